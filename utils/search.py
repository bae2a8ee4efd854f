# utils/search.py
import logging
from rapidfuzz.distance import Levenshtein

logger = logging.getLogger(__name__)

# Fuzzy matching thresholds. Heuristic values, kept for compatibility.
FUZZY_MIN_QUERY_LENGTH = 4      # shorter queries never match fuzzily
SHORT_QUERY_MAX_LENGTH = 5
SHORT_QUERY_MAX_DISTANCE = 1
LONG_QUERY_MAX_DISTANCE = 2


def max_fuzzy_distance(query):
    """Largest edit distance a fuzzy match may have for this query; 0 disables fuzzy matching."""
    if len(query) < FUZZY_MIN_QUERY_LENGTH:
        return 0
    if len(query) <= SHORT_QUERY_MAX_LENGTH:
        return SHORT_QUERY_MAX_DISTANCE
    return LONG_QUERY_MAX_DISTANCE


class ScriptureSearchEngine:
    def __init__(self, store):
        self.store = store

    def fuzzy_score(self, query, verse):
        """Smallest edit distance between the query and any word of the verse or its book name."""
        cutoff = LONG_QUERY_MAX_DISTANCE + 1
        best = Levenshtein.distance(query, verse.book.lower(), score_cutoff=cutoff)
        for word in verse.text.lower().split():
            if best == 0:
                break
            best = min(best, Levenshtein.distance(query, word, score_cutoff=cutoff))
        return best

    def exact_search(self, query, verses, limit):
        """Substring matches on text or book name, in scan order, stopping at limit."""
        results = []
        seen = set()
        for verse in verses:
            if query in verse.text.lower() or query in verse.book.lower():
                if verse.reference in seen:
                    continue
                seen.add(verse.reference)
                results.append(verse)
                if len(results) >= limit:
                    break
        return results

    def fuzzy_search(self, query, verses, exclude):
        """Approximate matches ordered best first; ties keep scan order."""
        max_distance = max_fuzzy_distance(query)
        if not max_distance:
            return []

        candidates = []
        for verse in verses:
            if verse.reference in exclude:
                continue
            score = self.fuzzy_score(query, verse)
            if 0 < score <= max_distance:
                candidates.append((score, verse))

        candidates.sort(key=lambda c: c[0])
        return [verse for _, verse in candidates]

    def search(self, query, limit=10, book=None, collection=None):
        """
        Keyword search with a fuzzy fallback.

        Exact substring matches are collected first. When they do not fill
        ``limit``, approximate matches fill the remaining slots, closest
        first. The combined list is always returned sorted by
        (collection, book, chapter, verse).
        """
        query = query.strip().lower()
        if not query or limit < 1:
            return []

        verses = list(self.store.scope(book=book, collection=collection))
        results = self.exact_search(query, verses, limit)
        logger.info(f"Exact pass for '{query}' found {len(results)} verse(s) in {len(verses)} scanned")

        if len(results) < limit:
            seen = {v.reference for v in results}
            for verse in self.fuzzy_search(query, verses, seen):
                if verse.reference in seen:
                    continue
                seen.add(verse.reference)
                results.append(verse)
                if len(results) >= limit:
                    break

        results.sort(key=lambda v: v.sort_key)
        return results[:limit]
