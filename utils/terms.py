# utils/terms.py
import re

TOKEN_SPLIT = re.compile(r"[^a-z0-9']+")

COMMON_WORDS = frozenset({
    'a', 'an', 'and', 'are', 'as', 'at', 'be', 'by',
    'for', 'from', 'has', 'he', 'in', 'is', 'it',
    'its', 'of', 'on', 'that', 'the', 'to', 'was',
    'will', 'with', 'his', 'her', 'him', 'she', 'they',
    'their', 'them', 'this', 'these', 'those', 'have',
})


class TermCounter:
    def __init__(self, stop_words=COMMON_WORDS):
        self.stop_words = stop_words

    def tokenize(self, text):
        """Lowercase and split on anything but letters, digits and apostrophes"""
        tokens = (token.strip("'") for token in TOKEN_SPLIT.split(text.lower()))
        return [token for token in tokens if token]

    def count(self, verses, terms, ignore_common_words=True):
        """Occurrences of each term (lowercased) across the given verses."""
        counts = {term.lower(): 0 for term in terms}
        for verse in verses:
            for token in self.tokenize(verse.text):
                if ignore_common_words and token in self.stop_words:
                    continue
                if token in counts:
                    counts[token] += 1
        return counts
