"""
Scripture query entry points.

Every entry point takes the raw argument bag of a request, validates it
against its schema and returns a ToolResult. Validation problems come back
as error results; a query that simply matches nothing is a normal result
with an explanatory message.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional
from pydantic import ValidationError

from corpus import get_store
from schemas.scripture_schemas import (
    SearchRequest,
    ReferenceRequest,
    ListBooksRequest,
    ListCollectionsRequest,
    TermCountRequest,
    describe_validation_error,
)
from utils.errors import ScriptureError
from utils.lookup import get_verses, get_chapter, reading_order
from utils.reference import parse_reference, parse_chapter_reference
from utils.search import ScriptureSearchEngine
from utils.terms import TermCounter

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    text: str
    is_error: bool = False
    payload: Optional[Any] = None
    found: bool = True

    @classmethod
    def error(cls, message):
        logger.warning(f"Rejected request: {message}")
        return cls(text=message, is_error=True, found=False)

    @classmethod
    def not_found(cls, message, payload=None):
        return cls(text=message, payload=payload, found=False)


def _filter_suffix(book=None, collection=None):
    if book:
        return f" in book '{book}'"
    if collection:
        return f" in collection '{collection}'"
    return ""


class ScriptureService:
    def __init__(self, store):
        self.store = store
        self.search_engine = ScriptureSearchEngine(store)
        self.term_counter = TermCounter()

    def _validate(self, schema, arguments):
        return schema.model_validate(arguments or {})

    # --- typed operations ---

    def search_verses(self, query, limit=10, book=None, collection=None):
        return self.search_engine.search(query, limit=limit, book=book, collection=collection)

    def lookup(self, reference):
        """Verses for a verse/range citation, in reading order."""
        ref = parse_reference(reference)
        verses = get_verses(self.store, ref)
        logger.info(f"Lookup {ref} matched {len(verses)} verse(s)")
        return reading_order(verses)

    def chapter(self, reference):
        ref = parse_chapter_reference(reference)
        verses = get_chapter(self.store, ref.book, ref.chapter)
        logger.info(f"Chapter {ref} has {len(verses)} verse(s)")
        return ref, reading_order(verses)

    def term_counts(self, terms, book=None, collection=None, reference=None, ignore_common_words=True):
        if reference:
            _, verses = self.chapter(reference)
        else:
            verses = self.store.scope(book=book, collection=collection)
        return self.term_counter.count(verses, terms, ignore_common_words=ignore_common_words)

    def books_by_collection(self):
        return {name: list(self.store.books_in(name)) for name in self.store.collections}

    # --- entry points ---

    def search(self, arguments=None):
        try:
            args = self._validate(SearchRequest, arguments)
        except ValidationError as e:
            return ToolResult.error(describe_validation_error(e))

        results = self.search_verses(args.query, args.limit, args.book, args.collection)
        logger.info(f"Search '{args.query}' (limit={args.limit}, book={args.book!r}, "
                    f"collection={args.collection!r}) returned {len(results)} verse(s)")
        suffix = _filter_suffix(args.book, args.collection)

        if not results:
            return ToolResult.not_found(
                f"No scriptures found matching '{args.query}'{suffix}. Try different keywords or check spelling.",
                payload=[],
            )

        response = f"Scripture Search Results for '{args.query}'{suffix}:\n\n"
        for i, verse in enumerate(results, start=1):
            response += f"{i}. {verse.book} {verse.chapter}:{verse.verse} - {verse.text}\n\n"
        return ToolResult(text=response, payload=[v.to_json() for v in results])

    def get_verses(self, arguments=None):
        try:
            args = self._validate(ReferenceRequest, arguments)
            verses = self.lookup(args.reference)
        except ValidationError as e:
            return ToolResult.error(describe_validation_error(e))
        except ScriptureError as e:
            return ToolResult.error(f"invalid scripture reference: {e}")

        if not verses:
            return ToolResult.not_found(f"Scripture reference '{args.reference}' not found.", payload=[])

        response = f"Scripture Reference: {args.reference}\n\n"
        for verse in verses:
            response += f"{verse.book} {verse.chapter}:{verse.verse} - {verse.text}\n\n"
        return ToolResult(text=response, payload=[v.to_json() for v in verses])

    def get_chapter(self, arguments=None):
        try:
            args = self._validate(ReferenceRequest, arguments)
            ref, verses = self.chapter(args.reference)
        except ValidationError as e:
            return ToolResult.error(describe_validation_error(e))
        except ScriptureError as e:
            return ToolResult.error(f"invalid chapter reference: {e}")

        if not verses:
            return ToolResult.not_found(f"Chapter '{args.reference}' not found.", payload=[])

        response = f"{ref.book} Chapter {ref.chapter}\n\n"
        for verse in verses:
            response += f"{verse.verse}. {verse.text}\n\n"
        return ToolResult(text=response, payload=[v.to_json() for v in verses])

    def list_collections(self, arguments=None):
        try:
            self._validate(ListCollectionsRequest, arguments)
        except ValidationError as e:
            return ToolResult.error(describe_validation_error(e))

        collections = [
            {'name': name, 'book_count': len(self.store.books_in(name))}
            for name in self.store.collections
        ]
        if not collections:
            return ToolResult.not_found("No scripture collections are loaded.", payload=[])

        response = "Available Scripture Collections:\n\n"
        for i, collection in enumerate(collections, start=1):
            response += f"{i}. {collection['name']} ({collection['book_count']} books)\n"
        return ToolResult(text=response, payload=collections)

    def list_books(self, arguments=None):
        try:
            args = self._validate(ListBooksRequest, arguments)
        except ValidationError as e:
            return ToolResult.error(describe_validation_error(e))

        if args.collection:
            name = self.store.find_collection(args.collection)
            if name is None:
                return ToolResult.not_found(f"Collection '{args.collection}' not found.", payload={})
            books = list(self.store.books_in(name))
            response = f"Books in {name}:\n\n"
            for i, book in enumerate(books, start=1):
                response += f"{i}. {book}\n"
            return ToolResult(text=response, payload={name: books})

        grouped = self.books_by_collection()
        if not grouped:
            return ToolResult.not_found("No scripture collections are loaded.", payload={})

        response = "Scripture Collections and Books:\n\n"
        for name, books in grouped.items():
            response += f"## {name} ({len(books)} books)\n"
            for book in books:
                response += f"- {book}\n"
            response += "\n"
        return ToolResult(text=response, payload=grouped)

    def count_terms(self, arguments=None):
        try:
            args = self._validate(TermCountRequest, arguments)
            counts = self.term_counts(
                args.terms,
                book=args.book,
                collection=args.collection,
                reference=args.reference,
                ignore_common_words=args.ignore_common_words,
            )
        except ValidationError as e:
            return ToolResult.error(describe_validation_error(e))
        except ScriptureError as e:
            return ToolResult.error(f"invalid chapter reference: {e}")

        response = "Term Counts"
        if args.reference:
            response += f" in chapter '{args.reference}'"
        else:
            response += _filter_suffix(args.book, args.collection)
        response += ":\n\n"

        for term in args.terms:
            response += f"'{term}': {counts[term.lower()]} occurrences\n"
        return ToolResult(text=response, payload=counts)


# --- Process-wide service ---
_service_instance = None


def get_service():
    """Get the shared service, building it over the shared store on first use."""
    global _service_instance
    if _service_instance is None:
        _service_instance = ScriptureService(get_store())
    return _service_instance
