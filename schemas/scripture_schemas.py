from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator
from typing import List, Optional

from config import Config
from utils.errors import MissingArgument


# --- Corpus document wire format ---
# Leaves with a missing or non-positive number decode as 0 and are skipped by the store.

class VerseEntry(BaseModel):
    verse: int = 0
    text: str = ''
    reference: Optional[str] = None

    @field_validator('text', mode='before')
    @classmethod
    def null_text(cls, value):
        return '' if value is None else value


class ChapterEntry(BaseModel):
    chapter: int = 0
    verses: List[VerseEntry] = []

    @field_validator('verses', mode='before')
    @classmethod
    def null_verses(cls, value):
        return [] if value is None else value


class BookEntry(BaseModel):
    book: str = Field(..., min_length=1)
    chapters: List[ChapterEntry] = []

    @field_validator('chapters', mode='before')
    @classmethod
    def null_chapters(cls, value):
        return [] if value is None else value


class SectionEntry(BaseModel):
    section: int = 0
    verses: List[VerseEntry] = []

    @field_validator('verses', mode='before')
    @classmethod
    def null_verses(cls, value):
        return [] if value is None else value


class ScriptureDocument(BaseModel):
    """
    One corpus file: books -> chapters -> verses.

    The Doctrine and Covenants file is published as a flat list of
    ``sections``; it is read as a single book whose chapters are the sections.
    """
    books: Optional[List[BookEntry]] = None
    sections: Optional[List[SectionEntry]] = None

    @model_validator(mode='after')
    def require_books_or_sections(self):
        if self.books is None and self.sections is None:
            raise ValueError("document has neither 'books' nor 'sections'")
        return self

    def iter_books(self, sections_book='Doctrine and Covenants'):
        if self.books is not None:
            return list(self.books)
        chapters = [ChapterEntry(chapter=s.section, verses=s.verses) for s in self.sections]
        return [BookEntry(book=sections_book, chapters=chapters)]


# --- Entry point argument bags ---

def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _Arguments(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)


class SearchRequest(_Arguments):
    query: str = Field(
        ...,
        validation_alias=AliasChoices('query', 'q'),
        description="Keyword or phrase to search for",
    )
    limit: int = Field(Config.DEFAULT_SEARCH_LIMIT, ge=1, description="Maximum number of verses to return")
    book: Optional[str] = Field(None, description="Only search this book, e.g. '1 Nephi'")
    collection: Optional[str] = Field(None, description="Only search this collection, e.g. 'New Testament'")

    @field_validator('query')
    @classmethod
    def query_not_empty(cls, value):
        value = value.strip()
        if not value:
            raise MissingArgument("search query cannot be empty")
        return value

    @field_validator('book', 'collection', mode='before')
    @classmethod
    def optional_filters(cls, value):
        return _blank_to_none(value)


class ReferenceRequest(_Arguments):
    reference: str = Field(
        ...,
        validation_alias=AliasChoices('reference', 'query', 'ref'),
        description="Scripture citation, e.g. '1 Nephi 3:7', 'John 3:16-17' or '1 Nephi 3'",
    )

    @field_validator('reference')
    @classmethod
    def reference_not_empty(cls, value):
        value = value.strip()
        if not value:
            raise MissingArgument("scripture reference cannot be empty")
        return value


class ListBooksRequest(_Arguments):
    collection: Optional[str] = Field(None, description="Only list books in this collection")

    @field_validator('collection', mode='before')
    @classmethod
    def optional_collection(cls, value):
        return _blank_to_none(value)


class ListCollectionsRequest(_Arguments):
    pass


class TermCountRequest(_Arguments):
    terms: List[str] = Field(..., description="Words to count")
    book: Optional[str] = Field(None, description="Only count within this book")
    collection: Optional[str] = Field(None, description="Only count within this collection")
    reference: Optional[str] = Field(None, description="Only count within this chapter, e.g. '1 Nephi 3'")
    ignore_common_words: bool = Field(True, description="Skip articles, conjunctions and common pronouns")

    @field_validator('terms')
    @classmethod
    def terms_not_empty(cls, value):
        if not value:
            raise MissingArgument("terms array cannot be empty")
        terms = [term.strip() for term in value if term.strip()]
        if not terms:
            raise MissingArgument("no valid terms provided")
        return terms

    @field_validator('book', 'collection', 'reference', mode='before')
    @classmethod
    def optional_scope(cls, value):
        return _blank_to_none(value)


def describe_validation_error(exc):
    """Turn a pydantic ValidationError into one readable sentence."""
    messages = []
    for error in exc.errors():
        field = '.'.join(str(part) for part in error.get('loc', ())) or 'arguments'
        if error.get('type') == 'missing':
            messages.append(f"missing required argument '{field}'")
            continue
        message = error.get('msg', 'invalid value')
        if message.startswith('Value error, '):
            messages.append(message[len('Value error, '):])
        else:
            messages.append(f"invalid '{field}': {message}")
    return '; '.join(messages)
