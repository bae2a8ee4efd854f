from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Verse:
    book: str
    collection: str
    chapter: int
    verse: int
    text: str
    reference: str

    @property
    def sort_key(self):
        """Ordering used for every multi-book result list."""
        return (self.collection, self.book, self.chapter, self.verse)

    def to_json(self):
        return {
            "book": self.book,
            "collection": self.collection,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text,
            "reference": self.reference,
        }

    def __repr__(self):
        return f'<Verse {self.reference} ({self.collection})>'


@dataclass(frozen=True)
class ScriptureReference:
    """
    A parsed citation.

    ``verse`` and ``end_verse`` are both None for a whole-chapter reference.
    For a single verse ``end_verse`` equals ``verse``.
    """
    book: str
    chapter: int
    verse: Optional[int] = None
    end_verse: Optional[int] = None

    @property
    def is_chapter(self):
        return self.verse is None

    def __str__(self):
        if self.is_chapter:
            return f"{self.book} {self.chapter}"
        if self.end_verse != self.verse:
            return f"{self.book} {self.chapter}:{self.verse}-{self.end_verse}"
        return f"{self.book} {self.chapter}:{self.verse}"
