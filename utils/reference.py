# utils/reference.py
import re

from models import ScriptureReference
from utils.errors import InvalidReference

# "1 Nephi 3:7", "John 3:16-17"
VERSE_REFERENCE = re.compile(r'^(.+?)\s+([0-9]+):([0-9]+)(?:-([0-9]+))?$')
# "1 Nephi 3"
CHAPTER_REFERENCE = re.compile(r'^(.+?)\s+([0-9]+)$')


def parse_reference(reference):
    """Parse a verse or verse-range citation like '1 Nephi 3:7' or 'John 3:16-17'."""
    match = VERSE_REFERENCE.match(reference.strip())
    if not match:
        raise InvalidReference(
            "invalid reference format. Use format like '1 Nephi 3:7' or 'John 3:16-17'"
        )

    book, chapter, verse, end_verse = match.groups()
    verse = int(verse)
    return ScriptureReference(
        book=book.strip(),
        chapter=int(chapter),
        verse=verse,
        end_verse=int(end_verse) if end_verse else verse,
    )


def parse_chapter_reference(reference):
    """Parse a whole-chapter citation like '1 Nephi 3'."""
    match = CHAPTER_REFERENCE.match(reference.strip())
    if not match:
        raise InvalidReference("invalid chapter reference format. Use format like '1 Nephi 3'")

    book, chapter = match.groups()
    return ScriptureReference(book=book.strip(), chapter=int(chapter))
