import os
import io
import logging
import zipfile
import zlib
from types import MappingProxyType
from pydantic import ValidationError

from config import Config
from models import Verse
from schemas.scripture_schemas import ScriptureDocument
from utils.errors import MalformedDocument

logger = logging.getLogger(__name__)

# Documents expected in a corpus directory, in load order
SCRIPTURE_FILES = [
    'book-of-mormon.json',
    'doctrine-and-covenants.json',
    'pearl-of-great-price.json',
    'old-testament.json',
    'new-testament.json',
]

COLLECTION_NAMES = [
    ('book-of-mormon', 'Book of Mormon'),
    ('doctrine-and-covenants', 'Doctrine and Covenants'),
    ('pearl-of-great-price', 'Pearl of Great Price'),
    ('old-testament', 'Old Testament'),
    ('new-testament', 'New Testament'),
]

UNKNOWN_COLLECTION = 'Unknown'


def collection_name_for(label):
    """Map a document label (usually its file name) to a collection display name."""
    for fragment, name in COLLECTION_NAMES:
        if fragment in label:
            return name
    return UNKNOWN_COLLECTION


def decode_document(label, raw):
    """Decode one raw blob, raising MalformedDocument when it does not fit the wire format."""
    try:
        return ScriptureDocument.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedDocument(label, f"{e.error_count()} validation error(s)") from e
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedDocument(label, str(e)) from e


class ScriptureStore:
    """
    In-memory verse store plus collection index.

    Built once through add_document(), then sealed. After sealing all
    containers are read-only so the store can be shared between requests.
    """

    def __init__(self):
        self._verses = {}        # book name -> verses in document order
        self._collections = {}   # collection name -> book names
        self._sealed = False

    @classmethod
    def from_documents(cls, documents):
        store = cls()
        for label, raw in documents:
            store.add_document(label, raw)
        return store.seal()

    def add_document(self, label, raw):
        """Decode and store one document. Returns False when it was skipped."""
        if self._sealed:
            raise RuntimeError("scripture store is sealed")

        try:
            document = decode_document(label, raw)
        except MalformedDocument as e:
            logger.warning(f"Skipping document: {e}")
            return False

        collection = collection_name_for(label)
        books_in_collection = []
        verse_count = 0
        skipped = 0

        for book in document.iter_books():
            added = 0
            for chapter in book.chapters:
                if chapter.chapter < 1:
                    skipped += len(chapter.verses)
                    continue
                for entry in chapter.verses:
                    if entry.verse < 1:
                        skipped += 1
                        continue
                    reference = entry.reference or f"{book.book} {chapter.chapter}:{entry.verse}"
                    self._verses.setdefault(book.book, []).append(Verse(
                        book=book.book,
                        collection=collection,
                        chapter=chapter.chapter,
                        verse=entry.verse,
                        text=entry.text,
                        reference=reference,
                    ))
                    added += 1
            if not added:
                logger.debug(f"Book '{book.book}' in {label} has no verses; not indexed")
                continue
            verse_count += added
            if book.book not in books_in_collection:
                books_in_collection.append(book.book)

        if skipped:
            logger.warning(f"Skipped {skipped} unnumbered verse(s) in {label}")
        if collection in self._collections:
            logger.info(f"Collection '{collection}' from {label} replaces an earlier entry")
        self._collections[collection] = books_in_collection
        logger.info(f"Loaded {verse_count} verses in {len(books_in_collection)} books from {label} ({collection})")
        return True

    def seal(self):
        if not self._sealed:
            self._verses = MappingProxyType({book: tuple(verses) for book, verses in self._verses.items()})
            self._collections = MappingProxyType({name: tuple(books) for name, books in self._collections.items()})
            self._sealed = True
        return self

    # --- read access ---

    def __len__(self):
        return sum(len(verses) for verses in self._verses.values())

    def __bool__(self):
        return bool(self._verses)

    @property
    def books(self):
        """All book names, sorted."""
        return sorted(self._verses)

    @property
    def collections(self):
        """All collection names, sorted."""
        return sorted(self._collections)

    def verses_for(self, book):
        """Verses of a book in store order; unknown books give an empty tuple."""
        return tuple(self._verses.get(book, ()))

    def books_in(self, collection):
        return tuple(self._collections.get(collection, ()))

    def find_collection(self, name):
        """Resolve a collection name case-insensitively; None when unknown."""
        if name in self._collections:
            return name
        wanted = name.lower()
        for candidate in sorted(self._collections):
            if candidate.lower() == wanted:
                return candidate
        return None

    def find_book(self, name):
        """Resolve a book name, exact key first then case-insensitively."""
        if name in self._verses:
            return name
        wanted = name.lower()
        for candidate in self.books:
            if candidate.lower() == wanted:
                return candidate
        return None

    def scope(self, book=None, collection=None):
        """
        Yield the verses a filtered query should visit.

        A book filter wins over a collection filter. With neither, every
        book is visited in sorted name order so repeated queries walk the
        store identically. Unresolvable filters give an empty scope.
        """
        if book:
            resolved = self.find_book(book)
            if resolved is None:
                return
            yield from self._verses[resolved]
            return

        if collection:
            resolved = self.find_collection(collection)
            if resolved is None:
                return
            wanted = resolved.lower()
            for book_name in self._collections[resolved]:
                for verse in self._verses.get(book_name, ()):
                    if verse.collection.lower() == wanted:
                        yield verse
            return

        for book_name in self.books:
            yield from self._verses[book_name]

    def stats(self):
        return {
            'collections': len(self._collections),
            'books': len(self._verses),
            'verses': len(self),
        }


# --- Corpus sources ---

def read_archive(data, label):
    """Return (name, bytes) for every readable .json member of a zip archive."""
    documents = []
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for info in archive.infolist():
            if info.is_dir() or not info.filename.endswith('.json'):
                continue
            # Corrupt, encrypted or unsupported members are skipped one by one
            try:
                documents.append((info.filename, archive.read(info)))
            except (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError, EOFError, OSError) as e:
                logger.warning(f"Could not read {info.filename} in {label}: {e}")
    return documents


def read_archive_file(path):
    """Read a zip archive from disk. None when absent or unreadable."""
    if not os.path.isfile(path):
        return None
    try:
        with open(path, 'rb') as f:
            return read_archive(f.read(), path)
    except (zipfile.BadZipFile, OSError) as e:
        logger.warning(f"Could not load {path}: {e} (falling back to discrete files)")
        return None


def read_directory(directory):
    """Documents from a corpus directory: its archive if present, else the discrete files."""
    if not directory or not os.path.isdir(directory):
        logger.info(f"Corpus directory not found: {directory}")
        return []

    documents = read_archive_file(os.path.join(directory, Config.ARCHIVE_NAME))
    if documents:
        return documents

    documents = []
    for filename in SCRIPTURE_FILES:
        path = os.path.join(directory, filename)
        try:
            with open(path, 'rb') as f:
                documents.append((filename, f.read()))
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
    return documents


def override_source():
    if not Config.SCRIPTURES_DATA_DIR:
        return []
    logger.info(f"Loading scriptures from override directory {Config.SCRIPTURES_DATA_DIR}")
    return read_directory(Config.SCRIPTURES_DATA_DIR)


def packaged_archive_source():
    return read_archive_file(os.path.join(Config.BUNDLED_DATA_DIR, Config.ARCHIVE_NAME)) or []


def bundled_files_source():
    documents = []
    for filename in SCRIPTURE_FILES:
        path = os.path.join(Config.BUNDLED_DATA_DIR, filename)
        if not os.path.isfile(path):
            continue
        with open(path, 'rb') as f:
            documents.append((filename, f.read()))
    return documents


# Tried in order until one produces a non-empty store
DEFAULT_SOURCES = [
    ('override directory', override_source),
    ('packaged archive', packaged_archive_source),
    ('bundled files', bundled_files_source),
]


def load_store(sources=None):
    """Build a sealed store from the first source that yields any verses."""
    for name, source in sources or DEFAULT_SOURCES:
        documents = source()
        if not documents:
            continue
        store = ScriptureStore.from_documents(documents)
        if store:
            stats = store.stats()
            logger.info(f"Scripture corpus loaded from {name}: {stats['verses']} verses, "
                        f"{stats['books']} books, {stats['collections']} collections")
            return store
        logger.warning(f"No scripture data loaded from {name}; trying next source")

    logger.warning("No scripture data found in any source; serving an empty corpus")
    return ScriptureStore().seal()


# --- Process-wide store ---
_store_instance = None


def get_store():
    """Get the shared store, loading it on first access."""
    global _store_instance
    if _store_instance is None:
        logger.info("Initializing scripture store...")
        _store_instance = load_store()
    return _store_instance
