import json

import pytest

from app import create_app
from corpus import ScriptureStore
from scripture_service import ScriptureService


def make_document(books):
    """Build a raw corpus document from {book: {chapter: {verse: text}}}."""
    return json.dumps({
        "books": [
            {
                "book": book,
                "chapters": [
                    {
                        "chapter": chapter,
                        "verses": [
                            {"verse": verse, "text": text, "reference": f"{book} {chapter}:{verse}"}
                            for verse, text in verses.items()
                        ],
                    }
                    for chapter, verses in chapters.items()
                ],
            }
            for book, chapters in books.items()
        ]
    }).encode('utf-8')


BOOK_OF_MORMON = {
    "1 Nephi": {
        3: {
            7: "I will go and do the things which the Lord hath commanded",
            8: "And it came to pass that when my father had heard these words he was exceedingly glad, "
               "for he knew that I had been blessed of the Lord.",
        },
        17: {
            50: "If God had commanded me to do all things I could do them",
        },
    },
    "2 Nephi": {
        9: {
            28: "O that cunning plan of the evil one! O the vainness, and the frailties, "
                "and the foolishness of men!",
        },
    },
}

NEW_TESTAMENT = {
    "John": {
        1: {
            14: "And the Word was made flesh, and dwelt among us",
        },
        3: {
            16: "For God so loved the world",
            17: "For God sent not his Son into the world to condemn the world; "
                "but that the world through him might be saved.",
        },
    },
}

PEARL_OF_GREAT_PRICE = {
    "Moses": {
        1: {
            39: "For behold, this is my work and my glory—to bring to pass the immortality "
                "and eternal life of man.",
        },
    },
}


@pytest.fixture
def documents():
    return [
        ("book-of-mormon.json", make_document(BOOK_OF_MORMON)),
        ("new-testament.json", make_document(NEW_TESTAMENT)),
        ("pearl-of-great-price.json", make_document(PEARL_OF_GREAT_PRICE)),
    ]


@pytest.fixture
def store(documents):
    return ScriptureStore.from_documents(documents)


@pytest.fixture
def service(store):
    return ScriptureService(store)


@pytest.fixture
def app(service):
    app = create_app(service=service)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
