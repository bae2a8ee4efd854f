# utils/lookup.py


def get_verses(store, ref):
    """
    Verses of ref.book whose chapter matches and whose number lies in
    [ref.verse, ref.end_verse]. Store order; unknown books give [].
    """
    end_verse = ref.end_verse if ref.end_verse is not None else ref.verse
    return [
        v for v in store.verses_for(ref.book)
        if v.chapter == ref.chapter and ref.verse <= v.verse <= end_verse
    ]


def get_chapter(store, book, chapter):
    """Every verse of one chapter, in store order."""
    return [v for v in store.verses_for(book) if v.chapter == chapter]


def reading_order(verses):
    """Sort verses for sequential reading."""
    return sorted(verses, key=lambda v: (v.chapter, v.verse))
