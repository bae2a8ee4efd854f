from utils.terms import COMMON_WORDS, TermCounter


def test_tokenize_keeps_inner_apostrophes():
    counter = TermCounter()
    assert counter.tokenize("The LORD's 'house' and don't") == ["the", "lord's", "house", "and", "don't"]


def test_tokenize_splits_on_punctuation():
    counter = TermCounter()
    assert counter.tokenize("flesh, and dwelt;among--us!") == ["flesh", "and", "dwelt", "among", "us"]


def test_count_book_scope(store):
    counts = TermCounter().count(store.verses_for("1 Nephi"), ["Lord"])
    assert counts == {"lord": 2}


def test_absent_terms_count_zero(store):
    counts = TermCounter().count(store.verses_for("John"), ["world", "faith"])
    assert counts == {"world": 4, "faith": 0}


def test_common_words_are_skipped_by_default(store):
    counter = TermCounter()
    verses = store.verses_for("2 Nephi")
    assert counter.count(verses, ["the"]) == {"the": 0}
    assert counter.count(verses, ["the"], ignore_common_words=False) == {"the": 4}


def test_count_whole_store(store):
    counts = TermCounter().count(store.scope(), ["the"], ignore_common_words=False)
    assert counts == {"the": 13}


def test_duplicate_terms_collapse(store):
    counts = TermCounter().count(store.verses_for("1 Nephi"), ["Lord", "lord", "LORD"])
    assert counts == {"lord": 2}


def test_stop_word_list():
    assert len(COMMON_WORDS) == 35
    assert {"the", "and", "of", "those", "have"} <= COMMON_WORDS
    assert "lord" not in COMMON_WORDS
