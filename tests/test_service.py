import pytest

import scripture_service
from corpus import ScriptureStore
from scripture_service import ScriptureService, ToolResult
from tests.conftest import make_document


class TestSearch:
    def test_search_formats_results(self, service):
        result = service.search({"query": "God"})
        assert not result.is_error
        assert result.found
        assert result.text.startswith("Scripture Search Results for 'God':\n\n")
        assert "1. 1 Nephi 17:50 - If God had commanded me" in result.text
        assert "3. John 3:17 - For God sent not his Son" in result.text
        assert [v["reference"] for v in result.payload] == ["1 Nephi 17:50", "John 3:16", "John 3:17"]

    def test_search_accepts_q_alias_and_limit(self, service):
        result = service.search({"q": "world", "limit": 2})
        assert [v["reference"] for v in result.payload] == ["John 3:16", "John 3:17"]

    def test_search_suffix_names_filter(self, service):
        result = service.search({"query": "lord", "book": "1 Nephi"})
        assert result.text.startswith("Scripture Search Results for 'lord' in book '1 Nephi':")
        result = service.search({"query": "god", "collection": "New Testament"})
        assert result.text.startswith("Scripture Search Results for 'god' in collection 'New Testament':")

    def test_no_results_is_not_an_error(self, service):
        result = service.search({"query": "god", "book": "Alma"})
        assert not result.is_error
        assert not result.found
        assert result.payload == []
        assert result.text == ("No scriptures found matching 'god' in book 'Alma'. "
                               "Try different keywords or check spelling.")

    @pytest.mark.parametrize("arguments, message", [
        ({}, "missing required argument 'query'"),
        ({"query": ""}, "search query cannot be empty"),
        ({"query": "   "}, "search query cannot be empty"),
    ])
    def test_invalid_query(self, service, arguments, message):
        result = service.search(arguments)
        assert result.is_error
        assert message in result.text

    def test_limit_must_be_positive(self, service):
        result = service.search({"query": "god", "limit": 0})
        assert result.is_error
        assert "limit" in result.text

    def test_blank_filters_are_ignored(self, service):
        result = service.search({"query": "god", "book": "", "collection": "  "})
        assert len(result.payload) == 3


class TestLookup:
    def test_get_single_verse(self, service):
        result = service.get_verses({"reference": "1 Nephi 3:7"})
        assert result.text == ("Scripture Reference: 1 Nephi 3:7\n\n"
                               "1 Nephi 3:7 - I will go and do the things which the Lord hath commanded\n\n")

    def test_get_verse_range_in_reading_order(self, service):
        result = service.get_verses({"query": "John 3:16-17"})
        assert [v["verse"] for v in result.payload] == [16, 17]

    def test_unknown_reference_is_not_found(self, service):
        result = service.get_verses({"reference": "Alma 32:21"})
        assert not result.is_error
        assert not result.found
        assert result.text == "Scripture reference 'Alma 32:21' not found."

    def test_exact_lookup_is_case_sensitive(self, service):
        result = service.get_verses({"reference": "1 nephi 3:7"})
        assert not result.found

    def test_malformed_reference_is_an_error(self, service):
        result = service.get_verses({"reference": "Invalid reference"})
        assert result.is_error
        assert result.text.startswith("invalid scripture reference: invalid reference format")

    def test_missing_reference(self, service):
        result = service.get_verses({})
        assert result.is_error
        assert "reference" in result.text

    def test_get_chapter(self, service):
        result = service.get_chapter({"reference": "1 Nephi 3"})
        assert result.text.startswith("1 Nephi Chapter 3\n\n7. I will go and do")
        assert [v["verse"] for v in result.payload] == [7, 8]

    def test_get_chapter_not_found(self, service):
        result = service.get_chapter({"reference": "1 Nephi 4"})
        assert not result.is_error
        assert result.text == "Chapter '1 Nephi 4' not found."

    def test_get_chapter_rejects_verse_reference(self, service):
        result = service.get_chapter({"reference": "1 Nephi 3:7"})
        assert result.is_error
        assert result.text.startswith("invalid chapter reference:")


class TestListing:
    def test_list_collections(self, service):
        result = service.list_collections()
        assert [c["name"] for c in result.payload] == ["Book of Mormon", "New Testament", "Pearl of Great Price"]
        assert result.payload[0]["book_count"] == 2
        assert "1. Book of Mormon (2 books)" in result.text

    def test_list_books_grouped(self, service):
        result = service.list_books()
        assert result.payload == {
            "Book of Mormon": ["1 Nephi", "2 Nephi"],
            "New Testament": ["John"],
            "Pearl of Great Price": ["Moses"],
        }
        assert "## Book of Mormon (2 books)\n- 1 Nephi\n- 2 Nephi\n" in result.text

    def test_list_books_in_collection(self, service):
        result = service.list_books({"collection": "new testament"})
        assert result.payload == {"New Testament": ["John"]}
        assert result.text.startswith("Books in New Testament:")

    def test_list_books_unknown_collection(self, service):
        result = service.list_books({"collection": "Apocrypha"})
        assert not result.is_error
        assert not result.found

    def test_empty_store(self):
        service = ScriptureService(ScriptureStore().seal())
        assert not service.list_collections().found
        assert not service.list_books().found
        assert not service.search({"query": "god"}).found


class TestTermCounts:
    def test_count_in_book(self, service):
        result = service.count_terms({"terms": ["Lord"], "book": "1 Nephi"})
        assert result.payload == {"lord": 2}
        assert result.text == "Term Counts in book '1 Nephi':\n\n'Lord': 2 occurrences\n"

    def test_count_in_chapter(self, service):
        result = service.count_terms({"terms": ["lord"], "reference": "1 Nephi 3", "book": "John"})
        assert result.payload == {"lord": 2}
        assert result.text.startswith("Term Counts in chapter '1 Nephi 3':")
        assert service.count_terms({"terms": ["lord"], "reference": "1 Nephi 17"}).payload == {"lord": 0}

    def test_count_rejects_verse_reference(self, service):
        result = service.count_terms({"terms": ["lord"], "reference": "1 Nephi 3:7"})
        assert result.is_error

    def test_count_in_collection(self, service):
        result = service.count_terms({"terms": ["world"], "collection": "New Testament"})
        assert result.payload == {"world": 4}

    def test_common_words(self, service):
        assert service.count_terms({"terms": ["the"]}).payload == {"the": 0}
        result = service.count_terms({"terms": ["the"], "ignore_common_words": False})
        assert result.payload == {"the": 13}

    @pytest.mark.parametrize("terms, message", [
        ([], "terms array cannot be empty"),
        (["", "  "], "no valid terms provided"),
    ])
    def test_invalid_terms(self, service, terms, message):
        result = service.count_terms({"terms": terms})
        assert result.is_error
        assert result.text == message

    def test_missing_terms(self, service):
        result = service.count_terms({"book": "John"})
        assert result.is_error
        assert "terms" in result.text


def test_end_to_end_scenario():
    store = ScriptureStore.from_documents([
        ("book-of-mormon.json", make_document({"1 Nephi": {3: {
            7: "I will go and do the things which the Lord hath commanded",
            8: "the Lord hath commanded me",
        }}})),
        ("new-testament.json", make_document({"John": {3: {16: "For God so loved the world"}}})),
    ])
    service = ScriptureService(store)

    found = service.search({"query": "God"})
    assert [v["reference"] for v in found.payload] == ["John 3:16"]

    counts = service.count_terms({"terms": ["Lord"], "book": "1 Nephi"})
    assert counts.payload == {"lord": 2}

    assert service.get_verses({"reference": "1 Nephi 3:7"}).found
    assert not service.get_verses({"reference": "1 Nephi 3:9"}).found


def test_get_service_is_shared(monkeypatch, store):
    monkeypatch.setattr(scripture_service, "_service_instance", None)
    monkeypatch.setattr(scripture_service, "get_store", lambda: store)
    first = scripture_service.get_service()
    assert first is scripture_service.get_service()
    assert first.store is store


def test_tool_result_constructors():
    assert ToolResult.error("bad") == ToolResult(text="bad", is_error=True, found=False)
    assert ToolResult.not_found("none", payload=[]) == ToolResult(text="none", payload=[], found=False)


def test_lookup_logs_parsed_reference(service, caplog):
    with caplog.at_level("INFO", logger="scripture_service"):
        service.get_verses({"reference": "  John 3:16-17 "})
        service.get_chapter({"reference": "1 Nephi 3"})
    assert "Lookup John 3:16-17 matched 2 verse(s)" in caplog.text
    assert "Chapter 1 Nephi 3 has 2 verse(s)" in caplog.text
