"""Tests for the search input collector."""

import pytest

from jobboard.models import SearchCriteria
from jobboard.search import FieldKind, SearchInputCollector

CITIES = ["Mumbai", "Delhi", "Bangalore", "Navi Mumbai", "Pune"]


@pytest.fixture
def emitted() -> list[SearchCriteria]:
    return []


@pytest.fixture
def collector(emitted) -> SearchInputCollector:
    return SearchInputCollector(cities=CITIES, listener=emitted.append)


class TestCommit:
    """Tests for committing keyword and location tokens."""

    def test_same_location_twice_gives_one_entry(self, collector, emitted) -> None:
        assert collector.commit_location("Pune") is True
        assert collector.commit_location("Pune") is False
        assert collector.locations == ("Pune",)
        assert len(emitted) == 1

    def test_values_are_trimmed(self, collector) -> None:
        collector.commit_keyword("  python  ")
        collector.commit_keyword("python")
        assert collector.keywords == ("python",)

    def test_empty_or_blank_rejected(self, collector, emitted) -> None:
        assert collector.commit_keyword("") is False
        assert collector.commit_keyword("   ") is False
        assert collector.keywords == ()
        assert emitted == []

    def test_different_casing_is_a_new_token(self, collector) -> None:
        collector.commit_keyword("Python")
        collector.commit_keyword("python")
        assert collector.keywords == ("Python", "python")

    def test_commits_pending_text_and_clears_it(self, collector, emitted) -> None:
        collector.type_keyword("react")
        assert collector.commit_keyword() is True
        assert collector.keyword_text == ""
        assert emitted[-1] == SearchCriteria(keywords=("react",))

    def test_emits_full_criteria(self, collector, emitted) -> None:
        collector.commit_keyword("engineer")
        collector.commit_location("Delhi")
        assert emitted[-1] == SearchCriteria(keywords=("engineer",), locations=("Delhi",))


class TestRemove:
    def test_remove_reemits(self, collector, emitted) -> None:
        collector.commit_location("Pune")
        collector.commit_location("Delhi")
        assert collector.remove("Pune", FieldKind.LOCATION) is True
        assert collector.locations == ("Delhi",)
        assert emitted[-1].locations == ("Delhi",)
        assert len(emitted) == 3

    def test_remove_missing_is_noop(self, collector, emitted) -> None:
        assert collector.remove("Go", "keyword") is False
        assert emitted == []


class TestSuggestions:
    """Tests for city autocomplete."""

    def test_empty_query_lists_all_cities(self, collector) -> None:
        assert collector.suggestions == CITIES

    def test_case_insensitive_substring(self, collector) -> None:
        collector.type_location("mum")
        assert collector.suggestions == ["Mumbai", "Navi Mumbai"]

    def test_typing_opens_and_never_closes(self, collector) -> None:
        collector.type_location("D")
        assert collector.suggestions_open
        collector.type_location("De")
        collector.type_location("")
        assert collector.suggestions_open

    def test_selection_commits_and_closes(self, collector, emitted) -> None:
        collector.type_location("ban")
        assert collector.select_suggestion("Bangalore") is True
        assert collector.locations == ("Bangalore",)
        assert collector.location_text == ""
        assert not collector.suggestions_open
        assert emitted[-1].locations == ("Bangalore",)

    def test_outside_pointer_and_dismiss_close(self, collector) -> None:
        collector.focus_location()
        collector.pointer_outside()
        assert not collector.suggestions_open
        collector.focus_location()
        collector.dismiss_suggestions()
        assert not collector.suggestions_open

    def test_defaults_to_major_cities(self) -> None:
        assert "Hyderabad" in SearchInputCollector().suggestions


class TestSearch:
    def test_search_commits_both_pending_fields(self, collector, emitted) -> None:
        collector.type_keyword("designer ")
        collector.type_location("Pune")
        criteria = collector.search()
        assert criteria == SearchCriteria(keywords=("designer",), locations=("Pune",))
        assert emitted == [criteria]
        assert collector.keyword_text == collector.location_text == ""

    def test_search_with_nothing_pending_still_emits(self, collector, emitted) -> None:
        collector.search()
        assert emitted == [SearchCriteria()]

    def test_clear(self, collector, emitted) -> None:
        collector.commit_keyword("go")
        collector.clear()
        assert collector.criteria.is_empty()
        assert emitted[-1] == SearchCriteria()
