"""Keyword/location token entry with city autocomplete."""
from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable

from jobboard.config import MAJOR_CITIES
from jobboard.log import get_logger
from jobboard.models import SearchCriteria

log = get_logger(__name__)

CriteriaListener = Callable[[SearchCriteria], None]


class FieldKind(str, Enum):
    KEYWORD = "keyword"
    LOCATION = "location"


class SearchInputCollector:
    """Pending text plus committed tokens for the keyword and location fields.

    Every change to the committed tokens is pushed to the listener as a
    SearchCriteria (employment types are owned by the page, not here).
    Committed values are trimmed, non-empty and unique (case-sensitive).
    """

    def __init__(
        self,
        cities: Iterable[str] | None = None,
        listener: CriteriaListener | None = None,
    ) -> None:
        self.cities: list[str] = list(cities) if cities is not None else list(MAJOR_CITIES)
        self.keyword_text = ""
        self.location_text = ""
        self.suggestions_open = False
        self._keywords: list[str] = []
        self._locations: list[str] = []
        self._listener = listener

    def set_listener(self, listener: CriteriaListener | None) -> None:
        self._listener = listener

    @property
    def keywords(self) -> tuple[str, ...]:
        return tuple(self._keywords)

    @property
    def locations(self) -> tuple[str, ...]:
        return tuple(self._locations)

    @property
    def criteria(self) -> SearchCriteria:
        return SearchCriteria(keywords=self.keywords, locations=self.locations)

    def _emit(self) -> None:
        if self._listener is not None:
            self._listener(self.criteria)

    def _bucket(self, kind: FieldKind | str) -> list[str]:
        return self._keywords if FieldKind(kind) is FieldKind.KEYWORD else self._locations

    @staticmethod
    def _append(bucket: list[str], value: str) -> bool:
        if not value or value in bucket:
            return False
        bucket.append(value)
        return True

    # ── Typing ───────────────────────────────────────────────────────────

    def type_keyword(self, text: str) -> None:
        self.keyword_text = text

    def type_location(self, text: str) -> None:
        self.location_text = text
        self.suggestions_open = True

    def focus_location(self) -> None:
        self.suggestions_open = True

    # ── Committing ───────────────────────────────────────────────────────

    def commit_keyword(self, text: str | None = None) -> bool:
        value = (self.keyword_text if text is None else text).strip()
        self.keyword_text = ""
        added = self._append(self._keywords, value)
        if added:
            self._emit()
        return added

    def commit_location(self, text: str | None = None) -> bool:
        value = (self.location_text if text is None else text).strip()
        self.location_text = ""
        self.suggestions_open = False
        added = self._append(self._locations, value)
        if added:
            self._emit()
        return added

    def remove(self, value: str, kind: FieldKind | str) -> bool:
        bucket = self._bucket(kind)
        if value not in bucket:
            return False
        bucket.remove(value)
        self._emit()
        return True

    def search(self) -> SearchCriteria:
        """Commit whatever is pending in both fields and emit once."""
        self._append(self._keywords, self.keyword_text.strip())
        self._append(self._locations, self.location_text.strip())
        self.keyword_text = ""
        self.location_text = ""
        self.suggestions_open = False
        log.debug("Search keywords=%s locations=%s", self._keywords, self._locations)
        self._emit()
        return self.criteria

    def clear(self) -> None:
        self._keywords.clear()
        self._locations.clear()
        self.keyword_text = ""
        self.location_text = ""
        self.suggestions_open = False
        self._emit()

    # ── Autocomplete ─────────────────────────────────────────────────────

    @property
    def suggestions(self) -> list[str]:
        query = self.location_text.strip().lower()
        if not query:
            return list(self.cities)
        return [c for c in self.cities if query in c.lower()]

    def select_suggestion(self, city: str) -> bool:
        return self.commit_location(city)

    def dismiss_suggestions(self) -> None:
        self.suggestions_open = False

    def pointer_outside(self) -> None:
        self.suggestions_open = False
