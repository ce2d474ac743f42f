"""
Read-only views over the catalog.

Neither projection keeps its own copy of the tracked fields. Both re-derive
from the catalog on every read, so time, running state and last-played date
can never go stale and a removed entry is gone from every view as soon as it
is gone from the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from playtracker.core.catalog.catalog import Catalog, verify_executable
from playtracker.core.catalog.models import CatalogChange, GameEntry
from playtracker.core.errors import EntryNotFoundError

from .formatting import format_last_played, format_play_time

DEFAULT_PAGE_SIZE = 15


class ListProjection:
    """Search + year filter over the catalog, revealed one page at a time."""

    def __init__(self, catalog: Catalog, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._catalog = catalog
        self._page_size = page_size
        self._query = ""
        self._year: Optional[int] = None
        self._visible = page_size

    @property
    def query(self) -> str:
        return self._query

    @property
    def year(self) -> Optional[int]:
        return self._year

    @property
    def visible_count(self) -> int:
        return self._visible

    def set_query(self, text: str) -> None:
        text = text or ""
        if text != self._query:
            self._query = text
            self._visible = self._page_size

    def set_year(self, year: Optional[int]) -> None:
        if year != self._year:
            self._year = year
            self._visible = self._page_size

    def extend(self) -> int:
        """Reveal one more page. Returns the new visible count."""
        self._visible += self._page_size
        return self._visible

    def _matches(self, entry: GameEntry) -> bool:
        needle = self._query.lower()
        if needle and needle not in entry.name.lower() and needle not in (entry.custom_name or "").lower():
            return False
        if self._year is not None and entry.added_date.astimezone().year != self._year:
            return False
        return True

    def filtered(self) -> list[GameEntry]:
        return [e for e in self._catalog.entries() if self._matches(e)]

    def items(self) -> list[GameEntry]:
        return self.filtered()[: self._visible]

    def has_more(self) -> bool:
        return len(self.filtered()) > self._visible

    def available_years(self) -> list[int]:
        return self._catalog.available_years()


@dataclass(frozen=True)
class DetailView:
    entry: GameEntry
    file_exists: bool

    @property
    def play_time(self) -> str:
        return format_play_time(self.entry.time)

    @property
    def last_played(self) -> str:
        return format_last_played(self.entry.last_played_date)


class DetailProjection:
    """The single selected entry, enriched with a live file-exists check."""

    def __init__(self, catalog: Catalog, exists: Callable[[str], bool] = verify_executable) -> None:
        self._catalog = catalog
        self._exists = exists
        self._selected_id: Optional[int] = None
        self._unsubscribe = catalog.on_change(self._on_catalog_change)

    @property
    def selected_id(self) -> Optional[int]:
        return self._selected_id

    def select(self, entry_id: int) -> DetailView:
        entry = self._catalog.get(entry_id)
        self._selected_id = entry_id
        return DetailView(entry=entry, file_exists=self._exists(entry.path))

    def clear(self) -> None:
        self._selected_id = None

    def current(self) -> Optional[DetailView]:
        if self._selected_id is None:
            return None
        try:
            entry = self._catalog.get(self._selected_id)
        except EntryNotFoundError:
            self._selected_id = None
            return None
        return DetailView(entry=entry, file_exists=self._exists(entry.path))

    def close(self) -> None:
        self._unsubscribe()

    def _on_catalog_change(self, change: CatalogChange) -> None:
        if self._selected_id is None:
            return
        if change.kind == "REMOVED" and self._selected_id in change.entry_ids:
            self._selected_id = None
        elif change.kind == "LOADED" and self._selected_id not in change.entry_ids:
            self._selected_id = None
