"""
In-memory catalog of tracked executables.

The catalog is the single source of truth for the current session. Every
mutation, whether it comes from the reconciler tick or from a user action,
goes through one re-entrant lock, and every read hands out copies so that no
caller can change an entry behind the catalog's back.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from datetime import datetime, timezone
from pathlib import PureWindowsPath
from typing import Callable, Iterable, Optional

from playtracker.core.errors import DuplicateNameError, EntryNotFoundError

from .models import CatalogChange, ChangeKind, EntryPatch, GameEntry, TimeDelta

log = logging.getLogger(__name__)

# Entry fields that cannot hold None; a None in a patch leaves them as they are
_NOT_NULLABLE = frozenset({"controller_remap", "screenshots", "genre_names"})

ChangeListener = Callable[[CatalogChange], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def name_from_path(path: str) -> str:
    # PureWindowsPath splits on both "\" and "/"
    return PureWindowsPath(path).name


def verify_executable(path: str) -> bool:
    return bool(path) and os.path.isfile(path)


class Catalog:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._entries: list[GameEntry] = []
        self._lock = threading.RLock()
        self._clock = clock or _utcnow
        self._revision = 0
        self._listeners: list[ChangeListener] = []

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: ChangeKind, entry_ids: Iterable[int]) -> None:
        self._revision += 1
        change = CatalogChange(kind=kind, entry_ids=tuple(entry_ids), revision=self._revision)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                log.exception("Catalog listener failed for %s", change.kind)

    def _index_of(self, entry_id: int) -> int:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        raise EntryNotFoundError(entry_id)

    def _next_id(self) -> int:
        candidate = int(time.time() * 1000)
        if self._entries:
            candidate = max(candidate, max(e.id for e in self._entries) + 1)
        return candidate

    # Reads

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def entries(self) -> list[GameEntry]:
        with self._lock:
            return [e.model_copy(deep=True) for e in self._entries]

    def snapshot(self) -> tuple[int, list[GameEntry]]:
        """Current revision together with a copy of every entry, taken atomically."""
        with self._lock:
            return self._revision, self.entries()

    def get(self, entry_id: int) -> GameEntry:
        with self._lock:
            return self._entries[self._index_of(entry_id)].model_copy(deep=True)

    def find_by_name(self, name: str) -> Optional[GameEntry]:
        with self._lock:
            for entry in self._entries:
                if entry.name == name:
                    return entry.model_copy(deep=True)
        return None

    def available_years(self) -> list[int]:
        with self._lock:
            years = {e.added_date.astimezone().year for e in self._entries}
        return sorted(years)

    # Mutations

    def replace_all(self, entries: Iterable[GameEntry]) -> None:
        """Swap in a freshly loaded catalog, dropping later duplicates of a name."""
        seen: set[str] = set()
        kept: list[GameEntry] = []
        for entry in entries:
            if entry.name in seen:
                log.warning("Dropping duplicate entry for %s (id=%s)", entry.name, entry.id)
                continue
            seen.add(entry.name)
            kept.append(entry.model_copy(deep=True))

        with self._lock:
            self._entries = kept
            self._notify("LOADED", [e.id for e in kept])

    def apply_running_set(
        self,
        active_names: Iterable[str],
        seconds: int = 1,
        now: Optional[datetime] = None,
    ) -> list[TimeDelta]:
        active = set(active_names)
        deltas: list[TimeDelta] = []

        with self._lock:
            stamp = now or self._clock()
            for entry in self._entries:
                if entry.name in active:
                    started = not entry.running
                    if not started and seconds == 0:
                        continue
                    entry.running = True
                    entry.time += seconds
                    deltas.append(TimeDelta(entry.id, entry.name, seconds, started=started))
                elif entry.running:
                    entry.running = False
                    entry.last_played_date = stamp
                    deltas.append(TimeDelta(entry.id, entry.name, 0, stopped=True))

            if deltas:
                self._notify("TICK", [d.entry_id for d in deltas])

        return deltas

    def add(self, path: str, now: Optional[datetime] = None) -> GameEntry:
        name = name_from_path(path)
        if not name:
            raise ValueError(f"Cannot derive an executable name from {path!r}")

        with self._lock:
            if any(e.name == name for e in self._entries):
                raise DuplicateNameError(name)

            entry = GameEntry(
                id=self._next_id(),
                name=name,
                path=path,
                added_date=now or self._clock(),
            )
            self._entries.append(entry)
            log.info("Tracking %s (id=%s)", entry.name, entry.id)
            self._notify("ADDED", [entry.id])
            return entry.model_copy(deep=True)

    def remove(self, entry_id: int) -> GameEntry:
        with self._lock:
            entry = self._entries.pop(self._index_of(entry_id))
            log.info("Stopped tracking %s (id=%s)", entry.name, entry.id)
            self._notify("REMOVED", [entry.id])
            return entry

    def edit(self, entry_id: int, patch: EntryPatch) -> GameEntry:
        updates = patch.model_dump(exclude_unset=True)
        with self._lock:
            entry = self._entries[self._index_of(entry_id)]
            for field, value in updates.items():
                if value is None and field in _NOT_NULLABLE:
                    continue
                setattr(entry, field, value)
            self._notify("EDITED", [entry.id])
            return entry.model_copy(deep=True)

    def verify_executable(self, path: str) -> bool:
        return verify_executable(path)
