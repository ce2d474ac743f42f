"""Error taxonomy shared by the catalog, store, probe and launcher."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for every error raised by the tracking engine."""


class DuplicateNameError(TrackerError):
    def __init__(self, name: str) -> None:
        super().__init__(f"'{name}' is already tracked")
        self.name = name


class EntryNotFoundError(TrackerError):
    def __init__(self, entry_id: int) -> None:
        super().__init__(f"No tracked entry with id={entry_id}")
        self.entry_id = entry_id


class StoreIOError(TrackerError):
    """Reading or writing the durable store failed. In-memory state is kept."""


class ProbeError(TrackerError):
    """Process enumeration failed for this tick."""


class LaunchError(TrackerError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not launch {path}: {reason}")
        self.path = path
        self.reason = reason
