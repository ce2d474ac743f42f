from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from playtracker.core.errors import StoreIOError

from .models import GameEntry

log = logging.getLogger(__name__)

STORE_KEY = "processes"


class CatalogStore:
    """
    Durable copy of the catalog: one JSON file holding a single ``"processes"``
    array. Every save replaces the whole array.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._last_revision: Optional[int] = None

    def path(self) -> str:
        return str(self._path)

    def load(self) -> list[GameEntry]:
        if not self._path.exists():
            return []

        try:
            raw = self._path.read_text(encoding="utf-8")
            data: Any = json.loads(raw)
        except (OSError, ValueError):
            log.warning("Store at %s is unreadable, starting with an empty catalog", self._path, exc_info=True)
            return []

        items = data.get(STORE_KEY) if isinstance(data, dict) else None
        if not isinstance(items, list):
            log.warning("Store at %s has no '%s' array, starting with an empty catalog", self._path, STORE_KEY)
            return []

        entries: list[GameEntry] = []
        for item in items:
            try:
                entries.append(GameEntry.model_validate(item))
            except ValidationError as e:
                log.warning("Skipping malformed store entry: %s", e.errors(include_url=False))
        return entries

    def save(self, entries: Iterable[GameEntry], revision: Optional[int] = None) -> bool:
        """
        Write the full catalog. Returns False when the write was skipped because
        a newer revision has already been written.

        Raises StoreIOError if the file could not be written.
        """
        payload = {STORE_KEY: [e.to_store_dict() for e in entries]}

        with self._lock:
            if revision is not None and self._last_revision is not None and revision <= self._last_revision:
                log.debug("Skipping stale save (revision %s <= %s)", revision, self._last_revision)
                return False

            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(dir=str(self._path.parent), prefix=".store-", suffix=".json")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(payload, f, indent=2)
                    os.replace(tmp, self._path)
                except BaseException:
                    if os.path.exists(tmp):
                        os.unlink(tmp)
                    raise
            except OSError as e:
                raise StoreIOError(f"Failed to write {self._path}: {e}") from e

            if revision is not None:
                self._last_revision = revision
            return True
