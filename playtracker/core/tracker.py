from __future__ import annotations

import logging
import subprocess
from typing import Optional

from playtracker.core.catalog.catalog import Catalog
from playtracker.core.catalog.models import EntryPatch, GameEntry
from playtracker.core.catalog.store import CatalogStore
from playtracker.core.errors import LaunchError
from playtracker.core.launch import launcher
from playtracker.core.monitor.process_probe import ProcessProbe
from playtracker.core.monitor.reconciler import Reconciler
from playtracker.core.monitor.ticker import Ticker
from playtracker.core.views.projections import DetailProjection, ListProjection
from playtracker.shared.config import AppConfig

log = logging.getLogger(__name__)


class PlaytimeTracker:
    """
    Owns the catalog and everything that writes to it.

    User actions mutate the catalog and then wait for the store write before
    returning. A failed write raises StoreIOError, but the in-memory change
    stays applied.
    """

    def __init__(
        self,
        cfg: AppConfig,
        store: Optional[CatalogStore] = None,
        catalog: Optional[Catalog] = None,
        probe: Optional[ProcessProbe] = None,
        ticker: Optional[Ticker] = None,
    ) -> None:
        self.cfg = cfg
        self.catalog = catalog or Catalog()
        self.store = store or CatalogStore(cfg.resolved_store_path())
        self.reconciler = Reconciler(
            self.catalog,
            self.store,
            config=cfg.to_reconciler_config(),
            probe=probe,
            ticker=ticker,
        )
        self.list_view = ListProjection(self.catalog, page_size=cfg.page_size)
        self.detail_view = DetailProjection(self.catalog)

    def load(self) -> int:
        entries = self.store.load()
        self.catalog.replace_all(entries)
        log.info("Loaded %d tracked entries from %s", len(self.catalog), self.store.path())
        return len(self.catalog)

    def start(self) -> None:
        self.reconciler.start()

    def shutdown(self) -> None:
        self.reconciler.stop(final_save=True)
        self.detail_view.close()

    def _persist(self) -> None:
        revision, entries = self.catalog.snapshot()
        self.store.save(entries, revision)

    def add_game(self, path: str) -> GameEntry:
        entry = self.catalog.add(path)
        self._persist()
        return entry

    def remove_game(self, entry_id: int) -> GameEntry:
        entry = self.catalog.remove(entry_id)
        self._persist()
        return entry

    def edit_game(self, entry_id: int, patch: EntryPatch) -> GameEntry:
        entry = self.catalog.edit(entry_id, patch)
        self._persist()
        return entry

    def rename_and_cover(self, entry_id: int, custom_name: str, cover_url: str) -> GameEntry:
        """Apply the (name, cover) pair produced by the edit dialog."""
        return self.edit_game(
            entry_id,
            EntryPatch(custom_name=custom_name or None, cover_url=cover_url or None),
        )

    def set_controller_remap(self, entry_id: int, enabled: bool) -> GameEntry:
        return self.edit_game(entry_id, EntryPatch(controller_remap=enabled))

    def launch_game(self, entry_id: int) -> subprocess.Popen:
        entry = self.catalog.get(entry_id)
        companion = self.cfg.controller_remap_exe if entry.controller_remap else None
        try:
            return launcher.launch(entry.path, companion=companion)
        except LaunchError:
            log.warning("Launch of %s failed", entry.name, exc_info=True)
            raise
