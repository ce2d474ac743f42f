"""
Process-presence reconciler.

Each tick probes the running processes, applies the result to the catalog and
writes the catalog once if anything changed. Ticks never overlap: a tick that
finds the previous one still in progress, or the previous probe still stuck,
is dropped.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Optional

from playtracker.core.catalog.catalog import Catalog
from playtracker.core.catalog.models import TimeDelta
from playtracker.core.catalog.store import CatalogStore
from playtracker.core.errors import ProbeError, StoreIOError

from .process_probe import ProcessProbe
from .ticker import ThreadTicker, Ticker
from .types import ReconcilerConfig, ReconcilerState

log = logging.getLogger(__name__)


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


class Reconciler:
    def __init__(
        self,
        catalog: Catalog,
        store: CatalogStore,
        config: Optional[dict] = None,
        probe: Optional[ProcessProbe] = None,
        ticker: Optional[Ticker] = None,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._cfg = ReconcilerConfig(**(config or {}))
        self._probe = probe or ProcessProbe()
        self._ticker: Ticker = ticker or ThreadTicker(self._cfg.interval_s, name="Reconciler")
        self._state = ReconcilerState()
        self._lock = threading.Lock()
        self._tick_lock = threading.Lock()

        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending_probe: Optional[Future] = None
        self._carry_ms = 0

        self._event_cb: Optional[Callable[[dict], None]] = None
        self._error_cb: Optional[Callable[[str], None]] = None

    def on_event(self, cb: Callable[[dict], None]) -> None:
        self._event_cb = cb

    def on_error(self, cb: Callable[[str], None]) -> None:
        self._error_cb = cb

    def get_state(self) -> ReconcilerState:
        with self._lock:
            return ReconcilerState(
                status=self._state.status,
                ticks=self._state.ticks,
                dropped_ticks=self._state.dropped_ticks,
                failed_probes=self._state.failed_probes,
                last_tick_at=self._state.last_tick_at,
                last_error=self._state.last_error,
            )

    def start(self) -> None:
        with self._lock:
            if self._state.status == "RUNNING":
                return
            self._state.status = "RUNNING"
            self._state.last_error = None
        self._carry_ms = 0

        self._ticker.start(self.tick)
        log.info("Reconciler started (interval %d ms)", self._cfg.poll_interval_ms)

    def stop(self, final_save: bool = True) -> None:
        self._ticker.stop()
        with self._lock:
            self._state.status = "STOPPED"

        # Let a tick that is mid-flight finish before the final write
        with self._tick_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None
                self._pending_probe = None

            if final_save:
                revision, entries = self._catalog.snapshot()
                try:
                    self._store.save(entries, revision)
                except StoreIOError as e:
                    log.error("Final save failed: %s", e)
        log.info("Reconciler stopped")

    def _emit(self, evt: dict) -> None:
        if self._event_cb:
            self._event_cb(evt)

    def _emit_error(self, msg: str) -> None:
        with self._lock:
            self._state.last_error = msg
        if self._error_cb:
            self._error_cb(msg)

    def _drop(self, reason: str) -> None:
        with self._lock:
            self._state.dropped_ticks += 1
        log.debug("Dropped tick: %s", reason)

    def _probe_names(self) -> Optional[set[str]]:
        if self._pending_probe is not None and not self._pending_probe.done():
            self._drop("previous probe still running")
            return None

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ProcessProbe")

        future = self._executor.submit(self._probe.running_names)
        self._pending_probe = future
        try:
            return future.result(timeout=self._cfg.interval_s)
        except FutureTimeout:
            log.warning("Process probe exceeded %d ms", self._cfg.poll_interval_ms)
            self._drop("probe timed out")
            return None
        except ProbeError as e:
            with self._lock:
                self._state.failed_probes += 1
            log.warning("Probe failed, keeping previous running state: %s", e)
            self._emit_error(str(e))
            return None

    def _elapsed_seconds(self) -> int:
        # Whole seconds only; a sub-second remainder carries to the next tick
        self._carry_ms += self._cfg.poll_interval_ms
        seconds, self._carry_ms = divmod(self._carry_ms, 1000)
        return seconds

    def tick(self) -> Optional[list[TimeDelta]]:
        """
        Run one reconciliation pass.

        Returns the applied deltas, or None when the tick was dropped or the
        probe failed and nothing was touched.
        """
        if not self._tick_lock.acquire(blocking=False):
            self._drop("previous tick still in progress")
            return None

        try:
            names = self._probe_names()
            if names is None:
                return None

            # Accrual and the save snapshot happen under one lock so that a
            # concurrent user edit lands either wholly before or wholly after.
            with self._catalog.lock:
                deltas = self._catalog.apply_running_set(names, seconds=self._elapsed_seconds())
                if deltas:
                    revision, entries = self._catalog.snapshot()

            with self._lock:
                self._state.ticks += 1
                self._state.last_tick_at = _now_iso()

            if deltas:
                try:
                    self._store.save(entries, revision)
                except StoreIOError as e:
                    log.error("Tick save failed, in-memory catalog kept: %s", e)
                    self._emit_error(str(e))

            for delta in deltas:
                if delta.started:
                    self._emit({"type": "GAME_STARTED", "id": delta.entry_id, "name": delta.name, "at": _now_iso()})
                elif delta.stopped:
                    self._emit({"type": "GAME_ENDED", "id": delta.entry_id, "name": delta.name, "at": _now_iso()})

            return deltas
        finally:
            self._tick_lock.release()
