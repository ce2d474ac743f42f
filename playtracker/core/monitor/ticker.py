from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)

TickHandler = Callable[[], None]


class Ticker(Protocol):
    """Calls a handler at a fixed period until stopped."""

    def start(self, handler: TickHandler) -> None:
        ...

    def stop(self) -> None:
        ...

    def is_running(self) -> bool:
        ...


class ThreadTicker:
    """Fixed-rate ticker on a daemon thread. Deadlines do not drift with handler runtime."""

    def __init__(self, interval_s: float, name: str = "Ticker") -> None:
        self._interval = interval_s
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()

    def start(self, handler: TickHandler) -> None:
        thread = self._thread
        if thread is not None and thread.is_alive():
            if not self._stop_evt.is_set():
                return
            # A stopped loop may still be inside its last handler call
            thread.join()
        self._stop_evt.clear()
        self._thread = threading.Thread(target=self._run, args=(handler,), name=self._name, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_evt.set()
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout=self._interval * 2)
        if thread.is_alive():
            log.warning("%s still finishing a tick after stop", self._name)
            return
        self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_evt.is_set()

    def _run(self, handler: TickHandler) -> None:
        next_at = time.monotonic() + self._interval
        while not self._stop_evt.wait(max(0.0, next_at - time.monotonic())):
            try:
                handler()
            except Exception:
                log.exception("Tick handler error")

            next_at += self._interval
            now = time.monotonic()
            if next_at < now:
                # Handler overran one or more periods; resume on the next boundary
                missed = int((now - next_at) // self._interval) + 1
                next_at += missed * self._interval


class ManualTicker:
    """Ticker fired explicitly with ``fire()``, for tests and scripts."""

    def __init__(self) -> None:
        self._handler: Optional[TickHandler] = None

    def start(self, handler: TickHandler) -> None:
        self._handler = handler

    def stop(self) -> None:
        self._handler = None

    def is_running(self) -> bool:
        return self._handler is not None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self._handler is None:
                return
            self._handler()
