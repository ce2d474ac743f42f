"""
Diagnostic: show which tracked executables the process probe sees right now.
Run this while a tracked game is open to check that its process name matches
the catalog entry exactly.

Expected behavior:
- Lists every catalog entry with RUNNING / not running
- Prints a notice when the store is empty
"""

import sys
import os
import time
import logging

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from playtracker.core.catalog.store import CatalogStore
from playtracker.core.errors import ProbeError
from playtracker.core.monitor.process_probe import ProcessProbe
from playtracker.core.views.formatting import format_play_time
from playtracker.shared.store import ConfigStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)


def main():
    cfg = ConfigStore().load()
    store = CatalogStore(cfg.resolved_store_path())
    entries = store.load()
    print(f"Store: {store.path()} ({len(entries)} entries)")
    if not entries:
        print("No tracked executables.")
        return 0

    probe = ProcessProbe()
    started = time.perf_counter()
    try:
        running = probe.running_names()
    except ProbeError as e:
        print(f"Probe failed: {e}")
        return 1
    elapsed_ms = (time.perf_counter() - started) * 1000
    print(f"Probe saw {len(running)} processes in {elapsed_ms:.0f} ms")
    print("-" * 60)

    for entry in entries:
        state = "RUNNING" if entry.name in running else "-"
        print(f"{state:8s} {entry.name:32s} {format_play_time(entry.time)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
