from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from playtracker.shared.paths import log_path, ensure_app_dirs


def setup_logging(level: str = "INFO") -> None:
    ensure_app_dirs()
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    fh = RotatingFileHandler(str(log_path()), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Dropped ticks are logged at DEBUG
    logging.getLogger("playtracker.core.monitor.reconciler").setLevel(max(logging.INFO, root.level))
