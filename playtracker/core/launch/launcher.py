from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import Optional

from playtracker.core.catalog.catalog import verify_executable
from playtracker.core.errors import LaunchError

log = logging.getLogger(__name__)


def _wait_for_exit(proc: subprocess.Popen, path: str) -> None:
    proc.wait()
    log.info("%s exited (code %s)", path, proc.returncode)


def _spawn(path: str) -> subprocess.Popen:
    """Start the executable from its own folder and return without waiting."""
    cwd = str(Path(path).parent)
    try:
        proc = subprocess.Popen([path], cwd=cwd)
    except OSError as e:
        raise LaunchError(path, str(e)) from e

    # The child is reaped when it exits, on every platform
    threading.Thread(target=_wait_for_exit, args=(proc, path), name="LaunchWaiter", daemon=True).start()
    return proc


def launch(path: str, companion: Optional[str] = None) -> subprocess.Popen:
    """
    Launch an executable.

    The file is re-checked right before spawning since it may have been moved
    or deleted since it was added. When ``companion`` is given (e.g. a
    controller remapping tool) it is started alongside; a companion failure is
    logged but does not fail the launch.

    Raises LaunchError if the executable is missing or the OS refuses it.
    """
    if not verify_executable(path):
        raise LaunchError(path, "file not found")

    proc = _spawn(path)
    log.info("Launched %s (pid %s)", path, proc.pid)

    if companion:
        try:
            if not verify_executable(companion):
                raise LaunchError(companion, "file not found")
            helper = _spawn(companion)
            log.info("Launched companion %s (pid %s)", companion, helper.pid)
        except LaunchError as e:
            log.warning("Companion launch failed: %s", e)

    return proc
