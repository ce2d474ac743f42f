from __future__ import annotations

import psutil

from playtracker.core.errors import ProbeError

from .types import ProcessInfo


class ProcessProbe:
    """Reads the names of the processes currently running on this host."""

    def snapshot(self) -> list[ProcessInfo]:
        infos: list[ProcessInfo] = []
        try:
            for p in psutil.process_iter(attrs=["name"]):
                try:
                    n = p.info.get("name")
                    if n:
                        infos.append(ProcessInfo(name=str(n)))
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    continue
        except (psutil.Error, OSError) as e:
            raise ProbeError(f"Process enumeration failed: {e}") from e
        return infos

    def running_names(self) -> set[str]:
        return {p.name for p in self.snapshot() if p.running}
