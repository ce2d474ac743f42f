from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

ReconcilerStatus = Literal["STOPPED", "RUNNING"]


@dataclass(frozen=True)
class ProcessInfo:
    name: str
    running: bool = True


@dataclass(frozen=True)
class ReconcilerConfig:
    poll_interval_ms: int = 1000

    @property
    def interval_s(self) -> float:
        return self.poll_interval_ms / 1000.0


@dataclass
class ReconcilerState:
    status: ReconcilerStatus = "STOPPED"
    ticks: int = 0
    dropped_ticks: int = 0
    failed_probes: int = 0
    last_tick_at: Optional[str] = None
    last_error: Optional[str] = None
