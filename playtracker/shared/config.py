from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from playtracker.shared.paths import store_path


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class AppConfig(BaseModel):
    poll_interval_ms: int = Field(default=1000, ge=250, le=60_000)
    page_size: int = Field(default=15, ge=1)
    store_path: Optional[str] = None
    controller_remap_exe: Optional[str] = None
    log_level: LogLevel = "INFO"
    dark_mode: bool = True

    def resolved_store_path(self) -> Path:
        if self.store_path:
            return Path(self.store_path)
        return store_path()

    def to_reconciler_config(self) -> dict:
        return {
            "poll_interval_ms": self.poll_interval_ms,
        }
