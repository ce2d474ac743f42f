from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def format_play_time(seconds: int) -> str:
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m {seconds % 60}s"


def format_last_played(when: Optional[datetime], now: Optional[datetime] = None) -> str:
    if when is None:
        return "Never"
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    diff = max(0, int((now - when).total_seconds()))

    days = diff // (3600 * 24)
    hours = (diff % (3600 * 24)) // 3600
    minutes = (diff % 3600) // 60

    if days > 0:
        return f"{days} day(s) ago"
    if hours > 0:
        return f"{hours} hour(s) ago"
    if minutes > 0:
        return f"{minutes} minute(s) ago"
    return "Recently"
