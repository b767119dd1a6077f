from __future__ import annotations

from datetime import datetime
from typing import Any

# Jellyfin runtimes are .NET ticks: 10,000,000 per second.
TICKS_PER_MINUTE = 600_000_000


def format_timestamp(value: Any) -> str:
    if value in (None, ""):
        return "-"

    raw = str(value).strip()
    if not raw:
        return "-"

    normalized = raw.replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError:
        return raw

    if dt.tzinfo is not None:
        dt = dt.astimezone()

    return dt.strftime("%H:%M:%S")


def format_runtime(ticks: Any) -> str:
    try:
        minutes = int(ticks) // TICKS_PER_MINUTE
    except (TypeError, ValueError):
        return ""
    if minutes < 60:
        return f"{minutes}m"
    return f"{minutes // 60}h {minutes % 60}m"


def format_uptime(seconds: Any) -> str:
    try:
        total = int(seconds)
    except (TypeError, ValueError):
        return "—"
    if total <= 0:
        return "—"
    days, remainder = divmod(total, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes = remainder // 60
    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
