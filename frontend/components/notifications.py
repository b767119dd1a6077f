from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Protocol

from dash import html

SEVERITIES = ("info", "success", "warning", "error")
DEFAULT_DURATION_SECONDS = 5.0

ICONS = {
    "info": "ℹ",
    "success": "✔",
    "warning": "⚠",
    "error": "✖",
}


class Notifier(Protocol):
    def show(self, message: str, severity: str = "info") -> None: ...


@dataclass
class Notification:
    message: str
    severity: str
    expires_at: float


class NotificationQueue:
    """Transient user feedback, serialized into a ``dcc.Store`` between callbacks."""

    def __init__(
        self,
        items: list[Notification] | None = None,
        clock: Callable[[], float] = time.time,
        duration: float = DEFAULT_DURATION_SECONDS,
    ):
        self.items = list(items or [])
        self._clock = clock
        self.duration = duration

    def show(self, message: str, severity: str = "info") -> None:
        if severity not in SEVERITIES:
            severity = "info"
        self.items.append(Notification(message, severity, self._clock() + self.duration))

    def info(self, message: str) -> None:
        self.show(message, "info")

    def success(self, message: str) -> None:
        self.show(message, "success")

    def warning(self, message: str) -> None:
        self.show(message, "warning")

    def error(self, message: str) -> None:
        self.show(message, "error")

    def prune(self) -> bool:
        now = self._clock()
        kept = [item for item in self.items if item.expires_at > now]
        changed = len(kept) != len(self.items)
        self.items = kept
        return changed

    def to_data(self) -> list[dict[str, Any]]:
        return [asdict(item) for item in self.items]

    @classmethod
    def from_data(cls, data: Any, clock: Callable[[], float] = time.time) -> NotificationQueue:
        items: list[Notification] = []
        for entry in data if isinstance(data, list) else []:
            if not isinstance(entry, dict) or "message" not in entry:
                continue
            items.append(
                Notification(
                    message=str(entry["message"]),
                    severity=str(entry.get("severity") or "info"),
                    expires_at=float(entry.get("expires_at") or 0.0),
                )
            )
        return cls(items, clock=clock)


def render_notifications(data: Any) -> list[html.Div]:
    queue = NotificationQueue.from_data(data)
    return [
        html.Div(
            [html.Span(ICONS.get(item.severity, ICONS["info"]), className="notification-icon"), html.Span(item.message)],
            className=f"notification {item.severity}",
        )
        for item in queue.items
    ]
