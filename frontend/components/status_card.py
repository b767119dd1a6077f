"""Configuration-driven pollable status card.

One ``StatusCard`` per integration: endpoint, renderer and refresh interval.
``load`` fetches the endpoint and produces the card's next content. A failed
first load renders an error state with a retry button; a failed refresh keeps
whatever was rendered before.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

import requests
from dash import dcc, html

logger = logging.getLogger(__name__)

Renderer = Callable[[dict[str, Any], dict[str, str]], Any]
Announcer = Callable[[dict[str, Any], dict[str, Any]], list[tuple[str, str]]]


def _never_empty(_payload: dict[str, Any]) -> bool:
    return False


@dataclass(frozen=True)
class StatusCard:
    widget_id: str
    title: str
    endpoint: str
    render: Renderer
    refresh_ms: int
    empty_text: str = "Nothing to show"
    is_empty: Callable[[dict[str, Any]], bool] = _never_empty
    # Some upstreams briefly report empty lists while busy; keep the last render then.
    keep_on_empty_refresh: bool = False
    announce: Announcer | None = None


@dataclass
class CardResult:
    # None means "leave the rendered content as it is".
    children: Any
    state: dict[str, Any] = field(default_factory=dict)
    show_retry: bool = False


def load_card(
    card: StatusCard,
    fetch: Callable[[str], Any],
    state: dict[str, Any] | None,
    links: dict[str, str] | None = None,
) -> CardResult:
    previous = dict(state or {})
    loaded = bool(previous.get("loaded"))
    seq = int(previous.get("seq") or 0) + 1

    try:
        payload = fetch(card.endpoint)
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Could not load %s: %s", card.widget_id, exc)
        return _failed(card, previous, loaded, seq, exc)

    payload = payload if isinstance(payload, dict) else {}
    if card.is_empty(payload):
        if loaded and card.keep_on_empty_refresh:
            return CardResult(None, {**previous, "announcements": [], "seq": seq}, show_retry=False)
        children = empty_state(card.empty_text)
    else:
        try:
            children = card.render(payload, links or {})
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            # An unexpected upstream shape; treat it like a failed fetch.
            logger.exception("Could not render %s", card.widget_id)
            return _failed(card, previous, loaded, seq, exc)

    announcements: list[tuple[str, str]] = []
    if card.announce is not None and loaded and isinstance(previous.get("payload"), dict):
        announcements = card.announce(previous["payload"], payload)

    return CardResult(
        children,
        {
            "loaded": True,
            "payload": payload,
            "updated": datetime.now(timezone.utc).isoformat(),
            "error": None,
            "announcements": [list(item) for item in announcements],
            "seq": seq,
        },
        show_retry=False,
    )


def _failed(card: StatusCard, previous: dict[str, Any], loaded: bool, seq: int, exc: Exception) -> CardResult:
    failed = {**previous, "error": str(exc), "announcements": [], "seq": seq}
    if loaded:
        return CardResult(None, failed, show_retry=False)
    return CardResult(error_state(card), {**failed, "loaded": False}, show_retry=True)


def error_state(card: StatusCard) -> html.Div:
    return html.Div(
        [
            html.Div("✖", className="error-icon"),
            html.P(f"Failed to load {card.title} data"),
        ],
        className="error-state",
    )


def empty_state(text: str) -> html.Div:
    return html.Div(html.P(text), className="empty-state")


def loading_state() -> html.Div:
    return html.Div(html.Div(className="spinner"), className="loading-state")


def card_shell(card: StatusCard) -> html.Div:
    """The widget element placed in the dashboard grid."""
    widget = {"widget": card.widget_id}
    return html.Div(
        [
            html.Div(
                [
                    html.H3(card.title, className="widget-title"),
                    html.Span(id={"type": "card-updated", **widget}, className="refresh-indicator"),
                    html.A("↗", id={"type": "widget-link", **widget}, href="#", target="_blank", className="widget-link"),
                ],
                className="widget-header",
            ),
            html.Div(loading_state(), id={"type": "card-content", **widget}, className="widget-content"),
            html.Button(
                "Retry",
                id={"type": "card-retry", **widget},
                n_clicks=0,
                className="retry-btn",
                style={"display": "none"},
            ),
            html.Div("⤡", className="resize-handle"),
            dcc.Interval(id={"type": "card-interval", **widget}, interval=card.refresh_ms, n_intervals=0),
            dcc.Store(id={"type": "card-data", **widget}, data={}),
        ],
        id={"type": "widget-shell", **widget},
        className="widget",
        **{"data-widget": card.widget_id},
    )
