from __future__ import annotations

from typing import Any, Callable

from dash import dcc, html

from frontend.widgets import proxmox

OVERVIEW_CARDS = {
    "proxmox": {"title": "Proxmox", "endpoint": "/api/proxmox/status"},
    "containers": {"title": "Containers", "endpoint": "/api/portainer/containers"},
    "servers": {"title": "Game Servers", "endpoint": "/api/pyrodactyl/servers"},
}

# (count, label, dot class, always shown)
Stat = tuple[int, str, str, bool]


def proxmox_stats(payload: dict[str, Any]) -> list[Stat]:
    counts = proxmox.summarize(payload)
    return [
        (counts["online"], "Online", "online", True),
        (counts["offline"], "Offline", "offline", False),
        (counts["total"], "Nodes", "", True),
    ]


def container_stats(payload: dict[str, Any]) -> list[Stat]:
    containers = payload.get("containers") or []
    running = sum(1 for item in containers if item.get("State") == "running")
    return [
        (running, "Running", "online", True),
        (len(containers) - running, "Stopped", "offline", False),
    ]


def server_stats(payload: dict[str, Any]) -> list[Stat]:
    # Raw panel states; anything else (stopping, installing) is left out of every count.
    statuses = [server.get("status") for server in payload.get("servers") or []]
    return [
        (statuses.count("running"), "Online", "online", True),
        (statuses.count("offline"), "Offline", "offline", False),
        (statuses.count("starting"), "Starting", "warning", False),
    ]


SUMMARIZERS: dict[str, Callable[[dict[str, Any]], list[Stat]]] = {
    "proxmox": proxmox_stats,
    "containers": container_stats,
    "servers": server_stats,
}


def has_issues(stats: list[Stat]) -> bool:
    return any(count > 0 for count, _label, dot, _always in stats if dot == "offline")


def render_stats(stats: list[Stat] | None) -> list[html.Div]:
    """Mini stats for one card; ``None`` means the upstream could not be reached."""
    if stats is None:
        return [html.Div([html.Span(className="stat-dot warning"), "Unable to connect"], className="mini-stat")]
    children = []
    for count, label, dot, always in stats:
        if not always and count == 0:
            continue
        parts: list[Any] = []
        if dot:
            parts.append(html.Span(className=f"stat-dot {dot}"))
        parts.extend([html.Span(str(count), className="mini-stat-value"), f" {label}"])
        children.append(html.Div(parts, className="mini-stat"))
    return children


def _mini_widget(name: str, title: str) -> html.Div:
    return html.Div(
        [
            html.H4(title, className="mini-widget-title"),
            html.Div(
                html.Div(html.Div(className="spinner"), className="loading-state"),
                id={"type": "overview-stats", "card": name},
                className="mini-widget-stats",
            ),
        ],
        id={"type": "overview-card", "card": name},
        className=f"mini-widget {name}-mini",
    )


def layout(refresh_ms: int) -> html.Div:
    return html.Div(
        [
            dcc.Interval(id="overview-interval", interval=refresh_ms, n_intervals=0),
            html.Div(
                [
                    html.Span("Show on overview", className="settings-label"),
                    dcc.Checklist(
                        id="overview-visibility",
                        options=[{"label": card["title"], "value": name} for name, card in OVERVIEW_CARDS.items()],
                        value=list(OVERVIEW_CARDS),
                        inline=True,
                        persistence=True,
                        persistence_type="local",
                    ),
                ],
                className="settings-panel",
            ),
            html.Div(
                [_mini_widget(name, card["title"]) for name, card in OVERVIEW_CARDS.items()],
                className="mini-widget-grid",
            ),
        ]
    )
