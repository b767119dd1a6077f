from __future__ import annotations

from typing import Any

from dash import html

GAME_TYPES = {
    "stoneblock": {"name": "StoneBlock", "class": "stoneblock"},
    "cobblemon": {"name": "Cobblemon", "class": "cobblemon"},
    "satisfactory": {"name": "Satisfactory", "class": "satisfactory"},
    "minecraft": {"name": "Minecraft", "class": "minecraft"},
}
DEFAULT_GAME = {"name": "Game Server", "class": "default"}

ONLINE_STATES = {"running", "online", "started"}
STARTING_STATES = {"starting", "start"}


def is_empty(payload: dict[str, Any]) -> bool:
    return not payload.get("servers")


def game_type(server: dict[str, Any]) -> dict[str, str]:
    haystack = f"{server.get('name') or ''} {server.get('description') or ''}".lower()
    for key, game in GAME_TYPES.items():
        if key in haystack:
            return game
    return DEFAULT_GAME


def status_of(server: dict[str, Any]) -> str:
    state = str(server.get("status") or "").lower()
    if state in ONLINE_STATES:
        return "online"
    if state in STARTING_STATES:
        return "starting"
    return "offline"


def format_bytes(value: Any) -> str:
    try:
        size = float(value)
    except (TypeError, ValueError):
        return "0 B"
    if size <= 0:
        return "0 B"
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} TB"


def _percent(used: Any, limit: Any) -> int:
    try:
        if not limit:
            return 0
        return min(100, round(float(used or 0) / float(limit) * 100))
    except (TypeError, ValueError):
        return 0


def resource_percents(server: dict[str, Any]) -> dict[str, int]:
    resources = server.get("resources") or {}
    limits = server.get("limits") or {}
    cpu_limit = limits.get("cpu") or 100
    return {
        "cpu": _percent(resources.get("cpu"), cpu_limit),
        "memory": _percent(resources.get("memory"), limits.get("memory")),
        "disk": _percent(resources.get("disk"), limits.get("disk")),
    }


def connection(server: dict[str, Any]) -> str:
    allocation = server.get("allocation") or {}
    if allocation.get("ip") and allocation.get("port"):
        return f"{allocation['ip']}:{allocation['port']}"
    return "Not available"


def _bar(label: str, value: int, detail: str) -> html.Div:
    return html.Div(
        [
            html.Div([html.Span(label), html.Span(detail)], className="server-stat-header"),
            html.Div(html.Div(className="progress-fill", style={"width": f"{value}%"}), className="progress-bar"),
        ],
        className="server-stat",
    )


def _server_card(server: dict[str, Any]) -> html.Div:
    game = game_type(server)
    status = status_of(server)
    percents = resource_percents(server)
    resources = server.get("resources") or {}
    limits = server.get("limits") or {}
    body = [
        html.Div(
            [
                html.Span(game["name"], className=f"game-badge {game['class']}"),
                html.Span(status.capitalize(), className=f"server-status {status}"),
            ],
            className="server-header",
        ),
        html.Div(server.get("name") or "Unknown", className="server-name"),
        html.Div(connection(server), className="server-connection"),
    ]
    if status == "online":
        body.append(
            html.Div(
                [
                    _bar("CPU", percents["cpu"], f"{percents['cpu']}%"),
                    _bar(
                        "RAM",
                        percents["memory"],
                        f"{format_bytes(resources.get('memory'))} / {format_bytes(limits.get('memory'))}",
                    ),
                    _bar(
                        "Disk",
                        percents["disk"],
                        f"{format_bytes(resources.get('disk'))} / {format_bytes(limits.get('disk'))}",
                    ),
                ],
                className="server-stats",
            )
        )
    return html.Div(body, className=f"server-card {game['class']}")


def render(payload: dict[str, Any], _links: dict[str, str]) -> html.Div:
    return html.Div([_server_card(server) for server in payload.get("servers") or []], className="server-grid")
