from __future__ import annotations

from typing import Any

from dash import dcc, html

from frontend.pages.cluster import load_level
from frontend.time_utils import format_uptime
from frontend.widgets.pyrodactyl import connection, format_bytes, game_type, resource_percents, status_of

MIB = 1048576

# Keyed by the widget's game class.
GAME_DETAILS = {
    "stoneblock": {"label": "Minecraft • StoneBlock 4", "icon": "⛏️"},
    "cobblemon": {"label": "Minecraft • Cobblemon", "icon": "🎮"},
    "satisfactory": {"label": "Satisfactory", "icon": "🏭"},
    "minecraft": {"label": "Minecraft", "icon": "⛏️"},
    "default": {"label": "Game Server", "icon": "🎮"},
}
STATUS_TEXT = {"online": "Online", "starting": "Starting...", "offline": "Offline"}


def usage_detail(used: Any, limit: Any) -> str:
    """Used/limit in MB, or GB once the limit reaches 1 GB; just the usage when unlimited."""
    used_mb = float(used or 0) / MIB
    limit_mb = float(limit or 0) / MIB
    if limit_mb > 0:
        if limit_mb >= 1024:
            return f"{used_mb / 1024:.1f}/{limit_mb / 1024:.1f}GB"
        return f"{used_mb:.0f}/{limit_mb:.0f}MB"
    return f"{used_mb / 1024:.1f}GB" if used_mb >= 1024 else f"{used_mb:.0f}MB"


def uptime_label(server: dict[str, Any]) -> str:
    if server.get("uptime"):
        return format_uptime(server["uptime"])
    return "Running" if status_of(server) == "online" else "—"


def short_uuid(server: dict[str, Any]) -> str:
    uuid = server.get("uuid")
    return f"{uuid[:8]}..." if uuid else "—"


def _gauge(label: str, value: str, percent: int, level: str, detail: str | None = None) -> html.Div:
    children = [
        html.Div([html.Span(label, className="gauge-label-v2"), html.Span(value, className="gauge-value-v2")], className="gauge-header-v2"),
        html.Div(html.Div(className=f"gauge-fill-v2 {level}", style={"width": f"{percent}%"}), className="gauge-bar-v2"),
    ]
    if detail:
        children.append(html.Span(detail, className="gauge-detail-v2"))
    return html.Div(children, className="gauge-v2")


def _detail(label: str, value: str) -> html.Div:
    return html.Div(
        [html.Span(label, className="detail-label-v2"), html.Span(value, className="detail-value-v2")],
        className="detail-item-v2",
    )


def _connection_box(server: dict[str, Any], index: int) -> html.Div:
    address = connection(server)
    row: list[Any] = [html.Code(address, className="connection-address-v2")]
    if server.get("allocation"):
        row.append(
            dcc.Clipboard(
                id={"type": "copy-address", "server": str(server.get("identifier") or index)},
                content=address,
                title="Copy to clipboard",
                className="copy-btn-v2",
            )
        )
    return html.Div(
        [html.Span("Server Address", className="connection-label-v2"), html.Div(row, className="connection-row-v2")],
        className="connection-box-v2",
    )


def _server_card(server: dict[str, Any], index: int) -> html.Div:
    game = game_type(server)
    details = GAME_DETAILS.get(game["class"], GAME_DETAILS["default"])
    status = status_of(server)
    percents = resource_percents(server)
    resources = server.get("resources") or {}
    limits = server.get("limits") or {}
    network = server.get("network") or {}
    unlimited_disk = not limits.get("disk")

    return html.Div(
        [
            html.Div(
                [
                    html.Div(
                        [
                            html.Div(details["icon"], className="server-icon-v2"),
                            html.Div(
                                [
                                    html.H3(server.get("name") or "Unknown Server", className="server-name-v2"),
                                    html.Span(details["label"], className="game-badge-v2"),
                                ],
                                className="server-title-v2",
                            ),
                        ],
                        className="server-header-content",
                    ),
                    html.Div(
                        [html.Span(className=f"status-dot-v2 {status}"), html.Span(STATUS_TEXT[status], className="status-text-v2")],
                        className="server-status-v2",
                    ),
                ],
                className=f"server-header-v2 {game['class']}",
            ),
            html.Div(
                [
                    html.Div(f"⏱ {uptime_label(server)}", className="uptime-row-v2"),
                    _connection_box(server, index),
                    html.Div(
                        [
                            _gauge("CPU", f"{percents['cpu']}%", percents["cpu"], load_level(percents["cpu"])),
                            _gauge(
                                "RAM",
                                f"{percents['memory']}%",
                                percents["memory"],
                                load_level(percents["memory"]),
                                usage_detail(resources.get("memory"), limits.get("memory")),
                            ),
                            _gauge(
                                "Disk",
                                "∞" if unlimited_disk else f"{percents['disk']}%",
                                percents["disk"],
                                "muted" if unlimited_disk else load_level(percents["disk"]),
                                usage_detail(resources.get("disk"), limits.get("disk")),
                            ),
                        ],
                        className="gauges-row-v2",
                    ),
                    html.Details(
                        [
                            html.Summary("Details", className="expand-btn-v2"),
                            html.Div(
                                [
                                    _detail("Network TX", format_bytes(network.get("tx"))),
                                    _detail("Network RX", format_bytes(network.get("rx"))),
                                    _detail("Raw Status", server.get("status") or "Unknown"),
                                    _detail("UUID", short_uuid(server)),
                                ],
                                className="details-grid-v2",
                            ),
                        ],
                        className="server-details-v2",
                    ),
                ],
                className="server-body-v2",
            ),
        ],
        className=f"server-card-v2 {status}",
    )


def render(payload: dict[str, Any], _links: dict[str, str]) -> html.Div:
    servers = payload.get("servers") or []
    return html.Div([_server_card(server, index) for index, server in enumerate(servers)], className="servers-grid-v2")
