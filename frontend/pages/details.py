"""Full-page views of one integration each, shown as their own tabs.

Each page is a ``StatusCard`` like the dashboard widgets, so it gets the same
load semantics: a retry button after a failed first load, and the previous
content kept when a refresh fails. Pages only poll while their tab is active.
"""

from __future__ import annotations

from typing import Any

from dash import dcc, html

from frontend.components.status_card import StatusCard, loading_state
from frontend.pages import cluster, containers, servers
from frontend.widgets import portainer, proxmox, pyrodactyl


def build_pages(settings: Any) -> dict[str, StatusCard]:
    """Detail pages keyed by their tab value, in tab order."""
    return {
        "proxmox": StatusCard(
            widget_id="proxmox",
            title="Proxmox",
            endpoint="/api/proxmox/status",
            render=cluster.render_with_order(settings.proxmox_node_order),
            refresh_ms=settings.proxmox_page_refresh_ms,
            empty_text="No nodes found",
            is_empty=proxmox.is_empty,
        ),
        "servers": StatusCard(
            widget_id="servers",
            title="Game Servers",
            endpoint="/api/pyrodactyl/servers",
            render=servers.render,
            refresh_ms=settings.servers_page_refresh_ms,
            empty_text="No servers found",
            is_empty=pyrodactyl.is_empty,
        ),
        "containers": StatusCard(
            widget_id="containers",
            title="Containers",
            endpoint="/api/portainer/containers",
            render=containers.render,
            refresh_ms=settings.containers_page_refresh_ms,
            empty_text="No containers found",
            is_empty=portainer.is_empty,
        ),
    }


def page_shell(card: StatusCard) -> html.Div:
    page = {"page": card.widget_id}
    return html.Div(
        [
            html.Div(
                [
                    html.H2(card.title, className="page-title"),
                    html.Span(id={"type": "page-updated", **page}, className="refresh-indicator"),
                ],
                className="page-header",
            ),
            html.Div(loading_state(), id={"type": "page-content", **page}, className="page-content"),
            html.Button(
                "Try Again",
                id={"type": "page-retry", **page},
                n_clicks=0,
                className="retry-btn",
                style={"display": "none"},
            ),
            dcc.Interval(id={"type": "page-interval", **page}, interval=card.refresh_ms, n_intervals=0, disabled=True),
            dcc.Store(id={"type": "page-data", **page}, data={}),
        ],
        id={"type": "detail-page", **page},
        className=f"detail-page {card.widget_id}-page",
        style={"display": "none"},
    )
