from __future__ import annotations

from typing import Any, Sequence

from dash import html

from frontend.time_utils import format_uptime
from frontend.widgets.proxmox import node_stats

GIB = 1073741824


def load_level(percent: int) -> str:
    if percent < 50:
        return "online"
    if percent < 80:
        return "warning"
    return "offline"


def sort_nodes(nodes: Sequence[dict[str, Any]], order: Sequence[str]) -> list[dict[str, Any]]:
    """Configured node names first, in their configured order; the rest keep API order."""
    rank = {name: index for index, name in enumerate(order)}
    return sorted(nodes, key=lambda node: rank.get(str(node.get("node") or "").lower(), len(rank)))


def _gib(value: Any) -> float:
    try:
        return float(value or 0) / GIB
    except (TypeError, ValueError):
        return 0.0


def memory_detail(node: dict[str, Any]) -> str:
    return f"{_gib(node.get('mem')):.1f}/{_gib(node.get('maxmem')):.0f}GB"


def disk_detail(node: dict[str, Any]) -> str:
    return f"{_gib(node.get('disk')) / 1024:.2f}/{_gib(node.get('maxdisk')) / 1024:.1f}TB"


def uptime_label(node: dict[str, Any]) -> str:
    if node.get("uptime"):
        return format_uptime(node["uptime"])
    return "Running" if node.get("status") == "online" else "—"


def _gauge(label: str, percent: int, detail: str | None = None) -> html.Div:
    ring = html.Div(
        html.Div(
            [html.Span(str(percent), className="px-gauge-value"), html.Span("%", className="px-gauge-percent")],
            className="px-gauge-inner",
        ),
        className=f"px-gauge-ring {load_level(percent)}",
        style={"background": f"conic-gradient(currentColor {percent}%, var(--gauge-track) 0)"},
    )
    children = [ring, html.Span(label, className="px-gauge-label")]
    if detail:
        children.append(html.Span(detail, className="px-gauge-detail"))
    return html.Div(children, className="px-gauge")


def _detail(label: str, value: Any) -> html.Div:
    return html.Div(
        [html.Span(label, className="px-detail-label"), html.Span(str(value), className="px-detail-value")],
        className="px-detail-item",
    )


def _node_card(node: dict[str, Any]) -> html.Div:
    stats = node_stats(node)
    state = "online" if node.get("status") == "online" else "offline"
    badges = []
    if node.get("vmCount") is not None:
        badges.append(html.Span(f"{node['vmCount']} VMs", className="px-badge vm"))
    badges.append(html.Span(f"⏱ {uptime_label(node)}", className="px-badge uptime"))

    return html.Div(
        [
            html.Div(
                [
                    html.Div(
                        [html.Span(className=f"px-status-dot {state}"), html.H3(node.get("node") or "Unknown", className="px-node-name")],
                        className="px-node-info",
                    ),
                    html.Span(state.capitalize(), className=f"px-status-badge {state}"),
                ],
                className="px-card-header",
            ),
            html.Div(badges, className="px-meta-row"),
            html.Div(
                [
                    _gauge("CPU", stats["cpu"]),
                    _gauge("RAM", stats["ram"], memory_detail(node)),
                    _gauge("Disk", stats["disk"], disk_detail(node)),
                ],
                className="px-gauges",
            ),
            html.Details(
                [
                    html.Summary("Details", className="px-expand-btn"),
                    html.Div(
                        [
                            _detail("CPU Cores", node.get("maxcpu") or "—"),
                            _detail("Total RAM", f"{_gib(node.get('maxmem')):.0f} GB"),
                            _detail("Total Disk", f"{_gib(node.get('maxdisk')) / 1024:.1f} TB"),
                            _detail("Status", node.get("status") or "Unknown"),
                        ],
                        className="px-details-grid",
                    ),
                ],
                className="px-details",
            ),
        ],
        className=f"px-node-card {state}",
    )


def render_with_order(order: Sequence[str]):
    def render(payload: dict[str, Any], _links: dict[str, str]) -> html.Div:
        nodes = sort_nodes(payload.get("nodes") or [], order)
        return html.Div([_node_card(node) for node in nodes], className="proxmox-nodes-grid")

    return render
