from __future__ import annotations

from typing import Any

from dash import html

from frontend.time_utils import format_uptime


def is_empty(payload: dict[str, Any]) -> bool:
    return not payload.get("nodes")


def percent(used: Any, total: Any) -> int:
    try:
        return round(float(used or 0) / float(total or 1) * 100)
    except (TypeError, ValueError, ZeroDivisionError):
        return 0


def node_stats(node: dict[str, Any]) -> dict[str, int]:
    return {
        "cpu": round(float(node.get("cpu") or 0) * 100),
        "ram": percent(node.get("mem"), node.get("maxmem")),
        "disk": percent(node.get("disk"), node.get("maxdisk")),
    }


def summarize(payload: dict[str, Any]) -> dict[str, int]:
    nodes = payload.get("nodes") or []
    online = sum(1 for node in nodes if node.get("status") == "online")
    return {"online": online, "offline": len(nodes) - online, "total": len(nodes)}


def _stat(label: str, value: int) -> html.Div:
    return html.Div(
        [
            html.Div(label, className="stat-label"),
            html.Div(f"{value}%", className="stat-value"),
            html.Div(html.Div(className="progress-fill", style={"width": f"{value}%"}), className="progress-bar"),
        ],
        className="stat",
    )


def _node_card(node: dict[str, Any]) -> html.Div:
    stats = node_stats(node)
    online = node.get("status") == "online"
    children = [
        html.Div(
            [
                html.Span(
                    [html.Span(className="status-dot" if online else "status-dot offline"), node.get("node") or "Unknown"],
                    className="node-name",
                ),
                html.Span(node.get("status") or "unknown", className="node-status"),
            ],
            className="node-header",
        ),
        html.Div([_stat("CPU", stats["cpu"]), _stat("RAM", stats["ram"]), _stat("Disk", stats["disk"])], className="node-stats"),
    ]
    if node.get("vmCount") is not None:
        children.append(html.Div(html.Small(f"{node['vmCount']} VMs running"), className="node-vms"))
    if online and node.get("uptime"):
        children.append(html.Div(html.Small(f"Up {format_uptime(node['uptime'])}"), className="node-vms"))
    return html.Div(children, className="node-card")


def render(payload: dict[str, Any], _links: dict[str, str]) -> html.Div:
    return html.Div([_node_card(node) for node in payload.get("nodes") or []], className="node-grid")
