from __future__ import annotations

from typing import Any

from dash import html

VISIBLE_CONTAINERS = 8
STOPPED_STATES = {"exited", "dead"}


def is_empty(payload: dict[str, Any]) -> bool:
    return not payload.get("containers")


def container_name(container: dict[str, Any]) -> str:
    names = container.get("Names") or []
    if not names:
        return "Unknown"
    return str(names[0]).lstrip("/")


def image_name(container: dict[str, Any]) -> str:
    image = str(container.get("Image") or "")
    return image.split("/")[-1].split("@")[0] or "unknown"


def summarize(payload: dict[str, Any]) -> dict[str, int]:
    containers = payload.get("containers") or []
    running = sum(1 for item in containers if item.get("State") == "running")
    stopped = sum(1 for item in containers if item.get("State") in STOPPED_STATES)
    return {"running": running, "stopped": stopped, "total": len(containers)}


def _summary_stat(value: int, label: str, modifier: str) -> html.Div:
    return html.Div(
        [html.Div(str(value), className="summary-value"), html.Div(label, className="summary-label")],
        className=f"summary-stat {modifier}",
    )


def _container_row(container: dict[str, Any]) -> html.Div:
    state = container.get("State") or "unknown"
    return html.Div(
        [
            html.Span(className=f"status-dot {'running' if state == 'running' else 'stopped'}"),
            html.Div(
                [
                    html.Div(container_name(container), className="container-name"),
                    html.Div(image_name(container), className="container-image"),
                ],
                className="container-info",
            ),
            html.Span(container.get("Status") or state, className="container-status"),
        ],
        className="container-item",
    )


def render(payload: dict[str, Any], _links: dict[str, str]) -> html.Div:
    containers = payload.get("containers") or []
    counts = summarize(payload)
    children = [
        html.Div(
            [
                _summary_stat(counts["running"], "Running", "running"),
                _summary_stat(counts["stopped"], "Stopped", "stopped"),
                _summary_stat(counts["total"], "Total", "total"),
            ],
            className="container-summary",
        ),
        html.Div([_container_row(item) for item in containers[:VISIBLE_CONTAINERS]], className="container-list"),
    ]
    hidden = len(containers) - VISIBLE_CONTAINERS
    if hidden > 0:
        children.append(html.Div(f"+{hidden} more containers", className="container-more"))
    return html.Div(children)
