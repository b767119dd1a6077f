from __future__ import annotations

from typing import Any

from dash import html

from frontend.widgets.portainer import container_name, summarize

VISIBLE_PORTS = 3
LONG_NAME = 25


def state_class(container: dict[str, Any]) -> str:
    state = container.get("State")
    if state in {"running", "paused"}:
        return state
    return "stopped"


def sort_containers(containers: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Running containers first, then alphabetical by name."""
    return sorted(containers, key=lambda item: (item.get("State") != "running", container_name(item).lower()))


def image_and_tag(container: dict[str, Any]) -> tuple[str, str]:
    image = str(container.get("Image") or "unknown")
    repository, _, tag = image.partition(":")
    return repository.split("/")[-1], tag or "latest"


def published_ports(container: dict[str, Any]) -> str:
    ports = [port for port in container.get("Ports") or [] if port.get("PublicPort")]
    return ", ".join(f"{port['PublicPort']}:{port.get('PrivatePort')}" for port in ports[:VISIBLE_PORTS])


def _stat_card(value: int, label: str, modifier: str) -> html.Div:
    return html.Div(
        html.Div([html.Span(str(value), className="stat-number"), html.Span(label, className="stat-label")], className="stat-info"),
        className=f"stat-card {modifier}",
    )


def _info_row(label: str, value: str, modifier: str = "") -> html.Div:
    return html.Div(
        [html.Span(label, className="info-label"), html.Span(value, className=f"info-value {modifier}".strip())],
        className="info-row",
    )


def _container_card(container: dict[str, Any]) -> html.Div:
    status = state_class(container)
    state = str(container.get("State") or "unknown")
    name = container_name(container)
    image, tag = image_and_tag(container)
    ports = published_ports(container)

    rows = [_info_row("Image", image), _info_row("Tag", tag, "tag")]
    if ports:
        rows.append(_info_row("Ports", ports, "ports"))
    rows.append(_info_row("Status", str(container.get("Status") or state), "status"))

    return html.Div(
        [
            html.Div(
                [
                    html.Div(
                        [
                            html.Span(className=f"status-dot {status}"),
                            # Long names are clipped by CSS; the full name stays in the tooltip.
                            html.H3(name, title=name, className="container-name truncated" if len(name) > LONG_NAME else "container-name"),
                        ],
                        className="container-info",
                    ),
                    html.Span(state.capitalize(), className=f"status-badge {status}"),
                ],
                className="card-header",
            ),
            html.Div(rows, className="card-body"),
        ],
        className=f"container-card {status}",
    )


def render(payload: dict[str, Any], _links: dict[str, str]) -> html.Div:
    containers = payload.get("containers") or []
    counts = summarize(payload)
    return html.Div(
        [
            html.Div(
                [
                    _stat_card(counts["running"], "Running", "running"),
                    _stat_card(counts["stopped"], "Stopped", "stopped"),
                    _stat_card(counts["total"], "Total", "total"),
                ],
                className="stats-grid",
            ),
            html.Div([_container_card(item) for item in sort_containers(containers)], className="containers-cards-grid"),
        ]
    )
