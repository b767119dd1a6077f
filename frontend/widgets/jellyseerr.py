from __future__ import annotations

from typing import Any

from dash import html

TMDB_POSTER_BASE = "https://image.tmdb.org/t/p/w92"
BLANK_POSTER = (
    "data:image/svg+xml,%3Csvg xmlns=%22http://www.w3.org/2000/svg%22 viewBox=%220 0 40 60%22%3E"
    "%3Crect fill=%22%231a1a1d%22 width=%2240%22 height=%2260%22/%3E%3C/svg%3E"
)

STATUS_LABELS = {1: "Pending", 2: "Approved", 3: "Declined", 4: "Available", 5: "Processing"}
STATUS_CLASSES = {1: "pending", 2: "approved", 3: "declined", 4: "approved", 5: "pending"}


def is_empty(payload: dict[str, Any]) -> bool:
    return not payload.get("requests")


def status_label(status: Any) -> str:
    return STATUS_LABELS.get(status, "Unknown")


def status_class(status: Any) -> str:
    return STATUS_CLASSES.get(status, "pending")


def request_title(request: dict[str, Any]) -> str:
    media = request.get("media") or {}
    if media.get("title"):
        return media["title"]
    if media.get("name"):
        return media["name"]
    if request.get("type") == "movie" and media.get("externalTitle"):
        return media["externalTitle"]
    return "Unknown"


def requested_by(request: dict[str, Any]) -> str:
    user = request.get("requestedBy") or {}
    return user.get("displayName") or user.get("email") or user.get("username") or "Unknown"


def request_link(request: dict[str, Any], base_url: str) -> str:
    tmdb_id = (request.get("media") or {}).get("tmdbId")
    if not base_url or not tmdb_id:
        return "#"
    media_type = "movie" if request.get("type") == "movie" else "tv"
    return f"{base_url.rstrip('/')}/{media_type}/{tmdb_id}"


def announce(previous: dict[str, Any], payload: dict[str, Any]) -> list[tuple[str, str]]:
    previous_ids = {request.get("id") for request in previous.get("requests") or []}
    if not previous_ids:
        return []
    return [
        (f"New request: {(request.get('media') or {}).get('title') or 'Unknown'}", "info")
        for request in payload.get("requests") or []
        if request.get("id") not in previous_ids
    ]


def _request_item(request: dict[str, Any], base_url: str) -> html.A:
    media = request.get("media") or {}
    poster = f"{TMDB_POSTER_BASE}{media['posterPath']}" if media.get("posterPath") else BLANK_POSTER
    title = request_title(request)
    return html.A(
        [
            html.Div(html.Img(src=poster, alt=title), className="request-poster"),
            html.Div(
                [
                    html.Div(title, className="request-title"),
                    html.Div(f"Requested by {requested_by(request)}", className="request-user"),
                ],
                className="request-info",
            ),
            html.Span(status_label(request.get("status")), className=f"request-status {status_class(request.get('status'))}"),
        ],
        href=request_link(request, base_url),
        target="_blank",
        className="request-item",
    )


def render_with_limit(max_items: int):
    def render(payload: dict[str, Any], links: dict[str, str]) -> html.Div:
        requests_ = (payload.get("requests") or [])[:max_items]
        base_url = links.get("jellyseerr", "")
        return html.Div([_request_item(request, base_url) for request in requests_], className="request-list")

    return render
