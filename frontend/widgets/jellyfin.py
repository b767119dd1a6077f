from __future__ import annotations

from typing import Any

from dash import html

from frontend.time_utils import format_runtime

OVERVIEW_LIMIT = 150
NO_IMAGE = (
    "data:image/svg+xml,%3Csvg xmlns=%22http://www.w3.org/2000/svg%22 viewBox=%220 0 300 450%22%3E"
    "%3Crect fill=%22%231a1a1d%22 width=%22300%22 height=%22450%22/%3E%3C/svg%3E"
)


def is_empty(payload: dict[str, Any]) -> bool:
    return not payload.get("items")


def truncate_overview(text: str | None, limit: int = OVERVIEW_LIMIT) -> str:
    if not text:
        return ""
    return text[:limit] + ("..." if len(text) > limit else "")


def item_link(item: dict[str, Any], base_url: str) -> str:
    if not base_url:
        return "#"
    return f"{base_url.rstrip('/')}/web/index.html#!/details?id={item.get('Id')}"


def announce(previous: dict[str, Any], payload: dict[str, Any]) -> list[tuple[str, str]]:
    previous_ids = {item.get("Id") for item in previous.get("items") or []}
    if not previous_ids:
        return []
    fresh = [item for item in payload.get("items") or [] if item.get("Id") not in previous_ids]
    if not fresh:
        return []
    # Only the newest one, a library scan can add dozens at once.
    return [(f"New content added: {fresh[0].get('Name')}", "success")]


def _media_card(item: dict[str, Any], base_url: str) -> html.A:
    rating = item.get("CommunityRating")
    meta = " ".join(
        part
        for part in (f"⭐ {float(rating):.1f}" if rating else "", format_runtime(item["RunTimeTicks"]) if item.get("RunTimeTicks") else "")
        if part
    )
    overview = truncate_overview(item.get("Overview")) or "No description available"
    kind = item.get("Type") or ""
    return html.A(
        [
            html.Div(
                [
                    html.Img(src=item.get("ImageUrl") or NO_IMAGE, alt=item.get("Name") or ""),
                    html.Div(
                        [
                            html.Div(item.get("Name"), className="media-tooltip-title"),
                            html.Div(meta, className="media-tooltip-meta") if meta else None,
                            html.Div(overview, className="media-tooltip-overview"),
                        ],
                        className="media-tooltip",
                    ),
                ],
                className="media-poster",
            ),
            html.Div(item.get("Name"), className="media-title"),
            html.Div(f"{item.get('ProductionYear') or ''} {'· ' + kind if kind else ''}".strip(), className="media-year"),
        ],
        href=item_link(item, base_url),
        target="_blank",
        className="media-card",
    )


def render_with_limit(max_items: int):
    def render(payload: dict[str, Any], links: dict[str, str]) -> html.Div:
        items = (payload.get("items") or [])[:max_items]
        base_url = links.get("jellyfin", "")
        return html.Div([_media_card(item, base_url) for item in items], className="media-scroll-container")

    return render
