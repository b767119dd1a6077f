from __future__ import annotations

import logging
from typing import Any

from backend.integrations.base import UpstreamError, UpstreamIntegration

logger = logging.getLogger(__name__)


class JellyseerrIntegration(UpstreamIntegration):
    label = "Jellyseerr"

    @property
    def base_url(self) -> str:
        return self.settings.jellyseerr_url

    def is_configured(self) -> bool:
        return bool(self.settings.jellyseerr_url and self.settings.jellyseerr_api_key)

    def auth_headers(self) -> dict[str, str]:
        return {"X-Api-Key": self.settings.jellyseerr_api_key}

    def recent_requests(self) -> dict[str, Any]:
        self.ensure_configured()
        data = self.get_json(
            "/api/v1/request",
            params={"take": 10, "sort": "added", "sortDirection": "desc"},
        ) or {}
        requests_ = [self._with_media(request) for request in data.get("results") or []]
        page_info = data.get("pageInfo") or {}
        return {"requests": requests_, "totalCount": page_info.get("results") or 0}

    def _with_media(self, request: dict[str, Any]) -> dict[str, Any]:
        media = dict(request.get("media") or {})
        if needs_media_lookup(media):
            media_type = "movie" if request.get("type") == "movie" else "tv"
            try:
                details = self.get_json(f"/api/v1/{media_type}/{media['tmdbId']}") or {}
                media.update(details)
            except UpstreamError:
                logger.warning("Failed to fetch additional media info for tmdbId=%s", media.get("tmdbId"))
        return shape_request(request, media)


def needs_media_lookup(media: dict[str, Any]) -> bool:
    return not media.get("title") and not media.get("name") and bool(media.get("tmdbId"))


def shape_request(request: dict[str, Any], media: dict[str, Any]) -> dict[str, Any]:
    return {**request, "media": {**media, "posterPath": media.get("posterPath") or None}}
