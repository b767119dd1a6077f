from __future__ import annotations

import logging
from typing import Any

from backend.integrations.base import UpstreamIntegration

logger = logging.getLogger(__name__)

LATEST_PARAMS = {
    "Limit": 20,
    # Movies and series only, episodes clutter the widget.
    "IncludeItemTypes": "Movie,Series",
    "EnableImages": "true",
    "ImageTypeLimit": 1,
    "Fields": "Overview,CommunityRating,RunTimeTicks",
}


class JellyfinIntegration(UpstreamIntegration):
    label = "Jellyfin"

    @property
    def base_url(self) -> str:
        return self.settings.jellyfin_url

    def is_configured(self) -> bool:
        return bool(self.settings.jellyfin_url and self.settings.jellyfin_api_key and self.settings.jellyfin_user_id)

    def auth_headers(self) -> dict[str, str]:
        return {"X-Emby-Token": self.settings.jellyfin_api_key}

    def latest_items(self) -> dict[str, Any]:
        self.ensure_configured()
        user_id = self.settings.jellyfin_user_id
        logger.info("Fetching Jellyfin latest for user: %s", user_id)
        items = self.get_json(f"/Users/{user_id}/Items/Latest", params=LATEST_PARAMS) or []
        return {"items": [shape_item(item, self.base_url) for item in items]}


def shape_item(item: dict[str, Any], base_url: str) -> dict[str, Any]:
    image_tags = item.get("ImageTags") or {}
    image_url = None
    if image_tags.get("Primary"):
        image_url = f"{base_url.rstrip('/')}/Items/{item.get('Id')}/Images/Primary?maxHeight=300&quality=90"
    return {
        "Id": item.get("Id"),
        "Name": item.get("Name"),
        "Type": item.get("Type"),
        "ProductionYear": item.get("ProductionYear"),
        "Overview": item.get("Overview") or "",
        "RunTimeTicks": item.get("RunTimeTicks"),
        "CommunityRating": item.get("CommunityRating"),
        "ImageUrl": image_url,
    }
