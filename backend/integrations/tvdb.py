from __future__ import annotations

import threading
import time
from typing import Any, Callable

import requests

from backend.integrations.base import UpstreamError, UpstreamIntegration
from config.settings import Settings

# Tokens are valid for one month; refresh after three weeks.
TOKEN_TTL_SECONDS = 21 * 24 * 60 * 60

ARTWORK_TYPE_IDS = {
    "poster": 2,
    "banner": 1,
    "fanart": 3,
    "background": 3,
}


class TvdbIntegration(UpstreamIntegration):
    label = "TVDB"

    def __init__(
        self,
        settings: Settings,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(settings, session)
        self._clock = clock
        self._token: str | None = None
        self._token_expiry = 0.0
        self._token_lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return self.settings.tvdb_base_url

    def is_configured(self) -> bool:
        return bool(self.settings.tvdb_api_key)

    def _verify_for(self, url: str) -> bool:
        return True

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token()}"}

    def token(self) -> str:
        with self._token_lock:
            if self._token and self._clock() < self._token_expiry:
                return self._token
            self.ensure_configured()
            body: dict[str, Any] = {"apikey": self.settings.tvdb_api_key}
            if self.settings.tvdb_pin:
                body["pin"] = self.settings.tvdb_pin
            try:
                response = self.session.post(
                    self.url("/login"),
                    json=body,
                    timeout=self.settings.upstream_timeout_seconds,
                )
            except requests.RequestException as exc:
                raise UpstreamError(self.label, reason=str(exc)) from exc
            if not response.ok:
                raise UpstreamError(self.label, reason=f"login failed: {response.status_code}")
            token = ((response.json() or {}).get("data") or {}).get("token")
            if not token:
                raise UpstreamError(self.label, reason="login returned no token")
            self._token = token
            self._token_expiry = self._clock() + TOKEN_TTL_SECONDS
            return token

    def series(self, series_id: int) -> Any:
        payload = self.get_json(f"/series/{series_id}/extended") or {}
        return payload.get("data")

    def episodes(self, series_id: int, season: int | None = None, episode: int | None = None) -> dict[str, Any]:
        params = {"season": season} if season else None
        payload = self.get_json(f"/series/{series_id}/episodes/default", params=params) or {}
        episodes = (payload.get("data") or {}).get("episodes") or []
        if episode:
            episodes = [item for item in episodes if item.get("number") == episode]
        return {"episodes": episodes}

    def search(self, query: str) -> dict[str, Any]:
        payload = self.get_json("/search", params={"query": query, "type": "series"}) or {}
        return {"results": payload.get("data") or []}

    def artworks(self, series_id: int, artwork_type: str | None = None) -> dict[str, Any]:
        payload = self.get_json(f"/series/{series_id}/artworks") or {}
        artworks = (payload.get("data") or {}).get("artworks") or []
        return {"artworks": filter_artworks(artworks, artwork_type)}


def filter_artworks(artworks: list[dict[str, Any]], artwork_type: str | None) -> list[dict[str, Any]]:
    if not artwork_type:
        return artworks
    type_id = ARTWORK_TYPE_IDS.get(artwork_type.lower())
    if type_id is None:
        return artworks
    return [item for item in artworks if item.get("type") == type_id]
