from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from backend.api.deps import get_jellyfin, get_jellyseerr, get_tvdb
from backend.integrations.jellyfin import JellyfinIntegration
from backend.integrations.jellyseerr import JellyseerrIntegration
from backend.integrations.tvdb import TvdbIntegration

router = APIRouter(prefix="/api", tags=["media"])


@router.get("/jellyfin/latest")
def jellyfin_latest(jellyfin: JellyfinIntegration = Depends(get_jellyfin)) -> dict[str, Any]:
    return jellyfin.latest_items()


@router.get("/jellyseerr/requests")
def jellyseerr_requests(jellyseerr: JellyseerrIntegration = Depends(get_jellyseerr)) -> dict[str, Any]:
    return jellyseerr.recent_requests()


@router.get("/tvdb/series/{series_id}")
def tvdb_series(series_id: int, tvdb: TvdbIntegration = Depends(get_tvdb)) -> Any:
    return tvdb.series(series_id)


@router.get("/tvdb/series/{series_id}/episodes")
def tvdb_episodes(
    series_id: int,
    season: int | None = Query(default=None),
    episode: int | None = Query(default=None),
    tvdb: TvdbIntegration = Depends(get_tvdb),
) -> dict[str, Any]:
    return tvdb.episodes(series_id, season=season, episode=episode)


@router.get("/tvdb/search")
def tvdb_search(query: str = Query(default=""), tvdb: TvdbIntegration = Depends(get_tvdb)) -> dict[str, Any]:
    return tvdb.search(query)


@router.get("/tvdb/series/{series_id}/artworks")
def tvdb_artworks(
    series_id: int,
    artwork_type: str | None = Query(default=None, alias="type"),
    tvdb: TvdbIntegration = Depends(get_tvdb),
) -> dict[str, Any]:
    return tvdb.artworks(series_id, artwork_type)
