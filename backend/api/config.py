from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.api.deps import get_settings
from backend.api.schemas import DashboardConfig, ExternalLinks
from config.settings import Settings

router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("", response_model=DashboardConfig)
def dashboard_config(current: Settings = Depends(get_settings)) -> DashboardConfig:
    return DashboardConfig(externalLinks=external_links(current))


def external_links(current: Settings) -> ExternalLinks:
    # Public URLs win; otherwise fall back to the upstream base URL.
    return ExternalLinks(
        proxmox=current.external_proxmox_url or current.proxmox_host or "",
        jellyfin=current.external_jellyfin_url or current.jellyfin_url or "",
        jellyseerr=current.external_jellyseerr_url or current.jellyseerr_url or "",
        pyrodactyl=current.external_pyrodactyl_url or current.pyrodactyl_url or "",
        portainer=current.external_portainer_url or current.portainer_url or "",
    )
