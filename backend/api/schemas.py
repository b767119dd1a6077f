from __future__ import annotations

from pydantic import BaseModel, Field


class ExternalLinks(BaseModel):
    proxmox: str = ""
    jellyfin: str = ""
    jellyseerr: str = ""
    pyrodactyl: str = ""
    portainer: str = ""


class DashboardConfig(BaseModel):
    externalLinks: ExternalLinks = Field(default_factory=ExternalLinks)
