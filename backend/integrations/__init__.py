from __future__ import annotations

import requests

from backend.integrations.base import (
    IntegrationError,
    IntegrationNotConfigured,
    UpstreamError,
    UpstreamIntegration,
)
from backend.integrations.jellyfin import JellyfinIntegration
from backend.integrations.jellyseerr import JellyseerrIntegration
from backend.integrations.portainer import PortainerIntegration
from backend.integrations.proxmox import ProxmoxIntegration
from backend.integrations.pyrodactyl import PyrodactylIntegration
from backend.integrations.tvdb import TvdbIntegration
from config.settings import Settings

INTEGRATIONS: dict[str, type[UpstreamIntegration]] = {
    "proxmox": ProxmoxIntegration,
    "jellyfin": JellyfinIntegration,
    "jellyseerr": JellyseerrIntegration,
    "tvdb": TvdbIntegration,
    "pyrodactyl": PyrodactylIntegration,
    "portainer": PortainerIntegration,
}


def build_integration(
    name: str,
    settings: Settings,
    session: requests.Session | None = None,
) -> UpstreamIntegration:
    normalized = name.lower()
    integration_cls = INTEGRATIONS.get(normalized)
    if integration_cls is None:
        raise ValueError(f"Unsupported integration: {name}")
    return integration_cls(settings, session)


__all__ = [
    "build_integration",
    "IntegrationError",
    "IntegrationNotConfigured",
    "UpstreamError",
    "UpstreamIntegration",
]
