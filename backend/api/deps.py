from __future__ import annotations

from functools import lru_cache

import requests

from backend.integrations import build_integration
from backend.integrations.jellyfin import JellyfinIntegration
from backend.integrations.jellyseerr import JellyseerrIntegration
from backend.integrations.portainer import PortainerIntegration
from backend.integrations.proxmox import ProxmoxIntegration
from backend.integrations.pyrodactyl import PyrodactylIntegration
from backend.integrations.tvdb import TvdbIntegration
from config.settings import Settings, settings


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def upstream_session() -> requests.Session:
    session = requests.Session()
    session.trust_env = False
    return session


# Cached so per-integration state (the TVDB token) survives across requests.
@lru_cache(maxsize=None)
def _integration(name: str):
    return build_integration(name, settings, upstream_session())


def get_proxmox() -> ProxmoxIntegration:
    return _integration("proxmox")


def get_jellyfin() -> JellyfinIntegration:
    return _integration("jellyfin")


def get_jellyseerr() -> JellyseerrIntegration:
    return _integration("jellyseerr")


def get_tvdb() -> TvdbIntegration:
    return _integration("tvdb")


def get_pyrodactyl() -> PyrodactylIntegration:
    return _integration("pyrodactyl")


def get_portainer() -> PortainerIntegration:
    return _integration("portainer")
