from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    backend_host: str = os.getenv("BACKEND_HOST", "127.0.0.1")
    backend_port: int = int(os.getenv("BACKEND_PORT", "3000"))

    frontend_host: str = os.getenv("FRONTEND_HOST", "127.0.0.1")
    frontend_port: int = int(os.getenv("FRONTEND_PORT", "8050"))

    # Upstream integrations. Every key stays server-side.
    proxmox_host: str = os.getenv("PROXMOX_HOST", "")
    proxmox_token_id: str = os.getenv("PROXMOX_TOKEN_ID", "")
    proxmox_token_secret: str = os.getenv("PROXMOX_TOKEN_SECRET", "")

    jellyfin_url: str = os.getenv("JELLYFIN_URL", "")
    jellyfin_api_key: str = os.getenv("JELLYFIN_API_KEY", "")
    jellyfin_user_id: str = os.getenv("JELLYFIN_USER_ID", "")

    jellyseerr_url: str = os.getenv("JELLYSEERR_URL", "")
    jellyseerr_api_key: str = os.getenv("JELLYSEERR_API_KEY", "")

    tvdb_api_key: str = os.getenv("TVDB_API_KEY", "")
    tvdb_pin: str = os.getenv("TVDB_PIN", "")
    tvdb_base_url: str = os.getenv("TVDB_BASE_URL", "https://api4.thetvdb.com/v4")

    pyrodactyl_url: str = os.getenv("PYRODACTYL_URL", "")
    pyrodactyl_api_key: str = os.getenv("PYRODACTYL_API_KEY", "")

    portainer_url: str = os.getenv("PORTAINER_URL", "")
    portainer_access_token: str = os.getenv("PORTAINER_ACCESS_TOKEN", "")
    portainer_endpoint_id: str = os.getenv("PORTAINER_ENDPOINT_ID", "1")

    external_proxmox_url: str = os.getenv("EXTERNAL_PROXMOX_URL", "")
    external_jellyfin_url: str = os.getenv("EXTERNAL_JELLYFIN_URL", "")
    external_jellyseerr_url: str = os.getenv("EXTERNAL_JELLYSEERR_URL", "")
    external_pyrodactyl_url: str = os.getenv("EXTERNAL_PYRODACTYL_URL", "")
    external_portainer_url: str = os.getenv("EXTERNAL_PORTAINER_URL", "")

    # Homelab services mostly run behind self-signed certificates.
    upstream_verify_tls: bool = _env_flag("UPSTREAM_VERIFY_TLS", "false")
    upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))

    layout_storage_key: str = os.getenv("LAYOUT_STORAGE_KEY", "gks-widget-layout")
    dashboard_widgets: tuple[str, ...] = _env_list(
        "DASHBOARD_WIDGETS",
        "proxmox,jellyfin,jellyseerr,pyrodactyl,portainer",
    )

    # Milliseconds, as consumed by dcc.Interval.
    proxmox_refresh_ms: int = int(os.getenv("PROXMOX_REFRESH_MS", "30000"))
    jellyfin_refresh_ms: int = int(os.getenv("JELLYFIN_REFRESH_MS", "300000"))
    jellyseerr_refresh_ms: int = int(os.getenv("JELLYSEERR_REFRESH_MS", "300000"))
    pyrodactyl_refresh_ms: int = int(os.getenv("PYRODACTYL_REFRESH_MS", "30000"))
    portainer_refresh_ms: int = int(os.getenv("PORTAINER_REFRESH_MS", "30000"))
    overview_refresh_ms: int = int(os.getenv("OVERVIEW_REFRESH_MS", "30000"))
    proxmox_page_refresh_ms: int = int(os.getenv("PROXMOX_PAGE_REFRESH_MS", "30000"))
    servers_page_refresh_ms: int = int(os.getenv("SERVERS_PAGE_REFRESH_MS", "60000"))
    containers_page_refresh_ms: int = int(os.getenv("CONTAINERS_PAGE_REFRESH_MS", "30000"))

    jellyfin_max_items: int = int(os.getenv("JELLYFIN_MAX_ITEMS", "10"))
    jellyseerr_max_items: int = int(os.getenv("JELLYSEERR_MAX_ITEMS", "5"))
    # Nodes listed here come first on the Proxmox page, in this order.
    proxmox_node_order: tuple[str, ...] = _env_list("PROXMOX_NODE_ORDER", "")

    # Dashboard client to proxy calls.
    api_retry_attempts: int = int(os.getenv("API_RETRY_ATTEMPTS", "3"))
    api_retry_backoff_seconds: float = float(os.getenv("API_RETRY_BACKOFF_SECONDS", "0.3"))
    backend_health_timeout_seconds: float = float(os.getenv("BACKEND_HEALTH_TIMEOUT_SECONDS", "1.2"))

    embed_backend: bool = _env_flag("EMBED_BACKEND", "true")
    embed_backend_wait_seconds: float = float(os.getenv("EMBED_BACKEND_WAIT_SECONDS", "20"))


settings = Settings()
