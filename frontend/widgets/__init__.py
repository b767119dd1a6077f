from __future__ import annotations

from typing import Any

from frontend.components.status_card import StatusCard
from frontend.widgets import jellyfin, jellyseerr, portainer, proxmox, pyrodactyl


def build_cards(settings: Any) -> dict[str, StatusCard]:
    """Cards for every widget enabled in settings, in declaration order."""
    cards = {
        "proxmox": StatusCard(
            widget_id="proxmox",
            title="Proxmox",
            endpoint="/api/proxmox/status",
            render=proxmox.render,
            refresh_ms=settings.proxmox_refresh_ms,
            empty_text="No nodes found",
            is_empty=proxmox.is_empty,
        ),
        "jellyfin": StatusCard(
            widget_id="jellyfin",
            title="Jellyfin",
            endpoint="/api/jellyfin/latest",
            render=jellyfin.render_with_limit(settings.jellyfin_max_items),
            refresh_ms=settings.jellyfin_refresh_ms,
            empty_text="No recent media",
            is_empty=jellyfin.is_empty,
            announce=jellyfin.announce,
        ),
        "jellyseerr": StatusCard(
            widget_id="jellyseerr",
            title="Jellyseerr",
            endpoint="/api/jellyseerr/requests",
            render=jellyseerr.render_with_limit(settings.jellyseerr_max_items),
            refresh_ms=settings.jellyseerr_refresh_ms,
            empty_text="No recent requests",
            is_empty=jellyseerr.is_empty,
            announce=jellyseerr.announce,
        ),
        "pyrodactyl": StatusCard(
            widget_id="pyrodactyl",
            title="Game Servers",
            endpoint="/api/pyrodactyl/servers",
            render=pyrodactyl.render,
            refresh_ms=settings.pyrodactyl_refresh_ms,
            empty_text="No game servers found",
            is_empty=pyrodactyl.is_empty,
            keep_on_empty_refresh=True,
        ),
        "portainer": StatusCard(
            widget_id="portainer",
            title="Containers",
            endpoint="/api/portainer/containers",
            render=portainer.render,
            refresh_ms=settings.portainer_refresh_ms,
            empty_text="No containers found",
            is_empty=portainer.is_empty,
        ),
    }
    enabled = settings.dashboard_widgets
    return {name: card for name, card in cards.items() if name in enabled}
