from __future__ import annotations

import logging
from typing import Any

from backend.integrations.base import UpstreamError, UpstreamIntegration

logger = logging.getLogger(__name__)

MIB = 1048576


class PyrodactylIntegration(UpstreamIntegration):
    label = "Pyrodactyl"

    @property
    def base_url(self) -> str:
        return self.settings.pyrodactyl_url

    def is_configured(self) -> bool:
        return bool(self.settings.pyrodactyl_url and self.settings.pyrodactyl_api_key)

    def auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.pyrodactyl_api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def servers(self) -> dict[str, Any]:
        self.ensure_configured()
        data = self.get_json("/api/client") or {}
        servers = []
        for server in data.get("data") or []:
            attributes = server.get("attributes") or server
            servers.append(shape_server(attributes, self._resources(attributes.get("identifier"))))
        return {"servers": servers}

    def _resources(self, identifier: Any) -> dict[str, Any]:
        try:
            payload = self.get_json(f"/api/client/servers/{identifier}/resources") or {}
        except UpstreamError:
            logger.warning("Failed to fetch resources for server %s", identifier)
            return {}
        # Pterodactyl nests usage as attributes.resources and state as attributes.current_state.
        return payload.get("attributes") or {}


def first_allocation(attributes: dict[str, Any]) -> dict[str, Any] | None:
    allocations = ((attributes.get("relationships") or {}).get("allocations") or {}).get("data") or []
    if not allocations:
        return None
    alloc = allocations[0].get("attributes") or {}
    return {"ip": alloc.get("ip_alias") or alloc.get("ip"), "port": alloc.get("port")}


def shape_server(attributes: dict[str, Any], resource_attrs: dict[str, Any]) -> dict[str, Any]:
    resources = resource_attrs.get("resources") or {}
    limits = attributes.get("limits") or {}
    return {
        "identifier": attributes.get("identifier"),
        "name": attributes.get("name"),
        "description": attributes.get("description"),
        "status": resource_attrs.get("current_state") or "offline",
        "resources": {
            "cpu": resources.get("cpu_absolute") or 0,
            "memory": resources.get("memory_bytes") or 0,
            "disk": resources.get("disk_bytes") or 0,
        },
        # A limit of 0 means unlimited and is passed through as 0.
        "limits": {
            "memory": (limits.get("memory") or 0) * MIB,
            "disk": (limits.get("disk") or 0) * MIB,
        },
        "allocation": first_allocation(attributes),
        "uuid": attributes.get("uuid"),
        # The panel reports uptime in milliseconds.
        "uptime": int(resources.get("uptime") or 0) // 1000,
        "network": {
            "tx": resources.get("network_tx_bytes") or 0,
            "rx": resources.get("network_rx_bytes") or 0,
        },
    }
