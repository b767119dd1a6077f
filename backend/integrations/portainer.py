from __future__ import annotations

from typing import Any

from backend.integrations.base import UpstreamIntegration


class PortainerIntegration(UpstreamIntegration):
    label = "Portainer"

    @property
    def base_url(self) -> str:
        return self.settings.portainer_url

    def is_configured(self) -> bool:
        return bool(self.settings.portainer_url and self.settings.portainer_access_token)

    def auth_headers(self) -> dict[str, str]:
        return {"X-API-Key": self.settings.portainer_access_token}

    def containers(self) -> dict[str, Any]:
        self.ensure_configured()
        endpoint_id = self.settings.portainer_endpoint_id or "1"
        # Portainer proxies the Docker Engine API per endpoint.
        containers = self.get_json(f"/api/endpoints/{endpoint_id}/docker/containers/json", params={"all": "true"})
        return {"containers": containers or []}
