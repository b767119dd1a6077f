"""
Tests for the FastAPI proxy routes.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from backend.api import deps
from backend.integrations.base import IntegrationNotConfigured, UpstreamError
from backend.main import app
from config.settings import Settings


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def override(dependency, integration):
    app.dependency_overrides[dependency] = lambda: integration
    return integration


class TestHealthAndConfig:
    """Test /health and /api/config."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_external_links_prefer_public_urls(self, client):
        app.dependency_overrides[deps.get_settings] = lambda: Settings(
            jellyfin_url="http://10.0.0.2:8096",
            external_jellyfin_url="https://watch.example",
            portainer_url="https://10.0.0.3:9443",
            external_portainer_url="",
            proxmox_host="",
            external_proxmox_url="",
        )
        links = client.get("/api/config").json()["externalLinks"]
        assert links["jellyfin"] == "https://watch.example"
        assert links["portainer"] == "https://10.0.0.3:9443"
        assert links["proxmox"] == ""


class TestProxyRoutes:
    """Test that each route delegates to its integration."""

    def test_proxmox_status(self, client):
        proxmox = override(deps.get_proxmox, MagicMock())
        proxmox.cluster_status.return_value = {"nodes": [{"node": "pve", "vmCount": 1}]}
        response = client.get("/api/proxmox/status")
        assert response.status_code == 200
        assert response.json() == {"nodes": [{"node": "pve", "vmCount": 1}]}

    def test_jellyfin_latest(self, client):
        jellyfin = override(deps.get_jellyfin, MagicMock())
        jellyfin.latest_items.return_value = {"items": []}
        assert client.get("/api/jellyfin/latest").json() == {"items": []}

    def test_jellyseerr_requests(self, client):
        jellyseerr = override(deps.get_jellyseerr, MagicMock())
        jellyseerr.recent_requests.return_value = {"requests": [], "totalCount": 0}
        assert client.get("/api/jellyseerr/requests").json() == {"requests": [], "totalCount": 0}

    def test_tvdb_routes(self, client):
        tvdb = override(deps.get_tvdb, MagicMock())
        tvdb.series.return_value = {"id": 81189}
        tvdb.episodes.return_value = {"episodes": []}
        tvdb.search.return_value = {"results": []}
        tvdb.artworks.return_value = {"artworks": []}

        assert client.get("/api/tvdb/series/81189").json() == {"id": 81189}
        client.get("/api/tvdb/series/81189/episodes", params={"season": 2, "episode": 3})
        tvdb.episodes.assert_called_once_with(81189, season=2, episode=3)
        client.get("/api/tvdb/search", params={"query": "breaking bad"})
        tvdb.search.assert_called_once_with("breaking bad")
        client.get("/api/tvdb/series/81189/artworks", params={"type": "poster"})
        tvdb.artworks.assert_called_once_with(81189, "poster")

    def test_servers_and_containers(self, client):
        pyrodactyl = override(deps.get_pyrodactyl, MagicMock())
        portainer = override(deps.get_portainer, MagicMock())
        pyrodactyl.servers.return_value = {"servers": []}
        portainer.containers.return_value = {"containers": []}
        assert client.get("/api/pyrodactyl/servers").json() == {"servers": []}
        assert client.get("/api/portainer/containers").json() == {"containers": []}


class TestErrorMapping:
    """Test integration errors become JSON error responses."""

    def test_not_configured_is_500(self, client):
        portainer = override(deps.get_portainer, MagicMock())
        portainer.containers.side_effect = IntegrationNotConfigured("Portainer")
        response = client.get("/api/portainer/containers")
        assert response.status_code == 500
        assert response.json() == {"detail": "Portainer not configured"}

    def test_upstream_error_is_502(self, client):
        proxmox = override(deps.get_proxmox, MagicMock())
        proxmox.cluster_status.side_effect = UpstreamError("Proxmox", status=401)
        response = client.get("/api/proxmox/status")
        assert response.status_code == 502
        assert response.json() == {"detail": "Proxmox API error: 401"}
