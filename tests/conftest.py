"""
Pytest fixtures for the dashboard proxy and layout editor tests.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config.settings import Settings  # noqa: E402
from frontend.components.notifications import NotificationQueue  # noqa: E402
from frontend.layout.store import BrowserStorage, LayoutStore  # noqa: E402
from test_helpers import FakeClock  # noqa: E402


@pytest.fixture
def configured_settings():
    """Settings with every integration configured."""
    return Settings(
        proxmox_host="https://pve.lan:8006",
        proxmox_token_id="root@pam!dash",
        proxmox_token_secret="secret",
        jellyfin_url="http://jellyfin.lan:8096",
        jellyfin_api_key="jf-key",
        jellyfin_user_id="user-1",
        jellyseerr_url="http://seerr.lan:5055",
        jellyseerr_api_key="seerr-key",
        tvdb_api_key="tvdb-key",
        tvdb_pin="1234",
        tvdb_base_url="https://api4.thetvdb.com/v4",
        pyrodactyl_url="https://panel.lan",
        pyrodactyl_api_key="ptla-key",
        portainer_url="https://portainer.lan:9443",
        portainer_access_token="ptr-token",
        portainer_endpoint_id="3",
        upstream_verify_tls=False,
        upstream_timeout_seconds=5.0,
    )


@pytest.fixture
def empty_settings():
    """Settings with no integration configured."""
    return Settings(
        proxmox_host="",
        proxmox_token_id="",
        proxmox_token_secret="",
        jellyfin_url="",
        jellyfin_api_key="",
        jellyfin_user_id="",
        jellyseerr_url="",
        jellyseerr_api_key="",
        tvdb_api_key="",
        pyrodactyl_url="",
        pyrodactyl_api_key="",
        portainer_url="",
        portainer_access_token="",
    )


@pytest.fixture
def session():
    """A requests.Session mock; set ``request.side_effect`` per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def storage():
    return BrowserStorage({})


@pytest.fixture
def store(storage):
    return LayoutStore(storage)


@pytest.fixture
def notifier():
    return NotificationQueue(clock=FakeClock())
