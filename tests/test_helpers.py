"""
Shared helpers for tests (not fixtures).
"""

from unittest.mock import MagicMock

STORAGE_KEY = "gks-widget-layout"
WIDGET_IDS = ["proxmox", "jellyfin", "jellyseerr", "pyrodactyl", "portainer"]


def make_response(status=200, json_data=None, text=""):
    """Build a requests.Response stand-in."""
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.text = text
    response.content = b"{}" if json_data is not None else b""
    response.json.return_value = json_data
    return response


class FakeClock:
    """Manually advanced clock for time-dependent code."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
