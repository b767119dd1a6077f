"""
Tests for frontend components: notifications and the pollable status card.
"""

from dataclasses import replace
from unittest.mock import MagicMock

import pytest
import requests

from config.settings import Settings
from frontend.components.notifications import NotificationQueue, render_notifications
from frontend.components.status_card import StatusCard, card_shell, load_card
from frontend.widgets import build_cards
from test_helpers import FakeClock


class TestNotificationQueue:
    """Test NotificationQueue."""

    def test_show_and_expire(self):
        clock = FakeClock()
        queue = NotificationQueue(clock=clock, duration=5.0)
        queue.success("Layout saved")
        clock.advance(4.9)
        assert not queue.prune()
        clock.advance(0.2)
        assert queue.prune()
        assert queue.items == []

    def test_unknown_severity_is_info(self):
        queue = NotificationQueue(clock=FakeClock())
        queue.show("hello", "shout")
        assert queue.items[0].severity == "info"

    def test_data_round_trip(self):
        queue = NotificationQueue(clock=FakeClock())
        queue.warning("careful")
        queue.error("broken")
        restored = NotificationQueue.from_data(queue.to_data())
        assert [(item.message, item.severity) for item in restored.items] == [
            ("careful", "warning"),
            ("broken", "error"),
        ]

    def test_from_data_skips_garbage(self):
        assert NotificationQueue.from_data([None, {"severity": "info"}, "x"]).items == []
        assert NotificationQueue.from_data(None).items == []

    def test_render(self):
        queue = NotificationQueue(clock=FakeClock())
        queue.error("broken")
        rendered = render_notifications(queue.to_data())
        assert len(rendered) == 1
        assert rendered[0].className == "notification error"


def render_names(payload, _links):
    return [item["name"] for item in payload["items"]]


def announce_new(previous, payload):
    before = {item["name"] for item in previous["items"]}
    return [(f"new {item['name']}", "info") for item in payload["items"] if item["name"] not in before]


@pytest.fixture
def card():
    return StatusCard(
        widget_id="demo",
        title="Demo",
        endpoint="/api/demo",
        render=render_names,
        refresh_ms=1000,
        empty_text="Nothing here",
        is_empty=lambda payload: not payload.get("items"),
        announce=announce_new,
    )


class TestLoadCard:
    """Test load_card refresh semantics."""

    def test_first_load_renders(self, card):
        fetch = MagicMock(return_value={"items": [{"name": "x"}]})
        result = load_card(card, fetch, None)
        fetch.assert_called_once_with("/api/demo")
        assert result.children == ["x"]
        assert result.state["loaded"] is True
        assert result.state["payload"] == {"items": [{"name": "x"}]}
        assert not result.show_retry

    def test_first_load_failure_shows_retry(self, card):
        fetch = MagicMock(side_effect=requests.ConnectionError("down"))
        result = load_card(card, fetch, None)
        assert result.show_retry
        assert result.state["loaded"] is False
        assert "Failed to load Demo data" in str(result.children)

    def test_refresh_failure_preserves_content(self, card):
        state = load_card(card, MagicMock(return_value={"items": [{"name": "x"}]}), None).state
        result = load_card(card, MagicMock(side_effect=requests.HTTPError("502")), state)
        assert result.children is None
        assert not result.show_retry
        assert result.state["payload"] == {"items": [{"name": "x"}]}
        assert result.state["error"] == "502"

    def test_empty_payload(self, card):
        result = load_card(card, MagicMock(return_value={"items": []}), None)
        assert "Nothing here" in str(result.children)

    def test_empty_refresh_kept_when_configured(self, card):
        sticky = replace(card, keep_on_empty_refresh=True)
        state = load_card(sticky, MagicMock(return_value={"items": [{"name": "x"}]}), None).state
        result = load_card(sticky, MagicMock(return_value={"items": []}), state)
        assert result.children is None
        assert result.state["payload"] == {"items": [{"name": "x"}]}

    def test_announcements_only_after_first_load(self, card):
        first = load_card(card, MagicMock(return_value={"items": [{"name": "x"}]}), None)
        assert first.state["announcements"] == []
        second = load_card(card, MagicMock(return_value={"items": [{"name": "y"}, {"name": "x"}]}), first.state)
        assert second.state["announcements"] == [["new y", "info"]]
        assert second.state["seq"] == first.state["seq"] + 1

    def test_non_dict_payload_is_empty(self, card):
        result = load_card(card, MagicMock(return_value=[1, 2]), None)
        assert "Nothing here" in str(result.children)

    def test_render_error_on_first_load_shows_retry(self, card):
        # render_names expects a "name" key on every item.
        result = load_card(card, MagicMock(return_value={"items": [{"title": "x"}]}), None)
        assert result.show_retry
        assert result.state["loaded"] is False
        assert "Failed to load Demo data" in str(result.children)

    def test_render_error_on_refresh_preserves_content(self, card):
        state = load_card(card, MagicMock(return_value={"items": [{"name": "x"}]}), None).state
        result = load_card(card, MagicMock(return_value={"items": [{"title": "y"}]}), state)
        assert result.children is None
        assert not result.show_retry
        assert result.state["payload"] == {"items": [{"name": "x"}]}

    def test_real_widgets_render_realistic_payloads(self):
        payloads = {
            "jellyfin": {
                "items": [
                    {
                        "Id": "1",
                        "Name": "Dune",
                        "Type": "Movie",
                        "ProductionYear": 2021,
                        "CommunityRating": 8.0,
                        "RunTimeTicks": 93_600_000_000,
                        "Overview": "Paul Atreides...",
                        "ImageUrl": "http://jf/Items/1/Images/Primary",
                    }
                ]
            },
            "jellyseerr": {
                "requests": [
                    {
                        "id": 7,
                        "type": "movie",
                        "status": 2,
                        "media": {"tmdbId": 438631, "title": "Dune", "posterPath": "/dune.jpg"},
                        "requestedBy": {"displayName": "sam"},
                    }
                ],
                "totalCount": 1,
            },
        }
        cards = build_cards(Settings())
        for name, payload in payloads.items():
            result = load_card(cards[name], MagicMock(return_value=payload), None, {name: "https://example"})
            assert not result.show_retry, name
            assert result.state["loaded"] is True
            assert "Dune" in str(result.children)


class TestCardShell:
    """Test card_shell."""

    def test_shell_ids(self, card):
        shell = card_shell(card)
        assert shell.id == {"type": "widget-shell", "widget": "demo"}
        assert shell.className == "widget"
        ids = [getattr(child, "id", None) for child in shell.children]
        assert {"type": "card-content", "widget": "demo"} in ids
        assert {"type": "card-interval", "widget": "demo"} in ids
        assert {"type": "card-retry", "widget": "demo"} in ids
        handles = [child for child in shell.children if getattr(child, "className", None) == "resize-handle"]
        assert len(handles) == 1
