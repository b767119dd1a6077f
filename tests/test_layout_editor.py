"""
Tests for the layout editor state machine.
"""

import json
import logging

import pytest

from frontend.layout.editor import IDLE, Dragging, LayoutEditor, Mode, Resizing, TargetKind
from frontend.layout.geometry import DropTarget, GridMetrics
from frontend.layout.grid import DEFAULT_LAYOUT, Span, WidgetPlacement
from test_helpers import STORAGE_KEY, WIDGET_IDS


def persisted(storage):
    return json.loads(storage[STORAGE_KEY])


@pytest.fixture
def editor(store, notifier):
    """Three 1x1 widgets in one row of a 1200px grid: a | b | c."""
    placements = [WidgetPlacement("a", 1, 1), WidgetPlacement("b", 1, 1), WidgetPlacement("c", 1, 1)]
    return LayoutEditor(placements, store, STORAGE_KEY, notifier, GridMetrics(1200.0))


@pytest.fixture
def editing(editor):
    editor.toggle()
    return editor


class TestOpen:
    """Test LayoutEditor.open."""

    def test_default_load(self, store):
        editor = LayoutEditor.open(WIDGET_IDS, store, STORAGE_KEY)
        assert editor.widget_ids == DEFAULT_LAYOUT.order
        for placement in editor.placements:
            assert placement.span == DEFAULT_LAYOUT.sizes[placement.id]
        assert editor.mode is Mode.VIEWING
        assert editor.gesture is IDLE

    def test_persisted_layout_wins(self, storage, store):
        storage[STORAGE_KEY] = json.dumps(
            {"order": ["portainer", "proxmox"], "sizes": {"proxmox": {"colSpan": "1", "rowSpan": "4"}}}
        )
        editor = LayoutEditor.open(["proxmox", "portainer", "jellyfin"], store, STORAGE_KEY)
        assert editor.widget_ids == ["jellyfin", "portainer", "proxmox"]
        assert editor.placement("proxmox").span == Span(1, 4)
        assert editor.placement("jellyfin").span == Span(2, 2)

    def test_corrupt_storage_uses_default(self, storage, store, caplog):
        storage[STORAGE_KEY] = "not json"
        with caplog.at_level(logging.WARNING):
            editor = LayoutEditor.open(WIDGET_IDS, store, STORAGE_KEY)
        assert editor.widget_ids == DEFAULT_LAYOUT.order
        assert caplog.records

    def test_partial_page(self, store):
        editor = LayoutEditor.open(["jellyfin", "proxmox"], store, STORAGE_KEY)
        assert editor.widget_ids == ["proxmox", "jellyfin"]
        assert editor.placement("jellyfin").span == Span(4, 1)


class TestToggle:
    """Test mode transitions."""

    def test_entering_edit_mode_notifies(self, editor, notifier, storage):
        assert editor.toggle() is Mode.EDITING
        assert notifier.items[-1].severity == "info"
        assert "Edit mode" in notifier.items[-1].message
        assert STORAGE_KEY not in storage

    def test_leaving_edit_mode_persists(self, editing, notifier, storage):
        assert editing.toggle() is Mode.VIEWING
        assert persisted(storage) == {
            "order": ["a", "b", "c"],
            "sizes": {key: {"colSpan": "1", "rowSpan": "1"} for key in "abc"},
        }
        assert notifier.items[-1].message == "Layout saved"
        assert notifier.items[-1].severity == "success"

    def test_toggle_during_drag_finishes_gesture(self, editing, storage):
        editing.pointer_down(700.0, 50.0)
        editing.pointer_move(50.0, 50.0)
        editing.toggle()
        assert editing.gesture is IDLE
        assert persisted(storage)["order"] == ["c", "a", "b"]

    def test_reset_restores_default(self, store, storage, notifier):
        storage[STORAGE_KEY] = json.dumps({"order": ["jellyfin"], "sizes": {}})
        editor = LayoutEditor.open(WIDGET_IDS, store, STORAGE_KEY, notifier)
        editor.reset()
        assert STORAGE_KEY not in storage
        assert editor.widget_ids == DEFAULT_LAYOUT.order
        assert notifier.items[-1].message == "Layout reset to defaults"


class TestDrag:
    """Test drag gestures."""

    def test_drag_commit_persists_immediately(self, editing, storage):
        assert editing.pointer_down(700.0, 50.0)
        assert isinstance(editing.gesture, Dragging)
        editing.pointer_move(50.0, 50.0)
        assert editing.gesture.drop_target == DropTarget("a", True)
        editing.pointer_up()
        assert editing.widget_ids == ["c", "a", "b"]
        assert editing.gesture is IDLE
        assert editing.editing
        assert persisted(storage)["order"] == ["c", "a", "b"]

    def test_drag_records_offset_and_follows_pointer(self, editing):
        editing.pointer_down(340.0, 20.0)
        editing.pointer_move(900.0, 400.0)
        rect = editing.gesture.floating_rect
        assert (rect.left, rect.top, rect.width, rect.height) == (860.0, 380.0, 300.0, 150.0)

    def test_drop_without_target_keeps_order(self, editing, storage):
        editing.pointer_down(50.0, 50.0)
        editing.pointer_move(1000.0, 900.0)
        assert editing.gesture.drop_target is None
        editing.pointer_up()
        assert editing.widget_ids == ["a", "b", "c"]
        assert persisted(storage)["order"] == ["a", "b", "c"]

    def test_drop_after_target(self, editing):
        editing.pointer_down(50.0, 50.0)
        editing.pointer_move(850.0, 120.0)
        editing.pointer_up()
        assert editing.widget_ids == ["b", "c", "a"]

    def test_ignored_while_viewing(self, editor):
        assert not editor.pointer_down(50.0, 50.0)
        assert editor.gesture is IDLE

    def test_ignored_on_controls(self, editing):
        assert not editing.pointer_down(50.0, 50.0, TargetKind.CONTROL)
        assert editing.gesture is IDLE

    def test_ignored_outside_widgets(self, editing):
        assert not editing.pointer_down(50.0, 800.0)

    def test_unknown_widget_is_noop(self, editing):
        assert not editing.start_drag("ghost", 0.0, 0.0)
        assert not editing.start_resize("ghost", 0.0, 0.0)
        assert editing.gesture is IDLE


class TestResize:
    """Test resize gestures."""

    def test_handle_starts_resize(self, editing):
        assert editing.pointer_down(100.0, 100.0, TargetKind.RESIZE_HANDLE)
        assert editing.gesture == Resizing("a", 100.0, 100.0, Span(1, 1))

    def test_corner_starts_resize(self, editing):
        editing.pointer_down(295.0, 145.0)
        assert isinstance(editing.gesture, Resizing)

    def test_live_preview_and_persist(self, editing, storage):
        editing.pointer_down(295.0, 145.0, TargetKind.RESIZE_HANDLE)
        editing.pointer_move(600.0, 300.0)
        assert editing.placement("a").span == Span(2, 2)
        assert STORAGE_KEY not in storage
        editing.pointer_up()
        assert persisted(storage)["sizes"]["a"] == {"colSpan": "2", "rowSpan": "2"}

    def test_resize_clamps_at_max(self, store, notifier, storage):
        editor = LayoutEditor([WidgetPlacement("a", 4, 1)], store, STORAGE_KEY, notifier, GridMetrics(1200.0))
        editor.toggle()
        editor.pointer_down(1195.0, 145.0)
        editor.pointer_move(90_000.0, 145.0)
        editor.pointer_up()
        assert editor.placement("a").span == Span(4, 1)
        assert persisted(storage)["sizes"]["a"]["colSpan"] == "4"

    def test_resize_clamps_at_min(self, editing):
        editing.pointer_down(295.0, 145.0)
        editing.pointer_move(-90_000.0, -90_000.0)
        assert editing.placement("a").span == Span(1, 1)


class TestMutualExclusion:
    """Only one gesture can be active at a time."""

    def test_pointerdown_during_drag_is_ignored(self, editing):
        editing.pointer_down(700.0, 50.0)
        gesture = editing.gesture
        assert not editing.pointer_down(295.0, 145.0, TargetKind.RESIZE_HANDLE)
        assert not editing.start_resize("a", 295.0, 145.0)
        assert editing.gesture is gesture

    def test_pointerdown_during_resize_is_ignored(self, editing):
        editing.pointer_down(295.0, 145.0)
        gesture = editing.gesture
        assert not editing.pointer_down(700.0, 50.0)
        assert not editing.start_drag("c", 700.0, 50.0)
        assert editing.gesture is gesture

    def test_pointer_up_when_idle_is_noop(self, editing, storage):
        assert not editing.pointer_up()
        assert STORAGE_KEY not in storage


class TestStateSerialization:
    """Test to_state / from_state used by the Dash store."""

    def test_round_trip_during_drag(self, editing, store):
        editing.pointer_down(700.0, 50.0)
        editing.pointer_move(50.0, 50.0)
        restored = LayoutEditor.from_state(json.loads(json.dumps(editing.to_state())), store, STORAGE_KEY)
        assert restored.mode is Mode.EDITING
        assert restored.gesture == editing.gesture
        assert restored.placements == editing.placements
        assert restored.metrics.width == 1200.0

    def test_round_trip_during_resize(self, editing, store):
        editing.pointer_down(295.0, 145.0)
        restored = LayoutEditor.from_state(json.loads(json.dumps(editing.to_state())), store, STORAGE_KEY)
        assert restored.gesture == editing.gesture

    def test_unreadable_gesture_becomes_idle(self, store):
        state = {"mode": "editing", "gesture": {"kind": "dragging"}, "placements": [{"id": "a"}]}
        restored = LayoutEditor.from_state(state, store, STORAGE_KEY)
        assert restored.gesture is IDLE
        assert restored.placement("a").span == Span(2, 2)

    def test_unknown_mode_is_viewing(self, store):
        assert LayoutEditor.from_state({"mode": "flying"}, store, STORAGE_KEY).mode is Mode.VIEWING
