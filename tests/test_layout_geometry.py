"""
Tests for grid geometry: auto-placement, hit-testing and resize deltas.
"""

import pytest

from frontend.layout.geometry import (
    DropTarget,
    GridMetrics,
    Rect,
    auto_place,
    find_drop_target,
    layout_rects,
    resized_span,
    round_half_up,
    widget_at,
)
from frontend.layout.grid import Span, WidgetPlacement, apply_layout, default_layout, placements_for
from test_helpers import WIDGET_IDS

METRICS = GridMetrics(width=1200.0)


class TestAutoPlace:
    """Test CSS grid auto-placement emulation."""

    def test_default_layout_cells(self):
        placements = apply_layout(default_layout(), placements_for(WIDGET_IDS))
        assert auto_place(placements) == {
            "pyrodactyl": (0, 0),
            "proxmox": (1, 0),
            "portainer": (0, 1),
            "jellyseerr": (2, 1),
            "jellyfin": (0, 2),
        }

    def test_sparse_flow_does_not_backfill(self):
        placements = [WidgetPlacement("a", 3, 1), WidgetPlacement("b", 2, 1), WidgetPlacement("c", 1, 1)]
        # "c" would fit in row 0 column 3, but the cursor has already moved past it.
        assert auto_place(placements) == {"a": (0, 0), "b": (0, 1), "c": (2, 1)}

    def test_tall_widgets_block_following_rows(self):
        placements = [WidgetPlacement("a", 2, 2), WidgetPlacement("b", 2, 1), WidgetPlacement("c", 4, 1)]
        cells = auto_place(placements)
        assert cells["b"] == (2, 0)
        assert cells["c"] == (0, 2)


class TestLayoutRects:
    """Test pixel rectangles derived from placements."""

    def test_rects_use_column_width_and_row_height(self):
        rects = layout_rects([WidgetPlacement("a", 1, 1), WidgetPlacement("b", 3, 2)], METRICS)
        assert rects["a"] == Rect(0.0, 0.0, 300.0, 150.0)
        assert rects["b"] == Rect(300.0, 0.0, 900.0, 300.0)

    def test_corner_detection(self):
        rect = Rect(0.0, 0.0, 300.0, 150.0)
        assert rect.in_corner(290.0, 140.0)
        assert not rect.in_corner(150.0, 140.0)
        assert not rect.in_corner(310.0, 160.0)


class TestHitTesting:
    """Test widget_at and find_drop_target."""

    @pytest.fixture
    def rects(self):
        return layout_rects(placements_for(["a", "b", "c"]), METRICS)

    def test_widget_at(self, rects):
        assert widget_at(rects, 100.0, 100.0) == "a"
        assert widget_at(rects, 700.0, 100.0) == "b"
        assert widget_at(rects, 100.0, 1000.0) is None

    def test_widget_at_excludes_dragged(self, rects):
        assert widget_at(rects, 100.0, 100.0, exclude="a") is None

    def test_upper_half_inserts_before(self, rects):
        assert find_drop_target(rects, 1100.0, 50.0, "c") == DropTarget("b", True)

    def test_left_half_inserts_before(self, rects):
        assert find_drop_target(rects, 650.0, 250.0, "c") == DropTarget("b", True)

    def test_lower_right_inserts_after(self, rects):
        assert find_drop_target(rects, 1100.0, 250.0, "c") == DropTarget("b", False)

    def test_no_target_over_self_or_empty_space(self, rects):
        assert find_drop_target(rects, 100.0, 400.0, "c") is None
        assert find_drop_target(rects, 1000.0, 500.0, "c") is None


class TestResizedSpan:
    """Test resize deltas."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.49, 0), (0.5, 1), (1.5, 2), (-0.5, 0), (-0.51, -1), (-1.5, -1)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_delta_in_cells(self):
        assert resized_span(Span(2, 2), 320.0, -160.0, METRICS) == Span(3, 1)

    def test_small_moves_keep_span(self):
        assert resized_span(Span(2, 2), 100.0, 50.0, METRICS) == Span(2, 2)

    @pytest.mark.parametrize("dx,dy", [(10_000.0, 10_000.0), (-10_000.0, -10_000.0), (5e9, -5e9)])
    def test_always_clamped(self, dx, dy):
        span = resized_span(Span(4, 1), dx, dy, METRICS)
        assert 1 <= span.col_span <= 4
        assert 1 <= span.row_span <= 4
