from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Sequence

from frontend.layout.grid import GRID_COLUMNS, Span, WidgetPlacement, clamp_span

ROW_HEIGHT = 150.0
RESIZE_HANDLE_SIZE = 24.0


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def mid_x(self) -> float:
        return self.left + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.top + self.height / 2

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def in_corner(self, x: float, y: float, size: float = RESIZE_HANDLE_SIZE) -> bool:
        return self.contains(x, y) and x >= self.right - size and y >= self.bottom - size


@dataclass(frozen=True)
class GridMetrics:
    width: float
    row_height: float = ROW_HEIGHT
    columns: int = GRID_COLUMNS

    @property
    def col_width(self) -> float:
        return self.width / self.columns if self.columns else 0.0


@dataclass(frozen=True)
class DropTarget:
    widget_id: str
    before: bool


def auto_place(placements: Sequence[WidgetPlacement], columns: int = GRID_COLUMNS) -> dict[str, tuple[int, int]]:
    """Return ``{id: (column, row)}`` using CSS grid sparse row auto-flow."""
    occupied: set[tuple[int, int]] = set()
    cursor_row, cursor_col = 0, 0
    cells: dict[str, tuple[int, int]] = {}

    for placement in placements:
        col_span = min(placement.col_span, columns)
        row_span = placement.row_span
        row, col = cursor_row, cursor_col
        while True:
            if col + col_span > columns:
                row, col = row + 1, 0
                continue
            area = {(r, c) for r in range(row, row + row_span) for c in range(col, col + col_span)}
            if not area & occupied:
                break
            col += 1
        occupied |= area
        cells[placement.id] = (col, row)
        cursor_row, cursor_col = row, col + col_span

    return cells


def layout_rects(placements: Sequence[WidgetPlacement], metrics: GridMetrics) -> dict[str, Rect]:
    rects: dict[str, Rect] = {}
    cells = auto_place(placements, metrics.columns)
    for placement in placements:
        col, row = cells[placement.id]
        rects[placement.id] = Rect(
            left=col * metrics.col_width,
            top=row * metrics.row_height,
            width=min(placement.col_span, metrics.columns) * metrics.col_width,
            height=placement.row_span * metrics.row_height,
        )
    return rects


def widget_at(rects: Mapping[str, Rect], x: float, y: float, exclude: str | None = None) -> str | None:
    for widget_id, rect in rects.items():
        if widget_id != exclude and rect.contains(x, y):
            return widget_id
    return None


def find_drop_target(rects: Mapping[str, Rect], x: float, y: float, dragged_id: str) -> DropTarget | None:
    target_id = widget_at(rects, x, y, exclude=dragged_id)
    if target_id is None:
        return None
    rect = rects[target_id]
    # Above the vertical midpoint, or left of the horizontal one, inserts before.
    before = y < rect.mid_y or x < rect.mid_x
    return DropTarget(target_id, before)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def resized_span(start: Span, dx: float, dy: float, metrics: GridMetrics) -> Span:
    col_delta = round_half_up(dx / metrics.col_width) if metrics.col_width else 0
    row_delta = round_half_up(dy / metrics.row_height) if metrics.row_height else 0
    return Span(clamp_span(start.col_span + col_delta), clamp_span(start.row_span + row_delta))
