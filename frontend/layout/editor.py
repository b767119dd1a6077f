"""Layout editor: the drag/resize interaction state machine.

The editor is either viewing or editing. While editing it holds at most one
pointer gesture at a time (idle, dragging or resizing); a pointerdown that
arrives while a gesture is active is ignored. Drops and resize releases are
persisted immediately, and leaving edit mode persists the whole layout.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Iterable, Sequence, Union

from frontend.components.notifications import Notifier
from frontend.layout.geometry import (
    DropTarget,
    GridMetrics,
    Rect,
    find_drop_target,
    layout_rects,
    resized_span,
    widget_at,
)
from frontend.layout.grid import (
    Layout,
    Span,
    WidgetPlacement,
    apply_layout,
    capture_layout,
    default_layout,
    move_placement,
    placements_for,
    resize_placement,
)
from frontend.layout.store import LayoutStore

logger = logging.getLogger(__name__)

DEFAULT_GRID_WIDTH = 1200.0


class Mode(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class TargetKind(str, Enum):
    BODY = "body"
    RESIZE_HANDLE = "resize-handle"
    CONTROL = "control"


@dataclass(frozen=True)
class Idle:
    kind = "idle"


@dataclass(frozen=True)
class Dragging:
    widget_id: str
    offset_x: float
    offset_y: float
    pointer_x: float
    pointer_y: float
    width: float
    height: float
    drop_target: DropTarget | None = None
    kind = "dragging"

    @property
    def floating_rect(self) -> Rect:
        return Rect(self.pointer_x - self.offset_x, self.pointer_y - self.offset_y, self.width, self.height)


@dataclass(frozen=True)
class Resizing:
    widget_id: str
    start_x: float
    start_y: float
    start_span: Span
    kind = "resizing"


Gesture = Union[Idle, Dragging, Resizing]
IDLE = Idle()


class LayoutEditor:
    def __init__(
        self,
        placements: Sequence[WidgetPlacement],
        store: LayoutStore,
        storage_key: str,
        notifier: Notifier | None = None,
        metrics: GridMetrics | None = None,
        mode: Mode = Mode.VIEWING,
        gesture: Gesture = IDLE,
    ):
        self.placements = list(placements)
        self.store = store
        self.storage_key = storage_key
        self.notifier = notifier
        self.metrics = metrics or GridMetrics(DEFAULT_GRID_WIDTH)
        self.mode = mode
        self.gesture = gesture

    @classmethod
    def open(
        cls,
        widget_ids: Iterable[str],
        store: LayoutStore,
        storage_key: str,
        notifier: Notifier | None = None,
        metrics: GridMetrics | None = None,
    ) -> LayoutEditor:
        """Restore the persisted layout for the widgets present on this page."""
        layout = store.load(storage_key)
        if layout is None:
            layout = default_layout()
        return cls(apply_layout(layout, placements_for(widget_ids)), store, storage_key, notifier, metrics)

    @property
    def editing(self) -> bool:
        return self.mode is Mode.EDITING

    @property
    def idle(self) -> bool:
        return isinstance(self.gesture, Idle)

    @property
    def layout(self) -> Layout:
        return capture_layout(self.placements)

    @property
    def widget_ids(self) -> list[str]:
        return [placement.id for placement in self.placements]

    def placement(self, widget_id: str) -> WidgetPlacement | None:
        return next((item for item in self.placements if item.id == widget_id), None)

    def rects(self) -> dict[str, Rect]:
        return layout_rects(self.placements, self.metrics)

    def set_grid_width(self, width: Any) -> None:
        try:
            value = float(width)
        except (TypeError, ValueError):
            return
        if value > 0:
            self.metrics = replace(self.metrics, width=value)

    # Mode transitions

    def toggle(self) -> Mode:
        if not self.idle:
            self.pointer_up()

        if self.editing:
            self.mode = Mode.VIEWING
            self.persist()
            self._notify("Layout saved", "success")
        else:
            self.mode = Mode.EDITING
            self._notify("Edit mode: Drag widgets to reorder, corners to resize", "info")
        return self.mode

    def reset(self) -> None:
        self.gesture = IDLE
        self.store.clear(self.storage_key)
        self.placements = apply_layout(default_layout(), placements_for(self.widget_ids))
        self._notify("Layout reset to defaults", "info")

    # Pointer gestures

    def pointer_down(self, x: float, y: float, target: TargetKind = TargetKind.BODY) -> bool:
        if not self.editing or not self.idle or target is TargetKind.CONTROL:
            return False

        rects = self.rects()
        widget_id = widget_at(rects, x, y)
        if widget_id is None:
            return False
        if target is TargetKind.RESIZE_HANDLE or rects[widget_id].in_corner(x, y):
            return self.start_resize(widget_id, x, y)
        return self.start_drag(widget_id, x, y)

    def start_drag(self, widget_id: str, x: float, y: float) -> bool:
        if not self.editing or not self.idle:
            return False
        rect = self.rects().get(widget_id)
        if rect is None:
            return False

        self.gesture = Dragging(
            widget_id=widget_id,
            offset_x=x - rect.left,
            offset_y=y - rect.top,
            pointer_x=x,
            pointer_y=y,
            width=rect.width,
            height=rect.height,
        )
        return True

    def start_resize(self, widget_id: str, x: float, y: float) -> bool:
        if not self.editing or not self.idle:
            return False
        placement = self.placement(widget_id)
        if placement is None:
            return False

        self.gesture = Resizing(widget_id=widget_id, start_x=x, start_y=y, start_span=placement.span)
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        gesture = self.gesture
        if isinstance(gesture, Dragging):
            # The placeholder keeps the dragged widget's cell, so sibling rects are unchanged.
            target = find_drop_target(self.rects(), x, y, gesture.widget_id)
            self.gesture = replace(gesture, pointer_x=x, pointer_y=y, drop_target=target)
            return True

        if isinstance(gesture, Resizing):
            span = resized_span(gesture.start_span, x - gesture.start_x, y - gesture.start_y, self.metrics)
            self.placements = resize_placement(self.placements, gesture.widget_id, span)
            return True

        return False

    def pointer_up(self) -> bool:
        gesture = self.gesture
        if isinstance(gesture, Dragging):
            target = gesture.drop_target
            if target is not None:
                self.placements = move_placement(self.placements, gesture.widget_id, target.widget_id, target.before)
            self.gesture = IDLE
            self.persist()
            return True

        if isinstance(gesture, Resizing):
            self.gesture = IDLE
            self.persist()
            return True

        return False

    def persist(self) -> None:
        self.store.save(self.storage_key, self.layout)

    def _notify(self, message: str, severity: str) -> None:
        if self.notifier is not None:
            self.notifier.show(message, severity)

    # Serialization for the per-page dcc.Store

    def to_state(self) -> dict[str, Any]:
        gesture: dict[str, Any] = {"kind": self.gesture.kind}
        if isinstance(self.gesture, Dragging):
            gesture.update(asdict(self.gesture))
        elif isinstance(self.gesture, Resizing):
            gesture.update(asdict(self.gesture))
            gesture["start_span"] = list(self.gesture.start_span)
        return {
            "mode": self.mode.value,
            "gesture": gesture,
            "placements": [placement.to_dict() for placement in self.placements],
            "grid_width": self.metrics.width,
        }

    @classmethod
    def from_state(
        cls,
        state: dict[str, Any],
        store: LayoutStore,
        storage_key: str,
        notifier: Notifier | None = None,
    ) -> LayoutEditor:
        placements = [WidgetPlacement.from_dict(item) for item in state.get("placements") or [] if isinstance(item, dict)]
        metrics = GridMetrics(float(state.get("grid_width") or DEFAULT_GRID_WIDTH))
        try:
            mode = Mode(state.get("mode") or Mode.VIEWING.value)
        except ValueError:
            mode = Mode.VIEWING
        return cls(placements, store, storage_key, notifier, metrics, mode, _gesture_from_state(state.get("gesture")))


def _gesture_from_state(data: Any) -> Gesture:
    if not isinstance(data, dict):
        return IDLE
    kind = data.get("kind")
    try:
        if kind == "dragging":
            target = data.get("drop_target")
            return Dragging(
                widget_id=str(data["widget_id"]),
                offset_x=float(data["offset_x"]),
                offset_y=float(data["offset_y"]),
                pointer_x=float(data["pointer_x"]),
                pointer_y=float(data["pointer_y"]),
                width=float(data["width"]),
                height=float(data["height"]),
                drop_target=DropTarget(str(target["widget_id"]), bool(target["before"])) if target else None,
            )
        if kind == "resizing":
            col_span, row_span = data["start_span"]
            return Resizing(
                widget_id=str(data["widget_id"]),
                start_x=float(data["start_x"]),
                start_y=float(data["start_y"]),
                start_span=Span(int(col_span), int(row_span)),
            )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Dropping unreadable gesture state %r: %s", data, exc)
    return IDLE
