from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from frontend.layout.editor import LayoutEditor, TargetKind

POINTER_EVENT_PROPS = [
    "type",
    "buttons",
    "pageX",
    "pageY",
    "currentTarget.offsetLeft",
    "currentTarget.offsetTop",
    "currentTarget.clientWidth",
    "target.className",
    "target.tagName",
    "target.parentElement.tagName",
]

GRID_EVENTS = [
    {"event": name, "props": POINTER_EVENT_PROPS}
    for name in ("pointerdown", "pointermove", "pointerup", "pointerleave")
]

CONTROL_TAGS = {"A", "BUTTON", "INPUT", "SELECT", "TEXTAREA"}


@dataclass(frozen=True)
class PointerEvent:
    type: str
    x: float
    y: float
    grid_width: float | None
    target: TargetKind
    # None when the browser did not report it.
    buttons: int | None = None


def _number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def target_kind(event: dict[str, Any]) -> TargetKind:
    class_name = event.get("target.className")
    # SVG elements report an SVGAnimatedString here, which arrives as a dict.
    classes = class_name.split() if isinstance(class_name, str) else []
    if "resize-handle" in classes:
        return TargetKind.RESIZE_HANDLE
    tags = {str(event.get("target.tagName") or "").upper(), str(event.get("target.parentElement.tagName") or "").upper()}
    if tags & CONTROL_TAGS:
        return TargetKind.CONTROL
    return TargetKind.BODY


def parse_pointer_event(event: Any) -> PointerEvent | None:
    """Translate an ``EventListener`` payload into grid-relative coordinates."""
    if not isinstance(event, dict) or not event.get("type"):
        return None
    width = _number(event.get("currentTarget.clientWidth"), 0.0)
    return PointerEvent(
        type=str(event["type"]),
        x=_number(event.get("pageX")) - _number(event.get("currentTarget.offsetLeft")),
        y=_number(event.get("pageY")) - _number(event.get("currentTarget.offsetTop")),
        grid_width=width if width > 0 else None,
        target=target_kind(event),
        buttons=int(_number(event["buttons"])) if event.get("buttons") is not None else None,
    )


def dispatch(editor: LayoutEditor, event: Any) -> bool:
    """Feed one grid pointer event to the editor; True when its state changed."""
    pointer = parse_pointer_event(event)
    if pointer is None:
        return False
    if pointer.grid_width is not None:
        editor.set_grid_width(pointer.grid_width)

    if pointer.type == "pointerdown":
        return editor.pointer_down(pointer.x, pointer.y, pointer.target)
    if pointer.type == "pointermove":
        # Queued events can be merged, so the pointerup may never arrive.
        if pointer.buttons == 0 and not editor.idle:
            editor.pointer_move(pointer.x, pointer.y)
            return editor.pointer_up()
        return editor.pointer_move(pointer.x, pointer.y)
    if pointer.type in {"pointerup", "pointerleave"}:
        return editor.pointer_up()
    return False
