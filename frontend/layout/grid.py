"""Grid model: widget placements and the serializable layout.

A placement's position is implicit, given by its index in the placement
list (CSS grid auto-flow). ``capture_layout`` and ``apply_layout`` translate
between that list and the persisted ``Layout``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, NamedTuple, Sequence

GRID_COLUMNS = 4
MIN_SPAN = 1
MAX_SPAN = 4
DEFAULT_SPAN = 2


class LayoutFormatError(ValueError):
    pass


class Span(NamedTuple):
    col_span: int
    row_span: int


DEFAULT_WIDGET_SPAN = Span(DEFAULT_SPAN, DEFAULT_SPAN)


def clamp_span(value: Any, default: int = DEFAULT_SPAN) -> int:
    try:
        span = int(value)
    except (TypeError, ValueError):
        span = default
    return max(MIN_SPAN, min(MAX_SPAN, span))


@dataclass(frozen=True)
class WidgetPlacement:
    id: str
    col_span: int = DEFAULT_SPAN
    row_span: int = DEFAULT_SPAN

    def __post_init__(self) -> None:
        object.__setattr__(self, "col_span", clamp_span(self.col_span))
        object.__setattr__(self, "row_span", clamp_span(self.row_span))

    @property
    def span(self) -> Span:
        return Span(self.col_span, self.row_span)

    def with_span(self, span: Span) -> WidgetPlacement:
        return replace(self, col_span=span.col_span, row_span=span.row_span)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "colSpan": self.col_span, "rowSpan": self.row_span}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WidgetPlacement:
        return cls(str(data["id"]), data.get("colSpan", DEFAULT_SPAN), data.get("rowSpan", DEFAULT_SPAN))


@dataclass
class Layout:
    order: list[str]
    # None means "no sizes recorded", which differs from an empty mapping.
    sizes: dict[str, Span] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"order": list(self.order)}
        if self.sizes is not None:
            payload["sizes"] = {
                widget_id: {"colSpan": str(span.col_span), "rowSpan": str(span.row_span)}
                for widget_id, span in self.sizes.items()
            }
        return payload

    @classmethod
    def from_dict(cls, data: Any) -> Layout:
        if not isinstance(data, dict):
            raise LayoutFormatError(f"layout must be an object, got {type(data).__name__}")

        raw_order = data.get("order") or []
        if not isinstance(raw_order, list):
            raise LayoutFormatError("layout order must be a list")
        # Older layouts carry null placeholders in the order list.
        order = [str(item) for item in raw_order if isinstance(item, str) and item]

        raw_sizes = data.get("sizes")
        sizes: dict[str, Span] | None = None
        if raw_sizes is not None:
            if not isinstance(raw_sizes, dict):
                raise LayoutFormatError("layout sizes must be an object")
            sizes = {}
            for widget_id, size in raw_sizes.items():
                if not isinstance(size, dict):
                    continue
                sizes[str(widget_id)] = Span(clamp_span(size.get("colSpan")), clamp_span(size.get("rowSpan")))
        return cls(order=order, sizes=sizes)


DEFAULT_LAYOUT = Layout(
    order=["pyrodactyl", "proxmox", "portainer", "jellyseerr", "jellyfin"],
    sizes={
        "pyrodactyl": Span(1, 1),
        "proxmox": Span(3, 1),
        "portainer": Span(2, 1),
        "jellyseerr": Span(2, 1),
        "jellyfin": Span(4, 1),
    },
)


def default_layout() -> Layout:
    return Layout(order=list(DEFAULT_LAYOUT.order), sizes=dict(DEFAULT_LAYOUT.sizes or {}))


def placements_for(widget_ids: Iterable[str]) -> list[WidgetPlacement]:
    return [WidgetPlacement(widget_id) for widget_id in widget_ids]


def capture_layout(placements: Sequence[WidgetPlacement]) -> Layout:
    return Layout(
        order=[placement.id for placement in placements],
        sizes={placement.id: placement.span for placement in placements},
    )


def apply_layout(layout: Layout, placements: Sequence[WidgetPlacement]) -> list[WidgetPlacement]:
    """Rearrange ``placements`` according to ``layout``.

    Each known id in ``layout.order`` is moved to the end in sequence, the same
    way re-appending DOM children works; unknown ids are skipped and widgets
    not mentioned keep their relative order at the front. When the layout has
    no sizes at all every widget gets the default 2x2 span.
    """
    arranged = list(placements)
    known = {placement.id for placement in arranged}

    for widget_id in layout.order:
        if widget_id not in known:
            continue
        index = next(i for i, placement in enumerate(arranged) if placement.id == widget_id)
        arranged.append(arranged.pop(index))

    if layout.sizes is None:
        return [placement.with_span(DEFAULT_WIDGET_SPAN) for placement in arranged]

    return [
        placement.with_span(layout.sizes[placement.id]) if placement.id in layout.sizes else placement
        for placement in arranged
    ]


def move_placement(
    placements: Sequence[WidgetPlacement],
    widget_id: str,
    target_id: str,
    before: bool,
) -> list[WidgetPlacement]:
    arranged = list(placements)
    ids = [placement.id for placement in arranged]
    if widget_id not in ids or target_id not in ids or widget_id == target_id:
        return arranged

    moving = arranged.pop(ids.index(widget_id))
    target_index = next(i for i, placement in enumerate(arranged) if placement.id == target_id)
    arranged.insert(target_index if before else target_index + 1, moving)
    return arranged


def resize_placement(placements: Sequence[WidgetPlacement], widget_id: str, span: Span) -> list[WidgetPlacement]:
    return [placement.with_span(span) if placement.id == widget_id else placement for placement in placements]
