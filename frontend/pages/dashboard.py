from __future__ import annotations

from typing import Any, Iterable

from dash import dcc, html
from dash_extensions import EventListener

from frontend.components.status_card import StatusCard, card_shell
from frontend.layout.editor import Dragging, LayoutEditor
from frontend.layout.events import GRID_EVENTS

HIDDEN = {"display": "none"}


def _span_style(col_span: int, row_span: int) -> dict[str, str]:
    return {"gridColumn": f"span {col_span}", "gridRow": f"span {row_span}"}


def shell_styles(editor: LayoutEditor) -> dict[str, tuple[dict[str, Any], str]]:
    """Style and className for every widget shell, keyed by widget id.

    Grid order is expressed through the CSS ``order`` property so the widget
    elements themselves never move in the DOM.
    """
    gesture = editor.gesture
    dragging = gesture if isinstance(gesture, Dragging) else None
    drop_target = dragging.drop_target if dragging else None

    result: dict[str, tuple[dict[str, Any], str]] = {}
    for index, placement in enumerate(editor.placements):
        style: dict[str, Any] = {"order": index, **_span_style(placement.col_span, placement.row_span)}
        classes = ["widget"]
        if dragging and dragging.widget_id == placement.id:
            rect = dragging.floating_rect
            style.update(
                {
                    "position": "absolute",
                    "left": f"{rect.left}px",
                    "top": f"{rect.top}px",
                    "width": f"{rect.width}px",
                    "height": f"{rect.height}px",
                    "zIndex": 1000,
                    "pointerEvents": "none",
                }
            )
            classes.append("dragging")
        if drop_target and drop_target.widget_id == placement.id:
            classes.append("drag-before" if drop_target.before else "drag-after")
        result[placement.id] = (style, " ".join(classes))
    return result


def placeholder_style(editor: LayoutEditor) -> dict[str, Any]:
    gesture = editor.gesture
    if not isinstance(gesture, Dragging):
        return HIDDEN
    placement = editor.placement(gesture.widget_id)
    if placement is None:
        return HIDDEN
    index = editor.widget_ids.index(gesture.widget_id)
    return {"display": "block", "order": index, **_span_style(placement.col_span, placement.row_span)}


def grid_class(editor: LayoutEditor) -> str:
    return "widget-grid edit-mode" if editor.editing else "widget-grid"


def layout(cards: Iterable[StatusCard]) -> html.Div:
    return html.Div(
        [
            dcc.Store(id="editor-state", storage_type="memory"),
            html.Div(
                [
                    html.Button("Edit Layout", id="edit-toggle", n_clicks=0, className="edit-toggle"),
                    html.Button("Reset Layout", id="reset-layout", n_clicks=0, className="reset-layout", style=HIDDEN),
                ],
                className="dashboard-toolbar",
            ),
            EventListener(
                html.Div(
                    [html.Div(id="widget-placeholder", className="widget-placeholder", style=HIDDEN)]
                    + [card_shell(card) for card in cards],
                    id="widget-grid",
                    className="widget-grid",
                ),
                id="grid-events",
                events=GRID_EVENTS,
                logging=False,
            ),
        ]
    )
