from __future__ import annotations

import logging
import threading
import time
from typing import Any

import requests
import uvicorn
import dash
from dash import ALL, MATCH, Dash, Input, Output, State, dcc, html, no_update
from dash.exceptions import PreventUpdate

from config.settings import settings
from frontend.components.notifications import NotificationQueue, render_notifications
from frontend.components.status_card import StatusCard, load_card
from frontend.layout.editor import LayoutEditor
from frontend.layout.events import dispatch
from frontend.layout.store import BrowserStorage, LayoutStore
from frontend.pages import dashboard as dashboard_page
from frontend.pages import details as details_page
from frontend.pages import overview as overview_page
from frontend.time_utils import format_timestamp
from frontend.widgets import build_cards

LOGGER = logging.getLogger(__name__)
API_RETRY_ATTEMPTS = max(settings.api_retry_attempts, 1)
# Upstream calls are proxied, so the backend needs more than its own timeout.
API_TIMEOUT_SECONDS = settings.upstream_timeout_seconds * 2 + 5
RETRYABLE_STATUS_CODES = {502, 503, 504}
NOTIFICATION_TICK_MS = 1000
_BACKEND_THREAD: threading.Thread | None = None
API_SESSION = requests.Session()
API_SESSION.trust_env = False

CARDS = build_cards(settings)
WIDGET_IDS = list(CARDS)
PAGES = details_page.build_pages(settings)
HIDDEN = {"display": "none"}


def _backend_client_host() -> str:
    host = str(settings.backend_host).strip()
    if host in {"", "0.0.0.0", "::"}:
        return "127.0.0.1"
    return host


BACKEND_BASE = f"http://{_backend_client_host()}:{settings.backend_port}"


def _backend_ready() -> bool:
    try:
        response = API_SESSION.get(f"{BACKEND_BASE}/health", timeout=settings.backend_health_timeout_seconds)
        return response.status_code == 200 and response.json().get("status") == "ok"
    except (requests.RequestException, ValueError, AttributeError):
        return False


def _run_embedded_backend() -> None:
    uvicorn.run(
        "backend.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


def _start_embedded_backend() -> None:
    global _BACKEND_THREAD
    if _BACKEND_THREAD and _BACKEND_THREAD.is_alive():
        return
    _BACKEND_THREAD = threading.Thread(target=_run_embedded_backend, name="gks-backend", daemon=True)
    _BACKEND_THREAD.start()


def _wait_backend_ready(max_wait_seconds: float) -> bool:
    deadline = time.monotonic() + max_wait_seconds
    while time.monotonic() < deadline:
        if _backend_ready():
            return True
        time.sleep(0.2)
    return _backend_ready()


def api_get(path: str) -> Any:
    """GET a proxy endpoint, retrying transport errors and gateway failures."""
    for attempt in range(1, API_RETRY_ATTEMPTS + 1):
        last_attempt = attempt == API_RETRY_ATTEMPTS
        try:
            response = API_SESSION.get(f"{BACKEND_BASE}{path}", timeout=API_TIMEOUT_SECONDS)
        except requests.RequestException:
            if last_attempt:
                raise
            time.sleep(settings.api_retry_backoff_seconds * attempt)
            continue

        if response.status_code in RETRYABLE_STATUS_CODES and not last_attempt:
            time.sleep(settings.api_retry_backoff_seconds * attempt)
            continue
        if response.status_code >= 400:
            detail = response.text
            try:
                payload = response.json()
                if isinstance(payload, dict):
                    detail = str(payload.get("detail") or payload)
            except ValueError:
                pass
            raise requests.HTTPError(f"{response.status_code} {detail}", response=response)
        return response.json() if response.content else None


def _layout_store(storage_data: Any) -> tuple[BrowserStorage, LayoutStore]:
    storage = BrowserStorage(dict(storage_data) if isinstance(storage_data, dict) else {})
    return storage, LayoutStore(storage)


def _card_outputs(card: StatusCard, card_state: Any, links: Any) -> tuple[Any, ...]:
    result = load_card(card, api_get, card_state, links if isinstance(links, dict) else {})
    updated = result.state.get("updated")
    return (
        no_update if result.children is None else result.children,
        result.state,
        f"Updated {format_timestamp(updated)}" if updated else "",
        {"display": "inline-block"} if result.show_retry else HIDDEN,
    )


app: Dash = Dash(__name__, suppress_callback_exceptions=True)
app.title = "GKS Home Dashboard"

app.layout = html.Div(
    [
        html.H1("GKS Home Dashboard", className="app-title"),
        dcc.Tabs(
            id="main-tabs",
            value="dashboard",
            children=[
                dcc.Tab(label="Dashboard", value="dashboard"),
                dcc.Tab(label="Overview", value="overview"),
                *[dcc.Tab(label=card.title, value=name) for name, card in PAGES.items()],
            ],
        ),
        dcc.Store(id="layout-storage", storage_type="local", data={}),
        dcc.Store(id="notifications-store", data=[]),
        dcc.Store(id="dashboard-links", data={}),
        dcc.Interval(id="notifications-interval", interval=NOTIFICATION_TICK_MS, n_intervals=0),
        dcc.Interval(id="config-interval", interval=10 * 60 * 1000, n_intervals=0),
        html.Div(id="notification-container", className="notification-container"),
        html.Div(id="page-dashboard", children=dashboard_page.layout(CARDS.values()), style={"display": "block"}),
        html.Div(
            id="page-overview",
            children=overview_page.layout(settings.overview_refresh_ms),
            style={"display": "none"},
        ),
        *[details_page.page_shell(card) for card in PAGES.values()],
    ],
    className="app-shell",
)


@app.callback(
    Output("page-dashboard", "style"),
    Output("page-overview", "style"),
    Output("overview-interval", "disabled"),
    Output({"type": "detail-page", "page": ALL}, "style"),
    Output({"type": "page-interval", "page": ALL}, "disabled"),
    Input("main-tabs", "value"),
)
def switch_active_tab(tab: str):
    active_tab = str(tab or "dashboard")
    pages = [item["id"]["page"] for item in dash.callback_context.outputs_list[3]]
    return (
        {"display": "block" if active_tab == "dashboard" else "none"},
        {"display": "block" if active_tab == "overview" else "none"},
        active_tab != "overview",
        [{"display": "block" if active_tab == page else "none"} for page in pages],
        [active_tab != page for page in pages],
    )


@app.callback(
    Output("editor-state", "data"),
    Output("layout-storage", "data"),
    Output("notifications-store", "data"),
    Input("layout-storage", "modified_timestamp"),
    Input("edit-toggle", "n_clicks"),
    Input("reset-layout", "n_clicks"),
    Input("grid-events", "n_events"),
    State("grid-events", "event"),
    State("layout-storage", "data"),
    State("editor-state", "data"),
    State("notifications-store", "data"),
)
def handle_layout_event(
    _storage_ts: Any,
    _toggle_clicks: Any,
    _reset_clicks: Any,
    _n_events: Any,
    event: Any,
    storage_data: Any,
    editor_state: Any,
    notifications: Any,
):
    ctx = dash.callback_context
    triggered_id = ctx.triggered[0]["prop_id"].split(".")[0] if ctx.triggered else ""
    storage, store = _layout_store(storage_data)
    before = dict(storage.backing)
    queue = NotificationQueue.from_data(notifications)
    queued = len(queue.items)

    if triggered_id in {"", "layout-storage"}:
        # Our own writes land here too; only the first load builds the editor.
        if editor_state:
            raise PreventUpdate
        editor = LayoutEditor.open(WIDGET_IDS, store, settings.layout_storage_key, queue)
        return editor.to_state(), no_update, no_update

    if not editor_state:
        raise PreventUpdate
    editor = LayoutEditor.from_state(editor_state, store, settings.layout_storage_key, queue)

    if triggered_id == "edit-toggle":
        editor.toggle()
    elif triggered_id == "reset-layout":
        editor.reset()
    elif triggered_id == "grid-events":
        if not dispatch(editor, event):
            raise PreventUpdate
    else:
        raise PreventUpdate

    return (
        editor.to_state(),
        storage.backing if storage.backing != before else no_update,
        queue.to_data() if len(queue.items) != queued else no_update,
    )


@app.callback(
    Output({"type": "widget-shell", "widget": ALL}, "style"),
    Output({"type": "widget-shell", "widget": ALL}, "className"),
    Output("widget-placeholder", "style"),
    Output("widget-grid", "className"),
    Output("edit-toggle", "children"),
    Output("reset-layout", "style"),
    Input("editor-state", "data"),
)
def render_grid(editor_state: Any):
    if not editor_state:
        raise PreventUpdate
    editor = LayoutEditor.from_state(editor_state, LayoutStore({}), settings.layout_storage_key)
    styles = dashboard_page.shell_styles(editor)

    ctx = dash.callback_context
    shells = [item["id"]["widget"] for item in ctx.outputs_list[0]]
    default = ({}, "widget")
    return (
        [styles.get(widget_id, default)[0] for widget_id in shells],
        [styles.get(widget_id, default)[1] for widget_id in shells],
        dashboard_page.placeholder_style(editor),
        dashboard_page.grid_class(editor),
        "Save Layout" if editor.editing else "Edit Layout",
        {"display": "inline-block"} if editor.editing else HIDDEN,
    )


@app.callback(
    Output({"type": "card-content", "widget": MATCH}, "children"),
    Output({"type": "card-data", "widget": MATCH}, "data"),
    Output({"type": "card-updated", "widget": MATCH}, "children"),
    Output({"type": "card-retry", "widget": MATCH}, "style"),
    Input({"type": "card-interval", "widget": MATCH}, "n_intervals"),
    Input({"type": "card-retry", "widget": MATCH}, "n_clicks"),
    State({"type": "card-data", "widget": MATCH}, "data"),
    State("dashboard-links", "data"),
)
def refresh_widget_card(_n: int, _retry_clicks: Any, card_state: Any, links: Any):
    ctx = dash.callback_context
    widget_id = ctx.outputs_list[0]["id"]["widget"]
    card = CARDS.get(widget_id)
    if card is None:
        raise PreventUpdate

    return _card_outputs(card, card_state, links)


@app.callback(
    Output({"type": "page-content", "page": MATCH}, "children"),
    Output({"type": "page-data", "page": MATCH}, "data"),
    Output({"type": "page-updated", "page": MATCH}, "children"),
    Output({"type": "page-retry", "page": MATCH}, "style"),
    Input({"type": "page-interval", "page": MATCH}, "n_intervals"),
    Input({"type": "page-retry", "page": MATCH}, "n_clicks"),
    Input("main-tabs", "value"),
    State({"type": "page-data", "page": MATCH}, "data"),
    State("dashboard-links", "data"),
)
def refresh_detail_page(_n: int, _retry_clicks: Any, active_tab: Any, page_state: Any, links: Any):
    ctx = dash.callback_context
    page = ctx.outputs_list[0]["id"]["page"]
    card = PAGES.get(page)
    if card is None or str(active_tab or "") != page:
        raise PreventUpdate
    return _card_outputs(card, page_state, links)


@app.callback(
    Output("notifications-store", "data", allow_duplicate=True),
    Input({"type": "copy-address", "server": ALL}, "n_clicks"),
    State("notifications-store", "data"),
    prevent_initial_call=True,
)
def announce_copied_address(_clicks: Any, notifications: Any):
    # Cards re-render with n_clicks unset, which also fires this callback.
    if not any(trigger.get("value") for trigger in dash.callback_context.triggered):
        raise PreventUpdate
    queue = NotificationQueue.from_data(notifications)
    queue.show("Address copied!", "success")
    return queue.to_data()


@app.callback(
    Output("notifications-store", "data", allow_duplicate=True),
    Input({"type": "card-data", "widget": ALL}, "data"),
    State("notifications-store", "data"),
    prevent_initial_call=True,
)
def announce_card_updates(_cards: Any, notifications: Any):
    ctx = dash.callback_context
    queue = NotificationQueue.from_data(notifications)
    for trigger in ctx.triggered:
        value = trigger.get("value")
        if not isinstance(value, dict):
            continue
        for message, severity in value.get("announcements") or []:
            queue.show(message, severity)
    if len(queue.items) == len(notifications or []):
        raise PreventUpdate
    return queue.to_data()


@app.callback(
    Output("notifications-store", "data", allow_duplicate=True),
    Input("notifications-interval", "n_intervals"),
    State("notifications-store", "data"),
    prevent_initial_call=True,
)
def expire_notifications(_n: int, notifications: Any):
    queue = NotificationQueue.from_data(notifications)
    if not queue.prune():
        raise PreventUpdate
    return queue.to_data()


@app.callback(
    Output("notification-container", "children"),
    Input("notifications-store", "data"),
)
def show_notifications(notifications: Any):
    return render_notifications(notifications)


@app.callback(
    Output("dashboard-links", "data"),
    Output({"type": "widget-link", "widget": ALL}, "href"),
    Output({"type": "widget-link", "widget": ALL}, "style"),
    Input("config-interval", "n_intervals"),
)
def load_dashboard_links(_n: int):
    ctx = dash.callback_context
    widgets = [item["id"]["widget"] for item in ctx.outputs_list[1]]
    try:
        config = api_get("/api/config") or {}
    except (requests.RequestException, ValueError) as exc:
        LOGGER.warning("Could not load dashboard config: %s", exc)
        return {}, ["#"] * len(widgets), [HIDDEN] * len(widgets)

    links = config.get("externalLinks") or {}
    return (
        links,
        [links.get(widget_id) or "#" for widget_id in widgets],
        [{} if links.get(widget_id) else HIDDEN for widget_id in widgets],
    )


@app.callback(
    Output({"type": "overview-stats", "card": ALL}, "children"),
    Output({"type": "overview-card", "card": ALL}, "className"),
    Input("overview-interval", "n_intervals"),
    Input("main-tabs", "value"),
)
def refresh_overview(_n: int, active_tab: Any):
    if str(active_tab or "") != "overview":
        raise PreventUpdate

    ctx = dash.callback_context
    names = [item["id"]["card"] for item in ctx.outputs_list[0]]
    children, classes = [], []
    for name in names:
        try:
            stats = overview_page.SUMMARIZERS[name](api_get(overview_page.OVERVIEW_CARDS[name]["endpoint"]) or {})
        except (requests.RequestException, ValueError) as exc:
            LOGGER.warning("Could not load %s summary: %s", name, exc)
            stats = None
        children.append(overview_page.render_stats(stats))
        offline = stats is None or overview_page.has_issues(stats)
        classes.append(f"mini-widget {name}-mini{' offline' if offline else ''}")
    return children, classes


@app.callback(
    Output({"type": "overview-card", "card": ALL}, "style"),
    Input("overview-visibility", "value"),
)
def apply_overview_visibility(visible: Any):
    ctx = dash.callback_context
    shown = set(visible or [])
    return [{} if item["id"]["card"] in shown else HIDDEN for item in ctx.outputs_list]


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    # With EMBED_BACKEND=true one `python app.py` serves both the proxy and the dashboard.
    if settings.embed_backend and not _backend_ready():
        LOGGER.info("Starting embedded backend on %s", BACKEND_BASE)
        _start_embedded_backend()
        if not _wait_backend_ready(settings.embed_backend_wait_seconds):
            if not (_BACKEND_THREAD and _BACKEND_THREAD.is_alive()):
                raise RuntimeError(f"Embedded backend exited before becoming ready at {BACKEND_BASE}")
            LOGGER.warning("Backend not ready after %.1fs; starting the dashboard anyway", settings.embed_backend_wait_seconds)
    elif not _backend_ready():
        LOGGER.warning("Backend is not reachable at %s", BACKEND_BASE)
    # The reloader would start a second backend.
    app.run(host=settings.frontend_host, port=settings.frontend_port, debug=True, use_reloader=False)
