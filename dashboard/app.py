import streamlit as st
import asyncio
import logging
from datetime import date

from tracker.config import app_config
from tracker.dependencies import init_services
from tracker.domain.entities import DialogResult, Entry
from tracker.routes import (
    DATASET_DETAIL,
    DATASET_EDIT,
    NEW_DATASET_PATH,
    dataset_path,
    parse_route,
)
from tracker.services.chart_renderer import build_chart
from tracker.services.date_normalizer import parse_instant
from tracker.services.messages import UI_TEXT

logging.basicConfig(
    level=app_config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

GRAPH_LABELS = {
    "actual": UI_TEXT["headers"]["graph"]["actual"],
    "target": UI_TEXT["headers"]["graph"]["target"],
    "end_date": UI_TEXT["headers"]["graph"]["end_date"],
}
TAB_LABELS = {
    "data": UI_TEXT["tabs"]["data"],
    "graph": UI_TEXT["tabs"]["graph"],
    "edit": UI_TEXT["tabs"]["edit"],
}

# Page config
st.set_page_config(
    page_title=UI_TEXT["headers"]["app_title"],
    page_icon="📈",
    layout="wide"
)


def run(coro):
    """Run one controller action to completion."""
    return asyncio.run(coro)


def navigate(path: str) -> None:
    st.session_state.route = path
    st.session_state.route_changed = True


def route_from_query() -> str:
    dataset = st.query_params.get("dataset")
    if not dataset:
        return NEW_DATASET_PATH
    return dataset_path(dataset, st.query_params.get("tab"))


def as_date(value):
    instant = parse_instant(value)
    return instant.date() if instant else None


def date_text(value) -> str:
    return value.isoformat() if isinstance(value, date) else ""


# Initialize session state: the services container (and with it the
# notification bus and the presentation host) exists before any action runs
if "services" not in st.session_state:
    st.session_state.services = init_services()
    logger.info(f"Dashboard started against {app_config.BACKEND_URL}")

services = st.session_state.services

if "route" not in st.session_state:
    st.session_state.route = route_from_query()
    st.session_state.route_changed = True

if "sidebar" not in st.session_state:
    st.session_state.sidebar = services.sidebar(navigate)
    st.session_state.entry_list = services.entry_list(navigate)
    st.session_state.dataset_form = services.dataset_form(navigate)

sidebar = st.session_state.sidebar
entry_list = st.session_state.entry_list
dataset_form = st.session_state.dataset_form

route = parse_route(st.session_state.route)

if st.session_state.route_changed:
    # Leaving a view releases its pending listeners
    entry_list.close()
    dataset_form.close()
    if services.host.dialog is not None:
        services.bus.close_dialog()
    st.session_state.route_changed = False
    if route.dataset_id:
        st.query_params["dataset"] = str(route.dataset_id)
        if route.tab == "edit":
            st.query_params["tab"] = "edit"
        else:
            st.query_params.pop("tab", None)
        run(entry_list.load(route.dataset_id, "#edit" if route.tab == "edit" else ""))
        run(dataset_form.load(route.dataset_id))
    else:
        st.query_params.clear()
        run(entry_list.load(None))
        run(dataset_form.load(None))


def rerun_if_navigated() -> None:
    if st.session_state.route_changed:
        st.rerun()


# Alerts: re-rendered every second so they hide after their duration
@st.fragment(run_every="1s")
def render_alerts():
    renderers = {
        "info": st.info,
        "success": st.success,
        "error": st.error,
        "warning": st.warning,
    }
    for alert in services.host.visible_alerts():
        col_msg, col_close = st.columns([12, 1])
        with col_msg:
            renderers[alert.event.severity](alert.event.message)
        with col_close:
            if st.button("✕", key=f"dismiss-{alert.id}"):
                services.host.dismiss_alert(alert.id)
                st.rerun(scope="fragment")


def render_dialog():
    dialog = services.host.dialog
    if dialog is None:
        return
    with st.container(border=True):
        st.markdown(f"**{dialog.header}**")
        st.write(dialog.message)
        col_left, col_right = st.columns(2)
        with col_left:
            if st.button(dialog.left_button_text, key="dialog-left", use_container_width=True):
                services.host.choose(DialogResult.LEFT)
                st.rerun()
        with col_right:
            if st.button(dialog.right_button_text, key="dialog-right", type="primary",
                         use_container_width=True):
                services.host.choose(DialogResult.RIGHT)
                rerun_if_navigated()
                st.rerun()


def render_dataset_form(edit: bool):
    values = dataset_form.form
    with st.form("dataset-form"):
        name = st.text_input(UI_TEXT["labels"]["name"], value=values["name"], max_chars=255)
        description = st.text_area(
            UI_TEXT["labels"]["description"], value=values["description"], max_chars=2000
        )
        symbol = st.text_input(UI_TEXT["labels"]["symbol"], value=values["symbol"], max_chars=50)
        target_value = st.number_input(
            UI_TEXT["labels"]["target_value"], value=values["target_value"], format="%.2f"
        )
        col1, col2 = st.columns(2)
        with col1:
            start_date = st.date_input(
                UI_TEXT["labels"]["start_date"], value=as_date(values["start_date"])
            )
        with col2:
            end_date = st.date_input(
                UI_TEXT["labels"]["end_date"], value=as_date(values["end_date"])
            )
        label = UI_TEXT["buttons"]["update"] if edit else UI_TEXT["buttons"]["create"]
        submitted = st.form_submit_button(label, type="primary")

    form = {
        "name": name,
        "description": description,
        "symbol": symbol,
        "target_value": target_value,
        "start_date": date_text(start_date),
        "end_date": date_text(end_date),
    }
    if submitted:
        run(dataset_form.submit(form))
        rerun_if_navigated()

    if edit:
        col_copy, col_delete = st.columns(2)
        with col_copy:
            if st.button(UI_TEXT["buttons"]["copy"], disabled=dataset_form.loading):
                run(dataset_form.create_copy(form))
                rerun_if_navigated()
        with col_delete:
            if st.button(UI_TEXT["buttons"]["delete"], key="delete-dataset"):
                dataset_form.delete()
                st.rerun()


def render_entries():
    with st.form("new-entry", clear_on_submit=True):
        col1, col2, col3 = st.columns(3)
        with col1:
            value = st.number_input(UI_TEXT["table"]["value"], value=None)
        with col2:
            label = st.text_input(UI_TEXT["table"]["label"])
        with col3:
            entry_date = st.date_input(UI_TEXT["table"]["date"], value=None)
        if st.form_submit_button(UI_TEXT["buttons"]["add"]):
            run(entry_list.add_entry(value, label, date_text(entry_date)))
            st.rerun()

    if entry_list.entries_loading:
        st.caption(UI_TEXT["table"]["loading"])

    sort_by = st.radio("Sort", ["date", "value"], horizontal=True, label_visibility="collapsed")
    entry_list.sort_entries(by=sort_by, descending=True)

    for entry in entry_list.entries:
        col_label, col_value, col_date, col_save, col_delete = st.columns([3, 2, 2, 1, 1])
        with col_label:
            label = st.text_input(
                UI_TEXT["table"]["label"], value=entry.label, key=f"label-{entry.id}",
                label_visibility="collapsed",
            )
        with col_value:
            value = st.number_input(
                UI_TEXT["table"]["value"], value=entry.value, key=f"value-{entry.id}",
                label_visibility="collapsed",
            )
        with col_date:
            entry_date = st.date_input(
                UI_TEXT["table"]["date"], value=as_date(entry.date), key=f"date-{entry.id}",
                label_visibility="collapsed",
            )
        with col_save:
            if st.button(UI_TEXT["buttons"]["save"], key=f"save-{entry.id}"):
                edited = Entry(
                    id=entry.id, dataset_id=entry.dataset_id, value=value,
                    label=label, date=date_text(entry_date),
                )
                run(entry_list.save_entry(edited))
                st.rerun()
        with col_delete:
            if st.button(UI_TEXT["buttons"]["delete"], key=f"delete-{entry.id}"):
                entry_list.delete_entry(entry)
                st.rerun()


def render_graph():
    options = list(GRAPH_LABELS)
    graph_type = st.radio(
        "Chart",
        options,
        index=options.index(entry_list.graph_type),
        format_func=GRAPH_LABELS.get,
        horizontal=True,
        label_visibility="collapsed",
    )
    if graph_type != entry_list.graph_type:
        with st.spinner(UI_TEXT["graph"]["loading"]):
            run(entry_list.set_graph_type(graph_type))

    chart = None
    if entry_list.chart is not None:
        chart = build_chart(
            entry_list.chart,
            symbol=entry_list.dataset_symbol,
            title=GRAPH_LABELS[entry_list.graph_type],
        )
    if chart is None:
        st.info(UI_TEXT["headers"]["chart_no_data"])
    else:
        st.altair_chart(chart, use_container_width=True)


# Sidebar
st.sidebar.title(UI_TEXT["headers"]["app_title"])
run(sidebar.refresh_if_stale())
for item in sidebar.items:
    if st.sidebar.button(item.label, key=f"nav-{item.route}", icon=item.icon,
                         use_container_width=True):
        navigate(item.route)
        st.rerun()

st.sidebar.markdown("---")
st.sidebar.caption(f"Backend: {services.config.BACKEND_URL}")


# Presentation host
render_alerts()
render_dialog()


# Pages
if route.view in (DATASET_DETAIL, DATASET_EDIT):
    st.title(f"{UI_TEXT['headers']['dataset']} {entry_list.dataset_name}")
    if entry_list.dataset_symbol:
        st.caption(entry_list.dataset_symbol)

    tabs = list(TAB_LABELS)
    active = st.radio(
        "View",
        tabs,
        index=tabs.index(entry_list.active_tab),
        format_func=TAB_LABELS.get,
        horizontal=True,
        label_visibility="collapsed",
    )
    entry_list.active_tab = active

    if active == "data":
        st.subheader(UI_TEXT["headers"]["entries"])
        render_entries()
    elif active == "graph":
        render_graph()
    else:
        st.subheader(UI_TEXT["headers"]["edit"])
        render_dataset_form(edit=True)

else:
    st.title(UI_TEXT["headers"]["create_dataset"])
    render_dataset_form(edit=False)
