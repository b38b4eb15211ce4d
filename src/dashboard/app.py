"""Головний файл дашборду вибору сенсорів на Streamlit.

Run with ``streamlit run src/dashboard/app.py``. The page is a thin
presentation layer over ``SessionController``: every button or checkbox
maps onto one controller operation.
"""

from __future__ import annotations

import logging
from pathlib import Path

import streamlit as st

# ── page config (MUST be the first Streamlit call) ───────────────────────────

st.set_page_config(
    page_title="Sensor Selection",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── inject theme CSS ────────────────────────────────────────────────────────

_CSS_PATH = Path(__file__).resolve().parent / "styles" / "theme.css"
if _CSS_PATH.exists():
    st.markdown(f"<style>{_CSS_PATH.read_text()}</style>", unsafe_allow_html=True)

# ── local imports (after page config) ───────────────────────────────────────

from src.contracts.enums import HeaderState, SessionState  # noqa: E402
from src.contracts.errors import InvalidStateTransition, UnknownSensorId  # noqa: E402
from src.dashboard.data_access import (  # noqa: E402
    catalogue_frame,
    device_type_counts,
    filter_sensors,
    get_settings,
)
from src.dashboard.ui.cards import action_bar, location_card  # noqa: E402
from src.dashboard.ui.charts import CHART_CONFIG, device_type_bar  # noqa: E402
from src.dashboard.ui.layout import render_header, render_sidebar  # noqa: E402
from src.dashboard.ui.state import bump_table_version, init_state  # noqa: E402
from src.dashboard.ui.tables import render_sensor_table  # noqa: E402
from src.shared.logger import setup_logging  # noqa: E402

log = logging.getLogger(__name__)

if "logging_ready" not in st.session_state:
    setup_logging()
    st.session_state["logging_ready"] = True

# ── initialise session state ────────────────────────────────────────────────

controller = init_state()
locations = st.session_state["locations"]
view = controller.view()

# ── sidebar ─────────────────────────────────────────────────────────────────

device_type_options = sorted({s.device_type for s in view.sensors})
sidebar = render_sidebar(locations, device_type_options)

if sidebar.location_id and sidebar.location_id != st.session_state["picked_location"]:
    st.session_state["picked_location"] = sidebar.location_id
    with st.spinner("Loading sensors…"):
        controller.pick_location(sidebar.location_id).result()
    bump_table_version()
    st.rerun()

# ── header ──────────────────────────────────────────────────────────────────

render_header()

# ── state guards ────────────────────────────────────────────────────────────

if view.state is SessionState.NO_LOCATION:
    st.markdown(
        '<div class="no-data-box">'
        "<strong>No location selected</strong><br>"
        "Choose a data center location in the sidebar to view "
        "available sensors and make your selection."
        "</div>",
        unsafe_allow_html=True,
    )
    st.stop()

if view.state is SessionState.LOAD_FAILED:
    st.error(f"Could not load sensors for {view.location_name}: {view.error}")
    if st.button("Retry", type="primary"):
        controller.pick_location(view.pending_location_id).result()
        st.rerun()
    st.stop()

if view.state is SessionState.LOADING_CATALOG:
    waited = controller.loading_for() or 0.0
    st.info(f"Loading sensors for {view.location_name}…")
    if waited >= get_settings().stall_warning_sec and st.button("Retry load"):
        controller.pick_location(view.pending_location_id)
        st.rerun()
    st.stop()

# ── READY: catalogue + selection ────────────────────────────────────────────

region = next((loc.region for loc in locations if loc.id == view.location_id), None)
st.markdown(location_card(view.location_name or "", region, view.total), unsafe_allow_html=True)

if view.total == 0:
    st.markdown(
        '<div class="no-data-box">'
        "<strong>No sensors found</strong><br>"
        "This location doesn't have any sensors configured yet."
        "</div>",
        unsafe_allow_html=True,
    )
    st.stop()

df_all = catalogue_frame(view.sensors, controller.is_selected)
df_view = filter_sensors(df_all, device_types=sidebar.device_types, query=sidebar.query)

# ── header row: select-all affordance ───────────────────────────────────────

c1, c2, c3 = st.columns([3, 1, 1])
with c1:
    st.markdown(f'<p class="section-label">{view.summary}</p>', unsafe_allow_html=True)
with c2:
    label = "Select all" if view.header_state is HeaderState.NONE else "Deselect all"
    if st.button(label, key="btn_toggle_all", use_container_width=True):
        controller.toggle_all()
        bump_table_version()
        st.rerun()
with c3:
    if view.header_state is HeaderState.SOME and st.button(
        "Clear selection", key="btn_clear", use_container_width=True
    ):
        controller.deselect_all()
        bump_table_version()
        st.rerun()

# ── chart ───────────────────────────────────────────────────────────────────

st.plotly_chart(
    device_type_bar(device_type_counts(df_all)),
    width="stretch",
    config=CHART_CONFIG,
    key="chart_device_types",
)

# ── sensor table ────────────────────────────────────────────────────────────

table_key = f"tbl_sensors_{view.location_id}_{st.session_state['table_version']}"
flipped = render_sensor_table(df_view, key=table_key)
if flipped:
    try:
        for sensor_id in flipped:
            controller.toggle(sensor_id)
    except (UnknownSensorId, InvalidStateTransition) as exc:
        log.warning("Ignoring table edit: %s", exc)
    bump_table_version()
    st.rerun()

# ── action bar ──────────────────────────────────────────────────────────────

st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)
a1, a2 = st.columns([4, 1])
with a1:
    st.markdown(
        action_bar(view.selected_count, view.total, view.header_state),
        unsafe_allow_html=True,
    )
with a2:
    if st.button(
        "Confirm Selection",
        type="primary",
        disabled=not view.can_confirm,
        use_container_width=True,
    ):
        snapshot = controller.confirm()
        st.success(f"Selection confirmed! {snapshot.count:,} sensor(s) selected.")
        with st.expander("Submitted payload", expanded=False):
            st.json(snapshot.to_dict())
