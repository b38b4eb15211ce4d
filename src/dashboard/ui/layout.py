"""Page layout — sidebar controls and main-area scaffolding.

``render_sidebar`` draws the location picker and catalogue filters and
returns the current values. ``render_header`` draws the top title bar.
"""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from src.contracts.location import Location


@dataclass
class SidebarState:
    """Values collected from sidebar controls."""
    location_id: str | None
    device_types: list[str]
    query: str


# ── header ──────────────────────────────────────────────────────────────────


def render_header() -> None:
    st.markdown(
        '<h1 class="page-title">Sensor Selection</h1>'
        '<p class="page-subtitle">'
        "Select a data center location to view and manage available sensors."
        "</p>",
        unsafe_allow_html=True,
    )


# ── sidebar ─────────────────────────────────────────────────────────────────


def render_sidebar(
    locations: list[Location],
    device_type_options: list[str],
) -> SidebarState:
    """Draw sidebar controls and return current selections."""

    with st.sidebar:
        st.markdown('<p class="sidebar-brand">Sensor Selection</p>', unsafe_allow_html=True)
        st.caption("Data-center sensor catalogue")
        st.divider()

        # -- location --
        st.markdown("##### Choose Location")
        by_id = {loc.id: loc for loc in locations}
        location_id = st.selectbox(
            "Location",
            options=list(by_id),
            index=None,
            placeholder="Select a location" if locations else "No locations available",
            format_func=lambda lid: f"{by_id[lid].name} ({by_id[lid].sensor_count:,} sensors)",
            disabled=not locations,
            label_visibility="collapsed",
        )

        st.divider()

        # -- catalogue filters --
        st.markdown("##### Filter Sensors")
        device_types = st.multiselect(
            "Device type",
            options=device_type_options,
            default=[],
            disabled=not device_type_options,
        )
        query = st.text_input(
            "Search",
            value="",
            placeholder="Sensor id, device, label or IP",
        )

    return SidebarState(
        location_id=location_id,
        device_types=device_types,
        query=query,
    )
