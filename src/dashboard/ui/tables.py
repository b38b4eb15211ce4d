"""Таблиця сенсорів з колонкою вибору."""

from __future__ import annotations

import pandas as pd
import streamlit as st
from streamlit import column_config as colcfg

from src.dashboard.data_access import changed_ids
from src.dashboard.ui.cards import device_icon

_COL_LABELS = {
    "selected": "Select",
    "sensor_id": "Sensor ID",
    "device_type": "Device Type",
    "device_label": "Device",
    "sensor_label": "Sensor",
    "sensor_type": "Type",
    "sensor_unit": "Unit",
    "ip_address": "IP",
    "device_id": "Device ID",
}

_COL_CONFIG = {
    "Select": colcfg.CheckboxColumn("Select", width="small"),
    "Sensor ID": colcfg.TextColumn("Sensor ID", width="medium"),
}


def render_sensor_table(df: pd.DataFrame, key: str) -> list[str]:
    """Render the editable sensor table; return ids whose checkbox flipped.

    Only the ``Select`` column is editable. Sorting and search are the
    built-in dataframe widget features.
    """
    if df.empty:
        st.info("No sensors match the current filters.")
        return []

    view = df.copy()
    view["device_type"] = view["device_type"].map(lambda t: f"{device_icon(t)} {t}")
    view["sensor_type"] = view["sensor_type"].str.replace("_", " ", regex=False)
    view = view.rename(columns=_COL_LABELS)

    edited = st.data_editor(
        view,
        hide_index=True,
        use_container_width=True,
        height=min(len(view) * 36 + 42, 480),
        column_config=_COL_CONFIG,
        disabled=[c for c in view.columns if c != "Select"],
        key=key,
    )
    before = df[["sensor_id", "selected"]]
    after = pd.DataFrame(
        {"sensor_id": df["sensor_id"].to_numpy(), "selected": edited["Select"].to_numpy()}
    )
    return changed_ids(before, after)
