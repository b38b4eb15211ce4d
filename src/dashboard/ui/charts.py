"""Білдери Plotly графіків."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from src.dashboard.ui.cards import DEVICE_TYPE_COLORS

# ── chart config (hide toolbar by default) ──────────────────────────────────

CHART_CONFIG: dict = {"displayModeBar": False}

_FONT = dict(family="-apple-system, Segoe UI, Roboto, sans-serif", size=13, color="#c9d1d9")

_LAYOUT: dict = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=48, r=16, t=44, b=36),
    font=_FONT,
    title=dict(font=dict(size=14, color="#e6edf3"), x=0, xanchor="left", y=0.98, yanchor="top"),
    legend=dict(
        orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=11)
    ),
    bargap=0.35,
    barmode="overlay",
    height=300,
)

_GRID_COLOR = "rgba(128,128,128,0.10)"


def device_type_bar(counts: pd.DataFrame) -> go.Figure:
    """Сенсори за типом пристрою: усього (тло) та обрані (поверх)."""
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=counts["device_type"],
            y=counts["total"],
            name="Total",
            marker_color="rgba(128,128,128,0.35)",
            marker_line_width=0,
            hovertemplate="%{x}: %{y} sensors<extra></extra>",
        )
    )
    fig.add_trace(
        go.Bar(
            x=counts["device_type"],
            y=counts["selected"],
            name="Selected",
            marker_color=[DEVICE_TYPE_COLORS.get(t, "#888") for t in counts["device_type"]],
            marker_line_width=0,
            hovertemplate="%{x}: %{y} selected<extra></extra>",
        )
    )
    fig.update_layout(**_LAYOUT, title_text="Sensors by Device Type")
    fig.update_yaxes(gridcolor=_GRID_COLOR, rangemode="tozero")
    fig.update_xaxes(showgrid=False)
    return fig
