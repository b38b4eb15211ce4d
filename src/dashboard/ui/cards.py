"""Білдери HTML карток: локація, стан вибору, панель підтвердження."""

from __future__ import annotations

from html import escape

from src.contracts.enums import HeaderState

# ── device type icons & colours ─────────────────────────────────────────────

DEVICE_TYPE_ICONS: dict[str, str] = {
    "Rack PDU": "🔌",
    "UPS": "🔋",
    "CRAC": "❄️",
    "CRAH": "💨",
    "Chiller": "🧊",
    "Generator": "⚡",
    "ATS": "🔀",
    "Meter": "📊",
}
DEFAULT_ICON = "📡"

DEVICE_TYPE_COLORS: dict[str, str] = {
    "Rack PDU": "#3b82f6",
    "UPS": "#22c55e",
    "CRAC": "#06b6d4",
    "CRAH": "#0ea5e9",
    "Chiller": "#a5f3fc",
    "Generator": "#f59e0b",
    "ATS": "#a855f7",
    "Meter": "#ef4444",
}

HEADER_ACCENT_CLASS: dict[HeaderState, str] = {
    HeaderState.NONE: "card-accent-none",
    HeaderState.SOME: "card-accent-some",
    HeaderState.ALL: "card-accent-all",
}


def device_icon(device_type: str) -> str:
    return DEVICE_TYPE_ICONS.get(device_type, DEFAULT_ICON)


def location_card(name: str, region: str | None, total: int) -> str:
    """Картка обраної локації."""
    plural = "" if total == 1 else "s"
    region_html = f'<span class="location-region">{escape(region)}</span>' if region else ""
    return (
        f'<div class="location-card">'
        f'  <div class="location-card-header">{escape(name)} Sensors {region_html}</div>'
        f'  <div class="location-card-body">{total:,} sensor{plural} available</div>'
        f"</div>"
    )


def action_bar(selected: int, total: int, state: HeaderState) -> str:
    """Нижня панель: лічильник обраних та загальна кількість."""
    accent_cls = HEADER_ACCENT_CLASS.get(state, "")
    if selected == 0:
        text = "No sensors selected"
    elif state is HeaderState.ALL:
        text = "All sensors selected"
    else:
        text = f"{selected:,} sensor{'' if selected == 1 else 's'} selected"
    total_html = (
        f'<span class="action-bar-total">{total:,} total in this location</span>'
        if total > 0
        else ""
    )
    return (
        f'<div class="action-bar {accent_cls}">'
        f'  <div class="action-bar-count">{selected:,}</div>'
        f'  <div class="action-bar-text"><span>{text}</span>{total_html}</div>'
        f"</div>"
    )
