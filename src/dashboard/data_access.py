"""Шар доступу до даних дашборду: репозиторій, каталоги, таблиці pandas."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

import pandas as pd
import streamlit as st

from src.catalog.directory import LocationDirectory
from src.catalog.repository import CatalogRepository
from src.catalog.sources import build_registry
from src.contracts.sensor import Sensor
from src.shared.config_loader import Settings, load_settings

log = logging.getLogger(__name__)

# ── paths (relative to repo root) ───────────────────────────────────────────

ROOT = Path(__file__).resolve().parent.parent.parent
CONFIG_PATH = Path(os.environ.get("SENSORSEL_CONFIG", ROOT / "config" / "catalog.yaml"))

# ── table layout ────────────────────────────────────────────────────────────

SENSOR_COLUMNS: list[str] = [
    "selected",
    "sensor_id",
    "device_type",
    "device_label",
    "sensor_label",
    "sensor_type",
    "sensor_unit",
    "ip_address",
    "device_id",
]


# ── process-wide resources ──────────────────────────────────────────────────


@st.cache_resource
def get_settings() -> Settings:
    """Зчитує конфіг один раз на процес."""
    return load_settings(CONFIG_PATH, base_dir=ROOT)


@st.cache_resource
def get_repository() -> CatalogRepository:
    """Спільний репозиторій каталогів (живе весь час роботи процесу)."""
    settings = get_settings()
    repo = CatalogRepository(
        build_registry(settings),
        max_entries=settings.max_cached_locations,
    )
    log.info("Dashboard repository created (%d locations)", len(repo.registry))
    return repo


def get_directory() -> LocationDirectory:
    return LocationDirectory(get_repository())


# ── frames ──────────────────────────────────────────────────────────────────


def catalogue_frame(
    sensors: Sequence[Sensor],
    is_selected: Callable[[str], bool],
) -> pd.DataFrame:
    """Будує DataFrame каталогу з колонкою ``selected``."""
    rows = [
        {
            "selected": is_selected(s.sensor_id),
            "sensor_id": s.sensor_id,
            "device_type": s.device_type,
            "device_label": s.device_label,
            "sensor_label": s.sensor_label,
            "sensor_type": s.sensor_type,
            "sensor_unit": s.sensor_unit,
            "ip_address": s.ip_address,
            "device_id": s.device_id,
        }
        for s in sensors
    ]
    return pd.DataFrame(rows, columns=SENSOR_COLUMNS)


def filter_sensors(
    df: pd.DataFrame,
    *,
    device_types: Iterable[str] | None = None,
    query: str = "",
) -> pd.DataFrame:
    """Застосовує фільтри sidebar: тип пристрою та пошуковий рядок."""
    mask = pd.Series(True, index=df.index)

    types = list(device_types or [])
    if types:
        mask &= df["device_type"].isin(types)

    needle = query.strip().lower()
    if needle:
        haystack = (
            df["sensor_id"] + " " + df["device_label"] + " " + df["sensor_label"] + " " + df["ip_address"]
        ).str.lower()
        mask &= haystack.str.contains(needle, regex=False)

    return df.loc[mask].copy()


def device_type_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Кількість сенсорів (усього / обрано) за типом пристрою."""
    if df.empty:
        return pd.DataFrame(columns=["device_type", "total", "selected"])
    grouped = (
        df.groupby("device_type", sort=False)
        .agg(total=("sensor_id", "size"), selected=("selected", "sum"))
        .reset_index()
    )
    grouped["selected"] = grouped["selected"].astype(int)
    return grouped.sort_values(["total", "device_type"], ascending=[False, True]).reset_index(drop=True)


def changed_ids(before: pd.DataFrame, after: pd.DataFrame) -> list[str]:
    """Ids рядків, у яких змінився прапорець ``selected`` після редагування."""
    merged = before[["sensor_id", "selected"]].merge(
        after[["sensor_id", "selected"]],
        on="sensor_id",
        suffixes=("_before", "_after"),
    )
    diff = merged["selected_before"].astype(bool) != merged["selected_after"].astype(bool)
    return merged.loc[diff, "sensor_id"].tolist()
