"""Завантаження YAML конфігурацій."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/catalog.yaml"


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Зчитує YAML файл та повертає його вміст як dict.

    Args:
        path: Шлях до файлу.

    Returns:
        Вміст файлу як словник.

    Raises:
        FileNotFoundError: Якщо файл не знайдено.
        ValueError: Якщо верхній рівень YAML не є мапою.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config {p} must contain a mapping, got {type(data).__name__}")
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data or {}))
    return data or {}


@dataclass(slots=True)
class LocationEntry:
    """One registered location from the ``locations`` list."""

    id: str
    file: str | None = None
    region: str | None = None


@dataclass(slots=True)
class Settings:
    """Typed view over ``catalog.yaml``."""

    data_dir: Path
    latency_ms: tuple[float, float] = (0.0, 0.0)
    seed: int | None = None
    max_cached_locations: int | None = None
    stall_warning_sec: float = 10.0
    locations: list[LocationEntry] = field(default_factory=list)


def _latency(raw: Any) -> tuple[float, float]:
    if raw is None:
        return (0.0, 0.0)
    if isinstance(raw, (int, float)):
        return (float(raw), float(raw))
    lo, hi = (float(v) for v in raw)
    if lo < 0 or hi < lo:
        raise ValueError(f"Invalid latency_ms range: {raw!r}")
    return (lo, hi)


def settings_from_dict(cfg: dict[str, Any], base_dir: str | Path = ".") -> Settings:
    """Build ``Settings`` from an already parsed config dict.

    ``catalog.data_dir`` is resolved relative to *base_dir*.
    """
    catalog = cfg.get("catalog", {}) or {}
    session = cfg.get("session", {}) or {}

    entries: list[LocationEntry] = []
    for raw in cfg.get("locations", []) or []:
        if isinstance(raw, str):
            entries.append(LocationEntry(id=raw))
            continue
        if "id" not in raw:
            raise ValueError(f"Location entry without 'id': {raw!r}")
        entries.append(
            LocationEntry(
                id=str(raw["id"]),
                file=raw.get("file"),
                region=raw.get("region"),
            )
        )

    max_cached = catalog.get("max_cached_locations")
    seed = catalog.get("seed")
    return Settings(
        data_dir=Path(base_dir) / catalog.get("data_dir", "data"),
        latency_ms=_latency(catalog.get("latency_ms")),
        seed=int(seed) if seed is not None else None,
        max_cached_locations=int(max_cached) if max_cached else None,
        stall_warning_sec=float(session.get("stall_warning_sec", 10.0)),
        locations=entries,
    )


def load_settings(
    path: str | Path = DEFAULT_CONFIG_PATH,
    base_dir: str | Path | None = None,
) -> Settings:
    """Зчитує catalog.yaml.

    Відносний ``data_dir`` розвʼязується від *base_dir* (за замовчуванням —
    поточна тека, тобто корінь репозиторію).
    """
    p = Path(path)
    cfg = load_yaml(p)
    settings = settings_from_dict(cfg, base_dir if base_dir is not None else Path.cwd())
    log.info(
        "Loaded settings from %s: %d locations, data_dir=%s",
        p,
        len(settings.locations),
        settings.data_dir,
    )
    return settings
