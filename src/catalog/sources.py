"""Catalogue sources and the explicit location registration table.

A *loader* is any zero-argument callable returning a sequence of
camelCase sensor dicts. The registry maps location ids to loaders in
registration order, so the set of valid ids is known up front and an
unknown id fails fast with ``UnknownLocation``.
"""

from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Sequence

from src.contracts.errors import SourceUnavailable, UnknownLocation
from src.shared.config_loader import Settings
from src.shared.seed import make_rng

log = logging.getLogger(__name__)

Loader = Callable[[], Sequence[dict[str, Any]]]


# ── JSON file source ─────────────────────────────────────────────────────────


@dataclass(slots=True)
class JsonFileSource:
    """Reads one location's catalogue from a JSON array file.

    ``latency`` is a ``(lo, hi)`` range in seconds; each read sleeps for a
    uniform random delay in that range to emulate a remote catalogue API.
    """

    location_id: str
    path: Path
    latency: tuple[float, float] = (0.0, 0.0)
    rng: random.Random = field(default_factory=make_rng)

    def __call__(self) -> list[dict[str, Any]]:
        self._simulate_latency()
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except OSError as exc:
            raise SourceUnavailable(self.location_id, str(exc)) from exc
        if not isinstance(data, list):
            raise ValueError(
                f"{self.path.name}: expected a JSON array of sensors, "
                f"got {type(data).__name__}"
            )
        log.debug("Read %d records from %s", len(data), self.path)
        return data

    def _simulate_latency(self) -> None:
        lo, hi = self.latency
        if hi <= 0:
            return
        time.sleep(self.rng.uniform(lo, hi))


# ── Registry ─────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class _Registration:
    loader: Loader
    region: str | None


class SourceRegistry:
    """Ordered ``location_id -> loader`` table built at startup."""

    def __init__(self) -> None:
        self._entries: dict[str, _Registration] = {}

    def register(self, location_id: str, loader: Loader, region: str | None = None) -> None:
        if location_id in self._entries:
            raise ValueError(f"Location '{location_id}' is already registered")
        self._entries[location_id] = _Registration(loader=loader, region=region)
        log.debug("Registered location source '%s'", location_id)

    def ids(self) -> list[str]:
        return list(self._entries)

    def loader_for(self, location_id: str) -> Loader:
        try:
            return self._entries[location_id].loader
        except KeyError:
            raise UnknownLocation(location_id) from None

    def region_for(self, location_id: str) -> str | None:
        try:
            return self._entries[location_id].region
        except KeyError:
            raise UnknownLocation(location_id) from None

    def __contains__(self, location_id: object) -> bool:
        return location_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


def build_registry(settings: Settings) -> SourceRegistry:
    """Register a ``JsonFileSource`` for every entry of ``settings.locations``."""
    registry = SourceRegistry()
    lo_ms, hi_ms = settings.latency_ms
    rng = make_rng(settings.seed)
    for entry in settings.locations:
        path = settings.data_dir / (entry.file or f"{entry.id}.json")
        registry.register(
            entry.id,
            JsonFileSource(
                location_id=entry.id,
                path=path,
                latency=(lo_ms / 1000.0, hi_ms / 1000.0),
                rng=rng,
            ),
            region=entry.region,
        )
    log.info(
        "Source registry built: %d locations from %s",
        len(registry),
        settings.data_dir,
    )
    return registry
