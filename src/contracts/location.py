"""Location data-class — a data-center site."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Location:
    id: str                     # stable external key, e.g. "SanDiego"
    name: str                   # display name, e.g. "San Diego"
    sensor_count: int = 0
    region: str | None = None
    available: bool = True      # False only for flagged, unreadable sources
