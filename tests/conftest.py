"""Shared fixtures for the Sensor Catalog & Selection tests."""

from __future__ import annotations

import json
import threading
import time
from pathlib import Path
from typing import Any

import pytest

from src.catalog.repository import CatalogRepository
from src.catalog.sources import SourceRegistry
from src.contracts.errors import SourceUnavailable
from src.contracts.sensor import Sensor

# ── Helper: create sensor records with sensible defaults ────────────────


def make_record(
    sensor_id: str,
    *,
    device_type: str = "Rack PDU",
    device_id: str = "PDU-0001",
    device_label: str = "Rack PDU 01",
    ip_address: str = "10.0.0.2",
    sensor_label: str = "Output Current",
    sensor_type: str = "current",
    sensor_unit: str = "A",
) -> dict[str, str]:
    return {
        "sensorId": sensor_id,
        "deviceType": device_type,
        "deviceId": device_id,
        "deviceLabel": device_label,
        "ipAddress": ip_address,
        "sensorLabel": sensor_label,
        "sensorType": sensor_type,
        "sensorUnit": sensor_unit,
    }


def make_sensor(sensor_id: str, **kwargs: str) -> Sensor:
    return Sensor.from_dict(make_record(sensor_id, **kwargs))


def records_for(ids: list[str]) -> list[dict[str, str]]:
    return [make_record(i) for i in ids]


# ── Fake sources ────────────────────────────────────────────────────────


class CountingSource:
    """Loader that counts invocations; optionally blocks or fails.

    ``gate`` — when set, each call waits on it before returning, so tests
    can hold a load "in flight". ``fail_times`` — the first N calls raise
    ``error`` (``SourceUnavailable`` when not given).
    """

    def __init__(
        self,
        location_id: str,
        records: list[dict[str, Any]],
        *,
        gate: threading.Event | None = None,
        fail_times: int = 0,
        error: BaseException | None = None,
    ) -> None:
        self.location_id = location_id
        self.records = records
        self.gate = gate
        self.fail_times = fail_times
        self.error = error
        self.calls = 0
        self.started = threading.Event()
        self._lock = threading.Lock()

    def __call__(self) -> list[dict[str, Any]]:
        with self._lock:
            self.calls += 1
            call_no = self.calls
        self.started.set()
        if self.gate is not None:
            assert self.gate.wait(timeout=5), "gate never opened"
        if call_no <= self.fail_times:
            if self.error is not None:
                raise self.error
            raise SourceUnavailable(self.location_id, "simulated outage")
        return list(self.records)


def wait_for(predicate, timeout: float = 5.0) -> bool:
    """Poll *predicate* until true or until *timeout* seconds pass."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.005)
    return True


def build_repository(
    catalogues: dict[str, list[str]],
    **repo_kwargs: Any,
) -> tuple[CatalogRepository, dict[str, CountingSource]]:
    """Repository over in-memory catalogues, plus the per-location sources."""
    registry = SourceRegistry()
    sources: dict[str, CountingSource] = {}
    for location_id, ids in catalogues.items():
        src = CountingSource(location_id, records_for(ids))
        sources[location_id] = src
        registry.register(location_id, src)
    return CatalogRepository(registry, **repo_kwargs), sources


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture
def two_locations() -> tuple[CatalogRepository, dict[str, CountingSource]]:
    """L1 = A, B, C and L2 = X, Y."""
    return build_repository({"L1": ["A", "B", "C"], "L2": ["X", "Y"]})


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data dir with SanDiego (3 sensors), NewYork (2) and a corrupt Broken.json."""
    d = tmp_path / "data"
    d.mkdir()
    (d / "SanDiego.json").write_text(
        json.dumps(records_for(["SD-1", "SD-2", "SD-3"])), encoding="utf-8"
    )
    (d / "NewYork.json").write_text(json.dumps(records_for(["NY-1", "NY-2"])), encoding="utf-8")
    (d / "Broken.json").write_text("{not json", encoding="utf-8")
    return d


@pytest.fixture
def config_file(tmp_path: Path, data_dir: Path) -> Path:
    """catalog.yaml registering SanDiego, NewYork, Broken and a missing Phoenix."""
    cfg = tmp_path / "catalog.yaml"
    cfg.write_text(
        "catalog:\n"
        f"  data_dir: {data_dir.as_posix()}\n"
        "  latency_ms: [0, 0]\n"
        "session:\n"
        "  stall_warning_sec: 3\n"
        "locations:\n"
        "  - id: SanDiego\n"
        "    region: us-west\n"
        "  - id: NewYork\n"
        "    region: us-east\n"
        "  - id: Broken\n"
        "  - id: Phoenix\n",
        encoding="utf-8",
    )
    return cfg
