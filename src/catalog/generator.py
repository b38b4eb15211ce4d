"""Генератор синтетичних каталогів сенсорів дата-центру.

Produces realistic catalogue records (camelCase, same shape as the JSON
location files) for demo data and scale tests. Output is deterministic
for a given ``random.Random`` seed.
"""

from __future__ import annotations

import json
import logging
import random as _random_mod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.catalog.naming import format_location_name

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SensorSpec:
    code: str          # short suffix used in sensorId
    sensor_type: str
    label: str
    unit: str


# device type -> (device code, sensors per device)
DEVICE_PROFILES: dict[str, tuple[str, list[SensorSpec]]] = {
    "Rack PDU": ("PDU", [
        SensorSpec("CUR", "current", "Output Current", "A"),
        SensorSpec("VLT", "voltage", "Input Voltage", "V"),
        SensorSpec("PWR", "active_power", "Active Power", "kW"),
        SensorSpec("NRG", "energy", "Energy", "kWh"),
    ]),
    "UPS": ("UPS", [
        SensorSpec("BAT", "battery_charge", "Battery Charge", "%"),
        SensorSpec("LOD", "load", "Output Load", "%"),
        SensorSpec("RUN", "runtime_remaining", "Runtime Remaining", "min"),
        SensorSpec("TMP", "battery_temperature", "Battery Temperature", "°C"),
    ]),
    "CRAC": ("CRAC", [
        SensorSpec("SAT", "supply_air_temperature", "Supply Air Temperature", "°C"),
        SensorSpec("RAT", "return_air_temperature", "Return Air Temperature", "°C"),
        SensorSpec("HUM", "relative_humidity", "Relative Humidity", "%RH"),
    ]),
    "CRAH": ("CRAH", [
        SensorSpec("SAT", "supply_air_temperature", "Supply Air Temperature", "°C"),
        SensorSpec("FAN", "fan_speed", "Fan Speed", "%"),
        SensorSpec("VLV", "chilled_water_valve", "Chilled Water Valve", "%"),
    ]),
    "Chiller": ("CHL", [
        SensorSpec("LWT", "leaving_water_temperature", "Leaving Water Temperature", "°C"),
        SensorSpec("EWT", "entering_water_temperature", "Entering Water Temperature", "°C"),
        SensorSpec("KWT", "efficiency", "Efficiency", "kW/ton"),
    ]),
    "Generator": ("GEN", [
        SensorSpec("FUL", "fuel_level", "Fuel Level", "%"),
        SensorSpec("RPM", "engine_speed", "Engine Speed", "rpm"),
        SensorSpec("OUT", "output_power", "Output Power", "kW"),
    ]),
    "ATS": ("ATS", [
        SensorSpec("SRC", "active_source", "Active Source", ""),
        SensorSpec("VLT", "voltage", "Line Voltage", "V"),
    ]),
    "Meter": ("MTR", [
        SensorSpec("PWR", "active_power", "Active Power", "kW"),
        SensorSpec("PF", "power_factor", "Power Factor", ""),
        SensorSpec("FRQ", "frequency", "Frequency", "Hz"),
    ]),
}

# relative share of each device type in a generated site
_DEVICE_WEIGHTS: dict[str, float] = {
    "Rack PDU": 0.45,
    "UPS": 0.08,
    "CRAC": 0.10,
    "CRAH": 0.10,
    "Chiller": 0.05,
    "Generator": 0.04,
    "ATS": 0.06,
    "Meter": 0.12,
}


def location_prefix(location_id: str) -> str:
    """Initials of the display name: ``"SanDiego"`` -> ``"SD"``."""
    words = format_location_name(location_id).split()
    return "".join(w[0] for w in words).upper() or "LOC"


def generate_catalogue(
    location_id: str,
    count: int,
    rng: _random_mod.Random,
) -> list[dict[str, Any]]:
    """Generate exactly *count* sensor records for one location."""
    if count < 0:
        raise ValueError("count must be >= 0")

    prefix = location_prefix(location_id)
    types = list(_DEVICE_WEIGHTS)
    weights = [_DEVICE_WEIGHTS[t] for t in types]
    device_seq: dict[str, int] = {}
    records: list[dict[str, Any]] = []
    subnet = rng.randint(0, 200)

    while len(records) < count:
        device_type = rng.choices(types, weights=weights, k=1)[0]
        code, specs = DEVICE_PROFILES[device_type]
        device_seq[code] = device_seq.get(code, 0) + 1
        n = device_seq[code]
        device_id = f"{code}-{n:04d}"
        ip = f"10.{subnet}.{(len(records) // 250) % 256}.{len(records) % 250 + 2}"
        for spec in specs:
            if len(records) >= count:
                break
            records.append(
                {
                    "sensorId": f"{prefix}-{device_id}-{spec.code}",
                    "deviceType": device_type,
                    "deviceId": device_id,
                    "deviceLabel": f"{device_type} {n:02d}",
                    "ipAddress": ip,
                    "sensorLabel": spec.label,
                    "sensorType": spec.sensor_type,
                    "sensorUnit": spec.unit,
                }
            )

    log.info("Generated %d sensors (%d devices) for '%s'",
             len(records), sum(device_seq.values()), location_id)
    return records


def write_catalogue(records: list[dict[str, Any]], path: Path) -> None:
    """Write catalogue records as a JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(records, fh, indent=2, ensure_ascii=False)
        fh.write("\n")
    log.info("Wrote %d sensors to %s", len(records), path)
