"""Canonical Sensor data-class — one monitored point in a location catalogue."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

# Wire keys (camelCase, as stored in catalogue JSON) -> attribute names
WIRE_FIELDS: dict[str, str] = {
    "sensorId": "sensor_id",
    "deviceType": "device_type",
    "deviceId": "device_id",
    "deviceLabel": "device_label",
    "ipAddress": "ip_address",
    "sensorLabel": "sensor_label",
    "sensorType": "sensor_type",
    "sensorUnit": "sensor_unit",
}


@dataclass(frozen=True, slots=True)
class Sensor:
    """Immutable sensor record. Replaced wholesale on reload, never mutated."""

    sensor_id: str
    device_type: str = ""     # Rack PDU | UPS | CRAC | … (open set, display grouping)
    device_id: str = ""
    device_label: str = ""
    ip_address: str = ""
    sensor_label: str = ""
    sensor_type: str = ""     # e.g. "supply_air_temperature"
    sensor_unit: str = ""

    # ── serialisation ─────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> Sensor:
        """Build a Sensor from a camelCase catalogue record.

        Raises:
            ValueError: If ``sensorId`` is missing or empty.
        """
        sensor_id = row.get("sensorId")
        if not isinstance(sensor_id, str) or not sensor_id:
            raise ValueError(f"Sensor record without a valid sensorId: {dict(row)!r}")
        values = {
            attr: str(row.get(key, "") or "")
            for key, attr in WIRE_FIELDS.items()
            if attr != "sensor_id"
        }
        return cls(sensor_id=sensor_id, **values)

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, attr) for key, attr in WIRE_FIELDS.items()}

    def to_json(self) -> str:
        """Return compact JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
