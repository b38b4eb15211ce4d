"""Confirm payload handed to the external submission collaborator."""

from __future__ import annotations

import json
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SelectionSnapshot:
    """Frozen selection of one location.

    ``sensor_ids`` follow catalogue-insertion order, not selection order.
    """

    location_id: str
    sensor_ids: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.sensor_ids)

    def to_dict(self) -> dict[str, object]:
        return {"locationId": self.location_id, "sensorIds": list(self.sensor_ids)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
