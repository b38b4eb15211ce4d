"""Error taxonomy for catalogue loading and selection.

Load failures (``SourceUnavailable``, ``CatalogLoadFailed``) are recoverable
and get turned into observable state by the session controller. Contract
violations (``InvalidStateTransition``, ``UnknownSensorId``) always propagate
to the caller.
"""

from __future__ import annotations


class SensorCatalogError(Exception):
    """Base class for every error raised by this package."""


class SourceUnavailable(SensorCatalogError):
    """One location's source cannot be read."""

    def __init__(self, location_id: str, reason: str = "") -> None:
        self.location_id = location_id
        self.reason = reason
        msg = f"Source unavailable for location '{location_id}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CatalogLoadFailed(SensorCatalogError):
    """Loading a location's sensor catalogue failed; nothing was cached."""

    def __init__(
        self,
        location_id: str,
        cause: BaseException | None = None,
        message: str | None = None,
    ) -> None:
        self.location_id = location_id
        self.cause = cause
        if message is None:
            message = f"Catalogue load failed for location '{location_id}'"
            if cause is not None:
                message += f": {cause}"
        super().__init__(message)


class UnknownLocation(CatalogLoadFailed):
    """Location id is not in the registration table."""

    def __init__(self, location_id: str) -> None:
        super().__init__(location_id, message=f"Unknown location '{location_id}'")


class InvalidStateTransition(SensorCatalogError):
    """Operation not allowed in the current session state."""

    def __init__(self, action: str, state: str, detail: str = "") -> None:
        self.action = action
        self.state = state
        msg = f"'{action}' is not allowed in state '{state}'"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class UnknownSensorId(SensorCatalogError):
    """Sensor id does not belong to the active catalogue."""

    def __init__(self, sensor_id: str, location_id: str | None = None) -> None:
        self.sensor_id = sensor_id
        self.location_id = location_id
        where = f"location '{location_id}'" if location_id else "the active catalogue"
        super().__init__(f"Sensor '{sensor_id}' is not part of {where}")
