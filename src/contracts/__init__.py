"""Sensor Selection contracts — canonical data structures shared by all modules."""

from src.contracts.enums import HeaderState, SessionState
from src.contracts.errors import (
    CatalogLoadFailed,
    InvalidStateTransition,
    SensorCatalogError,
    SourceUnavailable,
    UnknownLocation,
    UnknownSensorId,
)
from src.contracts.location import Location
from src.contracts.sensor import Sensor
from src.contracts.submission import SelectionSnapshot

__all__ = [
    "CatalogLoadFailed",
    "HeaderState",
    "InvalidStateTransition",
    "Location",
    "SelectionSnapshot",
    "Sensor",
    "SensorCatalogError",
    "SessionState",
    "SourceUnavailable",
    "UnknownLocation",
    "UnknownSensorId",
]
