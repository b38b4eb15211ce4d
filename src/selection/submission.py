"""Submission collaborators — receive the confirmed selection snapshot.

Transport, retry and persistence belong to the collaborator. Returning a
truthy value from ``submit`` asks the session to reset.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol, TextIO

from src.contracts.submission import SelectionSnapshot

log = logging.getLogger(__name__)


class SelectionSubmitter(Protocol):
    def submit(self, snapshot: SelectionSnapshot) -> bool | None: ...


class LoggingSubmitter:
    """Logs the confirmed selection; stands in for a submission API."""

    def __init__(self, logger: logging.Logger | None = None, max_ids: int = 50) -> None:
        self.log = logger or log
        self.max_ids = max_ids

    def submit(self, snapshot: SelectionSnapshot) -> None:
        shown = list(snapshot.sensor_ids[: self.max_ids])
        more = snapshot.count - len(shown)
        self.log.info("=" * 50)
        self.log.info("CONFIRMED SENSOR SELECTION")
        self.log.info("Location: %s", snapshot.location_id)
        self.log.info("Count: %d sensors", snapshot.count)
        self.log.info("Sensor IDs: %s%s", ", ".join(shown), f" … (+{more} more)" if more > 0 else "")
        self.log.info("=" * 50)
        return None


class StreamSubmitter:
    """Writes the snapshot as one JSON line to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def submit(self, snapshot: SelectionSnapshot) -> None:
        self.stream.write(snapshot.to_json() + "\n")
        self.stream.flush()
        return None


class CallbackSubmitter:
    """Adapts a plain callable to the submitter protocol."""

    def __init__(self, fn: Callable[[SelectionSnapshot], bool | None]) -> None:
        self.fn = fn

    def submit(self, snapshot: SelectionSnapshot) -> bool | None:
        return self.fn(snapshot)
