"""Selection Store — selected sensor ids within one catalogue's universe.

Every id in the selection belongs to the active catalogue. Rescoping to
another catalogue clears the selection in the same step.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from src.catalog.repository import Catalogue
from src.contracts.enums import HeaderState
from src.contracts.errors import UnknownSensorId

log = logging.getLogger(__name__)


def header_state(count: int, total: int) -> HeaderState:
    """Three-state header checkbox: all iff count == total > 0."""
    if total > 0 and count == total:
        return HeaderState.ALL
    if 0 < count < total:
        return HeaderState.SOME
    return HeaderState.NONE


def selection_summary(count: int, total: int) -> str:
    state = header_state(count, total)
    if state is HeaderState.ALL:
        return "All sensors selected"
    if state is HeaderState.SOME:
        return f"{count:,} of {total:,} selected"
    return "No sensors selected"


class SelectionStore:
    """Set of selected sensor ids with O(1) membership.

    Mutations are serialised by an internal lock; reads see either the
    state before or after a mutation, never a partial one.
    """

    def __init__(self, catalogue: Catalogue | None = None) -> None:
        self._lock = threading.RLock()
        self._catalogue = catalogue
        self._selected: set[str] = set()

    # ── Scope ────────────────────────────────────────────────────────────

    @property
    def catalogue(self) -> Catalogue | None:
        return self._catalogue

    @property
    def location_id(self) -> str | None:
        return self._catalogue.location_id if self._catalogue is not None else None

    def reset(self, catalogue: Catalogue | None) -> None:
        """Rescope to *catalogue* (or nothing) and clear the selection."""
        with self._lock:
            self._catalogue = catalogue
            self._selected = set()

    # ── Mutations ────────────────────────────────────────────────────────

    def toggle(self, sensor_id: str) -> bool:
        """Flip membership of *sensor_id*; return the new membership.

        Raises:
            UnknownSensorId: If the id is not in the active catalogue.
        """
        with self._lock:
            self._require_known(sensor_id)
            if sensor_id in self._selected:
                self._selected.discard(sensor_id)
                return False
            self._selected.add(sensor_id)
            return True

    def select_many(self, sensor_ids: Iterable[str]) -> int:
        """Add several ids at once; nothing changes if any id is unknown."""
        ids = list(sensor_ids)
        with self._lock:
            for sensor_id in ids:
                self._require_known(sensor_id)
            before = len(self._selected)
            self._selected.update(ids)
            return len(self._selected) - before

    def select_all(self) -> None:
        with self._lock:
            self._selected = set(self._catalogue.ids) if self._catalogue is not None else set()

    def deselect_all(self) -> None:
        with self._lock:
            self._selected = set()

    def toggle_all(self) -> HeaderState:
        """Header checkbox click: clear when some/all are selected, else select all."""
        with self._lock:
            if header_state(len(self._selected), self.total()) is HeaderState.NONE:
                self.select_all()
            else:
                self.deselect_all()
            return self.header_state()

    # ── Queries ──────────────────────────────────────────────────────────

    def is_selected(self, sensor_id: str) -> bool:
        return sensor_id in self._selected

    def count(self) -> int:
        return len(self._selected)

    def total(self) -> int:
        return len(self._catalogue) if self._catalogue is not None else 0

    def header_state(self) -> HeaderState:
        with self._lock:
            return header_state(len(self._selected), self.total())

    def summary(self) -> str:
        with self._lock:
            return selection_summary(len(self._selected), self.total())

    def selected_ids(self) -> list[str]:
        """Selected ids in catalogue order."""
        with self._lock:
            if self._catalogue is None or not self._selected:
                return []
            return self._catalogue.ordered(self._selected)

    # ── Internals ────────────────────────────────────────────────────────

    def _require_known(self, sensor_id: str) -> None:
        if self._catalogue is None or sensor_id not in self._catalogue:
            log.warning("Rejected unknown sensor id '%s' (location=%s)",
                        sensor_id, self.location_id)
            raise UnknownSensorId(sensor_id, self.location_id)
