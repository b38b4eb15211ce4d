"""Session Controller — coordinates directory, repository and selection.

State machine
─────────────
  NO_LOCATION ──pick──▶ LOADING_CATALOG(id) ──ok──▶ READY(id)
                              │                     │
                              └──fail──▶ LOAD_FAILED │
  any state ──pick(id')──▶ LOADING_CATALOG(id')  (earlier loads are stale)

``confirm`` is valid in READY with a non-empty selection. It hands a
frozen snapshot to the submitter and leaves the session in READY with the
selection intact, unless the submitter asks for a reset.

Every ``pick_location`` bumps a request sequence number; a load whose
number is no longer current is discarded when it completes, so a slow
load for an earlier location never overwrites the current one.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from concurrent.futures import Executor, Future
from dataclasses import dataclass

from src.catalog.directory import LocationDirectory
from src.catalog.naming import format_location_name
from src.catalog.repository import CatalogRepository, Catalogue
from src.contracts.enums import HeaderState, SessionState
from src.contracts.errors import CatalogLoadFailed, InvalidStateTransition
from src.contracts.location import Location
from src.contracts.sensor import Sensor
from src.contracts.submission import SelectionSnapshot
from src.selection.store import SelectionStore
from src.selection.submission import LoggingSubmitter, SelectionSubmitter

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionView:
    """Combined read model for a presentation layer."""

    state: SessionState
    location_id: str | None
    location_name: str | None
    pending_location_id: str | None
    sensors: tuple[Sensor, ...]
    selected_count: int
    total: int
    header_state: HeaderState
    summary: str
    error: str | None
    last_submission: SelectionSnapshot | None

    @property
    def can_confirm(self) -> bool:
        return self.state is SessionState.READY and self.selected_count > 0


class SessionController:
    """One operator session: pick a location, select sensors, confirm.

    Args:
        repository: Shared catalogue repository (process lifetime).
        directory: Optional location directory for ``list_locations``.
        submitter: Receives confirmed snapshots. Defaults to logging them.
        executor: Runs catalogue loads in the background. ``None`` loads
            inline on the calling thread.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        directory: LocationDirectory | None = None,
        submitter: SelectionSubmitter | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.repository = repository
        self.directory = directory
        self.submitter: SelectionSubmitter = submitter or LoggingSubmitter()
        self.executor = executor
        self.store = SelectionStore()

        self._lock = threading.RLock()
        self._state = SessionState.NO_LOCATION
        self._request_seq = 0
        self._pending_id: str | None = None
        self._catalogue: Catalogue | None = None
        self._error: CatalogLoadFailed | None = None
        self._loading_since: float | None = None
        self._last_submission: SelectionSnapshot | None = None

    # ── Read side ────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def location_id(self) -> str | None:
        """Id of the catalogue currently in READY, else ``None``."""
        catalogue = self._catalogue
        return catalogue.location_id if catalogue is not None else None

    @property
    def pending_location_id(self) -> str | None:
        return self._pending_id

    @property
    def error(self) -> CatalogLoadFailed | None:
        return self._error

    @property
    def last_submission(self) -> SelectionSnapshot | None:
        return self._last_submission

    def list_locations(self, include_unavailable: bool = False) -> list[Location]:
        if self.directory is None:
            return []
        return self.directory.list_locations(include_unavailable=include_unavailable)

    def loading_for(self) -> float | None:
        """Seconds spent in LOADING_CATALOG, or ``None`` in any other state."""
        with self._lock:
            if self._state is not SessionState.LOADING_CATALOG or self._loading_since is None:
                return None
            return time.monotonic() - self._loading_since

    def view(self) -> SessionView:
        with self._lock:
            catalogue = self._catalogue
            shown_id = catalogue.location_id if catalogue is not None else self._pending_id
            return SessionView(
                state=self._state,
                location_id=catalogue.location_id if catalogue is not None else None,
                location_name=format_location_name(shown_id) if shown_id else None,
                pending_location_id=self._pending_id,
                sensors=catalogue.sensors if catalogue is not None else (),
                selected_count=self.store.count(),
                total=self.store.total(),
                header_state=self.store.header_state(),
                summary=self.store.summary(),
                error=str(self._error) if self._error is not None else None,
                last_submission=self._last_submission,
            )

    def is_selected(self, sensor_id: str) -> bool:
        return self.store.is_selected(sensor_id)

    # ── Location switch ──────────────────────────────────────────────────

    def pick_location(self, location_id: str) -> Future[SessionView]:
        """Switch to *location_id* and load its catalogue.

        The selection and the previous catalogue are cleared immediately.
        The returned future resolves to the view after this request was
        applied (or discarded as stale). Load failures are reported via
        state LOAD_FAILED, not via the future.
        """
        with self._lock:
            retry = (
                self._state is SessionState.LOADING_CATALOG
                and self._pending_id == location_id
            )
            self._request_seq += 1
            token = self._request_seq
            self._state = SessionState.LOADING_CATALOG
            self._pending_id = location_id
            self._catalogue = None
            self._error = None
            self._loading_since = time.monotonic()
            self.store.reset(None)
        log.info("Picked location '%s' (request #%d)", location_id, token)

        if retry:
            # a load for this id is still outstanding; do not wait on it
            log.info("Restarting load for '%s'", location_id)
            self.repository.invalidate(location_id)

        if self.executor is not None:
            return self.executor.submit(self._load, token, location_id)
        future: Future[SessionView] = Future()
        future.set_running_or_notify_cancel()
        future.set_result(self._load(token, location_id))
        return future

    def reset(self) -> None:
        """Return to NO_LOCATION; outstanding loads become stale."""
        with self._lock:
            self._request_seq += 1
            self._state = SessionState.NO_LOCATION
            self._pending_id = None
            self._catalogue = None
            self._error = None
            self._loading_since = None
            self.store.reset(None)
        log.info("Session reset")

    def _load(self, token: int, location_id: str) -> SessionView:
        try:
            catalogue = self.repository.get_catalogue(location_id)
        except CatalogLoadFailed as exc:
            with self._lock:
                if token != self._request_seq:
                    log.debug("Ignoring stale failure for '%s' (request #%d)", location_id, token)
                    return self.view()
                self._state = SessionState.LOAD_FAILED
                self._error = exc
                self._catalogue = None
                self._loading_since = None
                self.store.reset(None)
                log.warning("Location '%s' failed to load: %s", location_id, exc)
                return self.view()

        with self._lock:
            if token != self._request_seq:
                log.info(
                    "Discarding stale catalogue for '%s' (request #%d, current #%d)",
                    location_id,
                    token,
                    self._request_seq,
                )
                return self.view()
            self._catalogue = catalogue
            self.store.reset(catalogue)
            self._state = SessionState.READY
            self._loading_since = None
            log.info("Session ready: '%s' with %d sensors", location_id, len(catalogue))
            return self.view()

    # ── Selection mutations (READY only) ─────────────────────────────────

    def toggle(self, sensor_id: str) -> bool:
        with self._lock:
            self._require_ready("toggle")
            return self.store.toggle(sensor_id)

    def select_many(self, sensor_ids: Iterable[str]) -> int:
        with self._lock:
            self._require_ready("select_many")
            return self.store.select_many(sensor_ids)

    def select_all(self) -> None:
        with self._lock:
            self._require_ready("select_all")
            self.store.select_all()

    def deselect_all(self) -> None:
        with self._lock:
            self._require_ready("deselect_all")
            self.store.deselect_all()

    def toggle_all(self) -> HeaderState:
        with self._lock:
            self._require_ready("toggle_all")
            return self.store.toggle_all()

    # ── Confirm ──────────────────────────────────────────────────────────

    def confirm(self) -> SelectionSnapshot:
        """Freeze the selection and hand it to the submitter.

        Raises:
            InvalidStateTransition: Outside READY or with an empty selection.
        """
        with self._lock:
            self._require_ready("confirm")
            if self.store.count() == 0:
                raise InvalidStateTransition("confirm", self._state.value, "selection is empty")
            snapshot = SelectionSnapshot(
                location_id=self.store.location_id or "",
                sensor_ids=tuple(self.store.selected_ids()),
            )
            self._last_submission = snapshot
        log.info("Confirmed %d sensors for '%s'", snapshot.count, snapshot.location_id)

        if self.submitter.submit(snapshot):
            self.reset()
        return snapshot

    def _require_ready(self, action: str) -> None:
        if self._state is not SessionState.READY:
            raise InvalidStateTransition(action, self._state.value)
