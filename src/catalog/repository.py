"""Catalog Repository — read-through cache of per-location sensor catalogues.

* A cache hit returns the stored ``Catalogue`` with no I/O.
* A miss triggers exactly one load; concurrent misses for the same id
  wait on the same in-flight ``Future`` instead of re-reading the source.
* A failed load is never cached, so the next call retries it. Any
  exception a loader raises reaches the caller as ``CatalogLoadFailed``.
* ``invalidate`` forgets cached and in-flight entries; a superseded load
  that finishes afterwards does not write its result back.

The repository is the only object shared between sessions. It is created
once at application startup and injected into every ``SessionController``.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Collection, Iterable, Iterator, KeysView
from concurrent.futures import Future
from dataclasses import dataclass

from src.contracts.errors import CatalogLoadFailed, UnknownLocation
from src.contracts.sensor import Sensor
from src.catalog.sources import SourceRegistry

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
#  Catalogue snapshot
# ═══════════════════════════════════════════════════════════════════════════


class Catalogue:
    """Immutable, indexed sensor list of one location.

    Keeps the source order and a ``sensor_id -> position`` hash index so
    membership checks downstream are O(1).
    """

    __slots__ = ("location_id", "sensors", "_index")

    def __init__(self, location_id: str, sensors: Iterable[Sensor]) -> None:
        self.location_id = location_id
        self.sensors: tuple[Sensor, ...] = tuple(sensors)
        index: dict[str, int] = {}
        for pos, sensor in enumerate(self.sensors):
            if sensor.sensor_id in index:
                raise ValueError(
                    f"Duplicate sensorId '{sensor.sensor_id}' in catalogue "
                    f"of '{location_id}'"
                )
            index[sensor.sensor_id] = pos
        self._index = index

    def __len__(self) -> int:
        return len(self.sensors)

    def __iter__(self) -> Iterator[Sensor]:
        return iter(self.sensors)

    def __contains__(self, sensor_id: object) -> bool:
        return sensor_id in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Catalogue):
            return NotImplemented
        return self.location_id == other.location_id and self.sensors == other.sensors

    def __hash__(self) -> int:
        return hash((self.location_id, self.sensors))

    def __repr__(self) -> str:
        return f"Catalogue({self.location_id!r}, {len(self.sensors)} sensors)"

    @property
    def ids(self) -> KeysView[str]:
        return self._index.keys()

    def get(self, sensor_id: str) -> Sensor | None:
        pos = self._index.get(sensor_id)
        return None if pos is None else self.sensors[pos]

    def position(self, sensor_id: str) -> int:
        """Catalogue-insertion position; ``KeyError`` for unknown ids."""
        return self._index[sensor_id]

    def ordered(self, sensor_ids: Collection[str]) -> list[str]:
        """Return *sensor_ids* sorted by catalogue position."""
        if len(sensor_ids) * 4 > len(self.sensors):
            # dense selection: one pass over the catalogue beats sorting
            wanted = sensor_ids if isinstance(sensor_ids, (set, frozenset)) else set(sensor_ids)
            return [s.sensor_id for s in self.sensors if s.sensor_id in wanted]
        return sorted(sensor_ids, key=self._index.__getitem__)


# ═══════════════════════════════════════════════════════════════════════════
#  Repository
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class RepositoryStats:
    hits: int = 0
    misses: int = 0
    loads: int = 0          # underlying source invocations
    failures: int = 0
    evictions: int = 0


class CatalogRepository:
    """Loads, memoizes and indexes location catalogues.

    Args:
        registry: Explicit ``location_id -> loader`` table.
        max_entries: Optional LRU bound on cached locations. ``None`` keeps
            every loaded catalogue for the process lifetime.
    """

    def __init__(self, registry: SourceRegistry, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1 or None")
        self.registry = registry
        self.max_entries = max_entries
        self.stats = RepositoryStats()
        self._cache: OrderedDict[str, Catalogue] = OrderedDict()
        self._inflight: dict[str, Future[Catalogue]] = {}
        self._lock = threading.Lock()

    # ── Public API ───────────────────────────────────────────────────────

    def get_catalogue(self, location_id: str) -> Catalogue:
        """Return the catalogue for *location_id*, loading it on a miss.

        Raises:
            UnknownLocation: If the id is not registered.
            CatalogLoadFailed: If the source could not be read or parsed.
        """
        if location_id not in self.registry:
            raise UnknownLocation(location_id)

        with self._lock:
            cached = self._cache.get(location_id)
            if cached is not None:
                self._cache.move_to_end(location_id)
                self.stats.hits += 1
                return cached
            self.stats.misses += 1
            pending = self._inflight.get(location_id)
            if pending is None:
                pending = Future()
                pending.set_running_or_notify_cancel()
                self._inflight[location_id] = pending
                owner = True
            else:
                owner = False

        if not owner:
            log.debug("Joining in-flight load for '%s'", location_id)
            return pending.result()

        try:
            catalogue = self._load(location_id)
        except BaseException as exc:
            # followers must never be left waiting on an unresolved future
            with self._lock:
                self.stats.failures += 1
                if self._inflight.get(location_id) is pending:
                    del self._inflight[location_id]
            pending.set_exception(exc)
            raise

        with self._lock:
            if self._inflight.get(location_id) is pending:
                del self._inflight[location_id]
                self._store(location_id, catalogue)
            else:
                log.debug("Load for '%s' was invalidated; result not cached", location_id)
        pending.set_result(catalogue)
        return catalogue

    def get_sensors(self, location_id: str) -> tuple[Sensor, ...]:
        return self.get_catalogue(location_id).sensors

    def invalidate(self, location_id: str | None = None) -> None:
        """Drop cached and in-flight state for one location, or for all."""
        with self._lock:
            if location_id is None:
                self._cache.clear()
                self._inflight.clear()
            else:
                self._cache.pop(location_id, None)
                self._inflight.pop(location_id, None)
        log.info("Catalogue cache invalidated: %s", location_id or "all locations")

    def is_cached(self, location_id: str) -> bool:
        with self._lock:
            return location_id in self._cache

    def cached_ids(self) -> list[str]:
        with self._lock:
            return list(self._cache)

    # ── Internals ────────────────────────────────────────────────────────

    def _load(self, location_id: str) -> Catalogue:
        loader = self.registry.loader_for(location_id)
        with self._lock:
            self.stats.loads += 1
        log.info("Loading catalogue for '%s'", location_id)
        try:
            records = loader()
            catalogue = Catalogue(location_id, (Sensor.from_dict(r) for r in records))
        except Exception as exc:
            log.warning("Catalogue load failed for '%s': %s", location_id, exc)
            raise CatalogLoadFailed(location_id, exc) from exc
        log.info("Loaded %d sensors for '%s'", len(catalogue), location_id)
        return catalogue

    def _store(self, location_id: str, catalogue: Catalogue) -> None:
        """Caller holds ``self._lock``."""
        self._cache[location_id] = catalogue
        self._cache.move_to_end(location_id)
        if self.max_entries is None:
            return
        while len(self._cache) > self.max_entries:
            evicted, _ = self._cache.popitem(last=False)
            self.stats.evictions += 1
            log.debug("Evicted catalogue '%s' (LRU bound %d)", evicted, self.max_entries)
