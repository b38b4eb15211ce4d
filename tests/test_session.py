"""Tests for src.selection.session — SessionController state machine."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.catalog.directory import LocationDirectory
from src.catalog.repository import CatalogRepository
from src.catalog.sources import SourceRegistry
from src.contracts.enums import HeaderState, SessionState
from src.contracts.errors import InvalidStateTransition, UnknownSensorId
from src.contracts.submission import SelectionSnapshot
from src.selection.session import SessionController
from src.selection.submission import CallbackSubmitter
from tests.conftest import CountingSource, records_for, wait_for


class Recorder:
    """Submitter that remembers every snapshot."""

    def __init__(self, reset: bool = False) -> None:
        self.snapshots: list[SelectionSnapshot] = []
        self.reset = reset

    def submit(self, snapshot: SelectionSnapshot) -> bool:
        self.snapshots.append(snapshot)
        return self.reset


class HangsOnce:
    """Loader whose first call blocks until ``gate`` opens."""

    def __init__(self, records) -> None:
        self.records = records
        self.gate = threading.Event()
        self.started = threading.Event()
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls == 1:
            self.started.set()
            assert self.gate.wait(timeout=5), "gate never opened"
        return list(self.records)


def _registry(**loaders) -> SourceRegistry:
    registry = SourceRegistry()
    for location_id, loader in loaders.items():
        registry.register(location_id, loader)
    return registry


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def controller(two_locations, recorder) -> SessionController:
    repo, _ = two_locations
    return SessionController(repo, directory=LocationDirectory(repo), submitter=recorder)


# ═══════════════════════════════════════════════════════════════════════════
#  Basic transitions
# ═══════════════════════════════════════════════════════════════════════════


class TestTransitions:
    def test_initial_state(self, controller):
        view = controller.view()
        assert controller.state is SessionState.NO_LOCATION
        assert view.location_id is None
        assert view.sensors == ()
        assert view.header_state is HeaderState.NONE
        assert not view.can_confirm

    def test_pick_reaches_ready_with_empty_selection(self, controller):
        view = controller.pick_location("L1").result(timeout=5)
        assert view.state is SessionState.READY
        assert view.location_id == "L1"
        assert [s.sensor_id for s in view.sensors] == ["A", "B", "C"]
        assert view.selected_count == 0
        assert view.total == 3
        assert view.summary == "No sensors selected"

    def test_switch_location_clears_selection(self, controller):
        controller.pick_location("L1").result(timeout=5)
        controller.toggle("A")
        view = controller.pick_location("L2").result(timeout=5)
        assert view.location_id == "L2"
        assert view.selected_count == 0
        assert view.total == 2
        assert not controller.is_selected("A")

    def test_switch_back_uses_cache(self, two_locations, controller):
        _, sources = two_locations
        controller.pick_location("L1").result(timeout=5)
        controller.pick_location("L2").result(timeout=5)
        controller.pick_location("L1").result(timeout=5)
        assert sources["L1"].calls == 1

    def test_list_locations_delegates_to_directory(self, controller):
        assert [loc.id for loc in controller.list_locations()] == ["L1", "L2"]

    def test_list_locations_without_directory(self, two_locations):
        repo, _ = two_locations
        assert SessionController(repo).list_locations() == []

    def test_reset(self, controller):
        controller.pick_location("L1").result(timeout=5)
        controller.select_all()
        controller.reset()
        assert controller.state is SessionState.NO_LOCATION
        assert controller.location_id is None
        assert controller.view().total == 0


class TestMutationGuards:
    @pytest.mark.parametrize(
        "action",
        [
            lambda c: c.toggle("A"),
            lambda c: c.select_many(["A"]),
            lambda c: c.select_all(),
            lambda c: c.deselect_all(),
            lambda c: c.toggle_all(),
            lambda c: c.confirm(),
        ],
    )
    def test_rejected_before_ready(self, controller, action):
        with pytest.raises(InvalidStateTransition):
            action(controller)

    def test_rejected_while_loading(self):
        source = HangsOnce(records_for(["A"]))
        repo = CatalogRepository(_registry(L1=source))
        with ThreadPoolExecutor(max_workers=1) as pool:
            controller = SessionController(repo, executor=pool)
            future = controller.pick_location("L1")
            assert source.started.wait(timeout=5)
            assert controller.state is SessionState.LOADING_CATALOG
            assert controller.pending_location_id == "L1"
            with pytest.raises(InvalidStateTransition):
                controller.toggle("A")
            source.gate.set()
            assert future.result(timeout=5).state is SessionState.READY

    def test_unknown_sensor_propagates(self, controller):
        controller.pick_location("L1").result(timeout=5)
        with pytest.raises(UnknownSensorId):
            controller.toggle("X")
        assert controller.view().selected_count == 0

    def test_toggle_all_follows_header(self, controller):
        controller.pick_location("L1").result(timeout=5)
        assert controller.toggle_all() is HeaderState.ALL
        controller.toggle("B")
        assert controller.view().header_state is HeaderState.SOME
        assert controller.toggle_all() is HeaderState.NONE


# ═══════════════════════════════════════════════════════════════════════════
#  Confirm
# ═══════════════════════════════════════════════════════════════════════════


class TestConfirm:
    def test_payload_in_catalogue_order(self, controller, recorder):
        controller.pick_location("L1").result(timeout=5)
        controller.toggle("C")
        controller.toggle("A")
        snapshot = controller.confirm()
        assert snapshot.to_dict() == {"locationId": "L1", "sensorIds": ["A", "C"]}
        assert recorder.snapshots == [snapshot]
        assert controller.last_submission == snapshot

    def test_payload_names_current_location_after_switch(self, controller, recorder):
        controller.pick_location("L1").result(timeout=5)
        controller.toggle("A")
        controller.pick_location("L2").result(timeout=5)
        controller.toggle("X")
        snapshot = controller.confirm()
        assert snapshot.location_id == "L2"
        assert snapshot.sensor_ids == ("X",)

    def test_selection_kept_after_confirm(self, controller):
        controller.pick_location("L1").result(timeout=5)
        controller.select_all()
        controller.confirm()
        assert controller.state is SessionState.READY
        assert controller.view().selected_count == 3

    def test_empty_selection_rejected(self, controller, recorder):
        controller.pick_location("L1").result(timeout=5)
        with pytest.raises(InvalidStateTransition):
            controller.confirm()
        assert recorder.snapshots == []

    def test_truthy_submitter_resets_session(self, two_locations):
        repo, _ = two_locations
        controller = SessionController(repo, submitter=Recorder(reset=True))
        controller.pick_location("L2").result(timeout=5)
        controller.toggle("Y")
        snapshot = controller.confirm()
        assert snapshot.sensor_ids == ("Y",)
        assert controller.state is SessionState.NO_LOCATION
        assert controller.last_submission == snapshot

    def test_callback_submitter(self, two_locations):
        repo, _ = two_locations
        seen: list[SelectionSnapshot] = []
        controller = SessionController(repo, submitter=CallbackSubmitter(seen.append))
        controller.pick_location("L1").result(timeout=5)
        controller.select_many(["B", "A"])
        controller.confirm()
        assert seen[0].sensor_ids == ("A", "B")
        assert controller.state is SessionState.READY


# ═══════════════════════════════════════════════════════════════════════════
#  Load failures
# ═══════════════════════════════════════════════════════════════════════════


class TestLoadFailure:
    def test_failure_then_retry(self):
        source = CountingSource("L1", records_for(["A", "B"]), fail_times=1)
        repo = CatalogRepository(_registry(L1=source))
        controller = SessionController(repo)

        view = controller.pick_location("L1").result(timeout=5)
        assert view.state is SessionState.LOAD_FAILED
        assert "L1" in view.error
        assert controller.error is not None
        assert view.sensors == ()
        with pytest.raises(InvalidStateTransition):
            controller.select_all()

        view = controller.pick_location("L1").result(timeout=5)
        assert view.state is SessionState.READY
        assert view.error is None
        assert view.total == 2

    def test_unexpected_loader_error_enters_load_failed(self):
        source = CountingSource(
            "Bad", records_for(["A"]), fail_times=1, error=RuntimeError("remote api 500")
        )
        repo = CatalogRepository(_registry(Bad=source))
        controller = SessionController(repo)

        view = controller.pick_location("Bad").result(timeout=5)
        assert view.state is SessionState.LOAD_FAILED
        assert "remote api 500" in view.error

        assert controller.pick_location("Bad").result(timeout=5).state is SessionState.READY

    def test_unexpected_loader_error_with_executor(self):
        source = CountingSource("Bad", [], fail_times=1, error=RuntimeError("remote api 500"))
        repo = CatalogRepository(_registry(Bad=source))

        with ThreadPoolExecutor(max_workers=1) as pool:
            controller = SessionController(repo, executor=pool)
            view = controller.pick_location("Bad").result(timeout=5)

        assert view.state is SessionState.LOAD_FAILED
        assert controller.loading_for() is None

    def test_unknown_location(self, controller):
        view = controller.pick_location("Atlantis").result(timeout=5)
        assert view.state is SessionState.LOAD_FAILED
        assert view.error == "Unknown location 'Atlantis'"
        assert view.location_name == "Atlantis"


# ═══════════════════════════════════════════════════════════════════════════
#  Concurrency
# ═══════════════════════════════════════════════════════════════════════════


class TestStaleResponses:
    def test_slow_earlier_load_is_discarded(self):
        slow = HangsOnce(records_for(["A", "B", "C"]))
        fast = CountingSource("L2", records_for(["X", "Y"]))
        repo = CatalogRepository(_registry(L1=slow, L2=fast))

        with ThreadPoolExecutor(max_workers=2) as pool:
            controller = SessionController(repo, executor=pool)
            first = controller.pick_location("L1")
            assert slow.started.wait(timeout=5)
            second = controller.pick_location("L2")
            assert second.result(timeout=5).location_id == "L2"
            slow.gate.set()
            first.result(timeout=5)

        view = controller.view()
        assert view.state is SessionState.READY
        assert view.location_id == "L2"
        assert [s.sensor_id for s in view.sensors] == ["X", "Y"]
        # the discarded load still warmed the shared cache
        assert repo.is_cached("L1")

    def test_stale_failure_is_discarded(self):
        failing = CountingSource("L1", records_for(["A"]), gate=threading.Event(), fail_times=1)
        ok = CountingSource("L2", records_for(["X"]))
        repo = CatalogRepository(_registry(L1=failing, L2=ok))

        with ThreadPoolExecutor(max_workers=2) as pool:
            controller = SessionController(repo, executor=pool)
            first = controller.pick_location("L1")
            assert failing.started.wait(timeout=5)
            controller.pick_location("L2").result(timeout=5)
            failing.gate.set()
            first.result(timeout=5)

        assert controller.state is SessionState.READY
        assert controller.error is None
        assert controller.location_id == "L2"

    def test_repick_of_hung_location_restarts_load(self):
        source = HangsOnce(records_for(["A", "B"]))
        repo = CatalogRepository(_registry(L1=source))

        with ThreadPoolExecutor(max_workers=2) as pool:
            controller = SessionController(repo, executor=pool)
            controller.pick_location("L1")
            assert source.started.wait(timeout=5)
            view = controller.pick_location("L1").result(timeout=5)
            assert view.state is SessionState.READY
            assert view.total == 2
            source.gate.set()

        assert source.calls == 2
        assert controller.state is SessionState.READY

    def test_reset_makes_outstanding_load_stale(self):
        source = HangsOnce(records_for(["A"]))
        repo = CatalogRepository(_registry(L1=source))

        with ThreadPoolExecutor(max_workers=1) as pool:
            controller = SessionController(repo, executor=pool)
            future = controller.pick_location("L1")
            assert source.started.wait(timeout=5)
            controller.reset()
            source.gate.set()
            future.result(timeout=5)

        assert controller.state is SessionState.NO_LOCATION

    def test_loading_for(self):
        source = HangsOnce(records_for(["A"]))
        repo = CatalogRepository(_registry(L1=source))

        with ThreadPoolExecutor(max_workers=1) as pool:
            controller = SessionController(repo, executor=pool)
            assert controller.loading_for() is None
            future = controller.pick_location("L1")
            assert source.started.wait(timeout=5)
            assert wait_for(lambda: (controller.loading_for() or 0.0) > 0.0)
            source.gate.set()
            future.result(timeout=5)

        assert controller.loading_for() is None

    def test_sessions_share_one_load(self):
        gate = threading.Event()
        source = CountingSource("L1", records_for(["A", "B"]), gate=gate)
        repo = CatalogRepository(_registry(L1=source))

        with ThreadPoolExecutor(max_workers=4) as pool:
            sessions = [SessionController(repo, executor=pool) for _ in range(4)]
            futures = [s.pick_location("L1") for s in sessions]
            assert wait_for(lambda: repo.stats.misses == 4)
            gate.set()
            views = [f.result(timeout=5) for f in futures]

        assert source.calls == 1
        assert all(v.state is SessionState.READY for v in views)
        sessions[0].toggle("A")
        assert sessions[1].view().selected_count == 0
