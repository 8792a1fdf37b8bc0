"""
Tests — Poll timer, consistency controller and polled views
============================================================
Controller scenarios run against the in-memory store; concurrent
writes by another operator are simulated by overwriting store rows
behind the controller's back.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from core.commands.rejection import ReasonCode
from core.primitives.access import AccessStatus, PersonRole
from core.sync import (
    ConsistencyController,
    DashboardView,
    LiveMonitoringView,
    Poller,
)
from core.time.access_window import EXPIRED
from projections.premise import RecordFilter

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def controller(memory_store, clock):
    return ConsistencyController(store=memory_store, clock=clock)


# ══════════════════════════════════════════════════════════════
# POLLER
# ══════════════════════════════════════════════════════════════

class TestPoller:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            Poller(lambda: None, 0)

    def test_fires_immediately_and_stops(self):
        fired = threading.Event()
        poller = Poller(fired.set, 60, name="test-poller")
        assert poller.start() is True
        try:
            assert fired.wait(2.0)
            assert poller.is_running()
        finally:
            poller.stop()
        assert not poller.is_running()
        assert poller.ticks >= 1

    def test_start_twice_is_refused(self):
        poller = Poller(lambda: None, 60, fire_immediately=False)
        with poller:
            assert poller.start() is False

    def test_failing_tick_keeps_polling(self):
        calls = []
        second = threading.Event()

        def callback():
            calls.append(1)
            if len(calls) >= 2:
                second.set()
            raise RuntimeError("store down")

        poller = Poller(callback, 0.01)
        poller.start()
        try:
            assert second.wait(2.0)
        finally:
            poller.stop()
        assert poller.failures >= 2

    def test_exit_hook_runs_on_polling_thread(self):
        tick_threads, exit_threads = [], []
        ticked = threading.Event()

        def callback():
            tick_threads.append(threading.current_thread())
            ticked.set()

        poller = Poller(callback, 60, on_exit=lambda: exit_threads.append(
            threading.current_thread()))
        poller.start()
        assert ticked.wait(2.0)
        poller.stop()
        assert exit_threads == [tick_threads[0]]
        assert exit_threads[0] is not threading.current_thread()

    def test_failing_exit_hook_is_logged(self, caplog):
        def boom():
            raise RuntimeError("close failed")

        poller = Poller(lambda: None, 60, on_exit=boom, name="exit-test")
        with caplog.at_level(logging.ERROR, logger="premise.sync"):
            poller.start()
            poller.stop()
        assert "exit hook failed" in caplog.text


# ══════════════════════════════════════════════════════════════
# CONTROLLER
# ══════════════════════════════════════════════════════════════

class TestRefresh:
    def test_refresh_replaces_cache(self, controller, memory_store):
        memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        assert controller.refresh() is True
        assert len(controller.records()) == 1
        assert controller.last_error is None

    def test_refresh_failure_keeps_previous_snapshot(self, controller, memory_store):
        memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        controller.refresh()
        memory_store.unavailable = True
        assert controller.refresh() is False
        assert len(controller.records()) == 1
        assert "unavailable" in controller.last_error


class TestOptimisticUpdates:
    def test_accepted_extend_updates_cache(self, controller, memory_store):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=7))
        controller.refresh()
        outcome = controller.extend(r.record_id, 2, 0)
        assert outcome.is_accepted
        cached = controller.cache.get(r.record_id)
        assert cached.entry_time == r.entry_time + timedelta(hours=2)

    def test_accepted_revoke_is_visible_without_poll(self, controller, memory_store):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        controller.refresh()
        assert controller.revoke(r.record_id).is_accepted
        assert controller.cache.get(r.record_id).status == AccessStatus.REVOKED

    def test_local_patch_applied_even_if_follow_up_refresh_fails(self, controller, memory_store):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        controller.refresh()
        original_refresh = controller.refresh

        def failing_refresh():
            memory_store.unavailable = True
            try:
                return original_refresh()
            finally:
                memory_store.unavailable = False

        controller.refresh = failing_refresh
        assert controller.revoke(r.record_id).is_accepted
        assert controller.cache.get(r.record_id).status == AccessStatus.REVOKED

    def test_grant_adds_to_front(self, controller, memory_store):
        memory_store.add_record(entry_time=NOW - timedelta(hours=2))
        person = memory_store.add_person("Zul", PersonRole.STAFF)
        gate = memory_store.add_location("Gate 1")
        controller.refresh()
        outcome = controller.grant(person.person_id, gate)
        assert outcome.is_accepted
        assert controller.records()[0].record_id == outcome.result.record_id


class TestConcurrentWrites:
    def test_precondition_failure_resyncs_without_local_mutation(self, controller, memory_store):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        controller.refresh()
        # another operator denies the record; our cache still says Granted
        memory_store.put(replace(memory_store.records[r.record_id], status=AccessStatus.DENIED))
        assert controller.cache.get(r.record_id).status == AccessStatus.GRANTED

        lists_before = memory_store.list_calls
        outcome = controller.extend(r.record_id, 1, 0)

        assert outcome.reason.code == ReasonCode.PRECONDITION_FAILED
        assert memory_store.list_calls == lists_before + 1
        cached = controller.cache.get(r.record_id)
        assert cached.status == AccessStatus.DENIED
        assert cached.entry_time == r.entry_time

    def test_not_found_resyncs(self, controller, memory_store):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        controller.refresh()
        del memory_store.records[r.record_id]
        outcome = controller.revoke(r.record_id)
        assert outcome.reason.code == ReasonCode.NOT_FOUND
        assert controller.cache.get(r.record_id) is None

    def test_validation_failure_leaves_cache_alone(self, controller, memory_store):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        controller.refresh()
        lists_before = memory_store.list_calls
        outcome = controller.extend(r.record_id, 0, 75)
        assert outcome.reason.code == ReasonCode.VALIDATION_FAILED
        assert memory_store.list_calls == lists_before
        assert memory_store.update_calls == 0

    def test_store_unavailable_leaves_cache_alone(self, controller, memory_store):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=1))
        controller.refresh()
        memory_store.unavailable = True
        outcome = controller.revoke(r.record_id)
        assert outcome.reason.code == ReasonCode.STORE_UNAVAILABLE
        assert controller.cache.get(r.record_id).status == AccessStatus.GRANTED


# ══════════════════════════════════════════════════════════════
# VIEWS
# ══════════════════════════════════════════════════════════════

class TestLiveMonitoringView:
    def test_rows_recompute_remaining(self, memory_store, clock):
        r = memory_store.add_record(entry_time=NOW - timedelta(hours=7))
        view = LiveMonitoringView(memory_store, clock=clock)
        view.controller.refresh()

        row = view.rows()[0]
        assert row.record.record_id == r.record_id
        assert row.remaining_text == "1h 0m"
        assert "access.record.extend" in row.actions

        clock.advance(hours=1)
        assert view.rows()[0].remaining is EXPIRED

    def test_limit_applies_to_refresh(self, memory_store, clock):
        for i in range(5):
            memory_store.add_record(entry_time=NOW - timedelta(minutes=i))
        view = LiveMonitoringView(memory_store, clock=clock, limit=3)
        view.controller.refresh()
        assert len(view.records()) == 3

    def test_filter(self, memory_store, clock):
        lobby = memory_store.add_location("Lobby")
        dock = memory_store.add_location("Loading Dock")
        memory_store.add_record(entry_time=NOW, location_id=lobby)
        memory_store.add_record(entry_time=NOW, location_id=dock)
        view = LiveMonitoringView(memory_store, clock=clock)
        view.controller.refresh()
        rows = view.rows(RecordFilter(search="dock"))
        assert [r.record.location_name for r in rows] == ["Loading Dock"]

    def test_close_stops_polling(self, memory_store, clock):
        view = LiveMonitoringView(memory_store, clock=clock, interval_seconds=60)
        with view:
            assert view.is_open
        assert not view.is_open
        with pytest.raises(RuntimeError):
            view.open()


class TestDashboardView:
    def test_includes_open_records_from_earlier_days(self, memory_store, clock):
        staff = memory_store.add_person("Guard", PersonRole.STAFF)
        memory_store.add_record(
            subject_id=staff.person_id, entry_time=NOW - timedelta(days=1),
        )
        memory_store.add_record(
            entry_time=NOW - timedelta(days=1),
            status=AccessStatus.CHECKED_OUT,
            exit_time=NOW - timedelta(hours=20),
        )
        memory_store.add_record(entry_time=NOW - timedelta(hours=1), status=AccessStatus.DENIED)

        view = DashboardView(memory_store, clock=clock)
        view.controller.refresh()
        stats = view.stats()
        assert len(view.controller.records()) == 2
        assert stats.total_entries_today == 1
        assert stats.active_on_site_count == 1
        assert stats.alert_count == 1

    def test_recent_limit(self, memory_store, clock):
        for i in range(8):
            memory_store.add_record(entry_time=NOW - timedelta(minutes=i))
        view = DashboardView(memory_store, clock=clock, recent_limit=5)
        view.controller.refresh()
        assert len(view.recent()) == 5

    def test_unavailable_store_shows_zeroes(self, memory_store, clock):
        memory_store.unavailable = True
        view = DashboardView(memory_store, clock=clock)
        assert view.controller.refresh() is False
        assert view.stats().total_entries_today == 0
