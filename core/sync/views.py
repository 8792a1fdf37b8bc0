"""
Premise Sync — View Ownership of Poll Timers
============================================
Each operator view owns one controller, one cache and one poller.
Closing the view stops its timer; there is no shared timer registry,
so a torn-down view never keeps polling on behalf of a dead screen.

LiveMonitoringView: latest records, fast poll (default 10s).
DashboardView:      today's records plus open ones, slow poll (default 30s).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from core.access_store.contracts import RecordQuery, RecordStore
from core.primitives.access import AccessRecord, DashboardStats
from core.sync.controller import ConsistencyController
from core.sync.poller import Poller
from core.time.access_window import (
    DEFAULT_WINDOW_HOURS,
    RemainingTime,
    format_remaining,
    remaining_time,
)
from core.time.clock import Clock, get_default_clock
from engines.access.policies import offered_operations
from projections.premise import (
    RecordFilter,
    ZoneOccupancy,
    day_bounds,
    safe_dashboard_stats,
    zone_occupancy,
)

logger = logging.getLogger("premise.sync")

LIVE_POLL_INTERVAL_SECONDS = 10
DASHBOARD_POLL_INTERVAL_SECONDS = 30
LIVE_RECORD_LIMIT = 20
DASHBOARD_RECENT_LIMIT = 5

# Wraps each poll tick, e.g. to manage per-thread store connections.
TickWrapper = Callable[[Callable[[], object]], Callable[[], object]]


@dataclass(frozen=True)
class LiveRow:
    """One rendered row of the live table, evaluated at a single instant."""

    record: AccessRecord
    remaining: RemainingTime
    remaining_text: str
    suspicious: bool
    actions: Tuple[str, ...]


class _PolledView:
    def __init__(
        self,
        *,
        store: RecordStore,
        clock: Optional[Clock],
        interval_seconds: float,
        window_hours: float,
        name: str,
        tick_wrapper: Optional[TickWrapper] = None,
        on_poll_exit: Optional[Callable[[], object]] = None,
    ) -> None:
        self._clock = clock
        self._window_hours = window_hours
        self._name = name
        self.controller = ConsistencyController(
            store=store, clock=clock, query_factory=self._query, name=name,
        )
        tick = self.controller.refresh
        if tick_wrapper is not None:
            tick = tick_wrapper(tick)
        self._poller = Poller(tick, interval_seconds, name=name, on_exit=on_poll_exit)
        self._closed = False

    def _query(self, now: datetime) -> RecordQuery:
        raise NotImplementedError

    @property
    def clock(self) -> Clock:
        return self._clock or get_default_clock()

    @property
    def poller(self) -> Poller:
        return self._poller

    def open(self) -> "_PolledView":
        """Start polling (the first refresh fires immediately)."""
        if self._closed:
            raise RuntimeError(f"{self._name} is closed.")
        self._poller.start()
        return self

    def close(self) -> None:
        self._poller.stop()
        self._closed = True
        logger.info(f"{self._name}: closed")

    @property
    def is_open(self) -> bool:
        return self._poller.is_running()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class LiveMonitoringView(_PolledView):
    def __init__(
        self,
        store: RecordStore,
        *,
        clock: Optional[Clock] = None,
        interval_seconds: float = LIVE_POLL_INTERVAL_SECONDS,
        limit: int = LIVE_RECORD_LIMIT,
        window_hours: float = DEFAULT_WINDOW_HOURS,
        tick_wrapper: Optional[TickWrapper] = None,
        on_poll_exit: Optional[Callable[[], object]] = None,
    ) -> None:
        self._limit = limit
        super().__init__(
            store=store, clock=clock, interval_seconds=interval_seconds,
            window_hours=window_hours, name="live-monitoring",
            tick_wrapper=tick_wrapper, on_poll_exit=on_poll_exit,
        )

    def _query(self, now: datetime) -> RecordQuery:
        return RecordQuery(limit=self._limit)

    def records(self, record_filter: Optional[RecordFilter] = None) -> List[AccessRecord]:
        snapshot = self.controller.records()
        if record_filter is None:
            return snapshot
        return record_filter.apply(snapshot)

    def rows(self, record_filter: Optional[RecordFilter] = None,
             now: Optional[datetime] = None) -> List[LiveRow]:
        """Rows with remaining time recomputed for this instant."""
        now = now or self.clock.now_utc()
        rows = []
        for r in self.records(record_filter):
            remaining = remaining_time(r, now, self._window_hours)
            rows.append(LiveRow(
                record=r,
                remaining=remaining,
                remaining_text=format_remaining(remaining),
                suspicious=r.is_suspicious,
                actions=tuple(offered_operations(r)),
            ))
        return rows

    def zones(self, now: Optional[datetime] = None) -> Dict[str, ZoneOccupancy]:
        now = now or self.clock.now_utc()
        return zone_occupancy(self.controller.records(), now, self._window_hours)


class DashboardView(_PolledView):
    def __init__(
        self,
        store: RecordStore,
        *,
        clock: Optional[Clock] = None,
        interval_seconds: float = DASHBOARD_POLL_INTERVAL_SECONDS,
        recent_limit: int = DASHBOARD_RECENT_LIMIT,
        window_hours: float = DEFAULT_WINDOW_HOURS,
        tick_wrapper: Optional[TickWrapper] = None,
        on_poll_exit: Optional[Callable[[], object]] = None,
    ) -> None:
        self._recent_limit = recent_limit
        super().__init__(
            store=store, clock=clock, interval_seconds=interval_seconds,
            window_hours=window_hours, name="dashboard",
            tick_wrapper=tick_wrapper, on_poll_exit=on_poll_exit,
        )

    def _query(self, now: datetime) -> RecordQuery:
        start, _ = day_bounds(now)
        return RecordQuery(since=start, include_open=True)

    def stats(self, now: Optional[datetime] = None) -> DashboardStats:
        now = now or self.clock.now_utc()
        return safe_dashboard_stats(self.controller.records(), now)

    def recent(self) -> List[AccessRecord]:
        return self.controller.records()[: self._recent_limit]

    def zones(self, now: Optional[datetime] = None) -> Dict[str, ZoneOccupancy]:
        now = now or self.clock.now_utc()
        return zone_occupancy(self.controller.records(), now, self._window_hours)
