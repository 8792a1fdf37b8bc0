"""
Premise Projections — Dashboard Aggregation
===========================================
Pure folds over the cached record set. Nothing here is stored or
maintained incrementally; every statistic is recomputed from the
snapshot it is given, so results do not depend on record order.

Day boundaries are UTC calendar days: [00:00, 24:00).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.primitives.access import (
    AccessRecord,
    AccessStatus,
    DashboardStats,
    PersonRole,
)
from core.time.access_window import DEFAULT_WINDOW_HOURS, EXPIRED, remaining_time

logger = logging.getLogger("premise.projections")


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """UTC calendar day containing `now`, as a half-open interval."""
    start = now.astimezone(timezone.utc).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return start, start + timedelta(days=1)


def _within(instant: Optional[datetime], bounds: Tuple[datetime, datetime]) -> bool:
    return instant is not None and bounds[0] <= instant < bounds[1]


# ══════════════════════════════════════════════════════════════
# STATISTICS
# ══════════════════════════════════════════════════════════════

def total_entries_today(records: Iterable[AccessRecord], now: datetime) -> int:
    bounds = day_bounds(now)
    return sum(1 for r in records if _within(r.entry_time, bounds))


def active_on_site_count(records: Iterable[AccessRecord]) -> int:
    """Open records belonging to Staff."""
    return sum(
        1 for r in records
        if r.exit_time is None and r.subject_role == PersonRole.STAFF
    )


def alert_count(records: Iterable[AccessRecord], now: datetime) -> int:
    bounds = day_bounds(now)
    return sum(
        1 for r in records
        if r.status == AccessStatus.DENIED and _within(r.entry_time, bounds)
    )


def avg_visit_duration(records: Iterable[AccessRecord], now: datetime) -> Optional[timedelta]:
    """Mean visit length over records closed today; None when none closed."""
    bounds = day_bounds(now)
    durations = [
        r.exit_time - r.entry_time
        for r in records
        if _within(r.exit_time, bounds)
    ]
    if not durations:
        return None
    total = sum(durations, timedelta(0))
    return timedelta(seconds=int(total.total_seconds() // len(durations)))


def dashboard_stats(records: Sequence[AccessRecord], now: datetime) -> DashboardStats:
    records = list(records)
    return DashboardStats(
        total_entries_today=total_entries_today(records, now),
        active_on_site_count=active_on_site_count(records),
        alert_count=alert_count(records, now),
        avg_visit_duration=avg_visit_duration(records, now),
    )


def safe_dashboard_stats(records: Sequence[AccessRecord], now: datetime) -> DashboardStats:
    """dashboard_stats that degrades to zeroed stats instead of raising."""
    try:
        return dashboard_stats(records, now)
    except Exception as e:
        logger.warning(f"Dashboard aggregation failed, showing zeroed stats: {e}")
        return DashboardStats.zeroed()


# ══════════════════════════════════════════════════════════════
# ZONE OCCUPANCY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ZoneOccupancy:
    location_id: str
    location_name: str
    records: Tuple[AccessRecord, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def suspicious_count(self) -> int:
        return sum(1 for r in self.records if r.is_suspicious)


def is_currently_present(
    record: AccessRecord,
    now: datetime,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> bool:
    if record.status == AccessStatus.CHECKED_OUT:
        return False
    return remaining_time(record, now, window_hours) is not EXPIRED


def zone_occupancy(
    records: Iterable[AccessRecord],
    now: datetime,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> Dict[str, ZoneOccupancy]:
    """
    Group current records by location_id.

    Current means not checked out and still inside the access window.
    Zones are keyed in first-seen order of the input.
    """
    grouped: Dict[str, List[AccessRecord]] = {}
    names: Dict[str, str] = {}
    for r in records:
        if not is_currently_present(r, now, window_hours):
            continue
        grouped.setdefault(r.location_id, []).append(r)
        names.setdefault(r.location_id, r.location_name)
    return {
        loc: ZoneOccupancy(location_id=loc, location_name=names[loc], records=tuple(rs))
        for loc, rs in grouped.items()
    }
