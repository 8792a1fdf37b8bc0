"""
Premise Core Time — Access Window Policy
==========================================
Pure functions deciding whether a record's access window is still open.
All functions take explicit datetime arguments — no hidden clock access.

Results depend on `now`, so callers re-evaluate on every render or poll
tick instead of caching them.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Union

from core.primitives.access import CLOSED_WINDOW_STATUSES, AccessRecord

DEFAULT_WINDOW_HOURS = 8


class Expired(Enum):
    """Marker result for a closed access window."""
    EXPIRED = "Expired"

    def __str__(self) -> str:
        return self.value


EXPIRED = Expired.EXPIRED

RemainingTime = Union[timedelta, Expired]


def _fails_closed(record: AccessRecord) -> bool:
    return record.exit_time is not None or record.status in CLOSED_WINDOW_STATUSES


# ══════════════════════════════════════════════════════════════
# WINDOW FUNCTIONS
# ══════════════════════════════════════════════════════════════

def remaining_time(
    record: AccessRecord,
    now: datetime,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> RemainingTime:
    """
    Time left in the record's access window, floored to whole minutes.

    Closed records and records whose status is Revoked or Denied are
    EXPIRED regardless of their timestamps.
    """
    if _fails_closed(record):
        return EXPIRED
    remaining = timedelta(hours=window_hours) - (now - record.entry_time)
    if remaining <= timedelta(0):
        return EXPIRED
    return timedelta(minutes=int(remaining.total_seconds() // 60))


def is_access_valid(
    record: AccessRecord,
    now: datetime,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> bool:
    return remaining_time(record, now, window_hours) is not EXPIRED


def expiry_time(
    record: AccessRecord,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> Optional[datetime]:
    """Instant the window closes, or None when the record fails closed."""
    if _fails_closed(record):
        return None
    return record.entry_time + timedelta(hours=window_hours)


# ══════════════════════════════════════════════════════════════
# DISPLAY HELPERS
# ══════════════════════════════════════════════════════════════

def format_remaining(result: RemainingTime) -> str:
    """Render a remaining_time() result as '1h 0m' or 'Expired'."""
    if result is EXPIRED:
        return str(EXPIRED)
    total_minutes = int(result.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def format_duration(duration: Optional[timedelta]) -> str:
    """Render a visit duration as '45m' or '1h 5m'; '-' when unknown."""
    if duration is None:
        return "-"
    total_minutes = max(0, int(duration.total_seconds() // 60))
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"
