"""
Premise Core Time — Public API
================================
Injectable clock and the access-window time policy.
"""

from core.time.access_window import (
    DEFAULT_WINDOW_HOURS,
    EXPIRED,
    Expired,
    expiry_time,
    format_duration,
    format_remaining,
    is_access_valid,
    remaining_time,
)
from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    get_default_clock,
    now_utc,
    set_default_clock,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_default_clock",
    "set_default_clock",
    "now_utc",
    "DEFAULT_WINDOW_HOURS",
    "EXPIRED",
    "Expired",
    "remaining_time",
    "is_access_valid",
    "expiry_time",
    "format_remaining",
    "format_duration",
]
