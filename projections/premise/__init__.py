"""
Premise Projections — Read-Side Aggregation
===========================================
Dashboard statistics, zone occupancy and operator filters computed
from a cached record snapshot.

Usage:
    from projections.premise import dashboard_stats, RecordFilter
    stats = dashboard_stats(controller.records(), clock.now_utc())
    rows = RecordFilter(search="tower", on_site=True).apply(records)
"""

from projections.premise.aggregation import (
    ZoneOccupancy,
    active_on_site_count,
    alert_count,
    avg_visit_duration,
    dashboard_stats,
    day_bounds,
    is_currently_present,
    safe_dashboard_stats,
    total_entries_today,
    zone_occupancy,
)
from projections.premise.filters import PersonFilter, RecordFilter

__all__ = [
    "ZoneOccupancy",
    "active_on_site_count",
    "alert_count",
    "avg_visit_duration",
    "dashboard_stats",
    "day_bounds",
    "is_currently_present",
    "safe_dashboard_stats",
    "total_entries_today",
    "zone_occupancy",
    "PersonFilter",
    "RecordFilter",
]
