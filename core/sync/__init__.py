"""
Premise Core Sync — Public API
==============================
Consistency controller, poll timers and the views that own them.
"""

from core.sync.controller import ConsistencyController
from core.sync.poller import Poller
from core.sync.views import (
    DASHBOARD_POLL_INTERVAL_SECONDS,
    DASHBOARD_RECENT_LIMIT,
    LIVE_POLL_INTERVAL_SECONDS,
    LIVE_RECORD_LIMIT,
    DashboardView,
    LiveMonitoringView,
    LiveRow,
)

__all__ = [
    "ConsistencyController",
    "Poller",
    "DashboardView",
    "LiveMonitoringView",
    "LiveRow",
    "LIVE_POLL_INTERVAL_SECONDS",
    "DASHBOARD_POLL_INTERVAL_SECONDS",
    "LIVE_RECORD_LIMIT",
    "DASHBOARD_RECENT_LIMIT",
]
