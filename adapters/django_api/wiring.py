"""
Premise Django Adapter Wiring
=============================
Constructs HttpApiDependencies and polled views from Django settings.

This module is adapter-only glue: one DjangoRecordStore serves the
record, person and session protocols, and the briefing client is
built only when BRIEFING_API_URL is set.

Polled views run their refresh on a background thread, which holds its
own database connection. Each tick is bracketed by close_old_connections()
so a broken or expired connection is discarded before the next attempt,
and the thread closes its connections when the poll loop ends.
"""

from __future__ import annotations

import functools
import threading
from typing import Callable, Optional

from django.conf import settings
from django.db import close_old_connections, connections

from ai.briefing import DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS, BriefingClient
from core.access_store.adapter import DjangoRecordStore
from core.access_store.contracts import RecordStore
from core.http_api.dependencies import HttpApiDependencies
from core.sync.views import (
    DASHBOARD_POLL_INTERVAL_SECONDS,
    DASHBOARD_RECENT_LIMIT,
    LIVE_POLL_INTERVAL_SECONDS,
    LIVE_RECORD_LIMIT,
    DashboardView,
    LiveMonitoringView,
)
from core.time.access_window import DEFAULT_WINDOW_HOURS
from core.time.clock import get_default_clock

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def _build_briefing() -> BriefingClient | None:
    api_url = getattr(settings, "BRIEFING_API_URL", "")
    if not api_url:
        return None
    return BriefingClient(
        api_url,
        model=getattr(settings, "BRIEFING_MODEL", DEFAULT_MODEL),
        timeout_seconds=getattr(
            settings, "BRIEFING_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
        ),
    )


def _create_dependencies() -> HttpApiDependencies:
    store = DjangoRecordStore()
    return HttpApiDependencies(
        store=store,
        people=store,
        sessions=store,
        clock=get_default_clock(),
        briefing=_build_briefing(),
        window_hours=getattr(settings, "ACCESS_WINDOW_HOURS", DEFAULT_WINDOW_HOURS),
        dashboard_recent_limit=getattr(settings, "DASHBOARD_RECENT_LIMIT", 5),
    )


def build_dependencies() -> HttpApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop the cached wiring so the next request rebuilds it."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None


# ══════════════════════════════════════════════════════════════
# POLLED VIEWS
# ══════════════════════════════════════════════════════════════

def db_connection_tick(callback: Callable[[], object]) -> Callable[[], object]:
    """Wrap a poll tick so the polling thread never reuses a dead connection."""

    @functools.wraps(callback)
    def tick():
        close_old_connections()
        try:
            return callback()
        finally:
            close_old_connections()

    return tick


def close_poll_connections() -> None:
    """Close the calling thread's connections; used as the poller exit hook."""
    connections.close_all()


def build_live_monitoring_view(
    store: Optional[RecordStore] = None,
    **overrides,
) -> LiveMonitoringView:
    options = {
        "interval_seconds": getattr(
            settings, "LIVE_POLL_INTERVAL_SECONDS", LIVE_POLL_INTERVAL_SECONDS
        ),
        "limit": getattr(settings, "LIVE_RECORD_LIMIT", LIVE_RECORD_LIMIT),
        "window_hours": getattr(settings, "ACCESS_WINDOW_HOURS", DEFAULT_WINDOW_HOURS),
        "tick_wrapper": db_connection_tick,
        "on_poll_exit": close_poll_connections,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})
    return LiveMonitoringView(store or DjangoRecordStore(), **options)


def build_dashboard_view(
    store: Optional[RecordStore] = None,
    **overrides,
) -> DashboardView:
    options = {
        "interval_seconds": getattr(
            settings, "DASHBOARD_POLL_INTERVAL_SECONDS", DASHBOARD_POLL_INTERVAL_SECONDS
        ),
        "recent_limit": getattr(settings, "DASHBOARD_RECENT_LIMIT", DASHBOARD_RECENT_LIMIT),
        "window_hours": getattr(settings, "ACCESS_WINDOW_HOURS", DEFAULT_WINDOW_HOURS),
        "tick_wrapper": db_connection_tick,
        "on_poll_exit": close_poll_connections,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})
    return DashboardView(store or DjangoRecordStore(), **options)
