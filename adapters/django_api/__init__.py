"""
Premise Django HTTP adapter.
Thin framework glue over core/http_api handlers and core/sync views.
"""

from adapters.django_api.wiring import (
    build_dashboard_view,
    build_dependencies,
    build_live_monitoring_view,
    close_poll_connections,
    db_connection_tick,
    reset_dependencies,
)

__all__ = [
    "build_dependencies",
    "reset_dependencies",
    "build_live_monitoring_view",
    "build_dashboard_view",
    "db_connection_tick",
    "close_poll_connections",
]
