"""
Premise Core Primitives — Canonical Domain Shapes
===================================================
Engine-agnostic building blocks shared by the store adapter,
lifecycle engine, controller and projections. They are:

- Pure Python (no Django dependency)
- Immutable (frozen dataclasses)
- Validated at construction

Primitives:
    access — AccessRecord, Person, Location, Session, PreRegistration,
             DashboardStats and their enums
"""

from core.primitives.access import (
    CLOSED_WINDOW_STATUSES,
    TERMINAL_STATUSES,
    AccessRecord,
    AccessState,
    AccessStatus,
    DashboardStats,
    Location,
    Person,
    PersonRole,
    PreRegistration,
    Session,
    is_suspicious,
)

__all__ = [
    "AccessRecord",
    "AccessState",
    "AccessStatus",
    "CLOSED_WINDOW_STATUSES",
    "DashboardStats",
    "Location",
    "Person",
    "PersonRole",
    "PreRegistration",
    "Session",
    "TERMINAL_STATUSES",
    "is_suspicious",
]
