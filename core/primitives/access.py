"""
Premise Access Primitives — Records, People, Locations, Sessions
==================================================================
Canonical shapes the engine works with. The record store's native
column names never leak past the store adapter; everything above it
speaks in these types.

RULES:
- All timestamps are timezone-aware UTC datetimes
- An AccessRecord's exit_time, when present, is >= entry_time
- is_suspicious is derived at read time, never stored
- Person.access_state is orthogonal to any record's status

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class AccessStatus(Enum):
    """Lifecycle status of one access record (values match the store)."""
    GRANTED = "Granted"
    CHECKED_OUT = "Checked Out"
    DENIED = "Denied"
    PENDING = "Pending"
    REVOKED = "Revoked"


class PersonRole(Enum):
    STAFF = "Staff"
    VISITOR = "Visitor"
    CONTRACTOR = "Contractor"
    VIP = "VIP"
    TRANSIENT = "Transient"
    DELIVERY = "Delivery"
    HOST = "Host"


class AccessState(Enum):
    """Registry-level standing of a person."""
    ACTIVE = "Active"
    BLACKLISTED = "Blacklisted"


TERMINAL_STATUSES = frozenset({AccessStatus.CHECKED_OUT})
CLOSED_WINDOW_STATUSES = frozenset({AccessStatus.REVOKED, AccessStatus.DENIED})


def _require_aware(value: Optional[datetime], field_name: str) -> None:
    if value is not None and value.tzinfo is None:
        raise ValueError(f"{field_name} must be timezone-aware.")


# ══════════════════════════════════════════════════════════════
# ACCESS RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AccessRecord:
    """
    One physical presence event.

    Fields:
        record_id:    Store-assigned identifier.
        subject_id:   Person the record belongs to.
        location_id:  Zone the entry applies to.
        entry_time:   Instant access began (moved forward only by extend).
        exit_time:    Instant access ended; presence closes the record.
        status:       Current lifecycle status.

    The subject_* fields are a read-time join of the owning Person and
    reflect the registry as of the fetch that produced this record.
    """

    record_id: str
    subject_id: str
    location_id: str
    entry_time: datetime
    status: AccessStatus
    location_name: str = ""
    exit_time: Optional[datetime] = None
    purpose: str = ""
    vehicle_plate: str = ""
    subject_name: str = ""
    subject_role: PersonRole = PersonRole.VISITOR
    subject_company: str = ""
    subject_avatar_url: str = ""
    subject_access_state: AccessState = AccessState.ACTIVE

    def __post_init__(self) -> None:
        if not self.record_id:
            raise ValueError("record_id must be non-empty.")
        if not isinstance(self.status, AccessStatus):
            raise ValueError(
                f"status must be AccessStatus, got {type(self.status).__name__}."
            )
        _require_aware(self.entry_time, "entry_time")
        _require_aware(self.exit_time, "exit_time")
        if self.exit_time is not None and self.exit_time < self.entry_time:
            raise ValueError(
                f"exit_time ({self.exit_time}) must be >= entry_time ({self.entry_time})."
            )

    @property
    def is_closed(self) -> bool:
        return self.exit_time is not None

    @property
    def is_suspicious(self) -> bool:
        return (
            self.status == AccessStatus.DENIED
            or self.subject_access_state == AccessState.BLACKLISTED
        )

    def visit_duration(self) -> Optional[timedelta]:
        if self.exit_time is None:
            return None
        return self.exit_time - self.entry_time


def is_suspicious(record: AccessRecord, person: Optional["Person"] = None) -> bool:
    """
    Suspicion against the freshest known registry state.

    When a Person is supplied its current access_state wins over the
    snapshot joined onto the record.
    """
    if record.status == AccessStatus.DENIED:
        return True
    state = person.access_state if person is not None else record.subject_access_state
    return state == AccessState.BLACKLISTED


# ══════════════════════════════════════════════════════════════
# PERSON / LOCATION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Person:
    """A registered identity, independent of any single visit."""

    person_id: str
    display_name: str
    role: PersonRole
    company: str = ""
    phone: str = ""
    email: str = ""
    avatar_url: str = ""
    access_state: AccessState = AccessState.ACTIVE
    blacklist_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.person_id:
            raise ValueError("person_id must be non-empty.")
        if not isinstance(self.role, PersonRole):
            raise ValueError("role must be PersonRole.")
        if not isinstance(self.access_state, AccessState):
            raise ValueError("access_state must be AccessState.")

    @property
    def is_blacklisted(self) -> bool:
        return self.access_state == AccessState.BLACKLISTED


@dataclass(frozen=True)
class Location:
    location_id: str
    name: str
    zone_code: str = ""


# ══════════════════════════════════════════════════════════════
# SESSIONS (scheduling only)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Session:
    """A hosted event with a pre-registration QR payload."""

    session_id: str
    host_id: str
    event_name: str
    venue: str
    session_date: str
    participants: str = ""
    qr_payload: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PreRegistration:
    registration_id: str
    session_id: str
    name: str
    email: str = ""
    phone: str = ""
    registered_at: Optional[datetime] = None


# ══════════════════════════════════════════════════════════════
# DERIVED STATS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DashboardStats:
    """Premise-wide statistics; recomputed on demand, never persisted."""

    total_entries_today: int
    active_on_site_count: int
    alert_count: int
    avg_visit_duration: Optional[timedelta] = None

    @classmethod
    def zeroed(cls) -> "DashboardStats":
        return cls(
            total_entries_today=0,
            active_on_site_count=0,
            alert_count=0,
            avg_visit_duration=None,
        )
