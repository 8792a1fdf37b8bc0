"""
Premise Access Store - Contracts
================================
Query and guard shapes plus the store protocols the engines depend on.
Free of Django imports so pure logic can be tested against stub stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, FrozenSet, List, Optional, Protocol

from core.primitives.access import (
    AccessRecord,
    AccessState,
    AccessStatus,
    Person,
    PersonRole,
    PreRegistration,
    Session,
)


# ══════════════════════════════════════════════════════════════
# QUERY / GUARD CONTRACTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RecordQuery:
    """
    Filtered read over access records, newest entry first.

    since:          entry_time >= since (None = unbounded)
    include_open:   with since, also keep older records still open
    open_only:      only records whose exit_time is not set
    statuses:       restrict to these statuses
    exclude_statuses: drop these statuses
    search:         subject name or location name contains (case-insensitive)
    location_name:  location name contains (case-insensitive)
    role:           subject role equals
    on_site:        only Granted records whose exit_time is not set

    Every criterion is applied by the store before limit.
    """

    limit: Optional[int] = None
    since: Optional[datetime] = None
    include_open: bool = False
    open_only: bool = False
    statuses: FrozenSet[AccessStatus] = field(default_factory=frozenset)
    exclude_statuses: FrozenSet[AccessStatus] = field(default_factory=frozenset)
    subject_id: Optional[str] = None
    location_id: Optional[str] = None
    search: str = ""
    location_name: str = ""
    role: Optional[PersonRole] = None
    on_site: bool = False

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit <= 0:
            raise ValueError("limit must be positive when set.")
        if self.since is not None and self.since.tzinfo is None:
            raise ValueError("since must be timezone-aware.")


@dataclass(frozen=True)
class Guard:
    """Precondition evaluated by the store inside the UPDATE statement."""

    allowed_statuses: FrozenSet[AccessStatus]
    require_open: bool = False

    def __post_init__(self) -> None:
        if not self.allowed_statuses:
            raise ValueError("Guard must allow at least one status.")


class RecordStore(Protocol):
    """Record operations the lifecycle engine and controller depend on."""

    def list_access_records(self, query: RecordQuery) -> List[AccessRecord]: ...

    def get_access_record(self, record_id: str) -> AccessRecord: ...

    def record_exists(self, record_id: str) -> bool: ...

    def conditional_update(
        self,
        record_id: str,
        guard: Guard,
        *,
        set_status: Optional[AccessStatus] = None,
        shift_entry_by: Optional[timedelta] = None,
        close_at: Optional[datetime] = None,
    ) -> int: ...

    def create_access_record(
        self,
        subject_id: str,
        location_id: str,
        status: AccessStatus,
        entry_time: datetime,
        purpose: str = "",
        vehicle_plate: str = "",
    ) -> AccessRecord: ...


class PersonStore(Protocol):
    """Registry operations used by the roster engine."""

    def list_people(self) -> List[Person]: ...

    def get_person(self, person_id: str) -> Person: ...

    def create_person(
        self,
        display_name: str,
        role: PersonRole,
        company: str = "",
        phone: str = "",
        email: str = "",
        avatar_url: str = "",
    ) -> Person: ...

    def set_person_access_state(
        self,
        person_id: str,
        state: AccessState,
        reason: Optional[str] = None,
    ) -> Person: ...


class SessionStore(Protocol):
    """Scheduling operations used by the roster engine."""

    def list_sessions(self, limit: Optional[int] = None) -> List[Session]: ...

    def create_session(
        self,
        host_id: str,
        event_name: str,
        venue: str,
        session_date: str,
        participants: str = "",
        qr_payload_factory: Optional[Callable[[Session], str]] = None,
    ) -> Session:
        """Insert a session and its QR payload in one transaction."""
        ...

    def list_pre_registrations(self, session_id: str) -> List[PreRegistration]: ...
