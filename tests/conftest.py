"""
Shared fixtures: an in-memory record store and a pinned clock.

The in-memory store honours the same contract as DjangoRecordStore:
guards are evaluated inside conditional_update, the subject join is
re-done on every read, and unavailable=True makes every call raise
StoreUnavailable.
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from core.access_store.contracts import Guard, RecordQuery
from core.access_store.errors import NotFound, StoreUnavailable
from core.primitives.access import (
    AccessRecord,
    AccessState,
    AccessStatus,
    Person,
    PersonRole,
    PreRegistration,
    Session,
)
from core.time.clock import FixedClock

PINNED_NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


class InMemoryRecordStore:
    def __init__(self) -> None:
        self.records: Dict[str, AccessRecord] = {}
        self.people: Dict[str, Person] = {}
        self.locations: Dict[str, str] = {}
        self.sessions: Dict[str, Session] = {}
        self.registrations: List[PreRegistration] = []
        self.unavailable = False
        self.list_calls = 0
        self.update_calls = 0
        self._ids = itertools.count(1)

    def _check(self) -> None:
        if self.unavailable:
            raise StoreUnavailable("Record store unavailable (test).")

    def _next_id(self) -> str:
        return str(next(self._ids))

    def _joined(self, record: AccessRecord) -> AccessRecord:
        location_name = self.locations.get(record.location_id, record.location_name)
        person = self.people.get(record.subject_id)
        if person is None:
            return replace(record, location_name=location_name)
        return replace(
            record,
            location_name=location_name,
            subject_name=person.display_name,
            subject_role=person.role,
            subject_company=person.company,
            subject_avatar_url=person.avatar_url,
            subject_access_state=person.access_state,
        )

    # ── seeding helpers ───────────────────────────────────────

    def add_person(self, name: str, role: PersonRole = PersonRole.VISITOR, *,
                   company: str = "",
                   access_state: AccessState = AccessState.ACTIVE) -> Person:
        person = Person(
            person_id=self._next_id(), display_name=name, role=role,
            company=company, access_state=access_state,
        )
        self.people[person.person_id] = person
        return person

    def add_location(self, name: str) -> str:
        location_id = self._next_id()
        self.locations[location_id] = name
        return location_id

    def add_record(self, *, entry_time: datetime,
                   status: AccessStatus = AccessStatus.GRANTED,
                   subject_id: str = "0", location_id: str = "0",
                   exit_time: Optional[datetime] = None, **extra) -> AccessRecord:
        record = AccessRecord(
            record_id=self._next_id(), subject_id=subject_id,
            location_id=location_id, entry_time=entry_time,
            exit_time=exit_time, status=status, **extra,
        )
        self.records[record.record_id] = record
        return self._joined(record)

    def put(self, record: AccessRecord) -> None:
        """Overwrite a row as another operator's write would."""
        self.records[record.record_id] = record

    # ── RecordStore ───────────────────────────────────────────

    def list_access_records(self, query: Optional[RecordQuery] = None) -> List[AccessRecord]:
        self._check()
        self.list_calls += 1
        query = query or RecordQuery()
        rows = [self._joined(r) for r in self.records.values()]
        if query.since is not None:
            rows = [
                r for r in rows
                if r.entry_time >= query.since
                or (query.include_open and r.exit_time is None)
            ]
        if query.open_only:
            rows = [r for r in rows if r.exit_time is None]
        if query.statuses:
            rows = [r for r in rows if r.status in query.statuses]
        if query.exclude_statuses:
            rows = [r for r in rows if r.status not in query.exclude_statuses]
        if query.subject_id is not None:
            rows = [r for r in rows if r.subject_id == query.subject_id]
        if query.location_id is not None:
            rows = [r for r in rows if r.location_id == query.location_id]
        if query.search:
            needle = query.search.casefold()
            rows = [
                r for r in rows
                if needle in r.subject_name.casefold()
                or needle in r.location_name.casefold()
            ]
        if query.location_name:
            rows = [r for r in rows
                    if query.location_name.casefold() in r.location_name.casefold()]
        if query.role is not None:
            rows = [r for r in rows if r.subject_role == query.role]
        if query.on_site:
            rows = [r for r in rows
                    if r.status == AccessStatus.GRANTED and r.exit_time is None]
        rows.sort(key=lambda r: (r.entry_time, int(r.record_id)), reverse=True)
        if query.limit is not None:
            rows = rows[: query.limit]
        return rows

    def get_access_record(self, record_id: str) -> AccessRecord:
        self._check()
        if record_id not in self.records:
            raise NotFound("AccessRecord", record_id)
        return self._joined(self.records[record_id])

    def record_exists(self, record_id: str) -> bool:
        self._check()
        return record_id in self.records

    def conditional_update(self, record_id: str, guard: Guard, *,
                           set_status=None, shift_entry_by: Optional[timedelta] = None,
                           close_at: Optional[datetime] = None) -> int:
        self._check()
        self.update_calls += 1
        current = self.records.get(record_id)
        if current is None or current.status not in guard.allowed_statuses:
            return 0
        if guard.require_open and current.exit_time is not None:
            return 0
        entry = current.entry_time
        changes = {}
        if set_status is not None:
            changes["status"] = set_status
        if shift_entry_by is not None:
            entry = entry + shift_entry_by
            changes["entry_time"] = entry
        if close_at is not None:
            changes["exit_time"] = max(close_at, entry)
        self.records[record_id] = replace(current, **changes)
        return 1

    def create_access_record(self, subject_id: str, location_id: str,
                             status: AccessStatus, entry_time: datetime,
                             purpose: str = "", vehicle_plate: str = "") -> AccessRecord:
        self._check()
        if subject_id not in self.people:
            raise NotFound("Person", subject_id)
        if location_id not in self.locations:
            raise NotFound("Location", location_id)
        return self.add_record(
            subject_id=subject_id, location_id=location_id, status=status,
            entry_time=entry_time, purpose=purpose, vehicle_plate=vehicle_plate,
        )

    # ── PersonStore ───────────────────────────────────────────

    def list_people(self) -> List[Person]:
        self._check()
        return sorted(self.people.values(), key=lambda p: p.display_name)

    def get_person(self, person_id: str) -> Person:
        self._check()
        if person_id not in self.people:
            raise NotFound("Person", person_id)
        return self.people[person_id]

    def create_person(self, display_name: str, role: PersonRole, company: str = "",
                      phone: str = "", email: str = "", avatar_url: str = "") -> Person:
        self._check()
        person = Person(
            person_id=self._next_id(), display_name=display_name, role=role,
            company=company, phone=phone, email=email, avatar_url=avatar_url,
        )
        self.people[person.person_id] = person
        return person

    def set_person_access_state(self, person_id: str, state: AccessState,
                                reason: Optional[str] = None) -> Person:
        person = self.get_person(person_id)
        updated = replace(
            person, access_state=state,
            blacklist_reason=reason if state == AccessState.BLACKLISTED else None,
        )
        self.people[person_id] = updated
        return updated

    # ── SessionStore ──────────────────────────────────────────

    def list_sessions(self, limit: Optional[int] = None) -> List[Session]:
        self._check()
        rows = list(reversed(list(self.sessions.values())))
        return rows if limit is None else rows[:limit]

    def create_session(self, host_id: str, event_name: str, venue: str,
                       session_date: str, participants: str = "",
                       qr_payload_factory=None) -> Session:
        self._check()
        if host_id not in self.people:
            raise NotFound("Person", host_id)
        session = Session(
            session_id=self._next_id(), host_id=host_id, event_name=event_name,
            venue=venue, session_date=session_date, participants=participants,
        )
        if qr_payload_factory is not None:
            session = replace(session, qr_payload=qr_payload_factory(session))
        self.sessions[session.session_id] = session
        return session

    def list_pre_registrations(self, session_id: str) -> List[PreRegistration]:
        self._check()
        return [r for r in self.registrations if r.session_id == session_id]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(PINNED_NOW)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()
