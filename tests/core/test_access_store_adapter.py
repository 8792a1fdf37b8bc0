"""
Tests — DjangoRecordStore against the test database
====================================================
Conditional updates are checked through their affected-row counts, the
same signal the lifecycle service relies on.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from django.db import DatabaseError

from core.access_store.adapter import DjangoRecordStore, _store_call
from core.access_store.contracts import Guard, RecordQuery
from core.access_store.errors import NotFound, StoreUnavailable, ValidationFailed
from core.access_store.models import (
    StoredAccessLog,
    StoredPreRegistration,
    StoredSession,
    StoredUser,
)
from core.primitives.access import AccessState, AccessStatus, PersonRole

pytestmark = pytest.mark.django_db(transaction=True)

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
GRANTED_OPEN = Guard(frozenset({AccessStatus.GRANTED}), require_open=True)


@pytest.fixture
def store():
    return DjangoRecordStore()


@pytest.fixture
def seeded(store):
    staff = store.create_person("Hafiz", PersonRole.STAFF, company="Premise Ops")
    visitor = store.create_person("Lim Wei", PersonRole.VISITOR)
    lobby = store.create_location("Lobby", "L1")
    return staff, visitor, lobby


def _grant(store, person, location, entry, status=AccessStatus.GRANTED):
    return store.create_access_record(
        person.person_id, location.location_id, status, entry,
    )


class TestReads:
    def test_create_and_get(self, store, seeded):
        staff, _, lobby = seeded
        created = _grant(store, staff, lobby, T0)
        fetched = store.get_access_record(created.record_id)
        assert fetched == created
        assert fetched.subject_name == "Hafiz"
        assert fetched.subject_role == PersonRole.STAFF
        assert fetched.location_name == "Lobby"
        assert fetched.entry_time == T0

    def test_newest_entry_first_with_limit(self, store, seeded):
        staff, visitor, lobby = seeded
        _grant(store, staff, lobby, T0)
        newest = _grant(store, visitor, lobby, T0 + timedelta(hours=2))
        _grant(store, visitor, lobby, T0 + timedelta(hours=1))
        records = store.list_access_records(RecordQuery(limit=2))
        assert [r.entry_time for r in records] == [
            T0 + timedelta(hours=2), T0 + timedelta(hours=1),
        ]
        assert records[0].record_id == newest.record_id

    def test_since_with_include_open(self, store, seeded):
        staff, visitor, lobby = seeded
        yesterday_open = _grant(store, staff, lobby, T0 - timedelta(days=1))
        yesterday_closed = _grant(store, visitor, lobby, T0 - timedelta(days=1))
        store.conditional_update(
            yesterday_closed.record_id,
            Guard(frozenset({AccessStatus.GRANTED})),
            set_status=AccessStatus.CHECKED_OUT,
            close_at=T0 - timedelta(hours=20),
        )
        today = _grant(store, visitor, lobby, T0)

        ids = {r.record_id for r in store.list_access_records(
            RecordQuery(since=T0.replace(hour=0), include_open=True)
        )}
        assert ids == {yesterday_open.record_id, today.record_id}

        ids = {r.record_id for r in store.list_access_records(
            RecordQuery(since=T0.replace(hour=0))
        )}
        assert ids == {today.record_id}

    def test_status_filters(self, store, seeded):
        staff, visitor, lobby = seeded
        _grant(store, staff, lobby, T0)
        denied = _grant(store, visitor, lobby, T0, status=AccessStatus.DENIED)
        only_denied = store.list_access_records(
            RecordQuery(statuses=frozenset({AccessStatus.DENIED}))
        )
        assert [r.record_id for r in only_denied] == [denied.record_id]
        without_denied = store.list_access_records(
            RecordQuery(exclude_statuses=frozenset({AccessStatus.DENIED}))
        )
        assert denied.record_id not in {r.record_id for r in without_denied}

    def test_text_filters_apply_before_limit(self, store, seeded):
        staff, visitor, lobby = seeded
        dock = store.create_location("Loading Dock", "D1")
        older = _grant(store, staff, dock, T0)
        for i in range(1, 4):
            _grant(store, visitor, lobby, T0 + timedelta(hours=i))

        by_search = store.list_access_records(RecordQuery(limit=1, search="DOCK"))
        assert [r.record_id for r in by_search] == [older.record_id]
        by_name = store.list_access_records(RecordQuery(limit=1, search="hafiz"))
        assert [r.record_id for r in by_name] == [older.record_id]
        by_location = store.list_access_records(RecordQuery(limit=1, location_name="dock"))
        assert [r.record_id for r in by_location] == [older.record_id]
        by_role = store.list_access_records(RecordQuery(limit=1, role=PersonRole.STAFF))
        assert [r.record_id for r in by_role] == [older.record_id]

    def test_unknown_user_type_matches_visitor_role(self, store, seeded):
        staff, _, lobby = seeded
        record = _grant(store, staff, lobby, T0)
        StoredUser.objects.filter(pk=int(staff.person_id)).update(user_type="Vendor")
        visitors = store.list_access_records(RecordQuery(role=PersonRole.VISITOR))
        assert [r.record_id for r in visitors] == [record.record_id]
        assert visitors[0].subject_role == PersonRole.VISITOR

    def test_on_site_before_limit_and_checked_in_alias(self, store, seeded):
        staff, visitor, lobby = seeded
        on_site = _grant(store, staff, lobby, T0)
        StoredAccessLog.objects.filter(pk=int(on_site.record_id)).update(
            access_status="Checked In"
        )
        for i in range(1, 3):
            _grant(store, visitor, lobby, T0 + timedelta(hours=i), status=AccessStatus.DENIED)
        left = _grant(store, visitor, lobby, T0 + timedelta(hours=3))
        store.conditional_update(
            left.record_id, GRANTED_OPEN,
            set_status=AccessStatus.CHECKED_OUT, close_at=T0 + timedelta(hours=4),
        )

        rows = store.list_access_records(RecordQuery(limit=1, on_site=True))
        assert [r.record_id for r in rows] == [on_site.record_id]
        assert rows[0].status == AccessStatus.GRANTED
        granted = store.list_access_records(
            RecordQuery(limit=1, statuses=frozenset({AccessStatus.GRANTED}))
        )
        assert [r.record_id for r in granted] == [on_site.record_id]

    def test_missing_record(self, store):
        with pytest.raises(NotFound):
            store.get_access_record("999")
        assert store.record_exists("999") is False

    def test_non_numeric_id_is_validation_failure(self, store):
        with pytest.raises(ValidationFailed):
            store.get_access_record("abc")


class TestConditionalUpdate:
    def test_guard_holds(self, store, seeded):
        staff, _, lobby = seeded
        r = _grant(store, staff, lobby, T0)
        affected = store.conditional_update(
            r.record_id, Guard(frozenset({AccessStatus.GRANTED})),
            set_status=AccessStatus.REVOKED,
        )
        assert affected == 1
        assert store.get_access_record(r.record_id).status == AccessStatus.REVOKED

    def test_guard_fails_returns_zero(self, store, seeded):
        staff, _, lobby = seeded
        r = _grant(store, staff, lobby, T0, status=AccessStatus.DENIED)
        affected = store.conditional_update(
            r.record_id, GRANTED_OPEN, shift_entry_by=timedelta(hours=2),
        )
        assert affected == 0
        assert store.get_access_record(r.record_id).entry_time == T0

    def test_shift_entry(self, store, seeded):
        staff, _, lobby = seeded
        r = _grant(store, staff, lobby, T0)
        assert store.conditional_update(
            r.record_id, GRANTED_OPEN, shift_entry_by=timedelta(hours=2, minutes=30),
        ) == 1
        assert store.get_access_record(r.record_id).entry_time == T0 + timedelta(
            hours=2, minutes=30
        )

    def test_close_at_sets_exit(self, store, seeded):
        staff, _, lobby = seeded
        r = _grant(store, staff, lobby, T0)
        closed_at = T0 + timedelta(hours=3)
        assert store.conditional_update(
            r.record_id, GRANTED_OPEN,
            set_status=AccessStatus.CHECKED_OUT, close_at=closed_at,
        ) == 1
        after = store.get_access_record(r.record_id)
        assert after.status == AccessStatus.CHECKED_OUT
        assert after.exit_time == closed_at

    def test_close_before_entry_clamps_to_entry(self, store, seeded):
        staff, _, lobby = seeded
        r = _grant(store, staff, lobby, T0)
        assert store.conditional_update(
            r.record_id, GRANTED_OPEN,
            set_status=AccessStatus.CHECKED_OUT, close_at=T0 - timedelta(hours=1),
        ) == 1
        assert store.get_access_record(r.record_id).exit_time == T0

    def test_require_open_blocks_closed_rows(self, store, seeded):
        staff, _, lobby = seeded
        r = _grant(store, staff, lobby, T0)
        store.conditional_update(
            r.record_id, GRANTED_OPEN, set_status=AccessStatus.CHECKED_OUT,
            close_at=T0 + timedelta(hours=1),
        )
        guard = Guard(frozenset(AccessStatus), require_open=True)
        assert store.conditional_update(
            r.record_id, guard, set_status=AccessStatus.GRANTED,
        ) == 0

    def test_missing_row_is_zero(self, store):
        assert store.conditional_update(
            "404", GRANTED_OPEN, set_status=AccessStatus.REVOKED,
        ) == 0

    def test_no_mutation_rejected(self, store):
        with pytest.raises(ValidationFailed):
            store.conditional_update("1", GRANTED_OPEN)


class TestCreateAccessRecord:
    def test_unknown_person(self, store, seeded):
        _, _, lobby = seeded
        with pytest.raises(NotFound, match="Person"):
            store.create_access_record("999", lobby.location_id, AccessStatus.GRANTED, T0)

    def test_unknown_location(self, store, seeded):
        staff, _, _ = seeded
        with pytest.raises(NotFound, match="Location"):
            store.create_access_record(staff.person_id, "999", AccessStatus.GRANTED, T0)


class TestPeople:
    def test_blacklist_and_reinstate(self, store, seeded):
        _, visitor, lobby = seeded
        record = _grant(store, visitor, lobby, T0)
        assert not record.is_suspicious

        banned = store.set_person_access_state(
            visitor.person_id, AccessState.BLACKLISTED, "Tailgating",
        )
        assert banned.is_blacklisted
        assert banned.blacklist_reason == "Tailgating"
        assert store.get_access_record(record.record_id).is_suspicious
        assert store.get_access_record(record.record_id).status == AccessStatus.GRANTED

        restored = store.set_person_access_state(visitor.person_id, AccessState.ACTIVE, "x")
        assert not restored.is_blacklisted
        assert restored.blacklist_reason is None

    def test_unknown_person_state_change(self, store):
        with pytest.raises(NotFound):
            store.set_person_access_state("999", AccessState.ACTIVE)

    def test_list_people_and_locations(self, store, seeded):
        assert {p.display_name for p in store.list_people()} == {"Hafiz", "Lim Wei"}
        assert [loc.name for loc in store.list_locations()] == ["Lobby"]


class TestSessions:
    def test_create_with_qr_payload(self, store, seeded):
        staff, _, _ = seeded
        session = store.create_session(
            staff.person_id, "Audit", "Hall 2", "2026-03-04",
            qr_payload_factory=lambda s: f"session:{s.session_id}",
        )
        assert session.qr_payload == f"session:{session.session_id}"
        listed = store.list_sessions()
        assert [s.session_id for s in listed] == [session.session_id]
        assert listed[0].qr_payload == session.qr_payload

    def test_unknown_host(self, store):
        with pytest.raises(NotFound):
            store.create_session("999", "Audit", "Hall 2", "2026-03-04")

    def test_failed_payload_write_leaves_no_session(self, store, seeded):
        staff, _, _ = seeded

        def failing_payload(session):
            raise DatabaseError("disk full")

        with pytest.raises(StoreUnavailable):
            store.create_session(
                staff.person_id, "Audit", "Hall 2", "2026-03-04",
                qr_payload_factory=failing_payload,
            )
        assert StoredSession.objects.count() == 0

    def test_failed_payload_build_leaves_no_session(self, store, seeded):
        staff, _, _ = seeded

        def broken_payload(session):
            raise RuntimeError("encoder crashed")

        with pytest.raises(RuntimeError):
            store.create_session(
                staff.person_id, "Audit", "Hall 2", "2026-03-04",
                qr_payload_factory=broken_payload,
            )
        assert store.list_sessions() == []

    def test_pre_registrations(self, store, seeded):
        staff, _, _ = seeded
        session = store.create_session(staff.person_id, "Audit", "Hall 2", "2026-03-04")
        StoredPreRegistration.objects.create(
            session_id=int(session.session_id), user_name="Guest One",
            user_email="g1@example.com",
        )
        regs = store.list_pre_registrations(session.session_id)
        assert [r.name for r in regs] == ["Guest One"]
        assert regs[0].session_id == session.session_id


class TestFailureTranslation:
    def test_database_error_becomes_store_unavailable(self):
        with pytest.raises(StoreUnavailable):
            with _store_call("list_access_records"):
                raise DatabaseError("connection refused")

    def test_check_connection(self, store):
        assert store.check_connection() is True
