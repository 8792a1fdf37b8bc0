"""
Tests — Roster engine (registry standing and hosted sessions)
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from core.commands.rejection import ReasonCode
from core.primitives.access import AccessState, AccessStatus, PersonRole
from engines.roster.events import ROSTER_PERSON_BLACKLIST, build_session_qr_payload
from engines.roster.services import RosterService

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def roster(memory_store, clock):
    return RosterService(people=memory_store, sessions=memory_store, clock=clock)


class TestRegister:
    def test_register_person(self, roster, memory_store):
        outcome = roster.register_person(
            "  Daniel Tan ", PersonRole.CONTRACTOR, company="BuildCo",
            email="daniel@buildco.example",
        )
        assert outcome.is_accepted
        person = outcome.result
        assert person.display_name == "Daniel Tan"
        assert person.role == PersonRole.CONTRACTOR
        assert person.access_state == AccessState.ACTIVE
        assert memory_store.people[person.person_id] == person

    def test_register_requires_name(self, roster):
        outcome = roster.register_person("   ")
        assert outcome.reason.code == ReasonCode.VALIDATION_FAILED

    def test_register_rejects_bad_email(self, roster):
        outcome = roster.register_person("Daniel", email="not-an-email")
        assert outcome.reason.code == ReasonCode.VALIDATION_FAILED


class TestStanding:
    def test_blacklist_requires_reason(self, roster, memory_store):
        person = memory_store.add_person("Ravi")
        outcome = roster.blacklist_person(person.person_id, "")
        assert outcome.is_rejected
        assert outcome.operation == ROSTER_PERSON_BLACKLIST
        assert not memory_store.people[person.person_id].is_blacklisted

    def test_blacklist_and_reinstate(self, roster, memory_store):
        person = memory_store.add_person("Ravi")
        banned = roster.blacklist_person(person.person_id, " Forged pass ")
        assert banned.result.is_blacklisted
        assert banned.result.blacklist_reason == "Forged pass"

        restored = roster.reinstate_person(person.person_id)
        assert not restored.result.is_blacklisted
        assert restored.result.blacklist_reason is None

    def test_unknown_person(self, roster):
        assert roster.reinstate_person("404").reason.code == ReasonCode.NOT_FOUND

    def test_toggle_blacklist(self, roster, memory_store):
        person = memory_store.add_person("Ravi")
        first = roster.toggle_blacklist(person, "Tailgating")
        assert first.result.is_blacklisted
        second = roster.toggle_blacklist(first.result)
        assert not second.result.is_blacklisted

    def test_blacklist_leaves_record_status_alone(self, roster, memory_store):
        person = memory_store.add_person("Ravi")
        record = memory_store.add_record(
            subject_id=person.person_id, entry_time=NOW - timedelta(hours=1),
        )
        assert not record.is_suspicious

        roster.blacklist_person(person.person_id, "Tailgating")
        reread = memory_store.get_access_record(record.record_id)
        assert reread.status == AccessStatus.GRANTED
        assert reread.is_suspicious


class TestSessions:
    def test_qr_payload_shape(self):
        payload = json.loads(build_session_qr_payload("9", "Audit", "Hall 2", "2026-03-04"))
        assert payload == {
            "sessionId": "9", "eventName": "Audit",
            "venue": "Hall 2", "date": "2026-03-04",
        }

    def test_create_session_embeds_assigned_id(self, roster, memory_store):
        host = memory_store.add_person("Host Person", PersonRole.HOST)
        outcome = roster.create_session(host.person_id, "Audit", "Hall 2", "2026-03-04")
        assert outcome.is_accepted
        session = outcome.result
        assert json.loads(session.qr_payload)["sessionId"] == session.session_id
        assert roster.list_sessions() == [session]

    def test_create_session_unknown_host(self, roster):
        outcome = roster.create_session("404", "Audit", "Hall 2", "2026-03-04")
        assert outcome.reason.code == ReasonCode.NOT_FOUND

    def test_create_session_requires_venue(self, roster, memory_store):
        host = memory_store.add_person("Host Person", PersonRole.HOST)
        outcome = roster.create_session(host.person_id, "Audit", "", "2026-03-04")
        assert outcome.reason.code == ReasonCode.VALIDATION_FAILED

    def test_sessions_need_session_store(self, memory_store, clock):
        roster = RosterService(people=memory_store, clock=clock)
        with pytest.raises(RuntimeError):
            roster.list_sessions()
