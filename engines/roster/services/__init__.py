"""
Premise Roster Engine — Service
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from core.access_store.contracts import PersonStore, SessionStore
from core.access_store.errors import AccessStoreError
from core.commands.outcomes import OperationOutcome
from core.primitives.access import AccessState, Person, PersonRole, PreRegistration, Session
from core.time.clock import Clock, get_default_clock
from engines.roster.commands import (
    BlacklistPersonRequest, CreateSessionRequest,
    RegisterPersonRequest, ReinstatePersonRequest,
)
from engines.roster.events import (
    ROSTER_PERSON_BLACKLIST, ROSTER_PERSON_REGISTER,
    ROSTER_PERSON_REINSTATE, ROSTER_SESSION_CREATE,
    build_session_qr_payload,
)

logger = logging.getLogger("premise.access.roster")


class RosterService:
    """
    Registry and scheduling operations.

    Blacklisting changes Person.access_state only; it never rewrites the
    status of existing access records. Suspicion flags pick the change
    up on the next read.
    """

    def __init__(self, *, people: PersonStore, sessions: Optional[SessionStore] = None,
                 clock: Optional[Clock] = None):
        self._people = people
        self._sessions = sessions
        self._clock = clock

    @property
    def clock(self) -> Clock:
        return self._clock or get_default_clock()

    def _run(self, operation: str, target_id: str,
             action: Callable[[], object]) -> OperationOutcome:
        try:
            result = action()
        except AccessStoreError as exc:
            logger.info(f"{operation} on '{target_id}' rejected: {exc.message}")
            return OperationOutcome.rejected(
                operation, target_id, self.clock.now_utc(),
                exc.to_rejection(operation),
            )
        logger.info(f"{operation} on '{target_id}' accepted.")
        return OperationOutcome.accepted(
            operation, target_id, self.clock.now_utc(), result,
        )

    # ── people ────────────────────────────────────────────────

    def list_people(self) -> List[Person]:
        return self._people.list_people()

    def register_person(self, display_name: str,
                        role: PersonRole = PersonRole.VISITOR, *,
                        company: str = "", phone: str = "", email: str = "",
                        avatar_url: str = "") -> OperationOutcome:
        def action():
            req = RegisterPersonRequest(
                display_name=display_name, role=role, company=company,
                phone=phone, email=email, avatar_url=avatar_url,
            )
            return self._people.create_person(
                req.display_name.strip(), req.role, company=req.company,
                phone=req.phone, email=req.email, avatar_url=req.avatar_url,
            )
        return self._run(ROSTER_PERSON_REGISTER, display_name or "", action)

    def blacklist_person(self, person_id: str, reason: str) -> OperationOutcome:
        def action():
            req = BlacklistPersonRequest(person_id=person_id, reason=reason)
            return self._people.set_person_access_state(
                req.person_id, AccessState.BLACKLISTED, req.reason.strip(),
            )
        return self._run(ROSTER_PERSON_BLACKLIST, person_id, action)

    def reinstate_person(self, person_id: str) -> OperationOutcome:
        def action():
            req = ReinstatePersonRequest(person_id=person_id)
            return self._people.set_person_access_state(
                req.person_id, AccessState.ACTIVE, None,
            )
        return self._run(ROSTER_PERSON_REINSTATE, person_id, action)

    def toggle_blacklist(self, person: Person, reason: str = "") -> OperationOutcome:
        """Flip a person's standing from the operator's cached copy."""
        if person.is_blacklisted:
            return self.reinstate_person(person.person_id)
        return self.blacklist_person(person.person_id, reason)

    # ── sessions ──────────────────────────────────────────────

    def _session_store(self) -> SessionStore:
        if self._sessions is None:
            raise RuntimeError("RosterService was built without a session store.")
        return self._sessions

    def list_sessions(self, limit: Optional[int] = None) -> List[Session]:
        return self._session_store().list_sessions(limit)

    def list_pre_registrations(self, session_id: str) -> List[PreRegistration]:
        return self._session_store().list_pre_registrations(session_id)

    def create_session(self, host_id: str, event_name: str, venue: str,
                       session_date: str, participants: str = "") -> OperationOutcome:
        store = self._session_store()

        def action():
            req = CreateSessionRequest(
                host_id=host_id, event_name=event_name, venue=venue,
                session_date=session_date, participants=participants,
            )
            return store.create_session(
                req.host_id, req.event_name, req.venue,
                req.session_date, req.participants,
                qr_payload_factory=lambda s: build_session_qr_payload(
                    s.session_id, s.event_name, s.venue, s.session_date,
                ),
            )
        return self._run(ROSTER_SESSION_CREATE, host_id, action)
