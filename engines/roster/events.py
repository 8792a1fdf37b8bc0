"""
Premise Roster Engine — Operation Types
=======================================
Engine: roster
Scope:  Person registry (register, blacklist, reinstate) and hosted
        sessions (create with a pre-registration QR payload, list).
"""

from __future__ import annotations

import json

ROSTER_PERSON_REGISTER  = "roster.person.register"
ROSTER_PERSON_BLACKLIST = "roster.person.blacklist"
ROSTER_PERSON_REINSTATE = "roster.person.reinstate"
ROSTER_SESSION_CREATE   = "roster.session.create"

ROSTER_OPERATIONS = (
    ROSTER_PERSON_REGISTER, ROSTER_PERSON_BLACKLIST,
    ROSTER_PERSON_REINSTATE, ROSTER_SESSION_CREATE,
)


def build_session_qr_payload(session_id: str, event_name: str,
                             venue: str, session_date: str) -> str:
    """JSON text a QR encoder renders for participant pre-registration."""
    return json.dumps({
        "sessionId": session_id,
        "eventName": event_name,
        "venue":     venue,
        "date":      session_date,
    }, separators=(",", ":"))
