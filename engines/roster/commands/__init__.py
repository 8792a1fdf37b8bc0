"""
Premise Roster Engine — Request Commands
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.access_store.errors import ValidationFailed
from core.primitives.access import PersonRole


def _require_text(value: Optional[str], name: str) -> None:
    if not value or not str(value).strip():
        raise ValidationFailed(f"{name} must be non-empty.")


@dataclass(frozen=True)
class RegisterPersonRequest:
    display_name: str
    role:         PersonRole = PersonRole.VISITOR
    company:      str = ""
    phone:        str = ""
    email:        str = ""
    avatar_url:   str = ""

    def __post_init__(self):
        _require_text(self.display_name, "display_name")
        if not isinstance(self.role, PersonRole):
            raise ValidationFailed(
                f"role must be one of {[r.value for r in PersonRole]}."
            )
        if self.email and "@" not in self.email:
            raise ValidationFailed("email must contain '@'.")


@dataclass(frozen=True)
class BlacklistPersonRequest:
    person_id: str
    reason:    str

    def __post_init__(self):
        _require_text(self.person_id, "person_id")
        _require_text(self.reason, "reason")


@dataclass(frozen=True)
class ReinstatePersonRequest:
    person_id: str

    def __post_init__(self):
        _require_text(self.person_id, "person_id")


@dataclass(frozen=True)
class CreateSessionRequest:
    host_id:      str
    event_name:   str
    venue:        str
    session_date: str
    participants: str = ""

    def __post_init__(self):
        _require_text(self.host_id, "host_id")
        _require_text(self.event_name, "event_name")
        _require_text(self.venue, "venue")
        _require_text(self.session_date, "session_date")
