"""
Premise HTTP API - Contracts
============================
Framework-agnostic request/response DTOs for operator endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from core.primitives.access import AccessStatus, PersonRole

RECORD_ACTIONS = ("revoke", "reinstate", "check_out", "approve", "deny")
EXPORT_FORMATS = ("csv", "pdf")
MAX_RECORD_LIMIT = 500


def _enum_by_value(enum_cls, value: Any, field_name: str):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().casefold()
    for member in enum_cls:
        if member.value.casefold() == text or member.name.casefold() == text:
            return member
    raise ValueError(
        f"{field_name} must be one of {[m.value for m in enum_cls]}."
    )


def parse_role(value: Any) -> Optional[PersonRole]:
    return _enum_by_value(PersonRole, value, "role")


def parse_status(value: Any) -> Optional[AccessStatus]:
    return _enum_by_value(AccessStatus, value, "status")


def parse_bool(value: Any, field_name: str) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{field_name} must be a boolean.")


def parse_int(value: Any, field_name: str, default: Optional[int] = None) -> int:
    if value is None or value == "":
        if default is None:
            raise ValueError(f"{field_name} is required.")
        return default
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer.")
    if isinstance(value, int):
        return value
    # Query strings arrive as text; floats are never truncated.
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"{field_name} must be a non-negative integer.")


def _require_text(value: Any, field_name: str) -> None:
    if not value or not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string.")


# ══════════════════════════════════════════════════════════════
# ACCESS RECORDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RecordListHttpRequest:
    search: str = ""
    location: str = ""
    role: Optional[PersonRole] = None
    status: Optional[AccessStatus] = None
    on_site: bool = False
    limit: int = 50

    def __post_init__(self):
        if not isinstance(self.limit, int) or not 1 <= self.limit <= MAX_RECORD_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_RECORD_LIMIT}.")


@dataclass(frozen=True)
class GrantHttpRequest:
    subject_id: str
    location_id: str
    status: AccessStatus = AccessStatus.GRANTED
    purpose: str = ""
    vehicle_plate: str = ""

    def __post_init__(self):
        _require_text(self.subject_id, "subject_id")
        _require_text(self.location_id, "location_id")
        if not isinstance(self.status, AccessStatus):
            raise ValueError("status must be AccessStatus.")


@dataclass(frozen=True)
class ExtendHttpRequest:
    record_id: str
    hours: int
    minutes: int = 0

    def __post_init__(self):
        _require_text(self.record_id, "record_id")


@dataclass(frozen=True)
class RecordActionHttpRequest:
    record_id: str
    action: str

    def __post_init__(self):
        _require_text(self.record_id, "record_id")
        if self.action not in RECORD_ACTIONS:
            raise ValueError(f"action must be one of {list(RECORD_ACTIONS)}.")


@dataclass(frozen=True)
class ExportHttpRequest:
    fmt: str
    records: RecordListHttpRequest = field(default_factory=RecordListHttpRequest)

    def __post_init__(self):
        if self.fmt not in EXPORT_FORMATS:
            raise ValueError(f"format must be one of {list(EXPORT_FORMATS)}.")


# ══════════════════════════════════════════════════════════════
# PEOPLE / SESSIONS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PersonListHttpRequest:
    search: str = ""
    role: Optional[PersonRole] = None
    blacklisted: Optional[bool] = None


@dataclass(frozen=True)
class PersonRegisterHttpRequest:
    display_name: str
    role: PersonRole = PersonRole.VISITOR
    company: str = ""
    phone: str = ""
    email: str = ""
    avatar_url: str = ""

    def __post_init__(self):
        _require_text(self.display_name, "display_name")


@dataclass(frozen=True)
class PersonStandingHttpRequest:
    person_id: str
    blacklist: bool
    reason: str = ""

    def __post_init__(self):
        _require_text(self.person_id, "person_id")


@dataclass(frozen=True)
class SessionCreateHttpRequest:
    host_id: str
    event_name: str
    venue: str
    session_date: str
    participants: str = ""

    def __post_init__(self):
        _require_text(self.host_id, "host_id")
        _require_text(self.event_name, "event_name")
        _require_text(self.venue, "venue")
        _require_text(self.session_date, "session_date")


# ══════════════════════════════════════════════════════════════
# RESPONSE ENVELOPE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        if self.error is None:
            raise ValueError("error must be set when ok is False.")
        return {"ok": False, "error": self.error.to_dict()}
