"""
Premise Access Engine — Request Commands
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from core.access_store.errors import ValidationFailed
from core.primitives.access import AccessStatus
from engines.access.events import (
    ACCESS_APPROVE, ACCESS_CHECK_OUT, ACCESS_DENY, ACCESS_EXTEND,
    ACCESS_GRANT, ACCESS_REINSTATE, ACCESS_REVOKE,
    GRANTABLE_STATUSES, MAX_EXTEND_HOURS, MAX_EXTEND_MINUTES,
    extension_delta,
)

DEFAULT_ACTOR = "operator"


@dataclass(frozen=True)
class AccessCommand:
    """Validated operation ready for the lifecycle service."""
    operation: str
    target_id: str
    payload:   Dict[str, Any]
    actor_id:  str
    issued_at: datetime


def _require_issued_at(issued_at: datetime) -> None:
    if not isinstance(issued_at, datetime) or issued_at.tzinfo is None:
        raise ValidationFailed("issued_at must be a timezone-aware datetime.")


def _require_ref(value: str, name: str) -> None:
    if not value or not str(value).strip():
        raise ValidationFailed(f"{name} must be non-empty.")


@dataclass(frozen=True)
class GrantAccessRequest:
    subject_id:    str
    location_id:   str
    issued_at:     datetime
    status:        AccessStatus = AccessStatus.GRANTED
    purpose:       str = ""
    vehicle_plate: str = ""
    actor_id:      str = DEFAULT_ACTOR

    def __post_init__(self):
        _require_ref(self.subject_id, "subject_id")
        _require_ref(self.location_id, "location_id")
        _require_issued_at(self.issued_at)
        if self.status not in GRANTABLE_STATUSES:
            raise ValidationFailed(
                f"status must be one of {sorted(s.value for s in GRANTABLE_STATUSES)}."
            )

    def to_command(self) -> AccessCommand:
        return AccessCommand(ACCESS_GRANT, self.subject_id, {
            "subject_id": self.subject_id, "location_id": self.location_id,
            "status": self.status, "purpose": self.purpose,
            "vehicle_plate": self.vehicle_plate,
        }, actor_id=self.actor_id, issued_at=self.issued_at)


@dataclass(frozen=True)
class ExtendAccessRequest:
    record_id: str
    hours:     int
    minutes:   int
    issued_at: datetime
    actor_id:  str = DEFAULT_ACTOR

    def __post_init__(self):
        _require_ref(self.record_id, "record_id")
        _require_issued_at(self.issued_at)
        if isinstance(self.hours, bool) or not isinstance(self.hours, int):
            raise ValidationFailed("hours must be an integer.")
        if isinstance(self.minutes, bool) or not isinstance(self.minutes, int):
            raise ValidationFailed("minutes must be an integer.")
        if not 0 <= self.hours <= MAX_EXTEND_HOURS:
            raise ValidationFailed(f"hours must be between 0 and {MAX_EXTEND_HOURS}.")
        if not 0 <= self.minutes <= MAX_EXTEND_MINUTES:
            raise ValidationFailed(f"minutes must be between 0 and {MAX_EXTEND_MINUTES}.")

    def to_command(self) -> AccessCommand:
        return AccessCommand(ACCESS_EXTEND, self.record_id, {
            "hours": self.hours, "minutes": self.minutes,
            "delta": extension_delta(self.hours, self.minutes),
        }, actor_id=self.actor_id, issued_at=self.issued_at)


@dataclass(frozen=True)
class _RecordRequest:
    record_id: str
    issued_at: datetime
    actor_id:  str = DEFAULT_ACTOR
    operation: str = field(init=False, default="")

    def __post_init__(self):
        _require_ref(self.record_id, "record_id")
        _require_issued_at(self.issued_at)

    def to_command(self) -> AccessCommand:
        return AccessCommand(self.operation, self.record_id, {},
                             actor_id=self.actor_id, issued_at=self.issued_at)


@dataclass(frozen=True)
class RevokeAccessRequest(_RecordRequest):
    operation: str = field(init=False, default=ACCESS_REVOKE)


@dataclass(frozen=True)
class ReinstateAccessRequest(_RecordRequest):
    operation: str = field(init=False, default=ACCESS_REINSTATE)


@dataclass(frozen=True)
class CheckOutRequest(_RecordRequest):
    operation: str = field(init=False, default=ACCESS_CHECK_OUT)


@dataclass(frozen=True)
class ApproveAccessRequest(_RecordRequest):
    operation: str = field(init=False, default=ACCESS_APPROVE)


@dataclass(frozen=True)
class DenyAccessRequest(_RecordRequest):
    operation: str = field(init=False, default=ACCESS_DENY)


RECORD_REQUESTS = {
    ACCESS_REVOKE:    RevokeAccessRequest,
    ACCESS_REINSTATE: ReinstateAccessRequest,
    ACCESS_CHECK_OUT: CheckOutRequest,
    ACCESS_APPROVE:   ApproveAccessRequest,
    ACCESS_DENY:      DenyAccessRequest,
}
