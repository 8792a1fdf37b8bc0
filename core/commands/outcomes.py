"""
Premise Command Layer — Operation Outcome Contract
====================================================
Every lifecycle or roster operation produces exactly one Outcome.

ACCEPTED → the store applied the write.
REJECTED → nothing was applied; reason is mandatory.

Rules:
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
- occurred_at is mandatory
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from core.commands.rejection import RESYNC_CODES, RejectionReason


class OutcomeStatus(Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class OperationOutcome:
    """
    Result of one operation against the record store.

    Fields:
        operation:   Operation name (e.g. 'access.extend').
        target_id:   Record or person id the operation targeted.
        status:      ACCEPTED or REJECTED.
        reason:      RejectionReason (mandatory if REJECTED, None if ACCEPTED).
        occurred_at: When the outcome was decided.
        result:      Optional payload (e.g. the projected record after an
                     accepted write, or a newly created record).
    """

    operation: str
    target_id: str
    status: OutcomeStatus
    reason: Optional[RejectionReason]
    occurred_at: datetime
    result: Any = None

    def __post_init__(self):
        if not isinstance(self.status, OutcomeStatus):
            raise ValueError(
                f"status must be OutcomeStatus, got {type(self.status).__name__}."
            )

        if self.status == OutcomeStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason."
            )

        if self.status == OutcomeStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    @classmethod
    def accepted(
        cls, operation: str, target_id: str, occurred_at: datetime, result: Any = None
    ) -> "OperationOutcome":
        return cls(
            operation=operation,
            target_id=target_id,
            status=OutcomeStatus.ACCEPTED,
            reason=None,
            occurred_at=occurred_at,
            result=result,
        )

    @classmethod
    def rejected(
        cls,
        operation: str,
        target_id: str,
        occurred_at: datetime,
        reason: RejectionReason,
    ) -> "OperationOutcome":
        return cls(
            operation=operation,
            target_id=target_id,
            status=OutcomeStatus.REJECTED,
            reason=reason,
            occurred_at=occurred_at,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def requires_resync(self) -> bool:
        return self.reason is not None and self.reason.code in RESYNC_CODES

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "target_id": self.target_id,
            "status": self.status.value,
            "reason": None if self.reason is None else self.reason.to_dict(),
            "occurred_at": self.occurred_at.isoformat(),
        }
