"""
Premise Command Layer — Rejection Model
=========================================
Structured reasons for operations that did not apply.

Every rejection must be:
- Machine-readable (code)
- Human-readable (message, shown to the operator)
- Attributable (policy_name: the guard or boundary that refused)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejected operation.

    Fields:
        code:        Machine-readable rejection code (see ReasonCode).
        message:     Human-readable explanation.
        policy_name: Name of the guard or boundary that refused.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # Guard evaluated by the store did not hold at write time
    PRECONDITION_FAILED = "PRECONDITION_FAILED"

    # Transport or query failure against the record store
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

    # Target row no longer present
    NOT_FOUND = "NOT_FOUND"

    # Caller-supplied values out of range
    VALIDATION_FAILED = "VALIDATION_FAILED"


# Codes after which local state must be resynchronised with the store.
RESYNC_CODES = frozenset({
    ReasonCode.PRECONDITION_FAILED,
    ReasonCode.NOT_FOUND,
})
