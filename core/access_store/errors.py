"""
Premise Access Store - Errors
=============================
Error taxonomy shared by the store adapter, lifecycle engine and
controller. Each error knows the ReasonCode it maps to so callers can
turn it into a REJECTED OperationOutcome without a lookup table.
"""

from __future__ import annotations

from core.commands.rejection import ReasonCode, RejectionReason


class AccessStoreError(Exception):
    """Base error for record store operations."""

    reason_code = ReasonCode.STORE_UNAVAILABLE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_rejection(self, policy_name: str) -> RejectionReason:
        return RejectionReason(
            code=self.reason_code,
            message=self.message,
            policy_name=policy_name,
        )


class PreconditionFailed(AccessStoreError):
    """A guard evaluated by the store did not hold at write time."""

    reason_code = ReasonCode.PRECONDITION_FAILED


class StoreUnavailable(AccessStoreError):
    """Transport or query failure against the record store."""

    reason_code = ReasonCode.STORE_UNAVAILABLE


class NotFound(AccessStoreError):
    """The targeted row is no longer present."""

    reason_code = ReasonCode.NOT_FOUND

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} '{identifier}' not found.")


class ValidationFailed(AccessStoreError, ValueError):
    """Caller-supplied values are out of range or malformed."""

    reason_code = ReasonCode.VALIDATION_FAILED
