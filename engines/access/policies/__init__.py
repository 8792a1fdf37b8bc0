"""
Premise Access Engine — Policies

Guards are evaluated by the record store inside the conditional write.
The advisory policies below only decide which actions an operator is
offered for a cached record; they never gate a write.
"""
from __future__ import annotations
from typing import List, Optional

from core.access_store.contracts import Guard
from core.primitives.access import AccessRecord, AccessStatus
from engines.access.events import (
    ACCESS_APPROVE, ACCESS_CHECK_OUT, ACCESS_DENY, ACCESS_EXTEND,
    ACCESS_REINSTATE, ACCESS_REVOKE,
)

_ALL_BUT_CHECKED_OUT = frozenset(AccessStatus) - {AccessStatus.CHECKED_OUT}

GUARDS = {
    ACCESS_EXTEND:    Guard(frozenset({AccessStatus.GRANTED}), require_open=True),
    ACCESS_REVOKE:    Guard(_ALL_BUT_CHECKED_OUT),
    ACCESS_REINSTATE: Guard(frozenset({AccessStatus.DENIED, AccessStatus.REVOKED})),
    ACCESS_CHECK_OUT: Guard(
        frozenset({AccessStatus.GRANTED, AccessStatus.REVOKED}), require_open=True,
    ),
    ACCESS_APPROVE:   Guard(frozenset({AccessStatus.PENDING})),
    ACCESS_DENY:      Guard(frozenset({AccessStatus.PENDING})),
}


def guard_for(operation: str) -> Guard:
    guard = GUARDS.get(operation)
    if guard is None:
        raise ValueError(f"No guard registered for operation '{operation}'.")
    return guard


def guard_failure_message(operation: str, record_id: str) -> str:
    guard = guard_for(operation)
    allowed = ", ".join(sorted(s.value for s in guard.allowed_statuses))
    suffix = " and still open" if guard.require_open else ""
    verb = operation.rsplit(".", 1)[-1].replace("_", "-")
    return (f"Cannot {verb} record '{record_id}': it is no longer "
            f"{allowed}{suffix}.")


def operation_offered_policy(record: AccessRecord, operation: str) -> Optional[str]:
    """Local hint against the cached copy; the store re-checks on write."""
    guard = guard_for(operation)
    if record.status not in guard.allowed_statuses:
        return f"record '{record.record_id}' is {record.status.value}."
    if guard.require_open and record.exit_time is not None:
        return f"record '{record.record_id}' is already closed."
    if operation == ACCESS_REVOKE and record.status == AccessStatus.REVOKED:
        return f"record '{record.record_id}' is already Revoked."
    return None


def offered_operations(record: AccessRecord) -> List[str]:
    return [op for op in GUARDS if operation_offered_policy(record, op) is None]
