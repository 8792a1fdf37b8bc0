"""
Premise Access Engine — Operation Types and Local Mutations
===========================================================
Engine: access
Scope:  Access record lifecycle. Grant, extend, revoke, reinstate,
        check-out, plus approve/deny for Pending gate requests.

Each operation has a local mutation that reproduces, on a cached
AccessRecord, the change the store applied. The consistency controller
uses these for optimistic cache patches after an accepted write.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Dict

from core.primitives.access import AccessRecord, AccessStatus

ACCESS_GRANT     = "access.record.grant"
ACCESS_EXTEND    = "access.record.extend"
ACCESS_REVOKE    = "access.record.revoke"
ACCESS_REINSTATE = "access.record.reinstate"
ACCESS_CHECK_OUT = "access.record.check_out"
ACCESS_APPROVE   = "access.record.approve"
ACCESS_DENY      = "access.record.deny"

ACCESS_OPERATIONS = (
    ACCESS_GRANT, ACCESS_EXTEND, ACCESS_REVOKE, ACCESS_REINSTATE,
    ACCESS_CHECK_OUT, ACCESS_APPROVE, ACCESS_DENY,
)

# Operations that target an existing record through a conditional write.
GUARDED_OPERATIONS = frozenset(ACCESS_OPERATIONS) - {ACCESS_GRANT}

GRANTABLE_STATUSES = frozenset({
    AccessStatus.GRANTED, AccessStatus.PENDING, AccessStatus.DENIED,
})

MAX_EXTEND_HOURS   = 24
MAX_EXTEND_MINUTES = 59


# ══════════════════════════════════════════════════════════════
# LOCAL MUTATIONS (optimistic cache patches)
# ══════════════════════════════════════════════════════════════

def apply_extend(record: AccessRecord, cmd) -> AccessRecord:
    delta = cmd.payload["delta"]
    return replace(record, entry_time=record.entry_time + delta)


def apply_revoke(record: AccessRecord, cmd) -> AccessRecord:
    return replace(record, status=AccessStatus.REVOKED)


def apply_reinstate(record: AccessRecord, cmd) -> AccessRecord:
    return replace(record, status=AccessStatus.GRANTED)


def apply_check_out(record: AccessRecord, cmd) -> AccessRecord:
    closed_at: datetime = max(cmd.issued_at, record.entry_time)
    return replace(record, status=AccessStatus.CHECKED_OUT, exit_time=closed_at)


def apply_approve(record: AccessRecord, cmd) -> AccessRecord:
    return replace(record, status=AccessStatus.GRANTED)


def apply_deny(record: AccessRecord, cmd) -> AccessRecord:
    return replace(record, status=AccessStatus.DENIED)


LOCAL_MUTATIONS: Dict[str, Callable[[AccessRecord, object], AccessRecord]] = {
    ACCESS_EXTEND:    apply_extend,
    ACCESS_REVOKE:    apply_revoke,
    ACCESS_REINSTATE: apply_reinstate,
    ACCESS_CHECK_OUT: apply_check_out,
    ACCESS_APPROVE:   apply_approve,
    ACCESS_DENY:      apply_deny,
}


def extension_delta(hours: int, minutes: int) -> timedelta:
    return timedelta(hours=hours, minutes=minutes)
