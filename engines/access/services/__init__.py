"""
Premise Access Engine — Lifecycle Service
=========================================
Turns validated access commands into store writes and reports each
one as an OperationOutcome.

Guarded operations are one conditional write each. A zero row count
is classified with an existence check: missing row → NotFound,
otherwise the guard failed concurrently → PreconditionFailed. There is
no read-then-check before the write.
"""
from __future__ import annotations

import logging
from typing import Optional

from core.access_store.contracts import RecordStore
from core.access_store.errors import AccessStoreError, NotFound, PreconditionFailed
from core.commands.outcomes import OperationOutcome
from core.primitives.access import AccessStatus
from core.time.clock import Clock, get_default_clock
from engines.access.commands import (
    AccessCommand, ExtendAccessRequest, GrantAccessRequest, RECORD_REQUESTS,
)
from engines.access.events import (
    ACCESS_APPROVE, ACCESS_CHECK_OUT, ACCESS_DENY, ACCESS_EXTEND,
    ACCESS_GRANT, ACCESS_REINSTATE, ACCESS_REVOKE, GUARDED_OPERATIONS,
)
from engines.access.policies import guard_failure_message, guard_for

logger = logging.getLogger("premise.access")

STATUS_AFTER = {
    ACCESS_REVOKE:    AccessStatus.REVOKED,
    ACCESS_REINSTATE: AccessStatus.GRANTED,
    ACCESS_CHECK_OUT: AccessStatus.CHECKED_OUT,
    ACCESS_APPROVE:   AccessStatus.GRANTED,
    ACCESS_DENY:      AccessStatus.DENIED,
}


class AccessLifecycleService:
    def __init__(self, *, store: RecordStore, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock

    @property
    def clock(self) -> Clock:
        return self._clock or get_default_clock()

    # ── command execution ─────────────────────────────────────

    def execute(self, command: AccessCommand) -> OperationOutcome:
        try:
            if command.operation == ACCESS_GRANT:
                result = self._grant(command)
            elif command.operation in GUARDED_OPERATIONS:
                self._guarded_write(command)
                result = None
            else:
                raise ValueError(f"Unknown operation: {command.operation}")
        except AccessStoreError as exc:
            logger.info(
                f"{command.operation} on '{command.target_id}' rejected: "
                f"{exc.reason_code} ({exc.message})"
            )
            return OperationOutcome.rejected(
                command.operation, command.target_id,
                self.clock.now_utc(), exc.to_rejection(command.operation),
            )

        logger.info(f"{command.operation} on '{command.target_id}' accepted "
                    f"by {command.actor_id}.")
        return OperationOutcome.accepted(
            command.operation, command.target_id, self.clock.now_utc(), result,
        )

    def _grant(self, command: AccessCommand):
        p = command.payload
        return self._store.create_access_record(
            subject_id=p["subject_id"],
            location_id=p["location_id"],
            status=p["status"],
            entry_time=command.issued_at,
            purpose=p.get("purpose", ""),
            vehicle_plate=p.get("vehicle_plate", ""),
        )

    def _guarded_write(self, command: AccessCommand) -> None:
        op, record_id = command.operation, command.target_id
        guard = guard_for(op)
        if op == ACCESS_EXTEND:
            affected = self._store.conditional_update(
                record_id, guard, shift_entry_by=command.payload["delta"],
            )
        elif op == ACCESS_CHECK_OUT:
            affected = self._store.conditional_update(
                record_id, guard,
                set_status=STATUS_AFTER[op], close_at=command.issued_at,
            )
        else:
            affected = self._store.conditional_update(
                record_id, guard, set_status=STATUS_AFTER[op],
            )

        if affected == 0:
            if not self._store.record_exists(record_id):
                raise NotFound("AccessRecord", record_id)
            raise PreconditionFailed(guard_failure_message(op, record_id))

    # ── operator entry points ─────────────────────────────────

    def _run(self, operation: str, target_id: str, build) -> OperationOutcome:
        try:
            command = build().to_command()
        except AccessStoreError as exc:
            logger.info(f"{operation} on '{target_id}' rejected: {exc.message}")
            return OperationOutcome.rejected(
                operation, str(target_id), self.clock.now_utc(),
                exc.to_rejection(operation),
            )
        return self.execute(command)

    def grant(self, subject_id: str, location_id: str, *,
              status: AccessStatus = AccessStatus.GRANTED,
              purpose: str = "", vehicle_plate: str = "",
              actor_id: str = "operator") -> OperationOutcome:
        return self._run(ACCESS_GRANT, subject_id, lambda: GrantAccessRequest(
            subject_id=subject_id, location_id=location_id,
            issued_at=self.clock.now_utc(), status=status, purpose=purpose,
            vehicle_plate=vehicle_plate, actor_id=actor_id,
        ))

    def extend(self, record_id: str, hours: int, minutes: int = 0, *,
               actor_id: str = "operator") -> OperationOutcome:
        return self._run(ACCESS_EXTEND, record_id, lambda: ExtendAccessRequest(
            record_id=record_id, hours=hours, minutes=minutes,
            issued_at=self.clock.now_utc(), actor_id=actor_id,
        ))

    def _record_op(self, operation: str, record_id: str, actor_id: str) -> OperationOutcome:
        request_cls = RECORD_REQUESTS[operation]
        return self._run(operation, record_id, lambda: request_cls(
            record_id=record_id, issued_at=self.clock.now_utc(), actor_id=actor_id,
        ))

    def revoke(self, record_id: str, *, actor_id: str = "operator") -> OperationOutcome:
        return self._record_op(ACCESS_REVOKE, record_id, actor_id)

    def reinstate(self, record_id: str, *, actor_id: str = "operator") -> OperationOutcome:
        return self._record_op(ACCESS_REINSTATE, record_id, actor_id)

    def check_out(self, record_id: str, *, actor_id: str = "operator") -> OperationOutcome:
        return self._record_op(ACCESS_CHECK_OUT, record_id, actor_id)

    def approve(self, record_id: str, *, actor_id: str = "operator") -> OperationOutcome:
        return self._record_op(ACCESS_APPROVE, record_id, actor_id)

    def deny(self, record_id: str, *, actor_id: str = "operator") -> OperationOutcome:
        return self._record_op(ACCESS_DENY, record_id, actor_id)
