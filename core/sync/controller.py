"""
Premise Sync — Consistency Controller
=====================================
Optimistic concurrency over a polled shared store.

For every operator mutation:
1. The lifecycle service issues one conditional write carrying the
   operation's guard.
2. Accepted → the same mutation is applied to the local cache right
   away, then a full refresh reconciles anything else that changed.
3. PreconditionFailed / NotFound → nothing is patched locally; a full
   refresh is forced so the cache matches the store again.
4. StoreUnavailable / ValidationFailed → reported only; the cache is
   left untouched.

Polls and optimistic patches may race. The last full refresh replaces
the cache wholesale, so staleness is bounded by one poll interval.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from core.access_store.contracts import RecordQuery, RecordStore
from core.access_store.errors import AccessStoreError
from core.caching import RecordCache
from core.commands.outcomes import OperationOutcome
from core.primitives.access import AccessRecord, AccessStatus
from core.time.clock import Clock, get_default_clock
from engines.access.commands import (
    AccessCommand, ExtendAccessRequest, GrantAccessRequest, RECORD_REQUESTS,
)
from engines.access.events import (
    ACCESS_APPROVE, ACCESS_CHECK_OUT, ACCESS_DENY, ACCESS_EXTEND,
    ACCESS_GRANT, ACCESS_REINSTATE, ACCESS_REVOKE, LOCAL_MUTATIONS,
)
from engines.access.services import AccessLifecycleService

logger = logging.getLogger("premise.sync")

QueryFactory = Callable[[datetime], RecordQuery]


def _all_records(now: datetime) -> RecordQuery:
    return RecordQuery()


class ConsistencyController:
    """
    Owns one view's record cache and routes its mutations.

    The query factory receives the current instant so views can ask for
    "today's records" or "the latest N" on every refresh.
    """

    def __init__(
        self,
        *,
        store: RecordStore,
        cache: Optional[RecordCache] = None,
        clock: Optional[Clock] = None,
        query_factory: Optional[QueryFactory] = None,
        name: str = "controller",
    ) -> None:
        self._store = store
        self._cache = cache if cache is not None else RecordCache()
        self._clock = clock
        self._query_factory = query_factory or _all_records
        self._name = name
        self._service = AccessLifecycleService(store=store, clock=clock)
        self._last_error: Optional[str] = None

    @property
    def clock(self) -> Clock:
        return self._clock or get_default_clock()

    @property
    def cache(self) -> RecordCache:
        return self._cache

    @property
    def last_error(self) -> Optional[str]:
        """Message of the most recent failed refresh, cleared on success."""
        return self._last_error

    def records(self) -> List[AccessRecord]:
        return self._cache.snapshot()

    # ── refresh ───────────────────────────────────────────────

    def refresh(self) -> bool:
        """
        Re-fetch and replace the cache wholesale.

        Returns False when the store could not be read; the previous
        snapshot is kept in that case.
        """
        now = self.clock.now_utc()
        try:
            records = self._store.list_access_records(self._query_factory(now))
        except AccessStoreError as e:
            self._last_error = e.message
            logger.error(f"{self._name}: refresh failed: {e.message}", exc_info=True)
            return False
        self._cache.replace_all(records, now)
        self._last_error = None
        logger.debug(f"{self._name}: refreshed {len(records)} records")
        return True

    # ── mutations ─────────────────────────────────────────────

    def submit(self, command: AccessCommand) -> OperationOutcome:
        outcome = self._service.execute(command)

        if outcome.is_accepted:
            if command.operation == ACCESS_GRANT:
                if outcome.result is not None:
                    self._cache.add(outcome.result)
            else:
                mutate = LOCAL_MUTATIONS[command.operation]
                self._cache.patch(command.target_id, lambda r: mutate(r, command))
            self.refresh()
        elif outcome.requires_resync:
            logger.info(
                f"{self._name}: {command.operation} on '{command.target_id}' "
                f"lost a concurrent update; resyncing"
            )
            self.refresh()
        return outcome

    def _submit_request(self, operation: str, target_id: str, build) -> OperationOutcome:
        try:
            command = build(self.clock.now_utc()).to_command()
        except AccessStoreError as e:
            return OperationOutcome.rejected(
                operation, str(target_id), self.clock.now_utc(),
                e.to_rejection(operation),
            )
        return self.submit(command)

    def grant(self, subject_id: str, location_id: str, *,
              status: AccessStatus = AccessStatus.GRANTED,
              purpose: str = "", vehicle_plate: str = "") -> OperationOutcome:
        return self._submit_request(ACCESS_GRANT, subject_id, lambda now: GrantAccessRequest(
            subject_id=subject_id, location_id=location_id, issued_at=now,
            status=status, purpose=purpose, vehicle_plate=vehicle_plate,
        ))

    def extend(self, record_id: str, hours: int, minutes: int = 0) -> OperationOutcome:
        return self._submit_request(ACCESS_EXTEND, record_id, lambda now: ExtendAccessRequest(
            record_id=record_id, hours=hours, minutes=minutes, issued_at=now,
        ))

    def _record_op(self, operation: str, record_id: str) -> OperationOutcome:
        request_cls = RECORD_REQUESTS[operation]
        return self._submit_request(operation, record_id, lambda now: request_cls(
            record_id=record_id, issued_at=now,
        ))

    def revoke(self, record_id: str) -> OperationOutcome:
        return self._record_op(ACCESS_REVOKE, record_id)

    def reinstate(self, record_id: str) -> OperationOutcome:
        return self._record_op(ACCESS_REINSTATE, record_id)

    def check_out(self, record_id: str) -> OperationOutcome:
        return self._record_op(ACCESS_CHECK_OUT, record_id)

    def approve(self, record_id: str) -> OperationOutcome:
        return self._record_op(ACCESS_APPROVE, record_id)

    def deny(self, record_id: str) -> OperationOutcome:
        return self._record_op(ACCESS_DENY, record_id)
