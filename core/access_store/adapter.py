"""
Premise Access Store - Store Adapter
====================================
The only code that talks to the shared record store. Everything above
this module works with core.primitives and never sees native rows.

Conditional writes:
    Every lifecycle mutation is a single UPDATE ... WHERE statement that
    carries its guard (allowed statuses, optionally "exit not set").
    Django's QuerySet.update() returns the number of affected rows; a
    zero count means the guard did not hold at write time. Callers use
    record_exists() to tell a vanished row from a failed guard.

RULES:
- DatabaseError never escapes: it becomes StoreUnavailable
- Identifiers are strings at the boundary; non-numeric ids are
  ValidationFailed, unknown ids are NotFound
- exit_timestamp is never written below entry_timestamp
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Callable, Iterator, List, Optional

from django.db import DatabaseError, connection, transaction
from django.db.models import F, Q

from core.access_store.contracts import Guard, RecordQuery
from core.access_store.errors import NotFound, StoreUnavailable, ValidationFailed
from core.access_store.mapping import (
    access_record_from_row,
    location_from_row,
    person_from_row,
    pre_registration_from_row,
    session_from_row,
    stored_status_values,
)
from core.access_store.models import (
    StoredAccessLog,
    StoredLocation,
    StoredPreRegistration,
    StoredSession,
    StoredUser,
)
from core.primitives.access import (
    AccessRecord,
    AccessState,
    AccessStatus,
    Location,
    Person,
    PersonRole,
    PreRegistration,
    Session,
)

logger = logging.getLogger("premise.store")


# ══════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════

def _parse_id(value: str, kind: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationFailed(f"{kind} id must be numeric, got {value!r}.")


def _role_filter(role: PersonRole) -> Q:
    # Unknown user types read back as Visitor.
    match = Q(user__user_type=role.value)
    if role == PersonRole.VISITOR:
        known = [r.value for r in PersonRole if r != PersonRole.VISITOR]
        match |= ~Q(user__user_type__in=known)
    return match


@contextmanager
def _store_call(action: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.error(f"Record store failure during {action}: {exc}")
        raise StoreUnavailable(f"Record store unavailable ({action}).") from exc


# ══════════════════════════════════════════════════════════════
# DJANGO-BACKED STORE
# ══════════════════════════════════════════════════════════════

class DjangoRecordStore:
    """RecordStore + PersonStore over the access_store tables."""

    # ── access records ────────────────────────────────────────

    def list_access_records(self, query: Optional[RecordQuery] = None) -> List[AccessRecord]:
        query = query or RecordQuery()
        with _store_call("list_access_records"):
            qs = StoredAccessLog.objects.select_related("user", "location")
            if query.since is not None:
                since = Q(entry_timestamp__gte=query.since)
                if query.include_open:
                    since |= Q(exit_timestamp__isnull=True)
                qs = qs.filter(since)
            if query.open_only:
                qs = qs.filter(exit_timestamp__isnull=True)
            if query.statuses:
                qs = qs.filter(access_status__in=stored_status_values(query.statuses))
            if query.exclude_statuses:
                qs = qs.exclude(
                    access_status__in=stored_status_values(query.exclude_statuses)
                )
            if query.search:
                qs = qs.filter(
                    Q(user__user_name__icontains=query.search)
                    | Q(location__location_name__icontains=query.search)
                )
            if query.location_name:
                qs = qs.filter(location__location_name__icontains=query.location_name)
            if query.role is not None:
                qs = qs.filter(_role_filter(query.role))
            if query.on_site:
                qs = qs.filter(
                    access_status__in=stored_status_values([AccessStatus.GRANTED]),
                    exit_timestamp__isnull=True,
                )
            if query.subject_id is not None:
                qs = qs.filter(user_id=_parse_id(query.subject_id, "Person"))
            if query.location_id is not None:
                qs = qs.filter(location_id=_parse_id(query.location_id, "Location"))
            qs = qs.order_by("-entry_timestamp", "-id_logs")
            if query.limit is not None:
                qs = qs[: query.limit]
            return [access_record_from_row(row) for row in qs]

    def get_access_record(self, record_id: str) -> AccessRecord:
        pk = _parse_id(record_id, "AccessRecord")
        with _store_call("get_access_record"):
            row = (
                StoredAccessLog.objects.select_related("user", "location")
                .filter(pk=pk)
                .first()
            )
        if row is None:
            raise NotFound("AccessRecord", record_id)
        return access_record_from_row(row)

    def record_exists(self, record_id: str) -> bool:
        pk = _parse_id(record_id, "AccessRecord")
        with _store_call("record_exists"):
            return StoredAccessLog.objects.filter(pk=pk).exists()

    def conditional_update(
        self,
        record_id: str,
        guard: Guard,
        *,
        set_status: Optional[AccessStatus] = None,
        shift_entry_by: Optional[timedelta] = None,
        close_at: Optional[datetime] = None,
    ) -> int:
        """
        Apply a guarded mutation and return the affected-row count.

        close_at sets exit_timestamp; rows whose entry lies after close_at
        are closed at their own entry instant instead, so a record is never
        closed before it opened.
        """
        if set_status is None and shift_entry_by is None and close_at is None:
            raise ValidationFailed("conditional_update requires a mutation.")
        pk = _parse_id(record_id, "AccessRecord")

        guarded = StoredAccessLog.objects.filter(
            pk=pk,
            access_status__in=stored_status_values(guard.allowed_statuses),
        )
        if guard.require_open:
            guarded = guarded.filter(exit_timestamp__isnull=True)

        changes = {}
        if set_status is not None:
            changes["access_status"] = set_status.value
        if shift_entry_by is not None:
            changes["entry_timestamp"] = F("entry_timestamp") + shift_entry_by

        with _store_call("conditional_update"):
            if close_at is None:
                affected = guarded.update(**changes)
            else:
                with transaction.atomic():
                    affected = guarded.filter(entry_timestamp__lte=close_at).update(
                        exit_timestamp=close_at, **changes
                    )
                    if affected == 0:
                        affected = guarded.filter(entry_timestamp__gt=close_at).update(
                            exit_timestamp=F("entry_timestamp"), **changes
                        )

        logger.debug(
            f"conditional_update record={record_id} "
            f"allowed={sorted(s.value for s in guard.allowed_statuses)} "
            f"affected={affected}"
        )
        return affected

    def create_access_record(
        self,
        subject_id: str,
        location_id: str,
        status: AccessStatus,
        entry_time: datetime,
        purpose: str = "",
        vehicle_plate: str = "",
    ) -> AccessRecord:
        user_pk = _parse_id(subject_id, "Person")
        location_pk = _parse_id(location_id, "Location")
        with _store_call("create_access_record"):
            if not StoredUser.objects.filter(pk=user_pk).exists():
                raise NotFound("Person", subject_id)
            if not StoredLocation.objects.filter(pk=location_pk).exists():
                raise NotFound("Location", location_id)
            row = StoredAccessLog.objects.create(
                user_id=user_pk,
                location_id=location_pk,
                access_status=status.value,
                entry_timestamp=entry_time,
                purpose=purpose,
                vehicle_plate=vehicle_plate,
            )
        return self.get_access_record(str(row.pk))

    # ── people ────────────────────────────────────────────────

    def list_people(self) -> List[Person]:
        with _store_call("list_people"):
            return [person_from_row(row) for row in StoredUser.objects.all()]

    def get_person(self, person_id: str) -> Person:
        pk = _parse_id(person_id, "Person")
        with _store_call("get_person"):
            row = StoredUser.objects.filter(pk=pk).first()
        if row is None:
            raise NotFound("Person", person_id)
        return person_from_row(row)

    def create_person(
        self,
        display_name: str,
        role: PersonRole,
        company: str = "",
        phone: str = "",
        email: str = "",
        avatar_url: str = "",
    ) -> Person:
        with _store_call("create_person"):
            row = StoredUser.objects.create(
                user_name=display_name,
                user_type=role.value,
                user_company=company,
                user_phone=phone,
                user_email=email,
                user_avatar=avatar_url,
            )
        return person_from_row(row)

    def set_person_access_state(
        self,
        person_id: str,
        state: AccessState,
        reason: Optional[str] = None,
    ) -> Person:
        pk = _parse_id(person_id, "Person")
        blacklist_reason = reason if state == AccessState.BLACKLISTED else None
        with _store_call("set_person_access_state"):
            affected = StoredUser.objects.filter(pk=pk).update(
                user_status=state.value,
                blacklist_reason=blacklist_reason,
            )
        if affected == 0:
            raise NotFound("Person", person_id)
        return self.get_person(person_id)

    # ── locations ─────────────────────────────────────────────

    def list_locations(self) -> List[Location]:
        with _store_call("list_locations"):
            return [location_from_row(row) for row in StoredLocation.objects.all()]

    def create_location(self, name: str, zone_code: str = "") -> Location:
        with _store_call("create_location"):
            row = StoredLocation.objects.create(
                location_name=name,
                location_zone_code=zone_code,
            )
        return location_from_row(row)

    # ── sessions ──────────────────────────────────────────────

    def list_sessions(self, limit: Optional[int] = None) -> List[Session]:
        with _store_call("list_sessions"):
            qs = StoredSession.objects.all()
            if limit is not None:
                qs = qs[:limit]
            return [session_from_row(row) for row in qs]

    def create_session(
        self,
        host_id: str,
        event_name: str,
        venue: str,
        session_date: str,
        participants: str = "",
        qr_payload_factory: Optional[Callable[[Session], str]] = None,
    ) -> Session:
        """
        Insert a session row and, when a factory is given, its QR payload.

        The payload embeds the assigned session id, so it is written by a
        second statement; both run in one transaction and a failure in
        either leaves no session behind.
        """
        host_pk = _parse_id(host_id, "Person")
        with _store_call("create_session"), transaction.atomic():
            if not StoredUser.objects.filter(pk=host_pk).exists():
                raise NotFound("Person", host_id)
            row = StoredSession.objects.create(
                host_id=host_pk,
                event_name=event_name,
                venue=venue,
                session_date=session_date,
                participants=participants,
            )
            if qr_payload_factory is not None:
                row.qr_code = qr_payload_factory(session_from_row(row))
                row.save(update_fields=["qr_code"])
        return session_from_row(row)

    def list_pre_registrations(self, session_id: str) -> List[PreRegistration]:
        pk = _parse_id(session_id, "Session")
        with _store_call("list_pre_registrations"):
            rows = StoredPreRegistration.objects.filter(session_id=pk)
            return [pre_registration_from_row(row) for row in rows]

    # ── health ────────────────────────────────────────────────

    def check_connection(self) -> bool:
        """True when the store answers a trivial query."""
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            return True
        except DatabaseError as exc:
            logger.warning(f"Record store connection check failed: {exc}")
            return False
