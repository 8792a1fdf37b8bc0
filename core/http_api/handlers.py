"""
Premise HTTP API - Framework-Agnostic Handlers
==============================================
Pure handler functions over contracts and injected dependencies.
Every handler returns the {ok, data|error} envelope; the export
handler returns an ExportArtifact on success.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from ai.briefing import NOT_CONFIGURED_TEXT
from core.access_store.contracts import RecordQuery
from core.access_store.errors import AccessStoreError
from core.commands.outcomes import OperationOutcome
from core.exports import export_filename, render_csv, render_pdf
from core.http_api.contracts import (
    ExportHttpRequest,
    ExtendHttpRequest,
    GrantHttpRequest,
    PersonListHttpRequest,
    PersonRegisterHttpRequest,
    PersonStandingHttpRequest,
    RecordActionHttpRequest,
    RecordListHttpRequest,
    SessionCreateHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    HANDLER_EXECUTION_FAILED,
    error_response,
    rejection_response,
    success_response,
)
from core.primitives.access import (
    AccessRecord,
    DashboardStats,
    Person,
    PreRegistration,
    Session,
)
from core.time.access_window import format_duration, format_remaining, remaining_time
from engines.access.policies import offered_operations
from engines.access.services import AccessLifecycleService
from engines.roster.services import RosterService
from projections.premise import (
    PersonFilter,
    ZoneOccupancy,
    day_bounds,
    safe_dashboard_stats,
    zone_occupancy,
)

logger = logging.getLogger("premise.http")


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content_type: str
    content: bytes


# ══════════════════════════════════════════════════════════════
# SERIALIZERS
# ══════════════════════════════════════════════════════════════

def _iso_or_none(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def serialize_record(record: AccessRecord, now: datetime, window_hours: float) -> dict[str, Any]:
    remaining = remaining_time(record, now, window_hours)
    return {
        "record_id": record.record_id,
        "subject_id": record.subject_id,
        "subject_name": record.subject_name,
        "subject_role": record.subject_role.value,
        "subject_company": record.subject_company,
        "subject_avatar_url": record.subject_avatar_url,
        "location_id": record.location_id,
        "location_name": record.location_name,
        "status": record.status.value,
        "entry_time": _iso_or_none(record.entry_time),
        "exit_time": _iso_or_none(record.exit_time),
        "purpose": record.purpose,
        "vehicle_plate": record.vehicle_plate,
        "remaining": format_remaining(remaining),
        "is_suspicious": record.is_suspicious,
        "actions": offered_operations(record),
    }


def serialize_person(person: Person) -> dict[str, Any]:
    return {
        "person_id": person.person_id,
        "display_name": person.display_name,
        "role": person.role.value,
        "company": person.company,
        "phone": person.phone,
        "email": person.email,
        "avatar_url": person.avatar_url,
        "access_state": person.access_state.value,
        "blacklist_reason": person.blacklist_reason,
        "created_at": _iso_or_none(person.created_at),
    }


def serialize_session(session: Session) -> dict[str, Any]:
    return {
        "session_id": session.session_id,
        "host_id": session.host_id,
        "event_name": session.event_name,
        "venue": session.venue,
        "session_date": session.session_date,
        "participants": session.participants,
        "qr_payload": session.qr_payload,
        "created_at": _iso_or_none(session.created_at),
    }


def serialize_pre_registration(reg: PreRegistration) -> dict[str, Any]:
    return {
        "registration_id": reg.registration_id,
        "session_id": reg.session_id,
        "name": reg.name,
        "email": reg.email,
        "phone": reg.phone,
        "registered_at": _iso_or_none(reg.registered_at),
    }


def serialize_stats(stats: DashboardStats) -> dict[str, Any]:
    avg = stats.avg_visit_duration
    return {
        "total_entries_today": stats.total_entries_today,
        "active_on_site_count": stats.active_on_site_count,
        "alert_count": stats.alert_count,
        "avg_visit_duration_seconds": None if avg is None else int(avg.total_seconds()),
        "avg_visit_duration": format_duration(avg),
    }


def serialize_zone(zone: ZoneOccupancy) -> dict[str, Any]:
    return {
        "location_id": zone.location_id,
        "location_name": zone.location_name,
        "count": zone.count,
        "suspicious_count": zone.suspicious_count,
        "record_ids": [r.record_id for r in zone.records],
    }


def _outcome_response(outcome: OperationOutcome, data: Any = None) -> dict[str, Any]:
    if outcome.is_rejected:
        return rejection_response(
            outcome.reason,
            extra_details={
                "operation": outcome.operation,
                "target_id": outcome.target_id,
            },
        )
    body = outcome.to_dict()
    body["result"] = data
    return success_response(body)


def _store_failure(exc: AccessStoreError, what: str) -> dict[str, Any]:
    logger.warning(f"{what} failed: {exc.message}")
    return rejection_response(exc.to_rejection(what))


def _unexpected_failure(exc: Exception, what: str) -> dict[str, Any]:
    logger.error(f"{what} failed unexpectedly: {exc}", exc_info=True)
    return error_response(
        code=HANDLER_EXECUTION_FAILED,
        message=f"Failed to execute {what}.",
        details={"error_type": type(exc).__name__},
    )


def _record_query(request: RecordListHttpRequest) -> RecordQuery:
    # The store filters before it limits, so older matches are not cut off.
    statuses = frozenset({request.status}) if request.status is not None else frozenset()
    return RecordQuery(
        limit=request.limit,
        statuses=statuses,
        search=request.search.strip(),
        location_name=request.location.strip(),
        role=request.role,
        on_site=request.on_site,
    )


def _filtered_records(request: RecordListHttpRequest, dependencies: HttpApiDependencies):
    return dependencies.store.list_access_records(_record_query(request))


# ══════════════════════════════════════════════════════════════
# ACCESS RECORDS
# ══════════════════════════════════════════════════════════════

def list_records(
    request: RecordListHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    try:
        records = _filtered_records(request, dependencies)
    except AccessStoreError as exc:
        return _store_failure(exc, "records.list")

    now = dependencies.clock.now_utc()
    items = [serialize_record(r, now, dependencies.window_hours) for r in records]
    return success_response({"items": items, "count": len(items)})


def post_grant(
    request: GrantHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    service = AccessLifecycleService(store=dependencies.store, clock=dependencies.clock)
    outcome = service.grant(
        request.subject_id, request.location_id, status=request.status,
        purpose=request.purpose, vehicle_plate=request.vehicle_plate,
    )
    data = None
    if outcome.is_accepted and outcome.result is not None:
        data = serialize_record(
            outcome.result, dependencies.clock.now_utc(), dependencies.window_hours,
        )
    return _outcome_response(outcome, data)


def post_extend(
    request: ExtendHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    service = AccessLifecycleService(store=dependencies.store, clock=dependencies.clock)
    return _outcome_response(
        service.extend(request.record_id, request.hours, request.minutes)
    )


def post_record_action(
    request: RecordActionHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    service = AccessLifecycleService(store=dependencies.store, clock=dependencies.clock)
    action = getattr(service, request.action)
    return _outcome_response(action(request.record_id))


def export_records(
    request: ExportHttpRequest,
    dependencies: HttpApiDependencies,
) -> Union[ExportArtifact, dict[str, Any]]:
    try:
        records = _filtered_records(request.records, dependencies)
    except AccessStoreError as exc:
        return _store_failure(exc, "records.export")

    now = dependencies.clock.now_utc()
    if request.fmt == "csv":
        return ExportArtifact(
            filename=export_filename(now, "csv"),
            content_type="text/csv; charset=utf-8",
            content=render_csv(records).encode("utf-8"),
        )
    return ExportArtifact(
        filename=export_filename(now, "pdf"),
        content_type="application/pdf",
        content=render_pdf(records, generated_at=now),
    )


# ══════════════════════════════════════════════════════════════
# DASHBOARD
# ══════════════════════════════════════════════════════════════

def _dashboard_records(dependencies: HttpApiDependencies, now: datetime):
    start, _ = day_bounds(now)
    return dependencies.store.list_access_records(
        RecordQuery(since=start, include_open=True)
    )


def get_dashboard(dependencies: HttpApiDependencies) -> dict[str, Any]:
    now = dependencies.clock.now_utc()
    try:
        records = _dashboard_records(dependencies, now)
    except AccessStoreError as exc:
        logger.warning(f"Dashboard read failed, showing zeroed stats: {exc.message}")
        records = []

    stats = safe_dashboard_stats(records, now)
    recent = records[: dependencies.dashboard_recent_limit]
    return success_response({
        "stats": serialize_stats(stats),
        "recent": [serialize_record(r, now, dependencies.window_hours) for r in recent],
        "generated_at": now.isoformat(),
    })


def get_zone_occupancy(dependencies: HttpApiDependencies) -> dict[str, Any]:
    now = dependencies.clock.now_utc()
    try:
        records = dependencies.store.list_access_records(RecordQuery(open_only=True))
    except AccessStoreError as exc:
        return _store_failure(exc, "zones.list")
    zones = zone_occupancy(records, now, dependencies.window_hours)
    return success_response({
        "zones": [serialize_zone(z) for z in zones.values()],
        "count": len(zones),
    })


def get_briefing(dependencies: HttpApiDependencies) -> dict[str, Any]:
    now = dependencies.clock.now_utc()
    try:
        records = _dashboard_records(dependencies, now)
    except AccessStoreError as exc:
        logger.warning(f"Briefing read failed: {exc.message}")
        records = []
    stats = safe_dashboard_stats(records, now)
    if dependencies.briefing is None:
        text = NOT_CONFIGURED_TEXT
    else:
        text = dependencies.briefing.generate(
            stats, records[: dependencies.dashboard_recent_limit]
        )
    return success_response({"text": text, "generated_at": now.isoformat()})


# ══════════════════════════════════════════════════════════════
# PEOPLE / SESSIONS
# ══════════════════════════════════════════════════════════════

def _roster(dependencies: HttpApiDependencies) -> RosterService:
    return RosterService(
        people=dependencies.people,
        sessions=dependencies.sessions,
        clock=dependencies.clock,
    )


def list_people(
    request: PersonListHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    try:
        people = _roster(dependencies).list_people()
    except AccessStoreError as exc:
        return _store_failure(exc, "people.list")
    matched = PersonFilter(
        search=request.search, role=request.role, blacklisted=request.blacklisted,
    ).apply(people)
    return success_response({
        "items": [serialize_person(p) for p in matched],
        "count": len(matched),
    })


def post_person_register(
    request: PersonRegisterHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    outcome = _roster(dependencies).register_person(
        request.display_name, request.role, company=request.company,
        phone=request.phone, email=request.email, avatar_url=request.avatar_url,
    )
    data = serialize_person(outcome.result) if outcome.is_accepted else None
    return _outcome_response(outcome, data)


def post_person_standing(
    request: PersonStandingHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    roster = _roster(dependencies)
    if request.blacklist:
        outcome = roster.blacklist_person(request.person_id, request.reason)
    else:
        outcome = roster.reinstate_person(request.person_id)
    data = serialize_person(outcome.result) if outcome.is_accepted else None
    return _outcome_response(outcome, data)


def list_sessions(dependencies: HttpApiDependencies) -> dict[str, Any]:
    try:
        sessions = _roster(dependencies).list_sessions()
    except AccessStoreError as exc:
        return _store_failure(exc, "sessions.list")
    return success_response({
        "items": [serialize_session(s) for s in sessions],
        "count": len(sessions),
    })


def list_session_registrations(
    session_id: str,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    try:
        regs = _roster(dependencies).list_pre_registrations(session_id)
    except AccessStoreError as exc:
        return _store_failure(exc, "sessions.registrations")
    return success_response({
        "items": [serialize_pre_registration(r) for r in regs],
        "count": len(regs),
    })


def post_session_create(
    request: SessionCreateHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    outcome = _roster(dependencies).create_session(
        request.host_id, request.event_name, request.venue,
        request.session_date, request.participants,
    )
    data = serialize_session(outcome.result) if outcome.is_accepted else None
    return _outcome_response(outcome, data)


def run_handler(handler, *args) -> Any:
    """Call a handler, mapping unexpected exceptions to an error envelope."""
    try:
        return handler(*args)
    except Exception as exc:
        return _unexpected_failure(exc, getattr(handler, "__name__", "handler"))
