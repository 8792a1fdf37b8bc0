"""
Premise Django Adapter Views
============================
Pass-through HTTP views over core/http_api handlers.
"""

from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
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
    parse_bool,
    parse_int,
    parse_role,
    parse_status,
)
from core.http_api.errors import INVALID_REQUEST, error_response, http_status_for
from core.http_api.handlers import (
    ExportArtifact,
    export_records,
    get_briefing,
    get_dashboard,
    get_zone_occupancy,
    list_people,
    list_records,
    list_session_registrations,
    list_sessions,
    post_extend,
    post_grant,
    post_person_register,
    post_person_standing,
    post_record_action,
    post_session_create,
    run_handler,
)
from core.primitives.access import AccessStatus, PersonRole


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _json(payload: dict[str, Any]) -> JsonResponse:
    return JsonResponse(payload, status=http_status_for(payload))


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


def _record_list_contract(params) -> RecordListHttpRequest:
    return RecordListHttpRequest(
        search=params.get("search", ""),
        location=params.get("location", ""),
        role=parse_role(params.get("role")),
        status=parse_status(params.get("status")),
        on_site=bool(parse_bool(params.get("on_site"), "on_site")),
        limit=parse_int(params.get("limit"), "limit", default=50),
    )


def _dispatch_read(read_handler, contract_factory, request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    try:
        args = contract_factory(request)
    except (ValueError, KeyError) as exc:
        return _json_error(INVALID_REQUEST, str(exc), status=400)
    return _json(run_handler(read_handler, *args, build_dependencies()))


def _dispatch_write(write_handler, contract_factory, request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    try:
        body = _parse_json_body(request)
        contract = contract_factory(body=body, request=request)
    except KeyError as exc:
        return _json_error(INVALID_REQUEST, f"{exc.args[0]} is required.", status=400)
    except ValueError as exc:
        return _json_error(INVALID_REQUEST, str(exc), status=400)
    return _json(run_handler(write_handler, contract, build_dependencies()))


# ══════════════════════════════════════════════════════════════
# CONTRACT FACTORIES
# ══════════════════════════════════════════════════════════════

def _grant_contract_factory(*, body, request):
    return GrantHttpRequest(
        subject_id=str(body["subject_id"]),
        location_id=str(body["location_id"]),
        status=parse_status(body.get("status")) or AccessStatus.GRANTED,
        purpose=body.get("purpose", ""),
        vehicle_plate=body.get("vehicle_plate", ""),
    )


def _extend_contract_factory(*, body, request):
    return ExtendHttpRequest(
        record_id=request.resolver_match.kwargs["record_id"],
        hours=parse_int(body.get("hours"), "hours"),
        minutes=parse_int(body.get("minutes"), "minutes", default=0),
    )


def _action_contract_factory(action: str):
    def factory(*, body, request):
        return RecordActionHttpRequest(
            record_id=request.resolver_match.kwargs["record_id"],
            action=action,
        )
    return factory


def _person_register_contract_factory(*, body, request):
    return PersonRegisterHttpRequest(
        display_name=body["display_name"],
        role=parse_role(body.get("role")) or PersonRole.VISITOR,
        company=body.get("company", ""),
        phone=body.get("phone", ""),
        email=body.get("email", ""),
        avatar_url=body.get("avatar_url", ""),
    )


def _person_standing_contract_factory(blacklist: bool):
    def factory(*, body, request):
        return PersonStandingHttpRequest(
            person_id=request.resolver_match.kwargs["person_id"],
            blacklist=blacklist,
            reason=body.get("reason", ""),
        )
    return factory


def _session_create_contract_factory(*, body, request):
    return SessionCreateHttpRequest(
        host_id=str(body["host_id"]),
        event_name=body["event_name"],
        venue=body["venue"],
        session_date=body["session_date"],
        participants=body.get("participants", ""),
    )


# ══════════════════════════════════════════════════════════════
# ACCESS RECORDS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def records_list_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(
        list_records, lambda r: (_record_list_contract(r.GET),), request,
    )


@csrf_exempt
def records_grant_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(post_grant, _grant_contract_factory, request)


@csrf_exempt
def records_extend_view(request: HttpRequest, record_id: str) -> JsonResponse:
    return _dispatch_write(post_extend, _extend_contract_factory, request)


@csrf_exempt
def records_revoke_view(request: HttpRequest, record_id: str) -> JsonResponse:
    return _dispatch_write(post_record_action, _action_contract_factory("revoke"), request)


@csrf_exempt
def records_reinstate_view(request: HttpRequest, record_id: str) -> JsonResponse:
    return _dispatch_write(post_record_action, _action_contract_factory("reinstate"), request)


@csrf_exempt
def records_check_out_view(request: HttpRequest, record_id: str) -> JsonResponse:
    return _dispatch_write(post_record_action, _action_contract_factory("check_out"), request)


@csrf_exempt
def records_approve_view(request: HttpRequest, record_id: str) -> JsonResponse:
    return _dispatch_write(post_record_action, _action_contract_factory("approve"), request)


@csrf_exempt
def records_deny_view(request: HttpRequest, record_id: str) -> JsonResponse:
    return _dispatch_write(post_record_action, _action_contract_factory("deny"), request)


@csrf_exempt
def records_export_view(request: HttpRequest):
    if request.method != "GET":
        return _method_not_allowed()
    try:
        contract = ExportHttpRequest(
            fmt=request.GET.get("format", "csv").lower(),
            records=_record_list_contract(request.GET),
        )
    except ValueError as exc:
        return _json_error(INVALID_REQUEST, str(exc), status=400)

    result = run_handler(export_records, contract, build_dependencies())
    if not isinstance(result, ExportArtifact):
        return _json(result)
    response = HttpResponse(result.content, content_type=result.content_type)
    response["Content-Disposition"] = f'attachment; filename="{result.filename}"'
    return response


# ══════════════════════════════════════════════════════════════
# DASHBOARD
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def dashboard_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(get_dashboard, lambda r: (), request)


@csrf_exempt
def zones_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(get_zone_occupancy, lambda r: (), request)


@csrf_exempt
def briefing_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(get_briefing, lambda r: (), request)


# ══════════════════════════════════════════════════════════════
# PEOPLE / SESSIONS
# ══════════════════════════════════════════════════════════════

def _person_list_contract(request: HttpRequest):
    params = request.GET
    return (PersonListHttpRequest(
        search=params.get("search", ""),
        role=parse_role(params.get("role")),
        blacklisted=parse_bool(params.get("blacklisted"), "blacklisted"),
    ),)


@csrf_exempt
def people_list_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(list_people, _person_list_contract, request)


@csrf_exempt
def people_register_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(post_person_register, _person_register_contract_factory, request)


@csrf_exempt
def people_blacklist_view(request: HttpRequest, person_id: str) -> JsonResponse:
    return _dispatch_write(
        post_person_standing, _person_standing_contract_factory(True), request,
    )


@csrf_exempt
def people_reinstate_view(request: HttpRequest, person_id: str) -> JsonResponse:
    return _dispatch_write(
        post_person_standing, _person_standing_contract_factory(False), request,
    )


@csrf_exempt
def sessions_list_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(list_sessions, lambda r: (), request)


@csrf_exempt
def sessions_create_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(post_session_create, _session_create_contract_factory, request)


@csrf_exempt
def session_registrations_view(request: HttpRequest, session_id: str) -> JsonResponse:
    return _dispatch_read(list_session_registrations, lambda r: (session_id,), request)
