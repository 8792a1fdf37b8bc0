"""
Premise HTTP API - Public API
============================
"""

from core.http_api.contracts import (
    ExportHttpRequest,
    ExtendHttpRequest,
    GrantHttpRequest,
    HttpApiErrorBody,
    HttpApiResponse,
    PersonListHttpRequest,
    PersonRegisterHttpRequest,
    PersonStandingHttpRequest,
    RecordActionHttpRequest,
    RecordListHttpRequest,
    SessionCreateHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    error_response,
    http_status_for,
    map_rejection_reason,
    rejection_response,
    success_response,
)
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
)

__all__ = [
    "RecordListHttpRequest",
    "GrantHttpRequest",
    "ExtendHttpRequest",
    "RecordActionHttpRequest",
    "ExportHttpRequest",
    "PersonListHttpRequest",
    "PersonRegisterHttpRequest",
    "PersonStandingHttpRequest",
    "SessionCreateHttpRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "HttpApiDependencies",
    "ExportArtifact",
    "error_response",
    "success_response",
    "map_rejection_reason",
    "rejection_response",
    "http_status_for",
    "list_records",
    "post_grant",
    "post_extend",
    "post_record_action",
    "export_records",
    "get_dashboard",
    "get_zone_occupancy",
    "get_briefing",
    "list_people",
    "post_person_register",
    "post_person_standing",
    "list_sessions",
    "list_session_registrations",
    "post_session_create",
]
