"""
Premise HTTP API - Error Mapping
================================
Stable transport error mapping for operation rejections and handler
failures.
"""

from __future__ import annotations

from typing import Any, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.http_api.contracts import HttpApiErrorBody, HttpApiResponse

INVALID_REQUEST = "INVALID_REQUEST"
HANDLER_EXECUTION_FAILED = "HANDLER_EXECUTION_FAILED"

HTTP_STATUS_BY_CODE = {
    INVALID_REQUEST: 400,
    ReasonCode.VALIDATION_FAILED: 400,
    ReasonCode.NOT_FOUND: 404,
    ReasonCode.PRECONDITION_FAILED: 409,
    ReasonCode.STORE_UNAVAILABLE: 503,
    HANDLER_EXECUTION_FAILED: 500,
}


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(data: Any) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data).to_dict()


def map_rejection_reason(reason: RejectionReason) -> HttpApiErrorBody:
    return HttpApiErrorBody(
        code=reason.code,
        message=reason.message,
        details={
            "policy_name": reason.policy_name,
            "message_key": f"rejection.{reason.code.lower()}",
        },
    )


def rejection_response(
    reason: RejectionReason,
    *,
    extra_details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    mapped = map_rejection_reason(reason)
    details = dict(mapped.details)
    if extra_details:
        details.update(extra_details)
    return error_response(
        code=mapped.code,
        message=mapped.message,
        details=details,
    )


def http_status_for(payload: dict[str, Any]) -> int:
    """HTTP status for an envelope produced by the handlers."""
    if payload.get("ok"):
        return 200
    code = (payload.get("error") or {}).get("code")
    return HTTP_STATUS_BY_CODE.get(code, 400)
