from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from object_access_app.core.env import OAV_ERROR_INCLUDE_DETAILS, get_env_bool
from object_access_app.core.errors import ServiceError

ERROR_CODE_VALIDATION = "VALIDATION_ERROR"
ERROR_CODE_BAD_REQUEST = "BAD_REQUEST"
ERROR_CODE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"
ERROR_CODE_FORBIDDEN = "FORBIDDEN"
ERROR_CODE_BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
ERROR_CODE_INTERNAL = "INTERNAL_SERVER_ERROR"

_HTTP_STATUS_CODES = {
    400: ERROR_CODE_BAD_REQUEST,
    401: ERROR_CODE_UNAUTHORIZED,
    403: ERROR_CODE_FORBIDDEN,
    404: ERROR_CODE_NOT_FOUND,
    422: ERROR_CODE_VALIDATION,
}


@dataclass(frozen=True)
class ApiErrorSpec:
    status_code: int
    code: str
    message: str
    details: dict[str, Any] | None = None


def is_api_request(request: Request) -> bool:
    # Matched route path takes precedence over the raw URL.
    route_path = str(getattr(request.scope.get("route"), "path", "") or "")
    return (route_path or request.url.path).startswith("/api/")


def request_id_from_request(request: Request) -> str:
    request_id = str(getattr(request.state, "request_id", "") or "").strip()
    return request_id or str(request.headers.get("x-request-id", "")).strip() or "-"


def build_api_error_payload(
    *,
    code: str,
    message: str,
    request_id: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details and get_env_bool(OAV_ERROR_INCLUDE_DETAILS, default=False):
        error["details"] = details
    return {
        "ok": False,
        "error": error,
        "request_id": request_id or "-",
        "timestamp": datetime.now(UTC).isoformat(),
    }


def api_error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    request_id = request_id_from_request(request)
    payload = build_api_error_payload(code=code, message=message, request_id=request_id, details=details)
    return JSONResponse(payload, status_code=status_code, headers={"X-Request-ID": request_id})


def normalize_exception(exc: Exception) -> ApiErrorSpec:
    """Map an exception raised while serving a request to the API error envelope."""
    if isinstance(exc, RequestValidationError):
        return ApiErrorSpec(
            status_code=422,
            code=ERROR_CODE_VALIDATION,
            message="Request validation failed. Check field values and try again.",
            details={"errors": exc.errors()},
        )
    if isinstance(exc, ServiceError):
        return ApiErrorSpec(
            status_code=502,
            code=ERROR_CODE_BACKEND_UNAVAILABLE,
            message="The authorization backend is unavailable. Please try again shortly.",
            details={"operation": exc.operation, "reason": str(exc)},
        )
    if isinstance(exc, ValueError):
        return ApiErrorSpec(
            status_code=400,
            code=ERROR_CODE_BAD_REQUEST,
            message=str(exc) or "Request parameters are invalid.",
            details={"reason": str(exc)},
        )
    if isinstance(exc, StarletteHTTPException):
        return ApiErrorSpec(
            status_code=exc.status_code,
            code=_HTTP_STATUS_CODES.get(exc.status_code, ERROR_CODE_INTERNAL),
            message=str(exc.detail or "HTTP request failed."),
            details={"reason": str(exc.detail or "")},
        )
    return ApiErrorSpec(
        status_code=500,
        code=ERROR_CODE_INTERNAL,
        message="An unexpected error occurred while inspecting access.",
        details={"reason": str(exc), "type": exc.__class__.__name__},
    )
