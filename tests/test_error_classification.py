from __future__ import annotations

import sys
from pathlib import Path

from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from object_access_app.core.errors import ServiceError  # noqa: E402
from object_access_app.web.http.errors import (  # noqa: E402
    build_api_error_payload,
    is_api_request,
    normalize_exception,
)


class _Route:
    def __init__(self, path: str) -> None:
        self.path = path


def _request(path: str, *, route_path: str = "") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": "https",
        "server": ("testserver", 443),
        "path": path,
        "query_string": b"",
        "headers": [],
    }
    if route_path:
        scope["route"] = _Route(route_path)

    async def _receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


def test_is_api_request_prefers_route_path() -> None:
    assert is_api_request(_request("/proxy/app/api/inspector", route_path="/api/inspector")) is True
    assert is_api_request(_request("/api/proxy/viewer", route_path="/")) is False


def test_is_api_request_path_fallback() -> None:
    assert is_api_request(_request("/api/health")) is True
    assert is_api_request(_request("/inspector/submit")) is False


def test_service_error_maps_to_bad_gateway() -> None:
    spec = normalize_exception(ServiceError("down", operation="list_objects", status_code=500))

    assert spec.status_code == 502
    assert spec.code == "BACKEND_UNAVAILABLE"
    assert spec.details == {"operation": "list_objects", "reason": "down"}


def test_value_error_maps_to_bad_request() -> None:
    spec = normalize_exception(ValueError("Unknown sort column: IsDeletable"))

    assert spec.status_code == 400
    assert spec.code == "BAD_REQUEST"
    assert spec.message == "Unknown sort column: IsDeletable"


def test_http_exception_keeps_status() -> None:
    not_found = normalize_exception(StarletteHTTPException(status_code=404, detail="Not Found"))
    conflict = normalize_exception(StarletteHTTPException(status_code=409, detail="busy"))

    assert (not_found.status_code, not_found.code) == (404, "NOT_FOUND")
    assert (conflict.status_code, conflict.code, conflict.message) == (409, "INTERNAL_SERVER_ERROR", "busy")


def test_unexpected_errors_map_to_internal() -> None:
    spec = normalize_exception(KeyError("boom"))

    assert spec.status_code == 500
    assert spec.code == "INTERNAL_SERVER_ERROR"


def test_error_payload_hides_details_by_default(monkeypatch) -> None:
    monkeypatch.delenv("OAV_ERROR_INCLUDE_DETAILS", raising=False)
    hidden = build_api_error_payload(code="X", message="m", request_id="abc", details={"reason": "r"})
    monkeypatch.setenv("OAV_ERROR_INCLUDE_DETAILS", "true")
    shown = build_api_error_payload(code="X", message="m", request_id="abc", details={"reason": "r"})

    assert hidden["ok"] is False
    assert hidden["request_id"] == "abc"
    assert "details" not in hidden["error"]
    assert shown["error"]["details"] == {"reason": "r"}
