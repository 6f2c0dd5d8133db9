from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from object_access_app.web.http.errors import api_error_response, is_api_request, normalize_exception

LOGGER = logging.getLogger(__name__)


def _spec_response(request: Request, exc: Exception):
    spec = normalize_exception(exc)
    return api_error_response(
        request,
        status_code=spec.status_code,
        code=spec.code,
        message=spec.message,
        details=spec.details,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        if is_api_request(request):
            return _spec_response(request, exc)
        return await http_exception_handler(request, exc)

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        if is_api_request(request):
            return _spec_response(request, exc)
        return await request_validation_exception_handler(request, exc)

    @app.exception_handler(ValueError)
    async def _value_error_handler(request: Request, exc: ValueError):
        LOGGER.info(
            "Rejected request with invalid parameters. path=%s reason=%s",
            request.url.path,
            exc,
            extra={"event": "bad_request", "path": str(request.url.path)},
        )
        if is_api_request(request):
            return _spec_response(request, exc)
        return PlainTextResponse(str(exc) or "Request parameters are invalid.", status_code=400)
