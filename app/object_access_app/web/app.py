from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from pathlib import Path
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from object_access_app.core.defaults import DEFAULT_SESSION_SECRET
from object_access_app.core.env import (
    OAV_ALLOW_DEFAULT_SESSION_SECRET,
    OAV_REQUEST_ID_HEADER_ENABLED,
    OAV_SESSION_HTTPS_ONLY,
    OAV_SESSION_SECRET,
    get_env,
    get_env_bool,
)
from object_access_app.infrastructure.logging import setup_app_logging
from object_access_app.web.core.runtime import close_runtime, get_config
from object_access_app.web.http.errors import api_error_response, is_api_request, normalize_exception
from object_access_app.web.http.exception_handlers import register_exception_handlers
from object_access_app.web.routers import router as web_router

LOGGER = logging.getLogger(__name__)
PERF_LOGGER = logging.getLogger("object_access_app.perf")


def create_app() -> FastAPI:
    setup_app_logging()
    config = get_config()
    session_secret = get_env(OAV_SESSION_SECRET, DEFAULT_SESSION_SECRET)
    allow_default_session_secret = get_env_bool(OAV_ALLOW_DEFAULT_SESSION_SECRET, default=False)
    if (
        not config.is_dev_env
        and session_secret == DEFAULT_SESSION_SECRET
        and not allow_default_session_secret
    ):
        raise RuntimeError(
            "OAV_SESSION_SECRET must be set to a strong, non-default value outside dev/local environments."
        )
    session_https_only = get_env_bool(OAV_SESSION_HTTPS_ONLY, default=not config.is_dev_env)
    request_id_header_enabled = get_env_bool(OAV_REQUEST_ID_HEADER_ENABLED, default=True)

    @asynccontextmanager
    async def _app_lifespan(_app: FastAPI):
        LOGGER.info(
            "Object access viewer starting. env=%s backend=%s",
            config.env,
            config.backend_mode,
            extra={"event": "app_startup", "env": config.env, "backend_mode": config.backend_mode},
        )
        try:
            yield
        finally:
            await close_runtime()

    app = FastAPI(title="Object Access Viewer", lifespan=_app_lifespan)

    base_dir = Path(__file__).resolve().parent
    app.state.templates = Jinja2Templates(directory=str(base_dir / "templates"))

    @app.middleware("http")
    async def _request_context_middleware(request: Request, call_next):
        request_id = uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        started = time.perf_counter()
        status_code = 500
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                LOGGER.exception(
                    "Unhandled web request error. path=%s method=%s",
                    request.url.path,
                    request.method,
                    extra={
                        "event": "unhandled_web_error",
                        "request_id": request_id,
                        "method": request.method,
                        "path": str(request.url.path),
                    },
                )
                spec = normalize_exception(exc)
                response = api_error_response(
                    request,
                    status_code=spec.status_code,
                    code=spec.code,
                    message=spec.message,
                    details=spec.details if is_api_request(request) else None,
                )
            status_code = response.status_code
            if request_id_header_enabled:
                response.headers.setdefault("X-Request-ID", request_id)
            return response
        finally:
            PERF_LOGGER.debug(
                "request_perf id=%s method=%s path=%s status=%s total_ms=%.2f",
                request_id,
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - started) * 1000.0,
                extra={"event": "request_perf", "request_id": request_id, "status_code": status_code},
            )

    register_exception_handlers(app)
    app.include_router(web_router)
    # Added last so it wraps the request-context middleware and routes.
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        same_site="lax",
        https_only=session_https_only,
    )
    return app
