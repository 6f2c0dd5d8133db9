from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from object_access_app.web.core.runtime import get_backend, get_config

router = APIRouter(prefix="/api")


@router.get("/health")
async def api_health():
    config = get_config()
    return JSONResponse(
        {
            "ok": True,
            "env": config.env,
            "backend": get_backend().mode,
        }
    )
