from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from object_access_app.inspector import FieldSelected, ObjectSelected, SubmitClicked, UserSelected
from object_access_app.web.routers.common import apply_and_wait, drop_session_inspector, session_inspector

router = APIRouter(prefix="/api/inspector")


class SelectionChange(BaseModel):
    value: str | None = None


class SortChange(BaseModel):
    column: str | None = None
    descending: bool = False


def _snapshot_response(inspector, **extra) -> JSONResponse:
    payload = {"ok": True, **inspector.snapshot(), **extra}
    return JSONResponse(payload)


@router.get("")
async def api_inspector_state(request: Request):
    inspector = await session_inspector(request)
    return _snapshot_response(inspector)


@router.post("/object")
async def api_select_object(request: Request, change: SelectionChange):
    inspector = await session_inspector(request)
    await apply_and_wait(inspector.handle(ObjectSelected(change.value)))
    return _snapshot_response(inspector)


@router.post("/field")
async def api_select_field(request: Request, change: SelectionChange):
    inspector = await session_inspector(request)
    inspector.handle(FieldSelected(change.value))
    return _snapshot_response(inspector)


@router.post("/user")
async def api_select_user(request: Request, change: SelectionChange):
    inspector = await session_inspector(request)
    inspector.handle(UserSelected(change.value))
    return _snapshot_response(inspector)


@router.post("/submit")
async def api_submit(request: Request):
    inspector = await session_inspector(request)
    dispatched = await apply_and_wait(inspector.handle(SubmitClicked()))
    return _snapshot_response(inspector, dispatched=dispatched)


@router.post("/sort")
async def api_sort(request: Request, change: SortChange):
    inspector = await session_inspector(request)
    inspector.set_sort(change.column, descending=change.descending)
    return _snapshot_response(inspector)


@router.delete("")
async def api_reset_inspector(request: Request):
    drop_session_inspector(request)
    return JSONResponse({"ok": True})
