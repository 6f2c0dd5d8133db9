from __future__ import annotations

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse

from object_access_app.inspector import FieldSelected, ObjectSelected, SubmitClicked, UserSelected
from object_access_app.web.routers.common import apply_and_wait, session_inspector

router = APIRouter()


def _back_to_viewer() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


@router.get("/")
async def access_viewer_page(request: Request):
    inspector = await session_inspector(request)
    return request.app.state.templates.TemplateResponse(
        request,
        "access_viewer.html",
        {
            "request": request,
            "view": inspector.snapshot(),
        },
    )


@router.post("/inspector/object")
async def select_object(request: Request, value: str = Form("")):
    inspector = await session_inspector(request)
    await apply_and_wait(inspector.handle(ObjectSelected(value)))
    return _back_to_viewer()


@router.post("/inspector/field")
async def select_field(request: Request, value: str = Form("")):
    inspector = await session_inspector(request)
    inspector.handle(FieldSelected(value))
    return _back_to_viewer()


@router.post("/inspector/user")
async def select_user(request: Request, value: str = Form("")):
    inspector = await session_inspector(request)
    inspector.handle(UserSelected(value))
    return _back_to_viewer()


@router.post("/inspector/submit")
async def submit_selection(request: Request):
    inspector = await session_inspector(request)
    await apply_and_wait(inspector.handle(SubmitClicked()))
    return _back_to_viewer()


@router.get("/inspector/sort")
async def sort_results(request: Request, column: str = "", direction: str = "asc"):
    inspector = await session_inspector(request)
    inspector.set_sort(column, descending=direction.lower() == "desc")
    return _back_to_viewer()
