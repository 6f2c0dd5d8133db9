from __future__ import annotations

from fastapi import Request

from object_access_app.core.defaults import INSPECTOR_SESSION_KEY
from object_access_app.inspector import AccessInspector
from object_access_app.web.core import runtime


async def session_inspector(request: Request) -> AccessInspector:
    """Return the inspector bound to this UI session, creating and loading it on first use."""
    inspector_id, inspector = await runtime.get_registry().get_or_create(
        request.session.get(INSPECTOR_SESSION_KEY)
    )
    request.session[INSPECTOR_SESSION_KEY] = inspector_id
    return inspector


def drop_session_inspector(request: Request) -> None:
    inspector_id = request.session.pop(INSPECTOR_SESSION_KEY, None)
    if inspector_id:
        runtime.get_registry().drop(inspector_id)


async def apply_and_wait(task) -> bool:
    if task is None:
        return False
    await task
    return True
