from fastapi import APIRouter

from object_access_app.web.routers.inspector import router as inspector_router
from object_access_app.web.routers.pages import router as pages_router
from object_access_app.web.routers.system import router as system_router


router = APIRouter()
router.include_router(system_router)
router.include_router(inspector_router)
router.include_router(pages_router)
