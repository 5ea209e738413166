from fastapi import APIRouter

from app.notices.core.config import settings
from app.notices.routers.auth import router as auth_router
from app.notices.routers.health import router as health_router
from app.notices.routers.metrics import router as metrics_router
from app.notices.routers.notices import router as notices_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(notices_router, prefix="/admin", tags=["notices"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
