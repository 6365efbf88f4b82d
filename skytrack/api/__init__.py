"""API routers for SkyTrack."""

from fastapi import APIRouter

from .health import router as health_router
from .proxy import router as proxy_router
from .recent import router as recent_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(proxy_router)
api_router.include_router(recent_router)

__all__ = ["api_router"]
