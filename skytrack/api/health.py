"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter

from skytrack import __version__
from skytrack.config import settings

router = APIRouter()


def provider_status() -> dict[str, bool]:
    """Which upstream providers have credentials; OpenSky works anonymously."""

    return {
        "aviationstack": bool(settings.aviationstack_key),
        "aerodatabox": settings.aerodatabox_configured,
        "openweather": bool(settings.openweather_key),
        "opensky": True,
    }


@router.get("/healthz", summary="Health check")
def health_check() -> dict[str, Any]:
    return {
        "status": "ok",
        "env": settings.skytrack_env,
        "version": __version__,
        "providers": provider_status(),
    }
