"""Proxy endpoints in front of the upstream flight data providers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from skytrack.providers import (
    AircraftImageProvider,
    ConfigError,
    LivePositionProvider,
    NotFoundError,
    ProviderError,
    ScheduleProvider,
    WeatherProvider,
)

router = APIRouter(prefix="/api/v1", tags=["providers"])

logger = logging.getLogger("skytrack.api.proxy")


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def get_schedule_provider() -> ScheduleProvider:
    return ScheduleProvider()


def get_live_position_provider() -> LivePositionProvider:
    return LivePositionProvider()


def get_weather_provider() -> WeatherProvider:
    return WeatherProvider()


def get_aircraft_image_provider() -> AircraftImageProvider:
    return AircraftImageProvider()


@router.get("/schedule", summary="Look up a flight by IATA flight number")
async def get_schedule(
    flight_code: Optional[str] = Query(default=None, description="IATA flight number"),
    flight_number: Optional[str] = Query(
        default=None, description="Alias of flight_code"
    ),
    provider: ScheduleProvider = Depends(get_schedule_provider),
):
    """Return the flight record; lookup failures are reported in the body with 200."""

    code = (flight_code or flight_number or "").strip()
    if not code:
        return _error(status.HTTP_400_BAD_REQUEST, "Flight number is required")

    try:
        record = await provider.lookup(code)
    except ConfigError as exc:
        logger.error("Schedule provider not configured: %s", exc.message)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)
    except NotFoundError as exc:
        return _error(status.HTTP_200_OK, exc.message)
    except ProviderError as exc:
        return _error(
            status.HTTP_200_OK, "Failed to fetch flight data", details=exc.message
        )

    return record.model_dump(mode="json")


@router.get("/live-position", summary="Current position for an ICAO24 address")
async def get_live_position(
    icao24: Optional[str] = Query(default=None, description="ICAO24 hex address"),
    provider: LivePositionProvider = Depends(get_live_position_provider),
):
    if not icao24 or not icao24.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "ICAO24 code is required")

    try:
        sample = await provider.get_position(icao24)
    except ProviderError as exc:
        logger.error("Error fetching location data: %s", exc.message)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch location data")

    if sample is None:
        return _error(status.HTTP_404_NOT_FOUND, "Location not available")
    return sample.model_dump(mode="json")


@router.get("/weather", summary="Current conditions at a coordinate")
async def get_weather(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180),
    provider: WeatherProvider = Depends(get_weather_provider),
):
    if lat is None or lon is None:
        logger.warning("Weather request missing coordinates")
        return _error(status.HTTP_400_BAD_REQUEST, "Missing coordinates")

    try:
        snapshot = await provider.get_weather(lat, lon)
    except ConfigError as exc:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)
    except ProviderError as exc:
        logger.error("Weather API error: %s", exc.message)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch weather")

    return snapshot.model_dump(mode="json")


@router.get("/aircraft-image", summary="Photo of an aircraft by registration")
async def get_aircraft_image(
    registration: Optional[str] = Query(default=None, description="Aircraft registration"),
    provider: AircraftImageProvider = Depends(get_aircraft_image_provider),
):
    """Return ``{"url": ...}``, or a ``null`` body when no photo exists."""

    if not registration or not registration.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Registration number required")

    try:
        image = await provider.get_image(registration)
    except ConfigError as exc:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)
    except ProviderError as exc:
        logger.error("Aircraft image API error: %s", exc.message)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch aircraft image"
        )

    if image is None:
        return JSONResponse(content=None)
    return image.model_dump(mode="json")
