"""Pydantic models for SkyTrack."""

from .aircraft import AircraftImage, AirportDetail
from .flight import AircraftInfo, Airline, AirportLeg, FlightRecord, FlightStatus
from .tracking import (
    ETA_UNAVAILABLE,
    AltitudePoint,
    PositionSample,
    ResolvedState,
    TrackingState,
)
from .weather import WeatherSnapshot

__all__ = [
    "AircraftImage",
    "AircraftInfo",
    "Airline",
    "AirportDetail",
    "AirportLeg",
    "AltitudePoint",
    "ETA_UNAVAILABLE",
    "FlightRecord",
    "FlightStatus",
    "PositionSample",
    "ResolvedState",
    "TrackingState",
    "WeatherSnapshot",
]
