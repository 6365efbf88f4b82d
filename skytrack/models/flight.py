"""Schedule snapshot models for the tracked flight."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from skytrack.models.tracking import PositionSample


class FlightStatus(str, Enum):
    """Normalized flight status reported by the schedule provider."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EN_ROUTE = "en-route"
    LANDED = "landed"
    ARRIVED = "arrived"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str | None) -> "FlightStatus":
        if not raw:
            return cls.UNKNOWN
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_still_active(self) -> bool:
        """Statuses under which a flight may still be airborne past its schedule."""
        return self in _STILL_ACTIVE

    @property
    def has_landed(self) -> bool:
        return self in (FlightStatus.LANDED, FlightStatus.ARRIVED)


_STILL_ACTIVE = frozenset(
    {FlightStatus.ACTIVE, FlightStatus.EN_ROUTE, FlightStatus.SCHEDULED}
)


class Airline(BaseModel):
    iata: Optional[str] = None
    icao: Optional[str] = None
    name: Optional[str] = None


class AirportLeg(BaseModel):
    """Departure or arrival side of a flight."""

    iata_code: Optional[str] = Field(default=None, description="IATA airport code")
    airport_name: Optional[str] = None
    scheduled_time: Optional[datetime] = None
    estimated_time: Optional[datetime] = None
    actual_time: Optional[datetime] = None
    terminal: Optional[str] = None
    gate: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = Field(default=None, description="IANA timezone name")

    model_config = ConfigDict(extra="ignore")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class AircraftInfo(BaseModel):
    registration: Optional[str] = None
    icao_type: Optional[str] = None
    icao24_hex: Optional[str] = Field(
        default=None, description="Transponder address used for live lookups"
    )


class FlightRecord(BaseModel):
    """Schedule snapshot for one tracked flight."""

    flight_code: str = Field(..., description="IATA flight number")
    airline: Optional[Airline] = None
    departure: AirportLeg = Field(default_factory=AirportLeg)
    arrival: AirportLeg = Field(default_factory=AirportLeg)
    aircraft: AircraftInfo = Field(default_factory=AircraftInfo)
    flight_status: FlightStatus = FlightStatus.UNKNOWN
    live_hint: Optional[PositionSample] = Field(
        default=None,
        description="Provider-supplied position, used only without an ICAO24 address",
    )

    model_config = ConfigDict(extra="ignore")

    @property
    def has_route_coordinates(self) -> bool:
        return self.departure.has_coordinates and self.arrival.has_coordinates

    @property
    def departure_time(self) -> Optional[datetime]:
        """Actual departure when known, otherwise scheduled."""
        return self.departure.actual_time or self.departure.scheduled_time

    @property
    def arrival_time(self) -> Optional[datetime]:
        """Estimated arrival when known, otherwise scheduled."""
        return self.arrival.estimated_time or self.arrival.scheduled_time


__all__ = [
    "AircraftInfo",
    "Airline",
    "AirportLeg",
    "FlightRecord",
    "FlightStatus",
]
