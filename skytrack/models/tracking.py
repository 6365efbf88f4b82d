"""Position and resolved-state models produced while tracking a flight."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ETA_UNAVAILABLE = "--:--"


class TrackingState(str, Enum):
    """Where the currently displayed position came from."""

    NO_DATA = "NO_DATA"
    LIVE_TRACKED = "LIVE_TRACKED"
    ESTIMATED = "ESTIMATED"


class PositionSample(BaseModel):
    """Point-in-time physical state of an aircraft."""

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    altitude_ft: float = Field(default=0.0, description="Altitude in feet")
    ground_speed_mps: float = Field(
        default=0.0, description="Ground speed in meters per second"
    )
    heading: Optional[float] = Field(
        default=None, description="Track heading in degrees, 0 = north"
    )
    on_ground: Optional[bool] = Field(
        default=None, description="Whether the aircraft reports being on the ground"
    )
    timestamp: datetime = Field(..., description="When the sample was observed (UTC)")

    model_config = ConfigDict(extra="ignore")

    @property
    def ground_speed_kmh(self) -> float:
        return self.ground_speed_mps * 3.6


class ResolvedState(BaseModel):
    """Single position decision for one tick, with route metrics."""

    state: TrackingState = Field(..., description="Source of the position")
    position: PositionSample
    is_estimated: bool = Field(
        ..., description="True when the position comes from schedule interpolation"
    )
    total_route_km: Optional[float] = Field(default=None)
    distance_traveled_km: Optional[float] = Field(default=None)
    distance_remaining_km: Optional[float] = Field(default=None)
    eta_local_time: str = Field(
        default=ETA_UNAVAILABLE, description="Arrival clock time or '--:--'"
    )
    effective_speed_mps: float = Field(
        default=0.0,
        description="Speed used for countdowns; back-computed from the schedule when estimated",
    )
    progress: Optional[float] = Field(
        default=None, description="Schedule progress fraction for estimated positions"
    )
    resolved_at: datetime = Field(..., description="Wall-clock time of the resolution")

    @property
    def has_route_metrics(self) -> bool:
        return self.distance_remaining_km is not None


class AltitudePoint(BaseModel):
    """One entry of the rolling altitude chart."""

    time: datetime
    altitude_ft: float


__all__ = [
    "AltitudePoint",
    "ETA_UNAVAILABLE",
    "PositionSample",
    "ResolvedState",
    "TrackingState",
]
