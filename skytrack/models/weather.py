"""Weather data models for airport conditions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class WeatherSnapshot(BaseModel):
    """Current conditions at a coordinate."""

    latitude: float = Field(..., description="Latitude of the observation point")
    longitude: float = Field(..., description="Longitude of the observation point")
    as_of: datetime = Field(..., description="Timestamp of the weather data (UTC)")
    location_name: Optional[str] = Field(
        default=None, description="Nearest named place reported by the provider",
    )
    temperature_c: Optional[float] = Field(
        default=None, description="Air temperature in Celsius",
    )
    feels_like_c: Optional[float] = Field(
        default=None, description="Apparent temperature in Celsius",
    )
    humidity_pct: Optional[float] = Field(
        default=None, description="Relative humidity in percent",
    )
    wind_speed_mps: Optional[float] = Field(
        default=None, description="Wind speed in meters per second",
    )
    wind_direction_deg: Optional[float] = Field(
        default=None, description="Wind direction in degrees",
    )
    visibility_km: Optional[float] = Field(
        default=None, description="Visibility in kilometers",
    )
    cloud_cover_pct: Optional[float] = Field(
        default=None, description="Cloud cover percentage",
    )
    condition: Optional[str] = Field(
        default=None, description="Short textual summary of conditions",
    )
    icon: Optional[str] = Field(default=None, description="Provider icon code")


__all__ = ["WeatherSnapshot"]
