"""Models for airport and aircraft enrichment lookups."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AirportDetail(BaseModel):
    """Location data used to backfill a schedule leg."""

    iata_code: str
    name: Optional[str] = None
    latitude: float
    longitude: float
    timezone: Optional[str] = Field(default=None, description="IANA timezone name")


class AircraftImage(BaseModel):
    """Photo of a specific airframe."""

    url: str = Field(..., description="Direct image URL")
    web_url: Optional[str] = Field(default=None, description="Page hosting the photo")
    author: Optional[str] = None
    title: Optional[str] = None
    license: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


__all__ = ["AircraftImage", "AirportDetail"]
