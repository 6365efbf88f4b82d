"""Flight schedule lookups from AviationStack, with airport backfill."""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from typing import Any, Callable, Optional

import httpx

from skytrack.config import settings
from skytrack.models.aircraft import AirportDetail
from skytrack.models.flight import (
    AircraftInfo,
    Airline,
    AirportLeg,
    FlightRecord,
    FlightStatus,
)
from skytrack.models.tracking import PositionSample
from skytrack.providers.airports import AirportProvider
from skytrack.providers.base import HttpProvider, parse_timestamp, to_float, utcnow
from skytrack.providers.errors import (
    ConfigError,
    InputError,
    NotFoundError,
    ProviderError,
    UpstreamError,
)

logger = logging.getLogger("skytrack.providers.schedule")

GENERIC_FAILURE = "Failed to fetch flight data"


def extract_error_message(payload: Any, default: str = GENERIC_FAILURE) -> str:
    """Pull a readable message out of an upstream error body."""

    if not isinstance(payload, dict):
        return default
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if payload.get("message"):
        return str(payload["message"])
    if isinstance(error, str) and error:
        return error
    return default


def _parse_leg(raw: Any) -> AirportLeg:
    if not isinstance(raw, dict):
        return AirportLeg()
    return AirportLeg(
        iata_code=raw.get("iata"),
        airport_name=raw.get("airport"),
        scheduled_time=parse_timestamp(raw.get("scheduled")),
        estimated_time=parse_timestamp(raw.get("estimated")),
        actual_time=parse_timestamp(raw.get("actual")),
        terminal=raw.get("terminal"),
        gate=raw.get("gate"),
        latitude=to_float(raw.get("latitude")),
        longitude=to_float(raw.get("longitude")),
        timezone=raw.get("timezone"),
    )


def _parse_live_hint(
    raw: Any, now: Callable[[], datetime] | None = None
) -> Optional[PositionSample]:
    """AviationStack reports altitude in meters and speeds in km/h.

    A block without ``updated`` is still a fix; it is stamped with ``now``.
    """

    if not isinstance(raw, dict):
        return None
    lat = to_float(raw.get("latitude"))
    lon = to_float(raw.get("longitude"))
    if lat is None or lon is None:
        return None
    timestamp = parse_timestamp(raw.get("updated")) or (now or utcnow)()

    altitude_m = to_float(raw.get("altitude"))
    speed_kmh = to_float(raw.get("speed_horizontal"))
    return PositionSample(
        latitude=lat,
        longitude=lon,
        altitude_ft=altitude_m * 3.28084 if altitude_m is not None else 0.0,
        ground_speed_mps=speed_kmh / 3.6 if speed_kmh is not None else 0.0,
        heading=to_float(raw.get("direction")),
        on_ground=raw.get("is_ground"),
        timestamp=timestamp,
    )


def parse_flight_record(
    raw: dict[str, Any],
    flight_code: str,
    *,
    now: Callable[[], datetime] | None = None,
) -> FlightRecord:
    """Normalize one AviationStack ``data`` entry."""

    airline_raw = raw.get("airline") or {}
    flight_raw = raw.get("flight") or {}
    aircraft_raw = raw.get("aircraft") or {}

    airline = None
    if any(airline_raw.get(key) for key in ("iata", "icao", "name")):
        airline = Airline(
            iata=airline_raw.get("iata"),
            icao=airline_raw.get("icao"),
            name=airline_raw.get("name"),
        )

    icao24 = aircraft_raw.get("icao24")
    return FlightRecord(
        flight_code=(flight_raw.get("iata") or flight_code).upper(),
        airline=airline,
        departure=_parse_leg(raw.get("departure")),
        arrival=_parse_leg(raw.get("arrival")),
        aircraft=AircraftInfo(
            registration=aircraft_raw.get("registration"),
            icao_type=aircraft_raw.get("icao"),
            icao24_hex=icao24.strip().lower() if icao24 else None,
        ),
        flight_status=FlightStatus.parse(raw.get("flight_status")),
        live_hint=_parse_live_hint(raw.get("live"), now),
    )


def _merge_airport(leg: AirportLeg, detail: AirportDetail | None) -> None:
    if detail is None:
        return
    leg.latitude = detail.latitude
    leg.longitude = detail.longitude
    if detail.timezone:
        leg.timezone = detail.timezone
    logger.debug(
        "Updated %s coords: %s, %s", leg.iata_code, detail.latitude, detail.longitude
    )


class ScheduleProvider(HttpProvider):
    """Resolve an IATA flight number to its current schedule snapshot."""

    name = "AviationStack"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        airport_provider: AirportProvider | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key if api_key is not None else settings.aviationstack_key
        self.base_url = base_url or settings.aviationstack_base_url
        self.airport_provider = airport_provider or AirportProvider(
            timeout=timeout, transport=transport
        )

    async def lookup(self, flight_code: str) -> FlightRecord:
        code = (flight_code or "").strip().upper()
        if not code:
            raise InputError("Flight number is required", provider=self.name)
        if not self.api_key:
            raise ConfigError("API key not configured", provider=self.name)

        logger.info("Looking up flight %s", code)
        response = await self._get(
            self.base_url,
            params={"access_key": self.api_key, "flight_iata": code, "limit": 1},
        )
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400 or (
            isinstance(payload, dict) and payload.get("error")
        ):
            message = extract_error_message(payload)
            logger.warning(
                "AviationStack error for %s: status=%s message=%s",
                code,
                response.status_code,
                message,
            )
            raise UpstreamError(message, provider=self.name)
        if not isinstance(payload, dict):
            raise UpstreamError(GENERIC_FAILURE, provider=self.name)

        data = payload.get("data") or []
        if not data:
            logger.info("No flight data found for %s", code)
            raise NotFoundError("Flight not found", provider=self.name)

        record = parse_flight_record(data[0], code)
        await self._backfill_airports(record)
        return record

    async def _backfill_airports(self, record: FlightRecord) -> None:
        departure, arrival = await asyncio.gather(
            self._airport_or_none(record.departure),
            self._airport_or_none(record.arrival),
        )
        _merge_airport(record.departure, departure)
        _merge_airport(record.arrival, arrival)

    async def _airport_or_none(self, leg: AirportLeg) -> AirportDetail | None:
        if not leg.iata_code or (leg.has_coordinates and leg.timezone):
            return None
        try:
            return await self.airport_provider.get_airport(leg.iata_code)
        except ConfigError as exc:
            logger.debug("Skipping airport backfill for %s: %s", leg.iata_code, exc.message)
        except ProviderError as exc:
            logger.warning("Failed to fetch airport %s: %s", leg.iata_code, exc.message)
        return None


__all__ = [
    "ScheduleProvider",
    "extract_error_message",
    "parse_flight_record",
]
