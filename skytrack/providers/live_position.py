"""Live aircraft positions from the OpenSky REST API."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Callable, Optional

import httpx

from skytrack.config import settings
from skytrack.models.tracking import PositionSample
from skytrack.providers.base import HttpProvider, parse_timestamp, to_float, utcnow

logger = logging.getLogger("skytrack.providers.live_position")

FEET_PER_METER = 3.28084


def _m_to_feet(value_m: Any) -> float | None:
    value = to_float(value_m)
    if value is None:
        return None
    return value * FEET_PER_METER


def parse_state_vector(
    entry: Any, *, now: Callable[[], datetime] | None = None
) -> Optional[PositionSample]:
    """Normalize one OpenSky state vector array into a sample.

    Index layout: 4 last_contact, 3 time_position, 5 longitude, 6 latitude,
    7 baro_altitude (m), 8 on_ground, 9 velocity (m/s), 10 true_track,
    13 geo_altitude (m).
    """

    if not isinstance(entry, (list, tuple)) or len(entry) < 11:
        return None

    lon = to_float(entry[5])
    lat = to_float(entry[6])
    if lat is None or lon is None:
        return None

    altitude_m = entry[13] if len(entry) > 13 and entry[13] is not None else entry[7]
    last_seen = entry[4] if entry[4] is not None else entry[3]
    timestamp = parse_timestamp(last_seen) or (now or utcnow)()

    return PositionSample(
        latitude=lat,
        longitude=lon,
        altitude_ft=_m_to_feet(altitude_m) or 0.0,
        ground_speed_mps=to_float(entry[9]) or 0.0,
        heading=to_float(entry[10]),
        on_ground=bool(entry[8]) if entry[8] is not None else None,
        timestamp=timestamp,
    )


class LivePositionProvider(HttpProvider):
    """Look up the current position of one aircraft by ICAO24 address.

    ``None`` means the aircraft is currently not reporting (parked, out of
    coverage, unknown address). Only transport or server failures raise.
    """

    name = "OpenSky"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self.base_url = base_url or settings.opensky_base_url
        username = username or settings.opensky_username
        password = password or settings.opensky_password
        self.auth = (username, password) if username and password else None

    async def get_position(self, icao24: str) -> PositionSample | None:
        hex_code = icao24.strip().lower()
        response = await self._get(
            self.base_url, params={"icao24": hex_code}, auth=self.auth
        )
        if response.status_code == 404:
            logger.info("Location not available for %s", hex_code)
            return None
        if response.status_code == 429:
            logger.warning("OpenSky rate limit encountered for %s", hex_code)
            return None
        self._raise_for_status(response)

        payload = self._json(response)
        states = payload.get("states") if isinstance(payload, dict) else None
        if not states:
            logger.info(
                "No live state for %s (aircraft may be on the ground or out of coverage)",
                hex_code,
            )
            return None

        sample = parse_state_vector(states[0])
        if sample is None:
            logger.info("Live state for %s has no position", hex_code)
        return sample


__all__ = ["LivePositionProvider", "parse_state_vector"]
