"""Current conditions from OpenWeather."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

import httpx

from skytrack.config import settings
from skytrack.models.weather import WeatherSnapshot
from skytrack.providers.base import HttpProvider, parse_timestamp, to_float
from skytrack.providers.errors import ConfigError

logger = logging.getLogger("skytrack.providers.weather")


class WeatherProvider(HttpProvider):
    """Fetch metric current-conditions for a coordinate."""

    name = "OpenWeather"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key if api_key is not None else settings.openweather_key
        self.base_url = base_url or settings.openweather_base_url

    async def get_weather(self, lat: float, lon: float) -> WeatherSnapshot:
        if not self.api_key:
            raise ConfigError("OpenWeather API key not configured", provider=self.name)

        logger.debug("Fetching weather for lat=%s lon=%s", lat, lon)
        response = await self._get(
            self.base_url,
            params={"lat": lat, "lon": lon, "appid": self.api_key, "units": "metric"},
        )
        self._raise_for_status(response)
        payload = self._json(response)
        if not isinstance(payload, dict):
            payload = {}

        main = payload.get("main") or {}
        wind = payload.get("wind") or {}
        clouds = payload.get("clouds") or {}
        conditions = payload.get("weather") or [{}]
        visibility_m = to_float(payload.get("visibility"))

        snapshot = WeatherSnapshot(
            latitude=lat,
            longitude=lon,
            as_of=parse_timestamp(payload.get("dt")) or datetime.now(tz=timezone.utc),
            location_name=payload.get("name") or None,
            temperature_c=to_float(main.get("temp")),
            feels_like_c=to_float(main.get("feels_like")),
            humidity_pct=to_float(main.get("humidity")),
            wind_speed_mps=to_float(wind.get("speed")),
            wind_direction_deg=to_float(wind.get("deg")),
            visibility_km=(visibility_m / 1000) if visibility_m is not None else None,
            cloud_cover_pct=to_float(clouds.get("all")),
            condition=conditions[0].get("description") or conditions[0].get("main"),
            icon=conditions[0].get("icon"),
        )
        logger.debug("Weather snapshot fetched: %s", snapshot)
        return snapshot


__all__ = ["WeatherProvider"]
