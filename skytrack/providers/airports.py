"""Airport detail lookups from AeroDataBox."""

from __future__ import annotations

import logging

import httpx

from skytrack.config import settings
from skytrack.models.aircraft import AirportDetail
from skytrack.providers.base import HttpProvider, to_float
from skytrack.providers.errors import ConfigError

logger = logging.getLogger("skytrack.providers.airports")


def rapidapi_headers(api_key: str, host: str) -> dict[str, str]:
    return {"x-rapidapi-key": api_key, "x-rapidapi-host": host}


class AirportProvider(HttpProvider):
    """Resolve an IATA airport code to coordinates and timezone."""

    name = "AeroDataBox"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        host: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key if api_key is not None else settings.aerodatabox_key
        self.host = host if host is not None else settings.aerodatabox_host

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.host)

    async def get_airport(self, iata_code: str | None) -> AirportDetail | None:
        if not iata_code:
            return None
        if not self.is_configured:
            raise ConfigError("Aerodatabox API keys not configured", provider=self.name)

        code = iata_code.strip().upper()
        logger.debug("Fetching airport details for %s", code)
        response = await self._get(
            f"https://{self.host}/airports/iata/{code}",
            headers=rapidapi_headers(self.api_key, self.host),
        )
        if response.status_code in (204, 404):
            logger.info("No airport details for %s", code)
            return None
        self._raise_for_status(response)

        payload = self._json(response)
        if not isinstance(payload, dict):
            return None
        location = payload.get("location") or {}
        lat = to_float(location.get("lat"))
        lon = to_float(location.get("lon"))
        if lat is None or lon is None:
            logger.info("Airport %s has no coordinates", code)
            return None

        return AirportDetail(
            iata_code=code,
            name=payload.get("fullName") or payload.get("name"),
            latitude=lat,
            longitude=lon,
            timezone=payload.get("timeZone"),
        )


__all__ = ["AirportProvider", "rapidapi_headers"]
