"""Aircraft photo lookups from AeroDataBox."""

from __future__ import annotations

import logging

import httpx

from skytrack.config import settings
from skytrack.models.aircraft import AircraftImage
from skytrack.providers.airports import rapidapi_headers
from skytrack.providers.base import HttpProvider
from skytrack.providers.errors import ConfigError

logger = logging.getLogger("skytrack.providers.aircraft_image")


class AircraftImageProvider(HttpProvider):
    """Fetch a photo for an aircraft registration; a missing photo is ``None``."""

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

    async def get_image(self, registration: str) -> AircraftImage | None:
        if not (self.api_key and self.host):
            raise ConfigError("Aerodatabox API keys not configured", provider=self.name)

        reg = registration.strip().upper()
        response = await self._get(
            f"https://{self.host}/aircrafts/reg/{reg}/image/beta",
            headers=rapidapi_headers(self.api_key, self.host),
        )
        if response.status_code in (204, 404):
            logger.info("No image found for aircraft %s", reg)
            return None
        self._raise_for_status(response)

        payload = self._json(response)
        if not isinstance(payload, dict) or not payload.get("url"):
            return None

        return AircraftImage(
            url=payload["url"],
            web_url=payload.get("webUrl"),
            author=payload.get("author"),
            title=payload.get("title"),
            license=payload.get("license"),
        )


__all__ = ["AircraftImageProvider"]
