"""Shared HTTP plumbing for provider adapters."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

import httpx

from skytrack.config import settings
from skytrack.providers.errors import UpstreamError

logger = logging.getLogger("skytrack.providers")


def parse_timestamp(raw_ts: Any) -> datetime | None:
    """Parse epoch seconds or ISO-8601 text into an aware UTC-based datetime."""

    if raw_ts is None or raw_ts == "":
        return None
    try:
        if isinstance(raw_ts, (int, float)):
            return datetime.fromtimestamp(raw_ts, tz=timezone.utc)
        if isinstance(raw_ts, str):
            if raw_ts.endswith("Z"):
                raw_ts = raw_ts[:-1] + "+00:00"
            parsed = datetime.fromisoformat(raw_ts)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    except (ValueError, OverflowError, OSError):
        logger.debug("Failed to parse timestamp: %s", raw_ts)
    return None


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def to_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class HttpProvider:
    """Base for adapters that issue a single GET per lookup.

    Transport-level failures are mapped to :class:`UpstreamError` here; status
    codes are left to each adapter since their meaning differs per provider.
    """

    name = "provider"

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout or settings.provider_timeout
        self.transport = transport

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                return await client.get(url, params=params, headers=headers, auth=auth)
        except httpx.TimeoutException as exc:
            logger.warning("%s request timed out: %s", self.name, exc)
            raise UpstreamError(f"{self.name} request timed out", provider=self.name) from exc
        except httpx.RequestError as exc:
            logger.warning("%s request failed: %s", self.name, exc)
            raise UpstreamError(f"{self.name} request failed", provider=self.name) from exc

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Failed to parse %s JSON response: %s", self.name, exc)
            raise UpstreamError(
                f"{self.name} returned an invalid response", provider=self.name
            ) from exc

    def _raise_for_status(self, response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "%s returned error: status=%s body=%s",
                self.name,
                exc.response.status_code,
                exc.response.text[:200],
            )
            raise UpstreamError(
                f"{self.name} returned HTTP {exc.response.status_code}",
                provider=self.name,
            ) from exc


__all__ = ["HttpProvider", "parse_timestamp", "to_float", "utcnow"]
