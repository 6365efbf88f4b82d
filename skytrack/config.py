"""Configuration settings for SkyTrack."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("skytrack.config")

_ssm_client = None


def _get_float(env_var: str, default: float) -> float:
    """Parse an environment variable into a float with a default."""

    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid value for %s: %r", env_var, value)
        return default


def _get_ssm_client():
    global _ssm_client
    if _ssm_client is None:
        _ssm_client = boto3.client(
            "ssm",
            region_name=os.getenv("AWS_REGION")
            or os.getenv("AWS_DEFAULT_REGION")
            or "us-east-1",
        )
    return _ssm_client


@lru_cache(maxsize=None)
def get_ssm_secret(name: str) -> str:
    """Fetch a provider credential from AWS SSM Parameter Store.

    Only consulted when ``SKYTRACK_SSM_PREFIX`` is set. The value is cached
    in-memory; a failed lookup is logged and yields an empty string so the
    affected provider reports itself as not configured.
    """

    prefix = os.getenv("SKYTRACK_SSM_PREFIX")
    if not prefix:
        return ""

    parameter = f"{prefix.rstrip('/')}/{name}"
    try:
        response = _get_ssm_client().get_parameter(Name=parameter, WithDecryption=True)
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.warning("Failed to load %s from SSM: %s", parameter, exc)
        return ""

    if not value:
        logger.warning("Received empty value for %s from SSM", parameter)
        return ""

    return value


def _credential(env_var: str, ssm_name: str) -> str:
    return os.getenv(env_var) or get_ssm_secret(ssm_name)


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    skytrack_env: str = os.getenv("SKYTRACK_ENV", "local")
    log_level: str = os.getenv("SKYTRACK_LOG_LEVEL", "INFO")
    database_url: str = os.getenv("SKYTRACK_DB_URL", "sqlite:///./skytrack.db")

    # Flight schedules (AviationStack)
    aviationstack_key: str = ""
    aviationstack_base_url: str = os.getenv(
        "AVIATIONSTACK_BASE_URL", "http://api.aviationstack.com/v1/flights"
    )

    # Airport details and aircraft photos (AeroDataBox via RapidAPI)
    aerodatabox_key: str = ""
    aerodatabox_host: str = os.getenv("AERODATABOX_HOST", "")

    # Current conditions (OpenWeather)
    openweather_key: str = ""
    openweather_base_url: str = os.getenv(
        "OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5/weather"
    )

    # Live positions (OpenSky); credentials are optional
    opensky_base_url: str = os.getenv(
        "OPENSKY_BASE_URL", "https://opensky-network.org/api/states/all"
    )
    opensky_username: str | None = os.getenv("OPENSKY_USERNAME") or None
    opensky_password: str | None = os.getenv("OPENSKY_PASSWORD") or None

    provider_timeout: float = _get_float("PROVIDER_TIMEOUT", 10.0)

    # Tracking cadence
    live_poll_seconds: float = _get_float("LIVE_POLL_SECONDS", 10.0)
    estimate_animation_seconds: float = _get_float("ESTIMATE_ANIMATION_SECONDS", 5.0)

    @property
    def aerodatabox_configured(self) -> bool:
        return bool(self.aerodatabox_key and self.aerodatabox_host)


settings = Settings()

# Credentials are resolved after construction so SSM lookups stay optional
settings.aviationstack_key = _credential("AVIATIONSTACK_KEY", "aviationstack_key")
settings.aerodatabox_key = _credential("AERODATABOX_KEY", "aerodatabox_key")
settings.openweather_key = _credential("OPENWEATHER_KEY", "openweather_key")

__all__ = ["settings", "Settings", "get_ssm_secret"]
