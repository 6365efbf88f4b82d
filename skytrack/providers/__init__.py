"""Provider adapters for SkyTrack."""

from .aircraft_image import AircraftImageProvider
from .airports import AirportProvider
from .errors import (
    ConfigError,
    InputError,
    NotFoundError,
    ProviderError,
    UpstreamError,
)
from .live_position import LivePositionProvider
from .schedule import ScheduleProvider
from .weather import WeatherProvider

__all__ = [
    "AircraftImageProvider",
    "AirportProvider",
    "ConfigError",
    "InputError",
    "LivePositionProvider",
    "NotFoundError",
    "ProviderError",
    "ScheduleProvider",
    "UpstreamError",
    "WeatherProvider",
]
