"""Failure taxonomy shared by all provider adapters.

Expected absence (aircraft not reporting, no photo, unknown airport) is
returned as ``None`` by the adapters and never raised.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for adapter failures; ``message`` is safe to show users."""

    default_message = "Provider request failed"

    def __init__(self, message: str | None = None, *, provider: str | None = None):
        self.message = message or self.default_message
        self.provider = provider
        super().__init__(self.message)


class NotFoundError(ProviderError):
    """The upstream has no record for the requested key."""

    default_message = "Not found"


class ConfigError(ProviderError):
    """Provider credentials are missing."""

    default_message = "Provider not configured"


class UpstreamError(ProviderError):
    """Network failure, timeout, or error response from the provider."""

    default_message = "Upstream provider error"


class InputError(ProviderError):
    """A required parameter is missing or malformed."""

    default_message = "Missing required parameter"


__all__ = [
    "ConfigError",
    "InputError",
    "NotFoundError",
    "ProviderError",
    "UpstreamError",
]
