"""
OpenWeatherMap client exceptions

This module contains the exception hierarchy raised by OpenWeatherMapClient.
Every exception renders as a single human-readable line, suitable for showing
to the user as-is.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class OpenWeatherMapError(Exception):
    """Base exception class for all OpenWeatherMap client errors

    Attributes:
        message: Human-readable error message
        status: HTTP status code (if the error came from an HTTP response)
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        logger.debug(f"OpenWeatherMapError: {message} (status: {status})")

    def __str__(self) -> str:
        return self.message


class MissingCredentialError(OpenWeatherMapError):
    """Raised when no API key is configured.

    This is a startup-time failure: it is raised before any network call is made.
    """

    def __init__(self, message: str = "Missing OpenWeatherMap API key. Please set OPENWEATHERMAP_API_KEY.") -> None:
        super().__init__(message)


class NotFoundError(OpenWeatherMapError):
    """Raised when geocoding returns no match for the requested city."""

    def __init__(self, message: str = "City not found. Please check the spelling.") -> None:
        super().__init__(message)


class InvalidCredentialsError(OpenWeatherMapError):
    """Raised on HTTP 401: the API key is invalid or not activated yet."""

    def __init__(self, message: str = "Invalid API key. Please verify the OpenWeatherMap API key.") -> None:
        super().__init__(message, status=401)


class RateLimitedError(OpenWeatherMapError):
    """Raised on HTTP 429: the account's call quota is exhausted."""

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.") -> None:
        super().__init__(message, status=429)


class ProviderError(OpenWeatherMapError):
    """Raised on any other failed request.

    Attributes:
        label: Name of the failed operation (e.g. "Daily forecast")
        status: HTTP status code, 0 for transport-level failures
        providerMessage: Message from the provider's JSON body, if any
    """

    def __init__(self, label: str, status: int, providerMessage: Optional[str] = None) -> None:
        self.label = label
        self.providerMessage = providerMessage
        message = f"{label} failed ({status})"
        if providerMessage:
            message += f": {providerMessage}"
        super().__init__(message, status=status)


class MalformedResponseError(ProviderError):
    """Raised when a successful response has an unparseable body or an unexpected shape."""

    def __init__(self, label: str, status: int = 200) -> None:
        super().__init__(label, status, None)
