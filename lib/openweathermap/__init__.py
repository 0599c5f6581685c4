"""
OpenWeatherMap Async Client Library

This module provides an async client for the OpenWeatherMap API.
Supports geocoding (city name → coordinates), current weather, daily forecast
(aggregated from the 3-hour forecast when the daily one is unavailable) and
air quality as US EPA AQI.

Example usage:
    from lib.openweathermap import OpenWeatherMapClient, OpenWeatherMapError

    client = OpenWeatherMapClient(apiKey="your_api_key")
    try:
        weather = await client.getCurrentWeather("New Delhi")
        print(f"Temperature: {weather['temperature']}°C")
    except OpenWeatherMapError as e:
        print(f"Error: {e}")
"""

from .aggregator import aggregateIntervalForecast
from .client import OpenWeatherMapClient
from .errors import (
    InvalidCredentialsError,
    MalformedResponseError,
    MissingCredentialError,
    NotFoundError,
    OpenWeatherMapError,
    ProviderError,
    RateLimitedError,
)
from .models import (
    AQIResult,
    CombinedWeatherResult,
    Coordinates,
    CurrentWeather,
    ForecastDay,
    ForecastResult,
    ForecastSource,
    GeocodingResult,
    IntervalSample,
    PollutantReading,
)

__all__ = [
    "Coordinates",
    "GeocodingResult",
    "CurrentWeather",
    "ForecastDay",
    "ForecastResult",
    "ForecastSource",
    "IntervalSample",
    "PollutantReading",
    "AQIResult",
    "CombinedWeatherResult",
    "OpenWeatherMapClient",
    "aggregateIntervalForecast",
    "OpenWeatherMapError",
    "MissingCredentialError",
    "NotFoundError",
    "InvalidCredentialsError",
    "RateLimitedError",
    "ProviderError",
    "MalformedResponseError",
]
