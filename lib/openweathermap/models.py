"""
Data models for OpenWeatherMap API client

This module defines TypedDict classes for normalized API results.
Units follow what the dashboard displays: Celsius, km/h and km.
"""

from typing import Dict, List, Literal, Optional, TypedDict

# Normalized results


class Coordinates(TypedDict):
    """Geographic point"""

    lat: float  # Latitude
    lon: float  # Longitude


class GeocodingResult(TypedDict):
    """Result from geocoding API: best match for a city name"""

    lat: float  # Latitude
    lon: float  # Longitude
    city: str  # City name as the provider spells it
    country: str  # Country code (e.g., "IN")


class CurrentWeather(TypedDict):
    """Current conditions"""

    temperature: float  # Temperature (Celsius)
    condition: str  # Weather description, "N/A" when absent
    humidity: int  # Humidity percentage
    windSpeed: float  # Wind speed (km/h), converted from m/s
    visibility: float  # Visibility (km), converted from meters
    city: str  # City name
    country: str  # Country code


class ForecastDay(TypedDict):
    """One calendar day of forecast"""

    date: str  # ISO date (YYYY-MM-DD), UTC
    minTemp: float  # Min temperature (Celsius)
    maxTemp: float  # Max temperature (Celsius)
    condition: str  # Weather description
    pop: Optional[float]  # Probability of precipitation (0-1)


ForecastSource = Literal["daily", "aggregated"]


class ForecastResult(TypedDict):
    """Forecast days together with the endpoint strategy that produced them"""

    days: List[ForecastDay]
    source: ForecastSource


class PollutantReading(TypedDict):
    """Most recent air pollution reading at a point"""

    # https://openweathermap.org/api/air-pollution

    pm2_5: Optional[float]  # PM2.5 concentration (µg/m³)
    pm10: Optional[float]  # PM10 concentration (µg/m³)
    legacyIndex: Optional[int]  # Provider's own 1-5 index (1 = Good, 5 = Very Poor)


class AQIResult(TypedDict):
    """US EPA Air Quality Index for a location"""

    aqi: int  # 0-500
    location: str  # Location label


# Raw provider payloads (only the fields we read)


class IntervalSampleMain(TypedDict, total=False):
    temp: float
    temp_min: float
    temp_max: float


class IntervalSample(TypedDict, total=False):
    """One 3-hour step of the 5 day forecast"""

    # https://openweathermap.org/forecast5#fields_JSON

    dt: int  # Unix timestamp (UTC)
    main: IntervalSampleMain
    weather: List[Dict[str, str]]  # [{"description": ...}]
    pop: float  # Probability of precipitation (0-1)


class CombinedWeatherResult(TypedDict):
    """Combined geocoding + current weather result"""

    location: GeocodingResult
    weather: CurrentWeather
