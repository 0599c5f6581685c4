"""Types for dashboard service."""

from typing import Awaitable, Callable, List, TypedDict, Union

from lib.openweathermap import AQIResult, CurrentWeather, ForecastDay, ForecastSource, GeocodingResult


class DashboardSnapshot(TypedDict):
    """Everything the dashboard shows for one city, fetched in one refresh"""

    location: GeocodingResult
    weather: CurrentWeather
    forecast: List[ForecastDay]
    forecastSource: ForecastSource
    aqi: AQIResult
    aqiCategory: str


AqiUpdateCallback = Callable[[AQIResult], Union[None, Awaitable[None]]]
