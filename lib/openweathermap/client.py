"""
OpenWeatherMap Async Client

This module provides the main OpenWeatherMapClient class for fetching everything
the weather dashboard shows: geocoding, current conditions, daily forecast
(with a 3-hour forecast fallback) and air quality.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from lib.aqi import computeOverallAQI

from .aggregator import MAX_FORECAST_DAYS, aggregateIntervalForecast, conditionFromWeather, utcDateFromTimestamp
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
    GeocodingResult,
    IntervalSample,
    PollutantReading,
)
from .payload import nestedDict, numberOrNone

logger = logging.getLogger(__name__)


class OpenWeatherMapClient:
    """
    Async client for OpenWeatherMap API

    Creates a new HTTP session for each request to support proper concurrent requests.
    Every failure is raised as an OpenWeatherMapError subclass, nothing is retried.

    Example usage:
        client = OpenWeatherMapClient(apiKey="your_key")

        # Get coordinates
        location = await client.getCoordinates("New Delhi")

        # Get current weather
        weather = await client.getCurrentWeather("New Delhi")

        # Daily forecast, aggregated from 3-hour steps if needed
        forecast = await client.getForecast("New Delhi", location)

        # Air quality
        aqi = await client.getAQI(location["lat"], location["lon"], "New Delhi, IN")
    """

    GEOCODING_API = "http://api.openweathermap.org/geo/1.0/direct"
    CURRENT_WEATHER_API = "https://api.openweathermap.org/data/2.5/weather"
    DAILY_FORECAST_API = "https://api.openweathermap.org/data/2.5/onecall"
    INTERVAL_FORECAST_API = "https://api.openweathermap.org/data/2.5/forecast"
    AIR_POLLUTION_API = "https://api.openweathermap.org/data/2.5/air_pollution"

    def __init__(
        self,
        apiKey: Optional[str],
        requestTimeout: int = 10,
        defaultLanguage: str = "en",
    ):
        """
        Initialize OpenWeatherMap client

        Args:
            apiKey: OpenWeatherMap API key
            requestTimeout: HTTP request timeout (seconds)
            defaultLanguage: Language for weather descriptions

        Raises:
            MissingCredentialError: If apiKey is empty
        """
        if not apiKey:
            raise MissingCredentialError()
        self.apiKey = apiKey
        self.requestTimeout = requestTimeout
        self.defaultLanguage = defaultLanguage
        # No persistent session - create new session for each request

    async def getCoordinates(self, city: str) -> GeocodingResult:
        """
        Get coordinates by city name

        Uses: http://api.openweathermap.org/geo/1.0/direct

        Args:
            city: City name (e.g., "New Delhi", "London,GB")

        Returns:
            Best match with coordinates and normalized city/country names

        Raises:
            NotFoundError: If the provider knows no such city
        """
        query = city.strip()
        if not query:
            raise NotFoundError()

        params = {"q": query, "limit": 1}
        responseData = await self._makeRequest(self.GEOCODING_API, params, "Geocoding")
        if not isinstance(responseData, list) or len(responseData) == 0 or not isinstance(responseData[0], dict):
            logger.warning(f"No geocoding results for: {query}")
            raise NotFoundError()

        apiResult = responseData[0]
        lat = numberOrNone(apiResult.get("lat"))
        lon = numberOrNone(apiResult.get("lon"))
        if lat is None or lon is None:
            raise MalformedResponseError("Geocoding")

        result: GeocodingResult = {
            "lat": lat,
            "lon": lon,
            "city": str(apiResult.get("name") or query),
            "country": str(apiResult.get("country") or ""),
        }
        return result

    async def getCurrentWeather(self, city: str) -> CurrentWeather:
        """
        Get current weather by city name

        Uses: https://api.openweathermap.org/data/2.5/weather

        Wind speed is converted m/s -> km/h, visibility m -> km.
        """
        params = {"q": city.strip(), "units": "metric", "lang": self.defaultLanguage}
        responseData = await self._makeRequest(self.CURRENT_WEATHER_API, params, "Current weather")
        if not isinstance(responseData, dict) or not isinstance(responseData.get("main"), dict):
            raise MalformedResponseError("Current weather")

        main = responseData["main"]
        temperature = numberOrNone(main.get("temp"))
        if temperature is None:
            raise MalformedResponseError("Current weather")

        wind = nestedDict(responseData, "wind", "Current weather")
        windSpeed = numberOrNone(wind.get("speed")) or 0.0
        visibility = numberOrNone(responseData.get("visibility")) or 0.0
        countryInfo = nestedDict(responseData, "sys", "Current weather")

        result: CurrentWeather = {
            "temperature": temperature,
            "condition": conditionFromWeather(responseData.get("weather")),
            "humidity": int(numberOrNone(main.get("humidity")) or 0),
            "windSpeed": windSpeed * 3.6,
            "visibility": visibility / 1000,
            "city": str(responseData.get("name") or ""),
            "country": str(countryInfo.get("country") or ""),
        }
        return result

    async def getDailyForecast(self, lat: float, lon: float) -> List[ForecastDay]:
        """
        Get daily forecast by coordinates

        Uses: https://api.openweathermap.org/data/2.5/onecall

        Returns:
            Up to 7 days. Empty list if the provider gave no daily entries,
            which means the caller should use the 3-hour forecast instead.
        """
        params = {
            "lat": lat,
            "lon": lon,
            "exclude": "current,minutely,hourly,alerts",
            "units": "metric",
            "lang": self.defaultLanguage,
        }
        responseData = await self._makeRequest(self.DAILY_FORECAST_API, params, "Daily forecast")
        if not isinstance(responseData, dict):
            raise MalformedResponseError("Daily forecast")

        dailyItems = responseData.get("daily")
        if not isinstance(dailyItems, list):
            return []

        result: List[ForecastDay] = []
        for dailyItem in dailyItems:
            if len(result) >= MAX_FORECAST_DAYS:
                break
            if not isinstance(dailyItem, dict):
                continue
            tempData = nestedDict(dailyItem, "temp", "Daily forecast")
            result.append(
                {
                    "date": utcDateFromTimestamp(dailyItem.get("dt"), "Daily forecast"),
                    "minTemp": numberOrNone(tempData.get("min")) or 0.0,
                    "maxTemp": numberOrNone(tempData.get("max")) or 0.0,
                    "condition": conditionFromWeather(dailyItem.get("weather")),
                    "pop": numberOrNone(dailyItem.get("pop")),
                }
            )

        return result

    async def getIntervalForecast(self, lat: float, lon: float) -> List[IntervalSample]:
        """
        Get 5 day / 3 hour forecast by coordinates

        Uses: https://api.openweathermap.org/data/2.5/forecast

        Returns:
            Raw forecast steps in provider order
        """
        params = {"lat": lat, "lon": lon, "units": "metric", "lang": self.defaultLanguage}
        responseData = await self._makeRequest(self.INTERVAL_FORECAST_API, params, "Forecast")
        if not isinstance(responseData, dict):
            raise MalformedResponseError("Forecast")

        samples = responseData.get("list") or []
        if not isinstance(samples, list):
            raise MalformedResponseError("Forecast")
        return [sample for sample in samples if isinstance(sample, dict)]

    async def getForecast(self, city: str, coordinates: Optional[Coordinates] = None) -> ForecastResult:
        """
        Get daily forecast for a city, choosing the endpoint strategy

        The daily endpoint is tried first. If it fails with a provider error
        (e.g. the key has no One Call access) or returns no days, the 3-hour
        forecast is fetched and aggregated into days instead.

        Args:
            city: City name
            coordinates: Already resolved coordinates of the city, if any

        Returns:
            Forecast days and the source they came from ("daily" or "aggregated")

        Raises:
            NotFoundError: If the city can not be geocoded
        """
        coords: Optional[Coordinates] = coordinates
        try:
            if coords is None:
                geocoded = await self.getCoordinates(city)
                coords = {"lat": geocoded["lat"], "lon": geocoded["lon"]}
            days = await self.getDailyForecast(coords["lat"], coords["lon"])
            if days:
                return {"days": days, "source": "daily"}
            logger.info(f"Daily forecast for {city} is empty, aggregating 3-hour forecast")
        except (MissingCredentialError, NotFoundError):
            raise
        except OpenWeatherMapError as e:
            logger.info(f"Daily forecast for {city} unavailable ({e}), aggregating 3-hour forecast")

        return {"days": await self._getAggregatedForecast(city, coords), "source": "aggregated"}

    async def _getAggregatedForecast(self, city: str, coordinates: Optional[Coordinates]) -> List[ForecastDay]:
        if coordinates is None:
            geocoded = await self.getCoordinates(city)
            coordinates = {"lat": geocoded["lat"], "lon": geocoded["lon"]}

        samples = await self.getIntervalForecast(coordinates["lat"], coordinates["lon"])
        return aggregateIntervalForecast(samples)

    async def getPollutants(self, lat: float, lon: float) -> PollutantReading:
        """
        Get most recent air pollution reading by coordinates

        Uses: https://api.openweathermap.org/data/2.5/air_pollution
        """
        params = {"lat": lat, "lon": lon}
        responseData = await self._makeRequest(self.AIR_POLLUTION_API, params, "Air quality")
        if not isinstance(responseData, dict):
            raise MalformedResponseError("Air quality")

        entries = responseData.get("list") or []
        entry = entries[0] if isinstance(entries, list) and entries and isinstance(entries[0], dict) else {}
        components = nestedDict(entry, "components", "Air quality")
        main = nestedDict(entry, "main", "Air quality")
        legacyIndex = main.get("aqi")

        result: PollutantReading = {
            "pm2_5": numberOrNone(components.get("pm2_5")),
            "pm10": numberOrNone(components.get("pm10")),
            "legacyIndex": legacyIndex if isinstance(legacyIndex, int) and not isinstance(legacyIndex, bool) else None,
        }
        return result

    async def getAQI(self, lat: float, lon: float, location: str) -> AQIResult:
        """
        Get US EPA AQI (0-500) by coordinates

        Missing pollutant data degrades to the legacy index or 0, never to an error.
        """
        reading = await self.getPollutants(lat, lon)
        aqi = computeOverallAQI(reading["pm2_5"], reading["pm10"], reading["legacyIndex"])
        logger.debug(f"AQI for {location}: {aqi} (reading: {reading})")
        return {"aqi": aqi, "location": location}

    async def getWeatherByCity(self, city: str) -> CombinedWeatherResult:
        """
        Combined operation: get coordinates then current weather

        Args:
            city: City name

        Returns:
            CombinedWeatherResult with location and weather data
        """
        location = await self.getCoordinates(city)
        weather = await self.getCurrentWeather(city)

        result: CombinedWeatherResult = {
            "location": location,
            "weather": weather,
        }
        return result

    async def _makeRequest(self, url: str, params: Dict[str, Any], label: str) -> Any:
        """
        Make HTTP request to OpenWeatherMap API

        Creates a new session for each request to support proper concurrent requests.

        Args:
            url: API endpoint URL
            params: Query parameters (appid will be added automatically)
            label: Operation name used in error messages

        Returns:
            Parsed JSON response

        Raises:
            InvalidCredentialsError: On HTTP 401
            RateLimitedError: On HTTP 429
            ProviderError: On any other non-2xx status or network error
            MalformedResponseError: On 2xx response with a non-JSON body
        """
        requestParams = dict(params)
        requestParams["appid"] = self.apiKey

        try:
            logger.debug(f"Making {label} request to {url}")

            # Create new session for each request
            async with httpx.AsyncClient(timeout=self.requestTimeout) as session:
                response = await session.get(url, params=requestParams)
        except httpx.TimeoutException:
            logger.error(f"{label} request timeout")
            raise ProviderError(label, 0, "request timed out")
        except httpx.RequestError as e:
            logger.error(f"{label} network error: {e}")
            raise ProviderError(label, 0, str(e) or type(e).__name__)

        status = response.status_code
        if 200 <= status < 300:
            try:
                data = response.json()
            except ValueError as e:
                logger.error(f"Failed to parse {label} JSON response: {e}")
                raise MalformedResponseError(label, status)
            logger.debug(f"{label} request successful: {status}")
            return data

        providerMessage: Optional[str] = None
        try:
            errorData = response.json()
            if isinstance(errorData, dict) and errorData.get("message"):
                providerMessage = str(errorData["message"])
        except ValueError:
            pass

        if status == 401:
            logger.error("Invalid API key")
            raise InvalidCredentialsError()
        elif status == 429:
            logger.error("Rate limit exceeded")
            raise RateLimitedError()

        logger.error(f"{label} request failed: {status} {providerMessage or ''}".rstrip())
        raise ProviderError(label, status, providerMessage)
