"""
Test utilities for weather dashboard tests.

Provides a fake OpenWeatherMap HTTP API that answers httpx requests with canned
responses and records which endpoints were called.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple
from unittest.mock import Mock, patch

# 2024-03-01 00:00:00 UTC
DAY1 = 1709251200
HOUR = 3600
DAY = 86400

# Endpoint name -> URL suffix
ENDPOINTS: Dict[str, str] = {
    "geocoding": "/geo/1.0/direct",
    "weather": "/data/2.5/weather",
    "daily": "/data/2.5/onecall",
    "forecast": "/data/2.5/forecast",
    "air_pollution": "/data/2.5/air_pollution",
}


def defaultResponses() -> Dict[str, Tuple[int, Any]]:
    """Canned (status, body) per endpoint, modeled on real New Delhi responses"""
    return {
        "geocoding": (
            200,
            [{"name": "New Delhi", "lat": 28.6139, "lon": 77.209, "country": "IN", "state": "Delhi"}],
        ),
        "weather": (
            200,
            {
                "weather": [{"id": 721, "main": "Haze", "description": "haze"}],
                "main": {"temp": 31.2, "humidity": 48},
                "visibility": 2500,
                "wind": {"speed": 2.5},
                "name": "New Delhi",
                "sys": {"country": "IN"},
            },
        ),
        "daily": (
            200,
            {
                "lat": 28.6139,
                "lon": 77.209,
                "daily": [
                    {
                        "dt": DAY1 + 6 * HOUR,
                        "temp": {"min": 17.0, "max": 29.0},
                        "weather": [{"description": "smoke"}],
                        "pop": 0.05,
                    },
                    {
                        "dt": DAY1 + DAY + 6 * HOUR,
                        "temp": {"min": 16.5, "max": 28.0},
                        "weather": [{"description": "haze"}],
                        "pop": 0,
                    },
                ],
            },
        ),
        "forecast": (
            200,
            {
                "cnt": 5,
                "list": [
                    {
                        "dt": DAY1 + 9 * HOUR,
                        "main": {"temp": 20.0, "temp_min": 18.0, "temp_max": 22.0},
                        "weather": [{"description": "haze"}],
                        "pop": 0,
                    },
                    {
                        "dt": DAY1 + 12 * HOUR,
                        "main": {"temp": 26.0, "temp_min": 21.0, "temp_max": 27.5},
                        "weather": [{"description": "haze"}],
                        "pop": 0,
                    },
                    {"dt": DAY1 + 15 * HOUR, "main": {"temp": 25.0}, "weather": [{"description": "smoke"}]},
                    {"dt": DAY1 + DAY + 3 * HOUR, "main": {"temp": 16.0}, "weather": [{"description": "mist"}], "pop": 0.4},
                    {"dt": DAY1 + DAY + 6 * HOUR, "main": {"temp": 17.0}, "weather": [{"description": "mist"}]},
                ],
            },
        ),
        "air_pollution": (
            200,
            {
                "coord": {"lon": 77.209, "lat": 28.6139},
                "list": [{"main": {"aqi": 5}, "components": {"pm2_5": 180.3, "pm10": 250.1}, "dt": DAY1}],
            },
        ),
    }


def createMockResponse(statusCode: int, body: Any) -> Mock:
    """Create fake httpx response with given status and JSON body"""
    response = Mock()
    response.status_code = statusCode
    response.json.return_value = body
    return response


class FakeOpenWeatherMapApi:
    """Fake OpenWeatherMap API for patching httpx.AsyncClient.get

    Example:
        fakeApi = FakeOpenWeatherMapApi()
        fakeApi.responses["daily"] = (200, {"daily": []})
        with fakeApi.patch():
            await client.getForecast("New Delhi")
        assert fakeApi.callCount("forecast") == 1
    """

    def __init__(self, responses: Optional[Dict[str, Tuple[int, Any]]] = None):
        self.responses = responses if responses is not None else defaultResponses()
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    @staticmethod
    def endpointName(url: str) -> str:
        for name, suffix in ENDPOINTS.items():
            if str(url).endswith(suffix):
                return name
        raise AssertionError(f"Unexpected URL requested: {url}")

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Mock:
        name = self.endpointName(url)
        self.calls.append((name, dict(params or {})))
        statusCode, body = self.responses[name]
        return createMockResponse(statusCode, body)

    @contextmanager
    def patch(self) -> Iterator[Mock]:
        with patch("httpx.AsyncClient.get", side_effect=self.get) as mockGet:
            yield mockGet

    def endpointsCalled(self) -> List[str]:
        return [name for name, _ in self.calls]

    def callCount(self, name: str) -> int:
        return self.endpointsCalled().count(name)
