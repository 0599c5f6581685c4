"""
Pytest configuration and common fixtures for weather dashboard tests.

All fixtures follow camelCase naming convention.
"""

import pytest

from lib.openweathermap import OpenWeatherMapClient
from tests.utils import FakeOpenWeatherMapApi

# ============================================================================
# OpenWeatherMap Fixtures
# ============================================================================


@pytest.fixture
def fakeApi() -> FakeOpenWeatherMapApi:
    """
    Provide fake OpenWeatherMap API with New Delhi responses.

    Override single endpoint answers through fakeApi.responses before
    entering fakeApi.patch().

    Returns:
        FakeOpenWeatherMapApi: Fake API recording called endpoints
    """
    return FakeOpenWeatherMapApi()


@pytest.fixture
def apiClient() -> OpenWeatherMapClient:
    """
    Provide OpenWeatherMap client with a test key.

    Returns:
        OpenWeatherMapClient: Real client, use together with fakeApi
    """
    return OpenWeatherMapClient(apiKey="test_key", requestTimeout=5, defaultLanguage="en")
