"""
Dashboard Service Module

This module provides DashboardService, which fetches everything the weather
dashboard shows for a city (current weather, forecast, air quality) and keeps
air quality fresh in background while the city stays the same.

Example:
    >>> client = OpenWeatherMapClient(apiKey=configManager.getOpenWeatherMapApiKey())
    >>> service = DashboardService(client, onAqiUpdate=renderAqi)
    >>> snapshot = await service.loadDashboard("New Delhi")
    >>> # ... AQI updates arrive to renderAqi every 60 seconds ...
    >>> await service.close()
"""

import asyncio
import logging
from typing import Optional

from lib.aqi import aqiCategory
from lib.openweathermap import AQIResult, Coordinates, OpenWeatherMapClient

from .refresher import DEFAULT_AQI_REFRESH_INTERVAL, AqiRefresher
from .types import AqiUpdateCallback, DashboardSnapshot

logger = logging.getLogger(__name__)


class DashboardService:
    """
    Loads dashboard snapshots and owns the periodic AQI refresh

    Every loadDashboard() call produces a new immutable snapshot. Errors from
    the OpenWeatherMap client are propagated to the caller as is; the previous
    snapshot and AQI refresh stay in place when loading fails.

    Attributes:
        client: OpenWeatherMap client
        aqiRefreshInterval: Seconds between background AQI refreshes
        onAqiUpdate: Optional consumer of background AQI updates
        snapshot: Last successfully loaded snapshot
    """

    def __init__(
        self,
        client: OpenWeatherMapClient,
        aqiRefreshInterval: float = DEFAULT_AQI_REFRESH_INTERVAL,
        onAqiUpdate: Optional[AqiUpdateCallback] = None,
    ):
        self.client = client
        self.aqiRefreshInterval = aqiRefreshInterval
        self.onAqiUpdate = onAqiUpdate
        self.snapshot: Optional[DashboardSnapshot] = None
        self._refresher: Optional[AqiRefresher] = None

    async def loadDashboard(self, city: str) -> DashboardSnapshot:
        """
        Fetch full dashboard for a city

        Geocodes the city once and reuses the coordinates for forecast and
        air quality. If the resolved location differs from the previous one,
        the background AQI refresh is restarted for the new location.

        Args:
            city: City name as entered by the user

        Returns:
            New dashboard snapshot

        Raises:
            OpenWeatherMapError: On any failure, with a user-presentable message
        """
        logger.info(f"Loading dashboard for {city}")
        location = await self.client.getCoordinates(city)
        coordinates: Coordinates = {"lat": location["lat"], "lon": location["lon"]}

        weather = await self.client.getCurrentWeather(city)
        forecast = await self.client.getForecast(city, coordinates)

        label = f"{weather['city']}, {weather['country']}"
        aqi = await self.client.getAQI(coordinates["lat"], coordinates["lon"], label)

        snapshot: DashboardSnapshot = {
            "location": location,
            "weather": weather,
            "forecast": forecast["days"],
            "forecastSource": forecast["source"],
            "aqi": aqi,
            "aqiCategory": aqiCategory(aqi["aqi"]),
        }
        self.snapshot = snapshot

        await self._restartAqiRefresh(coordinates, label)
        return snapshot

    async def close(self) -> None:
        """Stop background work, call it when the dashboard goes away"""
        await self.stopAqiRefresh()

    async def stopAqiRefresh(self) -> None:
        if self._refresher is not None:
            await self._refresher.stop()
            self._refresher = None

    async def _restartAqiRefresh(self, coordinates: Coordinates, label: str) -> None:
        if self.onAqiUpdate is None:
            return

        current = self._refresher
        if (
            current is not None
            and current.isRunning
            and current.coordinates == coordinates
            and current.location == label
        ):
            return

        await self.stopAqiRefresh()
        self._refresher = AqiRefresher(
            self.client,
            coordinates,
            label,
            self._handleAqiUpdate,
            interval=self.aqiRefreshInterval,
        )
        self._refresher.start()

    async def _handleAqiUpdate(self, result: AQIResult) -> None:
        if self.snapshot is not None and self.snapshot["aqi"]["location"] == result["location"]:
            # Replace the snapshot as a whole, never mutate the published one
            self.snapshot = {**self.snapshot, "aqi": result, "aqiCategory": aqiCategory(result["aqi"])}

        if self.onAqiUpdate is not None:
            ret = self.onAqiUpdate(result)
            if asyncio.iscoroutine(ret):
                await ret
