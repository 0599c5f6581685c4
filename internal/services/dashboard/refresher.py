"""
Periodic AQI refresh

Re-fetches air quality for a fixed location in the background and hands each
new AQIResult to a callback. A failed refresh is logged and skipped, so the
consumer keeps showing the previous value.
"""

import asyncio
import logging
from typing import Optional

from lib.openweathermap import AQIResult, Coordinates, OpenWeatherMapClient

from .types import AqiUpdateCallback

logger = logging.getLogger(__name__)

DEFAULT_AQI_REFRESH_INTERVAL = 60.0


class AqiRefresher:
    """
    Background AQI polling for one location

    Example:
        >>> refresher = AqiRefresher(client, {"lat": 28.61, "lon": 77.21}, "New Delhi, IN", print)
        >>> refresher.start()
        >>> # ... later, when the city changes or the view goes away
        >>> await refresher.stop()
    """

    def __init__(
        self,
        client: OpenWeatherMapClient,
        coordinates: Coordinates,
        location: str,
        onUpdate: AqiUpdateCallback,
        interval: float = DEFAULT_AQI_REFRESH_INTERVAL,
    ):
        """
        Args:
            client: OpenWeatherMap client
            coordinates: Coordinates to fetch air quality for
            location: Location label put into AQIResult
            onUpdate: Called (or awaited, if it is a coroutine function) with every new result
            interval: Seconds between refreshes
        """
        if interval <= 0:
            raise ValueError(f"AQI refresh interval must be positive, got {interval}")

        self.client = client
        self.coordinates = coordinates
        self.location = location
        self.onUpdate = onUpdate
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def isRunning(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start refreshing in background, must be called from a running event loop"""
        if self.isRunning:
            raise RuntimeError("AQI refresh is already started")

        self._task = asyncio.create_task(self._refreshLoop())
        logger.info(f"Started AQI refresh for {self.location} every {self.interval}s")

    async def stop(self) -> None:
        """Stop the background refresh and wait for it to finish"""
        task = self._task
        self._task = None
        if task is None:
            return

        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        logger.info(f"Stopped AQI refresh for {self.location}")

    async def refreshOnce(self) -> Optional[AQIResult]:
        """
        Fetch AQI once and publish it

        Returns:
            New AQIResult, or None if fetching or publishing failed
        """
        try:
            result = await self.client.getAQI(self.coordinates["lat"], self.coordinates["lon"], self.location)
        except Exception as e:
            logger.warning(f"AQI refresh for {self.location} failed: {e}")
            return None

        try:
            ret = self.onUpdate(result)
            if asyncio.iscoroutine(ret):
                await ret
        except Exception as e:
            logger.error(f"Error in AQI update handler: {e}")
            return None

        return result

    async def _refreshLoop(self) -> None:
        # Runs until cancelled by stop()
        while True:
            await asyncio.sleep(self.interval)
            await self.refreshOnce()
