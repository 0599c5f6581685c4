"""Dashboard service package.

This package provides DashboardService, which loads current weather, forecast and
air quality for a city, and AqiRefresher, which keeps air quality fresh in background.

Example:
    >>> from internal.services.dashboard import DashboardService
    >>> service = DashboardService(client, onAqiUpdate=print)
    >>> snapshot = await service.loadDashboard("New Delhi")
"""

from .refresher import DEFAULT_AQI_REFRESH_INTERVAL, AqiRefresher
from .service import DashboardService
from .types import AqiUpdateCallback, DashboardSnapshot

__all__ = [
    # Service
    "DashboardService",
    "AqiRefresher",
    # Types
    "DashboardSnapshot",
    "AqiUpdateCallback",
    # Constants
    "DEFAULT_AQI_REFRESH_INTERVAL",
]
