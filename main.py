"""
Weather Dashboard - current weather, forecast and air quality for a city.
Command-line front end for the dashboard data service.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from internal.config.manager import ConfigManager
from internal.services.dashboard import DEFAULT_AQI_REFRESH_INTERVAL, DashboardService
from lib import utils
from lib.logging_utils import initLogging
from lib.openweathermap import AQIResult, OpenWeatherMapClient, OpenWeatherMapError

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
# set higher logging level for httpx to avoid all GET and POST requests being logged
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


class WeatherDashboardApp:
    """Wires configuration, logging, OpenWeatherMap client and dashboard service together."""

    def __init__(self, configPath: str = "config.toml", config_dirs: Optional[List[str]] = None):
        """Initialize application with all components.

        Raises:
            MissingCredentialError: If no OpenWeatherMap API key is configured
        """
        self.configManager = ConfigManager(configPath, config_dirs)

        initLogging(self.configManager.getLoggingConfig())

        openWeatherMapConfig = self.configManager.getOpenWeatherMapConfig()
        self.client = OpenWeatherMapClient(
            apiKey=self.configManager.getOpenWeatherMapApiKey(),
            requestTimeout=openWeatherMapConfig.get("request-timeout", 10),
            defaultLanguage=openWeatherMapConfig.get("default-language", "en"),
        )

        dashboardConfig = self.configManager.getDashboardConfig()
        self.aqiRefreshInterval = float(dashboardConfig.get("aqi-refresh-interval", DEFAULT_AQI_REFRESH_INTERVAL))

    async def show(self, city: str, watch: bool = False) -> None:
        """Print dashboard for a city, and with watch=True keep printing AQI updates until interrupted."""
        service = DashboardService(
            self.client,
            aqiRefreshInterval=self.aqiRefreshInterval,
            onAqiUpdate=printAqiUpdate if watch else None,
        )
        try:
            snapshot = await service.loadDashboard(city)
            print(utils.jsonDumps(snapshot, indent=2))

            if watch:
                # Refresh runs in background until the task is cancelled by Ctrl+C
                await asyncio.Event().wait()
        finally:
            await service.close()


def printAqiUpdate(result: AQIResult) -> None:
    print(utils.jsonDumps({"aqi": result}, indent=2), flush=True)


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Weather Dashboard - current weather, forecast and air quality")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "--city",
        help="City to show the dashboard for (e.g. 'New Delhi' or 'London,GB')",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Keep running and print air quality updates periodically",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )
    args = parser.parse_args()
    if not args.print_config and not args.city:
        parser.error("--city is required")

    # Convert relative paths to absolute paths before config may change working directory
    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dir_path) for dir_path in args.config_dir]

    return args


def prettyPrintConfig(config_manager: ConfigManager):
    """Pretty-print the loaded configuration."""
    print("=== Weather Dashboard Configuration ===")
    print()
    print(utils.jsonDumps(config_manager.config, indent=2))
    print()


def main():
    """Main entry point."""
    args = parse_arguments()

    try:
        if args.print_config:
            prettyPrintConfig(ConfigManager(args.config, args.config_dir))
            sys.exit(0)

        app = WeatherDashboardApp(configPath=args.config, config_dirs=args.config_dir)
        asyncio.run(app.show(args.city, watch=args.watch))
    except KeyboardInterrupt:
        logger.info("Dashboard stopped by user")
    except OpenWeatherMapError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
