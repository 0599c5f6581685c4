"""
US EPA AQI breakpoint tables

Each table is an ordered tuple of Breakpoint segments. Concentrations are in
µg/m³ (24-hour averages), indices are on the 0-500 scale.

See: https://www.airnow.gov/sites/default/files/2020-05/aqi-technical-assistance-document-sept2018.pdf
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Breakpoint:
    """One linear segment of the concentration -> index function"""

    cLow: float
    cHigh: float
    iLow: int
    iHigh: int


BreakpointTable = Tuple[Breakpoint, ...]

PM25_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0.0, 12.0, 0, 50),
    Breakpoint(12.1, 35.4, 51, 100),
    Breakpoint(35.5, 55.4, 101, 150),
    Breakpoint(55.5, 150.4, 151, 200),
    Breakpoint(150.5, 250.4, 201, 300),
    Breakpoint(250.5, 350.4, 301, 400),
    Breakpoint(350.5, 500.4, 401, 500),
)

PM10_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0, 54, 0, 50),
    Breakpoint(55, 154, 51, 100),
    Breakpoint(155, 254, 101, 150),
    Breakpoint(255, 354, 151, 200),
    Breakpoint(355, 424, 201, 300),
    Breakpoint(425, 504, 301, 400),
    Breakpoint(505, 604, 401, 500),
)

# Pollutant key (as OpenWeatherMap names components) -> table
POLLUTANT_TABLES: Dict[str, BreakpointTable] = {
    "pm2_5": PM25_BREAKPOINTS,
    "pm10": PM10_BREAKPOINTS,
}

# OpenWeatherMap 1..5 index -> center of the matching EPA band
LEGACY_INDEX_BAND_CENTERS: Dict[int, int] = {
    1: 25,
    2: 75,
    3: 125,
    4: 175,
    5: 250,
}

# Upper bound (inclusive) of each EPA category
AQI_CATEGORIES: Tuple[Tuple[int, str], ...] = (
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy for Sensitive Groups"),
    (200, "Unhealthy"),
    (300, "Very Unhealthy"),
    (500, "Hazardous"),
)
