"""
US EPA Air Quality Index library

Example usage:
    from lib.aqi import computeOverallAQI, aqiCategory

    aqi = computeOverallAQI(pm25=35.4, pm10=20.0)  # 100
    print(f"AQI {aqi}: {aqiCategory(aqi)}")  # AQI 100: Moderate
"""

from .breakpoints import (
    LEGACY_INDEX_BAND_CENTERS,
    PM10_BREAKPOINTS,
    PM25_BREAKPOINTS,
    Breakpoint,
    BreakpointTable,
)
from .calculator import aqiCategory, computeOverallAQI, computeSubIndices, concentrationToIndex

__all__ = [
    "Breakpoint",
    "BreakpointTable",
    "PM25_BREAKPOINTS",
    "PM10_BREAKPOINTS",
    "LEGACY_INDEX_BAND_CENTERS",
    "concentrationToIndex",
    "computeSubIndices",
    "computeOverallAQI",
    "aqiCategory",
]
