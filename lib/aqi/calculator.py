"""
US EPA Air Quality Index calculator

Converts pollutant concentrations to the 0-500 AQI scale using piecewise-linear
interpolation over the breakpoint tables. The overall index is the worst
(maximum) pollutant sub-index.
"""

import logging
import math
from typing import Any, Dict, Optional

from .breakpoints import AQI_CATEGORIES, LEGACY_INDEX_BAND_CENTERS, POLLUTANT_TABLES, BreakpointTable

logger = logging.getLogger(__name__)


def _isUsableNumber(value: Any) -> bool:
    # bool is a subclass of int, but True is not a concentration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _roundHalfUp(value: float) -> int:
    return int(math.floor(value + 0.5))


def concentrationToIndex(concentration: Any, table: BreakpointTable) -> Optional[float]:
    """
    Map a concentration to an AQI sub-index

    Args:
        concentration: Pollutant concentration (µg/m³)
        table: Ordered breakpoint table

    Returns:
        Interpolated (not rounded) index, or None if the value is not a finite
        number or falls outside every segment (negative, above the top bound,
        or inside a gap between segments)
    """
    if not _isUsableNumber(concentration):
        return None

    for bp in table:
        if bp.cLow <= concentration <= bp.cHigh:
            if concentration == bp.cHigh:
                return float(bp.iHigh)
            return bp.iLow + (bp.iHigh - bp.iLow) / (bp.cHigh - bp.cLow) * (concentration - bp.cLow)

    return None


def computeSubIndices(pm25: Any = None, pm10: Any = None) -> Dict[str, float]:
    """
    Compute the per-pollutant sub-indices that are available

    Pollutants without a usable value are left out of the result rather than
    reported as zero.
    """
    concentrations = {"pm2_5": pm25, "pm10": pm10}
    ret: Dict[str, float] = {}
    for pollutant, concentration in concentrations.items():
        index = concentrationToIndex(concentration, POLLUTANT_TABLES[pollutant])
        if index is not None:
            ret[pollutant] = index
    return ret


def computeOverallAQI(pm25: Any = None, pm10: Any = None, legacyIndex: Any = None) -> int:
    """
    Compute the overall AQI, never failing

    Resolution order:
        1. round(max) of available PM2.5/PM10 sub-indices
        2. band center for the provider's legacy 1-5 index
        3. 0

    Args:
        pm25: PM2.5 concentration (µg/m³)
        pm10: PM10 concentration (µg/m³)
        legacyIndex: OpenWeatherMap 1-5 index

    Returns:
        Integer AQI in [0, 500]
    """
    subIndices = computeSubIndices(pm25, pm10)
    if subIndices:
        return _roundHalfUp(max(subIndices.values()))

    # Only the integer 1-5 scale, 3.0 would hash equal to 3
    if isinstance(legacyIndex, int) and not isinstance(legacyIndex, bool) and legacyIndex in LEGACY_INDEX_BAND_CENTERS:
        logger.debug(f"No usable PM concentrations, using legacy index {legacyIndex}")
        return LEGACY_INDEX_BAND_CENTERS[legacyIndex]

    logger.debug("No pollutant data available, AQI defaults to 0")
    return 0


def aqiCategory(aqi: int) -> str:
    """Get EPA category name for an AQI value (e.g. 42 -> "Good")"""
    for upperBound, name in AQI_CATEGORIES:
        if aqi <= upperBound:
            return name
    return AQI_CATEGORIES[-1][1]
