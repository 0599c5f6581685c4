"""
Daily aggregation of the 5 day / 3 hour forecast

Used when the One Call daily forecast is not available for the API key
(e.g. free tier) or returns nothing.
"""

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .errors import MalformedResponseError
from .models import ForecastDay, IntervalSample
from .payload import nestedDict, numberOrNone

logger = logging.getLogger(__name__)

MAX_FORECAST_DAYS = 7


def utcDateFromTimestamp(timestamp: Any, label: str = "Forecast") -> str:
    """
    Convert unix timestamp to ISO date (YYYY-MM-DD) in UTC, missing timestamp is epoch

    Raises:
        MalformedResponseError: If timestamp is not a number or out of datetime range
    """
    if timestamp is None:
        timestamp = 0
    if numberOrNone(timestamp) is None:
        raise MalformedResponseError(label)
    try:
        return datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc).date().isoformat()
    except (OverflowError, OSError, ValueError):
        raise MalformedResponseError(label)


def conditionFromWeather(weather: Any) -> str:
    """Get description of the first weather condition, "N/A" if there is none"""
    if isinstance(weather, list) and weather and isinstance(weather[0], dict):
        description = weather[0].get("description")
        if description:
            return str(description)
    return "N/A"


@dataclass
class _DayBucket:
    minTemp: Optional[float] = None
    maxTemp: Optional[float] = None
    # dict keeps insertion order, so ties go to the first seen condition
    conditionCounts: Dict[str, int] = field(default_factory=dict)
    popSum: float = 0.0
    samples: int = 0

    def add(self, sample: IntervalSample) -> None:
        main = nestedDict(sample, "main", "Forecast")
        low = numberOrNone(main.get("temp_min"), main.get("temp"))
        high = numberOrNone(main.get("temp_max"), main.get("temp"))
        if low is not None:
            self.minTemp = low if self.minTemp is None else min(self.minTemp, low)
        if high is not None:
            self.maxTemp = high if self.maxTemp is None else max(self.maxTemp, high)

        condition = conditionFromWeather(sample.get("weather"))
        self.conditionCounts[condition] = self.conditionCounts.get(condition, 0) + 1

        pop = numberOrNone(sample.get("pop"))
        self.popSum += pop if pop is not None else 0.0
        self.samples += 1

    def dominantCondition(self) -> str:
        topCondition = "N/A"
        topCount = 0
        for condition, count in self.conditionCounts.items():
            if count > topCount:
                topCondition = condition
                topCount = count
        return topCondition

    def toForecastDay(self, date: str) -> ForecastDay:
        return {
            "date": date,
            "minTemp": self.minTemp if self.minTemp is not None else 0.0,
            "maxTemp": self.maxTemp if self.maxTemp is not None else 0.0,
            "condition": self.dominantCondition(),
            "pop": self.popSum / self.samples if self.samples else None,
        }


def aggregateIntervalForecast(
    samples: Iterable[IntervalSample], maxDays: int = MAX_FORECAST_DAYS
) -> List[ForecastDay]:
    """
    Reduce 3-hour forecast samples to one entry per UTC calendar day

    For each day:
        minTemp: lowest temp_min (falls back to temp, then 0)
        maxTemp: highest temp_max (falls back to temp, then 0)
        condition: most frequent description, ties go to the first encountered
        pop: mean probability of precipitation, missing values count as 0

    Args:
        samples: Raw "list" entries of the 5 day / 3 hour forecast, in provider order
        maxDays: Max number of days to return

    Returns:
        Days sorted ascending by date, at most maxDays of them
    """
    buckets: Dict[str, _DayBucket] = {}
    for sample in samples:
        date = utcDateFromTimestamp(sample.get("dt"))
        bucket = buckets.get(date)
        if bucket is None:
            bucket = _DayBucket()
            buckets[date] = bucket
        bucket.add(sample)

    days = sorted(buckets.keys())[:maxDays]
    logger.debug(f"Aggregated {sum(b.samples for b in buckets.values())} samples into {len(buckets)} days")
    return [buckets[date].toForecastDay(date) for date in days]
