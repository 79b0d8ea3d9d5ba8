"""Data sources that feed run metric data points to the history manager."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Protocol

import numpy as np

from metric_types import MetricType, TimePeriod
from trends import DataPoint


logger = logging.getLogger(__name__)

ALL_TIME_DAYS = 365
MAX_SAMPLE_POINTS = 60
SAMPLE_TREND_POINTS = 5.0

# Inclusive score ranges for generated sample runs
SAMPLE_RANGES = {
    MetricType.EFFICIENCY: (70, 85),
    MetricType.BRAKING: (70, 85),
    MetricType.IMPACT: (75, 88),
    MetricType.SWAY: (65, 80),
    MetricType.VARIATION: (73, 85),
    MetricType.WARMUP: (68, 80),
    MetricType.ENDURANCE: (72, 85),
}


class DataSource(Protocol):
    """Anything that can produce an ascending data-point sequence for a period."""

    def fetch(self, period: TimePeriod, now: Optional[datetime] = None) -> List[DataPoint]:
        ...


def window_start(period: TimePeriod, now: datetime) -> Optional[datetime]:
    """Oldest datetime inside the trailing window, or None when unbounded."""
    days_back = TimePeriod(period).days_back
    if days_back is None:
        return None
    return now - timedelta(days=days_back)


class SampleDataSource:
    """
    Generates placeholder run history.

    Scores are drawn from SAMPLE_RANGES with a small upward drift towards
    the most recent run. Pass a seed for a repeatable sequence.
    """

    def __init__(self, seed: Optional[int] = None, max_points: int = MAX_SAMPLE_POINTS):
        self.seed = seed
        self.max_points = max_points
        self._rng = np.random.default_rng(seed)

    def fetch(self, period: TimePeriod, now: Optional[datetime] = None) -> List[DataPoint]:
        now = now or datetime.now()
        days_back = TimePeriod(period).days_back or ALL_TIME_DAYS
        count = min(days_back // 2, self.max_points)
        if count <= 0:
            return []

        points = []
        for i in range(count):
            # i == 0 is the oldest run
            day_offset = days_back * (count - 1 - i) // count
            trend_factor = int(i / count * SAMPLE_TREND_POINTS)
            scores = {
                metric.key: int(self._rng.integers(low, high + 1)) + trend_factor
                for metric, (low, high) in SAMPLE_RANGES.items()
            }
            points.append(DataPoint(
                date=now - timedelta(days=day_offset),
                distance_mi=round(float(self._rng.uniform(3.0, 8.0)), 2),
                duration_min=round(float(self._rng.uniform(25.0, 70.0)), 1),
                **scores,
            ))

        logger.debug("Generated %d sample points for %s", len(points), TimePeriod(period).value)
        return points


class DatabaseDataSource:
    """Reads stored data points from a DatabaseManager."""

    def __init__(self, db):
        self.db = db

    def fetch(self, period: TimePeriod, now: Optional[datetime] = None) -> List[DataPoint]:
        now = now or datetime.now()
        start = window_start(period, now)
        since_utc = int(start.timestamp()) if start is not None else None
        points = self.db.get_data_points(since_utc=since_utc)
        logger.debug("Loaded %d stored points for %s", len(points), TimePeriod(period).value)
        return points
