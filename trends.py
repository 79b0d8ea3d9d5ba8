"""
Running History - Metric Trend Analyzer
Per-metric statistics, first-half vs second-half trend classification,
and insight generation over a chronological sequence of data points.

Every function here is total: empty or degenerate input produces a
fallback value, never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence

from metric_types import (
    ERROR_COLOR,
    INFO_COLOR,
    METRIC_ORDER,
    PRIMARY_COLOR,
    SUCCESS_COLOR,
    WARNING_COLOR,
    MetricType,
)


# Percent change between half-averages needed to leave 'stable'
TREND_SENSITIVITY_PCT = 3
# Percent change a trend needs before it earns an insight
INSIGHT_TREND_MIN_PCT = 5
# Mean consistency across all metrics for the consistency insight
CONSISTENCY_INSIGHT_MIN = 75


def _int_div(total: int, count: int) -> int:
    """Integer division truncated toward zero."""
    quotient = abs(total) // abs(count)
    return quotient if (total >= 0) == (count > 0) else -quotient


def _int_mean(values: Sequence[int]) -> int:
    if not values:
        return 0
    return _int_div(sum(values), len(values))


@dataclass(frozen=True)
class DataPoint:
    """One run's metric scores (0-100 scale) at a point in time."""

    date: datetime
    efficiency: int
    braking: int
    impact: int
    sway: int
    variation: int
    warmup: int
    endurance: int
    distance_mi: Optional[float] = None
    duration_min: Optional[float] = None

    def __post_init__(self):
        for metric in METRIC_ORDER:
            value = getattr(self, metric.key)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{metric.value} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{metric.value} must be non-negative, got {value}")

    def value_for(self, metric: MetricType) -> int:
        return getattr(self, MetricType(metric).key)

    @property
    def overall_score(self) -> int:
        return _int_mean([self.value_for(m) for m in METRIC_ORDER])

    def to_dict(self) -> Dict[str, object]:
        row: Dict[str, object] = {'date': self.date}
        for metric in METRIC_ORDER:
            row[metric.key] = self.value_for(metric)
        row['distance_mi'] = self.distance_mi
        row['duration_min'] = self.duration_min
        return row


class TrendDirection(str, Enum):
    IMPROVING = 'improving'
    DECLINING = 'declining'
    STABLE = 'stable'


@dataclass(frozen=True)
class Trend:
    """
    Tagged trend value: improving(percent), declining(percent) or stable.

    Build with Trend.improving(p), Trend.declining(p) or Trend.stable();
    percent is positive for the first two and 0 for stable.
    """

    direction: TrendDirection
    percent: int = 0

    def __post_init__(self):
        if self.direction is TrendDirection.STABLE:
            if self.percent != 0:
                raise ValueError("stable trend carries no percent")
        elif self.percent <= 0:
            raise ValueError(f"{self.direction.value} trend needs a positive percent, got {self.percent}")

    @classmethod
    def improving(cls, percent: int) -> 'Trend':
        return cls(TrendDirection.IMPROVING, int(percent))

    @classmethod
    def declining(cls, percent: int) -> 'Trend':
        return cls(TrendDirection.DECLINING, int(percent))

    @classmethod
    def stable(cls) -> 'Trend':
        return cls(TrendDirection.STABLE)

    @property
    def is_improving(self) -> bool:
        return self.direction is TrendDirection.IMPROVING

    @property
    def is_declining(self) -> bool:
        return self.direction is TrendDirection.DECLINING

    @property
    def is_stable(self) -> bool:
        return self.direction is TrendDirection.STABLE

    @property
    def value(self) -> int:
        return self.percent

    @property
    def icon(self) -> str:
        return _TREND_ICONS[self.direction]

    @property
    def color(self) -> str:
        return _TREND_COLORS[self.direction]

    @property
    def label(self) -> str:
        if self.is_improving:
            return f"+{self.percent}%"
        if self.is_declining:
            return f"-{self.percent}%"
        return 'Stable'


_TREND_ICONS = {
    TrendDirection.IMPROVING: 'trending_up',
    TrendDirection.DECLINING: 'trending_down',
    TrendDirection.STABLE: 'trending_flat',
}

_TREND_COLORS = {
    TrendDirection.IMPROVING: SUCCESS_COLOR,
    TrendDirection.DECLINING: ERROR_COLOR,
    TrendDirection.STABLE: INFO_COLOR,
}


@dataclass(frozen=True)
class MetricStats:
    average: int
    best: int
    worst: int
    range: int
    consistency: int  # 0-100
    trend: Trend = field(default_factory=Trend.stable)

    @property
    def consistency_label(self) -> str:
        if self.consistency >= 80:
            return 'Very Consistent'
        if self.consistency >= 60:
            return 'Consistent'
        if self.consistency >= 40:
            return 'Moderate'
        return 'Variable'

    @property
    def consistency_color(self) -> str:
        if self.consistency >= 80:
            return SUCCESS_COLOR
        if self.consistency >= 60:
            return INFO_COLOR
        if self.consistency >= 40:
            return WARNING_COLOR
        return ERROR_COLOR


class InsightSeverity(str, Enum):
    SUCCESS = 'success'
    WARNING = 'warning'
    INFO = 'info'
    DEFAULT = 'default'

    @property
    def color(self) -> str:
        return _SEVERITY_COLORS[self]


_SEVERITY_COLORS = {
    InsightSeverity.SUCCESS: SUCCESS_COLOR,
    InsightSeverity.WARNING: WARNING_COLOR,
    InsightSeverity.INFO: INFO_COLOR,
    InsightSeverity.DEFAULT: PRIMARY_COLOR,
}


@dataclass(frozen=True)
class Insight:
    icon: str
    title: str
    message: str
    severity: InsightSeverity


def metric_values(metric: MetricType, points: Sequence[DataPoint]) -> List[int]:
    """Values of one metric in the order the points were given."""
    return [p.value_for(metric) for p in points]


def average_for_metric(metric: MetricType, points: Sequence[DataPoint]) -> int:
    """Truncating integer mean of the metric; 0 for no points."""
    return _int_mean(metric_values(metric, points))


def calculate_trend(values: Sequence[int]) -> Trend:
    """
    Compare the mean of the first half of the values with the mean of the last half.

    Both halves hold floor(n/2) values, so for odd n the middle value is ignored.
    """
    values = list(values)
    if len(values) < 2:
        return Trend.stable()

    half = len(values) // 2
    first_half = values[:half]
    second_half = values[-half:]
    if not first_half or not second_half:
        return Trend.stable()

    first_avg = _int_mean(first_half)
    second_avg = _int_mean(second_half)
    if first_avg == 0:
        return Trend.stable()

    percent_change = int(float(second_avg - first_avg) / float(first_avg) * 100)

    if percent_change > TREND_SENSITIVITY_PCT:
        return Trend.improving(percent_change)
    if percent_change < -TREND_SENSITIVITY_PCT:
        return Trend.declining(abs(percent_change))
    return Trend.stable()


def stats_for_metric(metric: MetricType, points: Sequence[DataPoint]) -> MetricStats:
    values = metric_values(metric, points)
    if not values:
        return MetricStats(average=0, best=0, worst=0, range=0, consistency=0, trend=Trend.stable())

    best = max(values)
    worst = min(values)
    spread = best - worst

    return MetricStats(
        average=_int_mean(values),
        best=best,
        worst=worst,
        range=spread,
        consistency=max(0, 100 - spread),
        trend=calculate_trend(values),
    )


def all_stats(points: Sequence[DataPoint]) -> Dict[MetricType, MetricStats]:
    return {metric: stats_for_metric(metric, points) for metric in METRIC_ORDER}


def generate_insights(points: Sequence[DataPoint]) -> List[Insight]:
    """
    Build the ordered insight list for a run history.

    Order: per-metric trend insights (metric declaration order), then the
    consistency insight, then the 'Keep Training' fallback when nothing
    else fired. The result is never empty.
    """
    insights: List[Insight] = []
    stats = all_stats(points)

    for metric in METRIC_ORDER:
        trend = stats[metric].trend
        name = metric.info.name
        if trend.is_improving and trend.percent > INSIGHT_TREND_MIN_PCT:
            insights.append(Insight(
                icon='arrow_circle_up',
                title=f"{name} Improving",
                message=f"Your {metric.value.lower()} has improved by {trend.percent}% over this period!",
                severity=InsightSeverity.SUCCESS,
            ))
        elif trend.is_declining and trend.percent > INSIGHT_TREND_MIN_PCT:
            insights.append(Insight(
                icon='warning',
                title=f"{name} Declining",
                message=(
                    f"Your {metric.value.lower()} has decreased by {trend.percent}%. "
                    "Consider reviewing your training."
                ),
                severity=InsightSeverity.WARNING,
            ))

    avg_consistency = _int_mean([s.consistency for s in stats.values()])
    if avg_consistency >= CONSISTENCY_INSIGHT_MIN:
        insights.append(Insight(
            icon='verified',
            title='Excellent Consistency',
            message='Your metrics are very consistent, showing strong form stability.',
            severity=InsightSeverity.INFO,
        ))

    if not insights:
        insights.append(Insight(
            icon='show_chart',
            title='Keep Training',
            message='Continue your current training to see improvements in your metrics.',
            severity=InsightSeverity.DEFAULT,
        ))

    return insights
