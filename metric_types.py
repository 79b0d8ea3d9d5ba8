"""Shared running-form metric identifiers, display info, and time periods."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

SUCCESS_COLOR = '#34d399'  # Emerald
WARNING_COLOR = '#facc15'  # Yellow
ERROR_COLOR = '#ef4444'    # Red
INFO_COLOR = '#60a5fa'     # Blue
PRIMARY_COLOR = '#f97316'  # Orange


class MetricType(str, Enum):
    EFFICIENCY = 'Efficiency'
    BRAKING = 'Braking'
    IMPACT = 'Impact'
    SWAY = 'Sway'
    VARIATION = 'Variation'
    WARMUP = 'Warmup'
    ENDURANCE = 'Endurance'

    @property
    def key(self) -> str:
        """Lowercase identifier used for columns and settings."""
        return self.name.lower()

    @property
    def info(self) -> 'MetricInfo':
        return METRIC_INFO[self]

    @classmethod
    def from_key(cls, key: str) -> 'MetricType':
        try:
            return cls[str(key).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown metric: {key!r}") from None


METRIC_ORDER: Tuple[MetricType, ...] = tuple(MetricType)


@dataclass(frozen=True)
class MetricInfo:
    id: str
    name: str
    icon: str
    color: str
    optimal_low: int
    optimal_high: int
    description: str
    unit: str = 'score'

    def status_for_value(self, value: int) -> str:
        if value >= self.optimal_high - 5:
            return 'Excellent'
        if value >= self.optimal_low + 5:
            return 'Good'
        if value >= self.optimal_low:
            return 'Fair'
        return 'Needs Improvement'

    def color_for_value(self, value: int) -> str:
        if value >= self.optimal_high - 5:
            return SUCCESS_COLOR
        if value >= self.optimal_low:
            return WARNING_COLOR
        return ERROR_COLOR


METRIC_INFO: Dict[MetricType, MetricInfo] = {
    MetricType.EFFICIENCY: MetricInfo(
        id='efficiency',
        name='Efficiency',
        icon='bolt',
        color='#f97316',
        optimal_low=80,
        optimal_high=100,
        description='How economically you use energy while running.',
    ),
    MetricType.BRAKING: MetricInfo(
        id='braking',
        name='Braking',
        icon='back_hand',
        color='#ef4444',
        optimal_low=80,
        optimal_high=100,
        description='Deceleration forces when the foot lands ahead of your center of mass.',
    ),
    MetricType.IMPACT: MetricInfo(
        id='impact',
        name='Impact',
        icon='arrow_circle_down',
        color='#a855f7',
        optimal_low=80,
        optimal_high=100,
        description='Ground reaction forces at foot strike.',
    ),
    MetricType.SWAY: MetricInfo(
        id='sway',
        name='Sway',
        icon='swap_horiz',
        color='#60a5fa',
        optimal_low=75,
        optimal_high=100,
        description='Lateral (side-to-side) movement while running.',
    ),
    MetricType.VARIATION: MetricInfo(
        id='variation',
        name='Variation',
        icon='monitor_heart',
        color='#34d399',
        optimal_low=80,
        optimal_high=100,
        description='Consistency of your stride pattern from step to step.',
    ),
    MetricType.WARMUP: MetricInfo(
        id='warmup',
        name='Warmup',
        icon='local_fire_department',
        color='#facc15',
        optimal_low=75,
        optimal_high=100,
        description='How prepared your body is at the start of the run.',
    ),
    MetricType.ENDURANCE: MetricInfo(
        id='endurance',
        name='Endurance',
        icon='directions_run',
        color='#2dd4bf',
        optimal_low=75,
        optimal_high=100,
        description='How well form holds up over the duration of the run.',
    ),
}


class TimePeriod(str, Enum):
    WEEK = 'Week'
    MONTH = 'Month'
    THREE_MONTHS = '3 Months'
    SIX_MONTHS = '6 Months'
    YEAR = 'Year'
    ALL_TIME = 'All Time'

    @property
    def days_back(self) -> Optional[int]:
        """Trailing window in days; None means unbounded."""
        return _PERIOD_DAYS[self]

    @property
    def key(self) -> str:
        return self.name.lower()

    @classmethod
    def from_key(cls, key: str) -> 'TimePeriod':
        text = str(key).strip()
        for period in cls:
            if text.lower() in (period.key, period.value.lower()):
                return period
        raise ValueError(f"Unknown time period: {key!r}")


_PERIOD_DAYS: Dict[TimePeriod, Optional[int]] = {
    TimePeriod.WEEK: 7,
    TimePeriod.MONTH: 30,
    TimePeriod.THREE_MONTHS: 90,
    TimePeriod.SIX_MONTHS: 180,
    TimePeriod.YEAR: 365,
    TimePeriod.ALL_TIME: None,
}
