"""Running history state, loading, and summary logic for the history page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional

import pandas as pd

from metric_types import METRIC_ORDER, MetricType, TimePeriod
from trends import (
    DataPoint,
    Insight,
    MetricStats,
    all_stats,
    average_for_metric,
    generate_insights,
    stats_for_metric,
)


logger = logging.getLogger(__name__)

DEFAULT_PERIOD = TimePeriod.MONTH
DEFAULT_ENABLED_METRICS = frozenset({MetricType.EFFICIENCY, MetricType.SWAY})

# Per-run fallbacks when a data point carries no distance/duration
DEFAULT_RUN_DISTANCE_MI = 5.0
DEFAULT_RUN_DURATION_MIN = 45

SETTING_PERIOD = 'history_selected_period'
SETTING_ENABLED_METRICS = 'history_enabled_metrics'


@dataclass(frozen=True)
class HistoryState:
    selected_period: TimePeriod = DEFAULT_PERIOD
    enabled_metrics: FrozenSet[MetricType] = field(default_factory=lambda: DEFAULT_ENABLED_METRICS)

    def is_enabled(self, metric: MetricType) -> bool:
        return metric in self.enabled_metrics

    def ordered_enabled_metrics(self) -> List[MetricType]:
        return [m for m in METRIC_ORDER if m in self.enabled_metrics]


def toggle_metric(state: HistoryState, metric: MetricType) -> HistoryState:
    """Return a new state with the metric's enabled membership flipped."""
    metric = MetricType(metric)
    if metric in state.enabled_metrics:
        enabled = state.enabled_metrics - {metric}
    else:
        enabled = state.enabled_metrics | {metric}
    return replace(state, enabled_metrics=frozenset(enabled))


def with_period(state: HistoryState, period: TimePeriod) -> HistoryState:
    return replace(state, selected_period=TimePeriod(period))


def format_duration(total_minutes: float) -> str:
    """Format minutes as 'Xh Ym'."""
    total = int(total_minutes)
    return f"{total // 60}h {total % 60}m"


def format_pace(minutes_per_mile: float) -> str:
    if not minutes_per_mile or minutes_per_mile <= 0:
        return "--:--"
    return f"{int(minutes_per_mile)}:{int((minutes_per_mile % 1) * 60):02d}"


class RunningHistoryManager:
    """
    Owns the selected period, enabled metrics and loaded data points.

    Query properties (insights, stats) are recomputed from the current
    points on every access.
    """

    def __init__(self, data_source, state: Optional[HistoryState] = None, settings=None):
        """
        Args:
            data_source: Object with fetch(period, now=None) -> List[DataPoint]
            state: Initial state; restored from settings when omitted
            settings: Optional store with get_setting/set_setting (e.g. DatabaseManager)
        """
        self.data_source = data_source
        self.settings = settings
        self.state = state if state is not None else self._restore_state()
        self._data_points: List[DataPoint] = []

    # --- State persistence ---
    def _restore_state(self) -> HistoryState:
        if self.settings is None:
            return HistoryState()

        period = DEFAULT_PERIOD
        raw_period = self.settings.get_setting(SETTING_PERIOD)
        if raw_period:
            try:
                period = TimePeriod.from_key(raw_period)
            except ValueError:
                logger.warning("Ignoring invalid saved period %r", raw_period)

        enabled = DEFAULT_ENABLED_METRICS
        raw_metrics = self.settings.get_setting(SETTING_ENABLED_METRICS)
        if raw_metrics is not None:
            try:
                enabled = frozenset(
                    MetricType.from_key(key) for key in raw_metrics.split(',') if key.strip()
                )
            except ValueError:
                logger.warning("Ignoring invalid saved metrics %r", raw_metrics)

        return HistoryState(selected_period=period, enabled_metrics=enabled)

    def _save_state(self) -> None:
        if self.settings is None:
            return
        self.settings.set_setting(SETTING_PERIOD, self.state.selected_period.key)
        self.settings.set_setting(
            SETTING_ENABLED_METRICS,
            ','.join(m.key for m in self.state.ordered_enabled_metrics()),
        )

    # --- State transitions ---
    @property
    def selected_period(self) -> TimePeriod:
        return self.state.selected_period

    @property
    def enabled_metrics(self) -> FrozenSet[MetricType]:
        return self.state.enabled_metrics

    @property
    def data_points(self) -> List[DataPoint]:
        return list(self._data_points)

    def load_data(self, period: Optional[TimePeriod] = None, now: Optional[datetime] = None) -> List[DataPoint]:
        """Switch to period (if given) and reload points from the data source."""
        if period is not None:
            self.state = with_period(self.state, period)
            self._save_state()
        self._data_points = list(self.data_source.fetch(self.state.selected_period, now=now))
        logger.debug(
            "Loaded %d data points for %s",
            len(self._data_points),
            self.state.selected_period.value,
        )
        return self.data_points

    def set_data_points(self, points) -> None:
        """Replace the loaded points, e.g. with a sequence fetched elsewhere."""
        self._data_points = list(points or [])

    def toggle_metric(self, metric: MetricType) -> HistoryState:
        self.state = toggle_metric(self.state, metric)
        self._save_state()
        return self.state

    # --- Queries ---
    @property
    def insights(self) -> List[Insight]:
        return generate_insights(self._data_points)

    def average_for_metric(self, metric: MetricType) -> int:
        return average_for_metric(metric, self._data_points)

    def stats_for_metric(self, metric: MetricType) -> MetricStats:
        return stats_for_metric(metric, self._data_points)

    def all_stats(self) -> Dict[MetricType, MetricStats]:
        return all_stats(self._data_points)

    # --- Summary ---
    @property
    def total_runs(self) -> int:
        return len(self._data_points)

    @property
    def total_distance(self) -> float:
        return sum(
            p.distance_mi if p.distance_mi is not None else DEFAULT_RUN_DISTANCE_MI
            for p in self._data_points
        )

    @property
    def total_minutes(self) -> float:
        return sum(
            p.duration_min if p.duration_min is not None else DEFAULT_RUN_DURATION_MIN
            for p in self._data_points
        )

    @property
    def total_time_formatted(self) -> str:
        return format_duration(self.total_minutes)

    @property
    def average_pace_formatted(self) -> str:
        distance = self.total_distance
        if distance <= 0:
            return "--:--"
        return format_pace(self.total_minutes / distance)

    @property
    def latest_overall_score(self) -> int:
        """Overall form score of the most recent run; 0 with no runs."""
        if not self._data_points:
            return 0
        return self._data_points[-1].overall_score

    def to_dataframe(self) -> pd.DataFrame:
        """One row per loaded point with a 'date' column and one column per metric."""
        columns = ['date'] + [m.key for m in METRIC_ORDER] + ['distance_mi', 'duration_min']
        if not self._data_points:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([p.to_dict() for p in self._data_points], columns=columns)
