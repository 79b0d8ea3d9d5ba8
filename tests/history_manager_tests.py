import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path

from core.history_manager import (
    DEFAULT_ENABLED_METRICS,
    SETTING_ENABLED_METRICS,
    SETTING_PERIOD,
    HistoryState,
    RunningHistoryManager,
    format_duration,
    format_pace,
    toggle_metric,
)
from db import DatabaseManager
from metric_types import METRIC_ORDER, MetricType, TimePeriod
from trends import DataPoint


def _point(day, value=70, distance_mi=None, duration_min=None, **overrides):
    values = {m.key: overrides.get(m.key, value) for m in METRIC_ORDER}
    return DataPoint(
        date=datetime(2026, 2, 1) + timedelta(days=day),
        distance_mi=distance_mi,
        duration_min=duration_min,
        **values,
    )


class StubDataSource:
    """Deterministic data source that records requested periods."""

    def __init__(self, points_by_period=None, default=None):
        self.points_by_period = points_by_period or {}
        self.default = default or []
        self.calls = []

    def fetch(self, period, now=None):
        self.calls.append(period)
        return list(self.points_by_period.get(period, self.default))


class HistoryStateTests(unittest.TestCase):
    def test_defaults(self):
        state = HistoryState()
        self.assertEqual(state.selected_period, TimePeriod.MONTH)
        self.assertEqual(state.enabled_metrics, frozenset({MetricType.EFFICIENCY, MetricType.SWAY}))

    def test_toggle_is_pure(self):
        state = HistoryState()
        added = toggle_metric(state, MetricType.IMPACT)
        removed = toggle_metric(added, MetricType.EFFICIENCY)

        self.assertEqual(state.enabled_metrics, DEFAULT_ENABLED_METRICS)
        self.assertIn(MetricType.IMPACT, added.enabled_metrics)
        self.assertNotIn(MetricType.EFFICIENCY, removed.enabled_metrics)
        self.assertEqual(toggle_metric(added, MetricType.IMPACT), state)

    def test_ordered_enabled_metrics(self):
        state = HistoryState(enabled_metrics=frozenset({MetricType.ENDURANCE, MetricType.BRAKING}))
        self.assertEqual(state.ordered_enabled_metrics(), [MetricType.BRAKING, MetricType.ENDURANCE])


class RunningHistoryManagerTests(unittest.TestCase):
    def test_load_data_uses_selected_period(self):
        week_points = [_point(0), _point(1)]
        source = StubDataSource({TimePeriod.WEEK: week_points})
        manager = RunningHistoryManager(source)

        self.assertEqual(manager.load_data(), [])
        self.assertEqual(manager.load_data(TimePeriod.WEEK), week_points)
        self.assertEqual(source.calls, [TimePeriod.MONTH, TimePeriod.WEEK])
        self.assertEqual(manager.selected_period, TimePeriod.WEEK)
        self.assertEqual(manager.total_runs, 2)

    def test_queries_follow_current_points(self):
        manager = RunningHistoryManager(StubDataSource())
        self.assertEqual([i.title for i in manager.insights], ['Keep Training'])

        manager.set_data_points([_point(i, efficiency=v) for i, v in enumerate([50, 50, 80, 80])])
        self.assertEqual(manager.average_for_metric(MetricType.EFFICIENCY), 65)
        self.assertTrue(manager.stats_for_metric(MetricType.EFFICIENCY).trend.is_improving)
        self.assertEqual(manager.insights[0].title, 'Efficiency Improving')

        manager.set_data_points([])
        self.assertEqual(manager.average_for_metric(MetricType.EFFICIENCY), 0)
        self.assertEqual([i.title for i in manager.insights], ['Keep Training'])

    def test_toggle_metric_replaces_state(self):
        manager = RunningHistoryManager(StubDataSource())
        before = manager.state
        manager.toggle_metric(MetricType.SWAY)

        self.assertIn(MetricType.SWAY, before.enabled_metrics)
        self.assertEqual(manager.enabled_metrics, frozenset({MetricType.EFFICIENCY}))

    def test_summary_uses_per_run_fallbacks(self):
        manager = RunningHistoryManager(StubDataSource())
        manager.set_data_points([_point(0), _point(1)])

        self.assertEqual(manager.total_distance, 10.0)
        self.assertEqual(manager.total_time_formatted, '1h 30m')
        self.assertEqual(manager.average_pace_formatted, '9:00')

    def test_summary_uses_recorded_totals(self):
        manager = RunningHistoryManager(StubDataSource())
        manager.set_data_points([
            _point(0, distance_mi=4.0, duration_min=34.0),
            _point(1, distance_mi=6.0, duration_min=50.0),
        ])

        self.assertAlmostEqual(manager.total_distance, 10.0)
        self.assertEqual(manager.total_time_formatted, '1h 24m')
        self.assertEqual(manager.average_pace_formatted, '8:24')

    def test_latest_overall_score(self):
        manager = RunningHistoryManager(StubDataSource())
        self.assertEqual(manager.latest_overall_score, 0)

        manager.set_data_points([_point(0, value=90), _point(1, value=70, efficiency=77)])
        # (77 + 6 * 70) / 7 = 71
        self.assertEqual(manager.latest_overall_score, 71)

    def test_empty_summary(self):
        manager = RunningHistoryManager(StubDataSource())
        self.assertEqual(manager.total_runs, 0)
        self.assertEqual(manager.total_time_formatted, '0h 0m')
        self.assertEqual(manager.average_pace_formatted, '--:--')
        self.assertTrue(manager.to_dataframe().empty)

    def test_to_dataframe(self):
        manager = RunningHistoryManager(StubDataSource())
        manager.set_data_points([_point(0, sway=61), _point(1, sway=64)])
        df = manager.to_dataframe()

        self.assertEqual(len(df), 2)
        self.assertEqual(list(df['sway']), [61, 64])
        for metric in METRIC_ORDER:
            self.assertIn(metric.key, df.columns)

    def test_formatters(self):
        self.assertEqual(format_duration(125), '2h 5m')
        self.assertEqual(format_pace(8.5), '8:30')
        self.assertEqual(format_pace(0), '--:--')


class HistorySettingsTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db = DatabaseManager(str(Path(self.temp_dir.name) / "test.db"))

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_state_round_trips_through_settings(self):
        manager = RunningHistoryManager(StubDataSource(), settings=self.db)
        manager.load_data(TimePeriod.YEAR)
        manager.toggle_metric(MetricType.IMPACT)

        restored = RunningHistoryManager(StubDataSource(), settings=self.db)
        self.assertEqual(restored.selected_period, TimePeriod.YEAR)
        self.assertEqual(
            restored.enabled_metrics,
            frozenset({MetricType.EFFICIENCY, MetricType.IMPACT, MetricType.SWAY}),
        )

    def test_all_metrics_disabled_is_restored(self):
        manager = RunningHistoryManager(StubDataSource(), settings=self.db)
        manager.toggle_metric(MetricType.EFFICIENCY)
        manager.toggle_metric(MetricType.SWAY)

        restored = RunningHistoryManager(StubDataSource(), settings=self.db)
        self.assertEqual(restored.enabled_metrics, frozenset())

    def test_invalid_settings_fall_back_to_defaults(self):
        self.db.set_setting(SETTING_PERIOD, "fortnight")
        self.db.set_setting(SETTING_ENABLED_METRICS, "efficiency,cadence")

        with self.assertLogs('core.history_manager', level='WARNING') as logs:
            manager = RunningHistoryManager(StubDataSource(), settings=self.db)

        self.assertEqual(manager.state, HistoryState())
        self.assertEqual(len(logs.records), 2)


if __name__ == "__main__":
    unittest.main()
