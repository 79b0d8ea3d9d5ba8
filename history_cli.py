"""
Running History - Command Line Interface
Print a trend report for a time period without the GUI.

Usage: python history_cli.py [period] [--db PATH] [--seed N]
"""

import os
import sys

from core.data_source import DatabaseDataSource, SampleDataSource
from core.history_manager import RunningHistoryManager
from db import DatabaseManager
from metric_types import METRIC_ORDER, TimePeriod
from trends import InsightSeverity

SEVERITY_MARKERS = {
    InsightSeverity.SUCCESS: "✅",
    InsightSeverity.WARNING: "⚠️",
    InsightSeverity.INFO: "🔷",
    InsightSeverity.DEFAULT: "🏃",
}


class HistoryReporter:
    """Writes a text report for a loaded RunningHistoryManager."""

    def __init__(self, manager, output_callback=None):
        self.manager = manager
        self.output_callback = output_callback or self._default_output

    def _default_output(self, text: str):
        print(text)

    def _emit(self, text: str):
        self.output_callback(text)

    def report(self):
        m = self.manager
        self._emit(f"\n🏃 RUNNING HISTORY: {m.selected_period.value}")
        self._emit("-" * 60)
        self._emit(
            f"Totals:   {m.total_runs} runs  |  {m.total_distance:.1f} mi  |  "
            f"{m.total_time_formatted}  |  {m.average_pace_formatted}/mi"
        )
        if m.total_runs:
            self._emit(f"Latest:   overall form score {m.latest_overall_score}")
            self._emit("")
            self._emit(f"{'Metric':<12}{'Avg':>5}{'Best':>6}{'Low':>5}{'Cons':>6}  Trend")
            for metric in METRIC_ORDER:
                stats = m.stats_for_metric(metric)
                self._emit(
                    f"{metric.info.name:<12}{stats.average:>5}{stats.best:>6}{stats.worst:>5}"
                    f"{stats.consistency:>6}  {stats.trend.label} ({stats.consistency_label})"
                )

        self._emit("")
        self._emit("Insights:")
        for insight in m.insights:
            marker = SEVERITY_MARKERS.get(insight.severity, "•")
            self._emit(f"  {marker} {insight.title}: {insight.message}")


def _usage():
    periods = ", ".join(p.key for p in TimePeriod)
    print("Usage: python history_cli.py [period] [--db PATH] [--seed N]")
    print(f"       period is one of: {periods}")


def main(argv=None):
    """CLI entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    db_path = None
    seed = None
    period = TimePeriod.MONTH

    try:
        while args:
            arg = args.pop(0)
            if arg == "--db":
                db_path = args.pop(0)
            elif arg == "--seed":
                seed = int(args.pop(0))
            elif arg in ("-h", "--help"):
                _usage()
                return 0
            else:
                period = TimePeriod.from_key(arg)
    except (IndexError, ValueError) as e:
        print(f"❌ Error: {e}")
        _usage()
        sys.exit(1)

    if db_path:
        if not os.path.exists(db_path):
            print(f"❌ Error: {db_path} does not exist")
            sys.exit(1)
        source = DatabaseDataSource(DatabaseManager(db_path))
    else:
        source = SampleDataSource(seed=seed)

    manager = RunningHistoryManager(data_source=source)
    manager.load_data(period)
    HistoryReporter(manager).report()
    return 0


if __name__ == "__main__":
    main()
