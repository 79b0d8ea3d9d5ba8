"""
Running History - NiceGUI application entry point.
Wires the SQLite store, data source, history manager and history view.
"""

import logging

from nicegui import ui

from components.history_view import HistoryView
from core.data_source import DatabaseDataSource, SampleDataSource
from core.history_manager import RunningHistoryManager
from db import DatabaseManager
from metric_types import TimePeriod


logger = logging.getLogger(__name__)

DB_PATH = 'runner_history.db'
SAMPLE_SEED = 7


class MuteFrameworkNoise(logging.Filter):
    def filter(self, record):
        # Filter out the specific NiceGUI warning about event listeners
        return "Event listeners changed after initial definition" not in record.getMessage()


def seed_sample_history(db, seed=SAMPLE_SEED):
    """Fill an empty store with a year of sample runs. Returns rows inserted."""
    if db.get_count() > 0:
        return 0
    points = SampleDataSource(seed=seed).fetch(TimePeriod.ALL_TIME)
    inserted = db.insert_data_points(points, source='sample')
    logger.info("Seeded %d sample data points", inserted)
    return inserted


class RunningHistoryApp:
    """Main application class for the running history page."""

    def __init__(self, db_path=DB_PATH):
        self.db = DatabaseManager(db_path)
        seed_sample_history(self.db)
        self.manager = RunningHistoryManager(
            data_source=DatabaseDataSource(self.db),
            settings=self.db,
        )
        self.view = HistoryView(self.manager).build()


def main():
    """Application entry point."""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    # Suppress known NiceGUI framework listener-churn warning noise
    nicegui_logger = logging.getLogger('nicegui')
    nicegui_logger.addFilter(MuteFrameworkNoise())

    @ui.page("/")
    def index():
        RunningHistoryApp()

    try:
        ui.run(
            title="Running History",
            reload=False,
            dark=True,
        )
    except KeyboardInterrupt:
        # Graceful terminal interrupt during local development.
        pass


if __name__ in {"__main__", "__mp_main__"}:
    main()
