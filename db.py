import logging
import sqlite3
from datetime import datetime

from metric_types import METRIC_ORDER
from trends import DataPoint

logger = logging.getLogger(__name__)

METRIC_COLUMNS = [metric.key for metric in METRIC_ORDER]


class DatabaseManager:
    """SQLite store for run metric data points and user settings."""

    def __init__(self, db_path='runner_history.db'):
        self.db_path = db_path
        self.create_tables()

    def get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def create_tables(self):
        with self.get_connection() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS data_points (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp_utc INTEGER NOT NULL,  -- Source of truth for ordering
                    date TEXT,
                    efficiency INTEGER,
                    braking INTEGER,
                    impact INTEGER,
                    sway INTEGER,
                    variation INTEGER,
                    warmup INTEGER,
                    endurance INTEGER,
                    distance_mi REAL,
                    duration_min REAL,
                    source TEXT
                )
            ''')
            conn.execute('''
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                )
            ''')
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_data_points_timestamp ON data_points(timestamp_utc)"
            )

            # Migration: add columns introduced after the first schema
            cursor = conn.execute("PRAGMA table_info(data_points)")
            columns = [info[1] for info in cursor.fetchall()]

            migrations = {col: 'INTEGER' for col in METRIC_COLUMNS}
            migrations.update({
                'distance_mi': 'REAL',
                'duration_min': 'REAL',
                'source': 'TEXT',
            })

            for col, dtype in migrations.items():
                if col not in columns:
                    logger.info("Migrating database: adding %s column", col)
                    conn.execute(f"ALTER TABLE data_points ADD COLUMN {col} {dtype}")

    def insert_data_point(self, point: DataPoint, source='manual'):
        self.insert_data_points([point], source=source)

    def insert_data_points(self, points, source='manual'):
        rows = [
            (
                int(p.date.timestamp()),
                p.date.strftime('%Y-%m-%d %H:%M'),
                *[p.value_for(metric) for metric in METRIC_ORDER],
                p.distance_mi,
                p.duration_min,
                source,
            )
            for p in points
        ]
        placeholders = ', '.join('?' * (len(METRIC_COLUMNS) + 5))
        with self.get_connection() as conn:
            conn.executemany(
                f'''
                INSERT INTO data_points (
                    timestamp_utc, date, {', '.join(METRIC_COLUMNS)},
                    distance_mi, duration_min, source
                ) VALUES ({placeholders})
                ''',
                rows,
            )
        return len(rows)

    def get_count(self):
        with self.get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM data_points").fetchone()[0]

    def delete_all_points(self):
        with self.get_connection() as conn:
            conn.execute("DELETE FROM data_points")

    def _points_query(self, since_utc=None):
        query = f"SELECT timestamp_utc, {', '.join(METRIC_COLUMNS)}, distance_mi, duration_min FROM data_points"
        params = []
        if since_utc is not None:
            query += " WHERE timestamp_utc >= ?"
            params.append(int(since_utc))
        query += " ORDER BY timestamp_utc ASC, id ASC"
        return query, params

    def _fetch_rows(self, since_utc=None):
        query, params = self._points_query(since_utc)
        with self.get_connection() as conn:
            return conn.execute(query, params).fetchall()

    def get_data_points(self, since_utc=None):
        """
        Fetch stored data points, oldest first.

        Args:
            since_utc: Optional epoch seconds; older points are excluded

        Rows with missing or invalid metric values are skipped.
        """
        points = []
        for row in self._fetch_rows(since_utc):
            values = {col: row[col] for col in METRIC_COLUMNS}
            missing = [col for col, val in values.items() if val is None]
            if missing:
                logger.warning(
                    "Skipping data point at %s with missing metrics: %s",
                    row['timestamp_utc'],
                    ", ".join(missing),
                )
                continue
            try:
                point = DataPoint(
                    date=datetime.fromtimestamp(row['timestamp_utc']),
                    distance_mi=row['distance_mi'],
                    duration_min=row['duration_min'],
                    **{col: int(val) for col, val in values.items()},
                )
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping invalid data point at %s: %s", row['timestamp_utc'], exc)
                continue
            points.append(point)
        return points

    def get_setting(self, key):
        with self.get_connection() as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
            return row[0] if row else None

    def set_setting(self, key, value):
        with self.get_connection() as conn:
            conn.execute(
                '''
                INSERT INTO settings (key, value, updated_at)
                VALUES (?, ?, strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                ''',
                (key, str(value)),
            )
