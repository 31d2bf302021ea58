import datetime
import sqlite3
from typing import Dict, List, Optional


class Database:
    """sqlite storage for the state snapshot and the document counters."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.init_db()

    def get_connection(self):
        return sqlite3.connect(self.db_path)

    def init_db(self):
        """Initialize the database schema."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # One JSON blob per storage namespace
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS app_state (
                    namespace TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    last_updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS quote_numbers (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    prefix TEXT NOT NULL DEFAULT 'QUO',
                    counter INTEGER NOT NULL DEFAULT 0,
                    last_updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(date, prefix)
                )
            ''')
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_quote_date_prefix ON quote_numbers(date, prefix)")
        conn.close()

    # State snapshot ---------------------------------------------------------

    def read_state(self, namespace: str) -> Optional[str]:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT payload FROM app_state WHERE namespace = ?", (namespace,))
            row = cursor.fetchone()
        conn.close()
        return row[0] if row else None

    def write_state(self, namespace: str, payload: str):
        with self.get_connection() as conn:
            conn.execute('''
                INSERT OR REPLACE INTO app_state (namespace, payload, last_updated)
                VALUES (?, ?, CURRENT_TIMESTAMP)
            ''', (namespace, payload))
        conn.close()

    # Quote counters ---------------------------------------------------------

    def get_quote_counter(self, date: datetime.date, prefix: str = "QUO") -> int:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT counter FROM quote_numbers WHERE date = ? AND prefix = ?",
                (date.isoformat(), prefix)
            )
            row = cursor.fetchone()
        conn.close()
        return row[0] if row else 0

    def increment_quote_counter(self, date: datetime.date, prefix: str = "QUO") -> int:
        """Increment the counter in a single transaction and return the new value."""
        date_str = date.isoformat()
        with self.get_connection() as conn:
            conn.execute('''
                INSERT INTO quote_numbers (date, prefix, counter) VALUES (?, ?, 1)
                ON CONFLICT(date, prefix) DO UPDATE SET
                    counter = counter + 1, last_updated = CURRENT_TIMESTAMP
            ''', (date_str, prefix))
            cursor = conn.execute(
                "SELECT counter FROM quote_numbers WHERE date = ? AND prefix = ?",
                (date_str, prefix)
            )
            counter = cursor.fetchone()[0]
        conn.close()
        return counter

    def reset_quote_counter(self, date: datetime.date, prefix: str = "QUO"):
        with self.get_connection() as conn:
            conn.execute('''
                INSERT OR REPLACE INTO quote_numbers (date, prefix, counter, last_updated)
                VALUES (?, ?, 0, CURRENT_TIMESTAMP)
            ''', (date.isoformat(), prefix))
        conn.close()

    def get_quote_stats_for_date(self, date: datetime.date) -> List[Dict]:
        with self.get_connection() as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute(
                "SELECT date, prefix, counter, last_updated FROM quote_numbers WHERE date = ?",
                (date.isoformat(),)
            )
            rows = [dict(row) for row in cursor.fetchall()]
        conn.close()
        return rows
