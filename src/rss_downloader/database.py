"""SQLite feed registry for rss-downloader."""

import sqlite3

from rss_downloader.models import FeedConfig

# Column names are shared with existing registry files; don't rename them.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS feeds (
    name TEXT PRIMARY KEY,
    url TEXT NOT NULL,
    dayOfWeek INTEGER NOT NULL,
    seconds INTEGER NOT NULL,
    lastTitle TEXT NOT NULL
);
"""


class PersistenceError(Exception):
    """Raised when the registry cannot be read or written."""


class Database:
    """SQLite registry of watched feeds and their last seen titles."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Open database connection and initialize schema."""
        try:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA_SQL)
            self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not open registry {self.db_path}: {e}") from e

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._conn

    def add_feed(self, feed: FeedConfig) -> FeedConfig:
        """Insert a feed, replacing any existing feed with the same name."""
        try:
            self.conn.execute(
                """INSERT OR REPLACE INTO feeds (name, url, dayOfWeek, seconds, lastTitle)
                   VALUES (?, ?, ?, ?, ?)""",
                (feed.name, feed.url, feed.day_of_week, feed.anchor_second, feed.last_title),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not add feed '{feed.name}': {e}") from e
        return feed

    def get_feed(self, name: str) -> FeedConfig | None:
        """Look up a feed by name."""
        try:
            row = self.conn.execute(
                "SELECT * FROM feeds WHERE name = ?", (name,)
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read feed '{name}': {e}") from e
        return _row_to_feed(row) if row else None

    def get_feeds(self) -> list[FeedConfig]:
        """Return every registered feed.

        Raises:
            PersistenceError: If the registry can't be read.
            ValueError: If a row holds an out-of-range day or anchor.
        """
        try:
            rows = self.conn.execute(
                "SELECT name, url, dayOfWeek, seconds, lastTitle FROM feeds ORDER BY name"
            ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read feeds: {e}") from e
        return [_row_to_feed(r) for r in rows]

    def update_last_title(self, name: str, title: str) -> None:
        """Record the newest seen title for a feed."""
        try:
            self.conn.execute(
                "UPDATE feeds SET lastTitle = ? WHERE name = ?",
                (title, name),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not update last title for '{name}': {e}") from e


def _row_to_feed(row: sqlite3.Row) -> FeedConfig:
    """Convert a database row to a FeedConfig dataclass."""
    return FeedConfig(
        name=row["name"],
        url=row["url"],
        day_of_week=row["dayOfWeek"],
        anchor_second=row["seconds"],
        last_title=row["lastTitle"],
    )
