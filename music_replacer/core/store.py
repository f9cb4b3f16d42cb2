"""
Thread-safe SQLite configuration store for music-replacer.

A plain string key/value store scoped by group, the same shape as the
configuration manager of the host client. Overrides are stored as one
row each:

    group = "musicreplacer"
    key   = "track_<track name>"
    value = TrackOverride JSON

Schema:
    configuration:  (group_name, key) -> value

Usage:
    store = ConfigStore(storage_dir / "music-replacer.db")

    store.set_configuration("musicreplacer", "track_Harmony", "{...}")
    store.get_configuration("musicreplacer", "track_Harmony")
    for key in store.get_configuration_keys("musicreplacer"):
        ...
"""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from music_replacer.core.exceptions import StoreError


STORE_VERSION = 1


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS configuration (
    group_name TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    PRIMARY KEY (group_name, key)
);
"""


class ConfigStore:
    """
    Thread-safe grouped key/value store.

    Uses a single persistent connection with thread locking for safety.
    All public methods acquire self._lock before executing, so the store
    can be read from the caller's thread while pool threads write to it.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

        if not db_path.parent.exists():
            raise StoreError(
                f"Parent directory does not exist: {db_path.parent}",
                details={"path": str(db_path.parent)}
            )

        try:
            self._init_store()
        except sqlite3.Error as e:
            raise StoreError(
                f"Failed to initialize configuration store: {e}",
                details={"path": str(db_path)}
            ) from e

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Get the persistent connection, wrapping SQLite failures.

        The connection is created once and reused for all operations.
        """
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                timeout=30.0,
                check_same_thread=False  # We handle thread safety with _lock
            )
            self._conn.execute("PRAGMA journal_mode = WAL")
        try:
            yield self._conn
        except sqlite3.Error as e:
            raise StoreError(
                f"Configuration store error: {e}",
                details={"path": str(self.db_path)}
            ) from e

    def _init_store(self) -> None:
        with self._get_connection() as conn:
            conn.executescript(_SCHEMA_SQL)

            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if row is None:
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (STORE_VERSION,))
            elif row[0] != STORE_VERSION:
                raise StoreError(
                    f"Store version mismatch: expected {STORE_VERSION}, got {row[0]}",
                    details={"expected": STORE_VERSION, "actual": row[0]}
                )
            conn.commit()

    def close(self) -> None:
        """Close the store connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def get_configuration(self, group: str, key: str) -> str | None:
        """Return the value for key in group, or None when unset."""
        with self._lock:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT value FROM configuration WHERE group_name = ? AND key = ?",
                    (group, key)
                ).fetchone()
                return row[0] if row else None

    def set_configuration(self, group: str, key: str, value: str) -> None:
        """Create or replace the value for key in group."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO configuration (group_name, key, value)
                    VALUES (?, ?, ?)
                    ON CONFLICT(group_name, key) DO UPDATE SET value = excluded.value
                """, (group, key, value))
                conn.commit()

    def unset_configuration(self, group: str, key: str) -> None:
        """Delete key from group. Unsetting a missing key is a no-op."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute(
                    "DELETE FROM configuration WHERE group_name = ? AND key = ?",
                    (group, key)
                )
                conn.commit()

    def get_configuration_keys(self, group: str) -> list[str]:
        """All keys of a group, sorted."""
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "SELECT key FROM configuration WHERE group_name = ? ORDER BY key",
                    (group,)
                )
                return [row[0] for row in cursor.fetchall()]
