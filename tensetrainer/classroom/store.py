"""
Key-value stores - Durable JSON blobs addressed by string key.

Provides:
- KeyValueStore: the get/set contract used by the trackers
- SQLiteStore: persistent store in ~/.tensetrainer/store.db
- MemoryStore: in-process store for tests and throwaway sessions

Stores never raise on I/O problems: failed reads are reported as absent,
failed writes return False. Both are logged.
"""

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from tensetrainer.config import DEFAULT_DATA_DIR
from tensetrainer.errors import PersistenceError


logger = logging.getLogger(__name__)

DEFAULT_STORE_DB = DEFAULT_DATA_DIR / "store.db"

PROGRESS_KEY = "progress"
DAILY_VOCABULARY_KEY = "daily_vocabulary"
MARKED_VOCABULARY_KEY = "marked_vocabulary"


class KeyValueStore(ABC):
    """Get/set of JSON-serializable values by key."""

    def get(self, key: str) -> Optional[Any]:
        """Read a value; None if absent or unreadable."""
        try:
            return self._read(key)
        except PersistenceError as e:
            logger.error(f"Error reading '{key}' from store: {e}")
            return None

    def set(self, key: str, value: Any) -> bool:
        """Write a value; returns False if the write failed."""
        try:
            self._write(key, value)
            return True
        except PersistenceError as e:
            logger.error(f"Error writing '{key}' to store: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Remove a value; returns False if the delete failed."""
        try:
            self._delete(key)
            return True
        except PersistenceError as e:
            logger.error(f"Error deleting '{key}' from store: {e}")
            return False

    @abstractmethod
    def _read(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def _write(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def _delete(self, key: str) -> None:
        ...


def _dumps(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Value is not JSON-serializable: {e}") from e


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"Stored value is not valid JSON: {e}") from e


class MemoryStore(KeyValueStore):
    """
    Dict-backed store.

    Values are kept as JSON text so they behave exactly like persisted ones
    (no shared references, same serialization failures).
    """

    def __init__(self):
        self._data: dict[str, str] = {}

    def _read(self, key: str) -> Optional[Any]:
        text = self._data.get(key)
        return _loads(text) if text is not None else None

    def _write(self, key: str, value: Any) -> None:
        self._data[key] = _dumps(value)

    def _delete(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteStore(KeyValueStore):
    """
    Persistent store in a single SQLite table.

    Last writer wins; there is no conflict detection or schema versioning.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the store.

        A location that cannot be created is logged and leaves the store
        unavailable: reads come back absent and writes report failure.

        Args:
            db_path: Path to store.db (default: ~/.tensetrainer/store.db)
        """
        self.db_path = db_path or DEFAULT_STORE_DB
        self.available = False
        try:
            self._ensure_database()
            self.available = True
        except (OSError, sqlite3.Error) as e:
            logger.error(f"Store at {self.db_path} is unavailable, progress will not be saved: {e}")

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        if not self.available:
            raise PersistenceError(f"Store at {self.db_path} is unavailable")
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _read(self, key: str) -> Optional[Any]:
        try:
            conn = self._get_connection()
            try:
                cursor = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?",
                    (key,)
                )
                row = cursor.fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e

        return _loads(row["value"]) if row else None

    def _write(self, key: str, value: Any) -> None:
        text = _dumps(value)
        try:
            conn = self._get_connection()
            try:
                now = datetime.now().isoformat()
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at)
                       VALUES (?, ?, ?)
                       ON CONFLICT(key) DO UPDATE SET
                         value = excluded.value,
                         updated_at = excluded.updated_at""",
                    (key, text, now)
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e

    def _delete(self, key: str) -> None:
        try:
            conn = self._get_connection()
            try:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
