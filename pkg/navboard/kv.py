"""
Key-value backends for the navigation store.

Every backend exposes single-key get/put/delete. Each call is atomic on its
own key; nothing sequences a get and a later put across requests.
"""
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class KeyValueStore:
    """Interface shared by the backends."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def put(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def describe(self) -> str:
        return self.__class__.__name__


class MemoryKV(KeyValueStore):
    """Process-local store. Data is lost on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def describe(self) -> str:
        return "memory"


class SQLiteKV(KeyValueStore):
    """SQLite-backed durable key-value table."""

    def __init__(self, db_path: str = None):
        """Initialize store and create the table if needed."""
        if db_path is None:
            db_path = str(Path.home() / ".local" / "share" / "navboard" / "navboard.db")
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ? LIMIT 1", (key,)
            ).fetchone()
        return row["value"] if row else None

    def put(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with _connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """, (key, value, now))
            conn.commit()

    def delete(self, key: str) -> None:
        with _connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()

    def describe(self) -> str:
        return self.db_path
