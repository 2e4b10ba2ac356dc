"""Check-in history stores backing the progress report endpoints."""
import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import timezone
from typing import Any, Dict, Generator, List, Optional
import logging

from progress_engine import parse_timestamp

from .config import get_settings

log = logging.getLogger(__name__)


def _sort_key(timestamp: Optional[str]) -> str:
    # Stored check-ins were validated on append, so this always parses
    return parse_timestamp(timestamp).astimezone(timezone.utc).isoformat()


class HistoryStore(ABC):
    """Append-only per-user check-in history."""

    @abstractmethod
    def append(self, user_id: str, timestamp: str, indicators: Dict[str, Any]) -> Dict[str, Any]:
        """Store one check-in and return it as a record dict."""

    @abstractmethod
    def query(self, user_id: str) -> List[Dict[str, Any]]:
        """All check-ins for ``user_id``, oldest first."""


class InMemoryHistoryStore(HistoryStore):
    """Process-local store, used for tests and ``history_backend=memory``."""

    def __init__(self):
        self._records: Dict[str, List[Dict[str, Any]]] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def append(self, user_id: str, timestamp: str, indicators: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            record = {
                "id": self._next_id,
                "user_id": user_id,
                "timestamp": timestamp,
                "indicators": dict(indicators),
            }
            self._next_id += 1
            self._records.setdefault(user_id, []).append(record)
        log.debug(f"[HISTORY] Appended check-in {record['id']} for {user_id}")
        return record

    def query(self, user_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            records = list(self._records.get(user_id, []))
        return sorted(records, key=lambda r: (_sort_key(r["timestamp"]), r["id"]))


class SQLiteHistoryStore(HistoryStore):
    """
    SQLite-backed history store.

    Opens a short-lived connection per operation so the store can be
    shared across request threads.
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS check_ins (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            timestamp TEXT NOT NULL,
            recorded_at TEXT NOT NULL,
            indicators TEXT NOT NULL
        )
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_settings().history_db_file
        with self._connect() as conn:
            conn.execute(self.SCHEMA)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_check_ins_user ON check_ins (user_id, recorded_at)"
            )
        log.info(f"[HISTORY] Using SQLite history store at {self.db_path}")

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row  # Enable dict-like row access
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def append(self, user_id: str, timestamp: str, indicators: Dict[str, Any]) -> Dict[str, Any]:
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO check_ins (user_id, timestamp, recorded_at, indicators)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, timestamp, _sort_key(timestamp), json.dumps(indicators)),
            )
            record_id = cursor.lastrowid
        log.debug(f"[HISTORY] Appended check-in {record_id} for {user_id}")
        return {
            "id": record_id,
            "user_id": user_id,
            "timestamp": timestamp,
            "indicators": dict(indicators),
        }

    def query(self, user_id: str) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM check_ins
                WHERE user_id = ?
                ORDER BY recorded_at, id
                """,
                (user_id,),
            ).fetchall()
        return [_row_to_record(row) for row in rows]


def _row_to_record(row) -> Dict[str, Any]:
    """Convert SQLite row to a check-in record dict."""
    return {
        "id": int(row["id"]),
        "user_id": row["user_id"],
        "timestamp": row["timestamp"],
        "indicators": json.loads(row["indicators"]),
    }


_store: Optional[HistoryStore] = None
_store_lock = threading.Lock()


def get_history_store() -> HistoryStore:
    """FastAPI dependency returning the configured store (created once)."""
    global _store
    with _store_lock:
        if _store is None:
            settings = get_settings()
            if settings.history_backend == "memory":
                _store = InMemoryHistoryStore()
            else:
                _store = SQLiteHistoryStore(settings.history_db_file)
        return _store
