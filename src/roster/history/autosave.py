"""
Autosave Storage
================
Durable key/value slots holding the latest roster snapshot.

Record format (one key):
    {"data": <serialized snapshot>, "timestamp": "<ISO-8601>"}
"""
import json
import sqlite3
import threading
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Union

from roster.errors import AutosaveCorruptedError
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.history.autosave")


class KeyValueStore(Protocol):
    """A durable string slot store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store, for tests and sessions without a disk."""

    def __init__(self) -> None:
        self._store: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def put(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)


class SqliteKeyValueStore:
    """
    Key/value slots in a local SQLite file.

    Usage:
        store = SqliteKeyValueStore(Path("data/autosave.db"))
        store.put("roster-autosave", payload)
    """

    def __init__(self, db_path: Union[str, Path] = Path("data/autosave.db")):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @classmethod
    def from_config(cls, config) -> "SqliteKeyValueStore":
        """Store at ``config.autosave_db_path``."""
        return cls(config.autosave_db_path)

    def _init_db(self):
        """Create the slot table if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_slots (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP
                )
            """)
            conn.commit()
        logger.debug(f"Autosave database initialized at {self.db_path}")

    def get(self, key: str) -> Optional[str]:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM kv_slots WHERE key = ?",
                (key,)
            ).fetchone()
            return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_slots (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, datetime.now().isoformat())
            )
            conn.commit()

    def delete(self, key: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv_slots WHERE key = ?", (key,))
            conn.commit()


def json_default(o: Any) -> Any:
    """JSON fallback for dates, enums, sets and objects with ``to_dict``."""
    if isinstance(o, (datetime, date)):
        return o.isoformat()
    if isinstance(o, Enum):
        return o.value
    if isinstance(o, (set, frozenset)):
        return sorted(o)
    if hasattr(o, "to_dict"):
        return o.to_dict()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


@dataclass
class AutosaveRecord:
    """Serialized snapshot plus the moment it was written."""
    data: Any
    timestamp: datetime

    def to_json(self) -> str:
        return json.dumps(
            {"data": self.data, "timestamp": self.timestamp.isoformat()},
            default=json_default,
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, raw: str) -> "AutosaveRecord":
        """Parse a stored record; raises AutosaveCorruptedError on bad content."""
        try:
            payload = json.loads(raw)
            data = payload["data"]
            timestamp = datetime.fromisoformat(payload["timestamp"])
        except (TypeError, ValueError, KeyError) as e:
            raise AutosaveCorruptedError(f"Unreadable autosave record: {e}") from e
        return cls(data=data, timestamp=timestamp)


def read_autosave(store: KeyValueStore, key: str) -> Optional[AutosaveRecord]:
    """
    Read the autosave slot.

    Returns None when the slot is empty or unreadable; corrupt contents
    are deleted so the next startup does not trip over them again.
    """
    try:
        raw = store.get(key)
    except Exception as e:
        logger.error(f"Autosave read failed for {key!r}: {type(e).__name__}: {e}")
        return None

    if raw is None:
        logger.debug(f"No autosave under {key!r}")
        return None

    try:
        return AutosaveRecord.from_json(raw)
    except AutosaveCorruptedError as e:
        logger.warning(f"Discarding corrupt autosave {key!r}: {e}")
        discard_autosave(store, key)
        return None


def discard_autosave(store: KeyValueStore, key: str) -> None:
    try:
        store.delete(key)
    except Exception as e:
        logger.error(f"Could not delete autosave {key!r}: {type(e).__name__}: {e}")


class AutosaveTimer:
    """
    Calls ``save`` every ``interval_seconds`` on a daemon thread.

    Usage:
        with AutosaveTimer(history.autosave, 30):
            run_event_loop()
    """

    def __init__(self, save: Callable[[], Any], interval_seconds: float):
        self.save = save
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "AutosaveTimer":
        if self.interval_seconds <= 0:
            logger.info("Periodic autosave disabled (interval <= 0)")
            return self
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="roster-autosave", daemon=True)
        self._thread.start()
        logger.debug(f"Autosave timer started ({self.interval_seconds}s)")
        return self

    def _run(self):
        while not self._stop.wait(self.interval_seconds):
            self.save()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=max(1.0, self.interval_seconds))
            self._thread = None
        logger.debug("Autosave timer stopped")

    def __enter__(self) -> "AutosaveTimer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
