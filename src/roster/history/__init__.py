# roster/history - Undo/redo history with durable autosave
from .autosave import (
    AutosaveRecord,
    AutosaveTimer,
    InMemoryKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
    read_autosave,
)
from .manager import (
    ActionType,
    HistoryEntry,
    HistoryManager,
    HistoryState,
    roster_history,
    state_fingerprint,
)

__all__ = [
    "HistoryManager",
    "HistoryEntry",
    "HistoryState",
    "ActionType",
    "roster_history",
    "state_fingerprint",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SqliteKeyValueStore",
    "AutosaveRecord",
    "AutosaveTimer",
    "read_autosave",
]
