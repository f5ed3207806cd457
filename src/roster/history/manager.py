"""
History Manager
===============
Snapshot-based undo/redo log with bounded depth and durable autosave.

Every entry holds a full copy of the state. The cursor (``current_index``)
selects the visible state:

    commit          append after the cursor, dropping any redo branch,
                    evicting the oldest entries beyond ``max_history``
    undo / redo     move the cursor one step, no-op at either end
    revert_to_index jump anywhere without dropping entries
    reset           replace the log with a single initial entry

A commit whose resolved state matches the visible one (same content
fingerprint and ==) creates no entry. Navigation with an out-of-range index is
ignored. Autosave runs after every log change and from ``tick``/the
autosave timer; storage failures are logged and never raised.
"""
import copy
import hashlib
import itertools
import json
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

from roster.history.autosave import (
    AutosaveTimer,
    KeyValueStore,
    AutosaveRecord,
    discard_autosave,
    json_default,
    read_autosave,
)
from roster.models.config import RosterConfig
from roster.models.shift import Shift, shifts_from_data, shifts_to_data
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.history.manager")

T = TypeVar("T")

HistoryListener = Callable[["HistoryState"], None]


class ActionType(str, Enum):
    """Kind of change recorded by a history entry."""
    ADD = "add"
    DELETE = "delete"
    UPDATE = "update"
    MOVE = "move"
    RESIZE = "resize"
    BULK = "bulk"
    COPY = "copy"
    UNDO = "undo"
    REDO = "redo"
    INITIAL = "initial"


@dataclass(frozen=True)
class HistoryEntry(Generic[T]):
    """One recorded state. Snapshots are private copies; treat them as read-only."""
    id: str
    timestamp: datetime
    action_type: ActionType
    description: str
    snapshot: T
    fingerprint: str = ""
    changed_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HistoryState(Generic[T]):
    """Entries plus cursor, as handed to listeners and history views."""
    entries: Tuple[HistoryEntry[T], ...]
    current_index: int

    @property
    def can_undo(self) -> bool:
        return self.current_index > 0

    @property
    def can_redo(self) -> bool:
        return self.current_index < len(self.entries) - 1

    @property
    def current(self) -> HistoryEntry[T]:
        return self.entries[self.current_index]


def state_fingerprint(data: Any) -> str:
    """Content hash of serialized state, used for deep-equality checks."""
    payload = json.dumps(data, sort_keys=True, default=json_default, ensure_ascii=False)
    return hashlib.sha256(payload.encode()).hexdigest()


def _identity(value):
    return value


class HistoryManager(Generic[T]):
    """
    Undo/redo container over an arbitrary serializable state.

    Usage:
        history = HistoryManager(shifts, serialize=shifts_to_data,
                                 deserialize=shifts_from_data,
                                 store=SqliteKeyValueStore())
        history.commit(lambda prev: prev + [new_shift], "Add shift", ActionType.ADD)
        history.undo()

    All mutations and autosave snapshots happen under one re-entrant lock,
    so the autosave timer never persists a half-applied change.
    """

    def __init__(
        self,
        initial_state: T,
        config: Optional[RosterConfig] = None,
        *,
        serialize: Callable[[T], Any] = _identity,
        deserialize: Callable[[Any], T] = _identity,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], datetime] = datetime.now,
        description: str = "Initial state",
    ):
        self.config = config or RosterConfig()
        self.max_history = max(1, int(self.config.max_history))
        self._serialize = serialize
        self._deserialize = deserialize
        self._store = store
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: List[HistoryListener] = []
        self._ids = itertools.count(1)
        self._timer: Optional[AutosaveTimer] = None

        self.last_saved_at: Optional[datetime] = None
        self.last_save_error: Optional[str] = None
        self._last_autosave_attempt: Optional[datetime] = None

        self._entries: List[HistoryEntry[T]] = [
            self._make_entry(initial_state, ActionType.INITIAL, description)
        ]
        self._index = 0

    # --- Queries ---

    @property
    def entries(self) -> Tuple[HistoryEntry[T], ...]:
        with self._lock:
            return tuple(self._entries)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_entry(self) -> HistoryEntry[T]:
        with self._lock:
            return self._entries[self._index]

    @property
    def state(self) -> T:
        """A private copy of the visible state, safe to modify."""
        with self._lock:
            return copy.deepcopy(self._entries[self._index].snapshot)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def history(self) -> HistoryState[T]:
        with self._lock:
            return HistoryState(entries=tuple(self._entries), current_index=self._index)

    def __len__(self) -> int:
        return len(self._entries)

    # --- Mutations ---

    def commit(
        self,
        new_state: Union[T, Callable[[T], T]],
        description: str,
        action_type: Union[ActionType, str] = ActionType.UPDATE,
        changed_ids: Optional[Iterable[str]] = None,
    ) -> bool:
        """
        Record a new state.

        Args:
            new_state: The new state, or a function of the previous state
            description: Human-readable summary for the history view
            action_type: Kind of change, used for icons and filtering
            changed_ids: Ids of the records touched by this change

        Returns:
            True if an entry was appended, False for no-ops and rejected commits
        """
        with self._lock:
            try:
                resolved = new_state(self.state) if callable(new_state) else new_state
                entry = self._make_entry(resolved, ActionType(action_type), description, changed_ids)
            except Exception:
                logger.exception(f"Commit rejected: {description!r}")
                return False

            current = self._entries[self._index]
            if entry.fingerprint == current.fingerprint and entry.snapshot == current.snapshot:
                logger.debug(f"No-op commit ignored: {description!r}")
                return False

            dropped = len(self._entries) - self._index - 1
            del self._entries[self._index + 1:]
            self._entries.append(entry)

            overflow = len(self._entries) - self.max_history
            if overflow > 0:
                del self._entries[:overflow]
            self._index = len(self._entries) - 1

            logger.info(
                f"Commit [{entry.action_type.value}] {description!r} → index {self._index}"
                + (f" (dropped {dropped} redo entries)" if dropped else "")
                + (f" (evicted {overflow} oldest)" if overflow > 0 else "")
            )

        self._changed()
        return True

    def undo(self) -> bool:
        with self._lock:
            if self._index <= 0:
                return False
            self._index -= 1
            logger.debug(f"Undo → index {self._index}")
        self._changed()
        return True

    def redo(self) -> bool:
        with self._lock:
            if self._index >= len(self._entries) - 1:
                return False
            self._index += 1
            logger.debug(f"Redo → index {self._index}")
        self._changed()
        return True

    def revert_to_index(self, index: int) -> bool:
        """
        Move the cursor to ``index`` without discarding later entries.

        Stale or out-of-range indices are ignored.
        """
        with self._lock:
            if isinstance(index, bool) or not isinstance(index, int):
                return False
            if index < 0 or index >= len(self._entries) or index == self._index:
                return False
            self._index = index
            logger.debug(f"Revert → index {index}")
        self._changed()
        return True

    def reset(self, initial_state: T, description: str = "Initial state") -> bool:
        """Replace the whole log with a single initial entry."""
        with self._lock:
            try:
                entry = self._make_entry(initial_state, ActionType.INITIAL, description)
            except Exception:
                logger.exception(f"Reset rejected: {description!r}")
                return False
            self._entries = [entry]
            self._index = 0
            logger.info(f"History reset: {description!r}")
        self._changed()
        return True

    # --- Subscriptions ---

    def subscribe(self, listener: HistoryListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Autosave ---

    def autosave(self) -> bool:
        """
        Write the visible snapshot to the autosave slot.

        Returns False (and records ``last_save_error``) on failure.
        """
        if self._store is None:
            return False

        with self._lock:
            now = self._clock()
            self._last_autosave_attempt = now
            try:
                record = AutosaveRecord(
                    data=self._serialize(self._entries[self._index].snapshot),
                    timestamp=now,
                )
                self._store.put(self.config.autosave_key, record.to_json())
            except Exception as e:
                self.last_save_error = f"{type(e).__name__}: {e}"
                logger.error(f"Autosave failed: {self.last_save_error}")
                return False

            self.last_saved_at = now
            self.last_save_error = None
            logger.debug(f"Autosaved index {self._index} at {now.isoformat()}")
            return True

    def tick(self) -> bool:
        """Autosave if the configured interval has elapsed since the last attempt."""
        if self._store is None:
            return False
        last = self._last_autosave_attempt
        if last is not None:
            elapsed = (self._clock() - last).total_seconds()
            if elapsed < self.config.autosave_interval_seconds:
                return False
        return self.autosave()

    def start_autosave_timer(self) -> AutosaveTimer:
        """Start periodic autosave on a background timer."""
        if self._timer is None:
            self._timer = AutosaveTimer(self.autosave, self.config.autosave_interval_seconds)
        return self._timer.start()

    def stop_autosave_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def load_autosave(self) -> Optional[AutosaveRecord]:
        """The stored autosave record, or None if missing or corrupt."""
        if self._store is None:
            return None
        return read_autosave(self._store, self.config.autosave_key)

    def restore_autosave(self) -> bool:
        """
        Replace the log with the autosaved snapshot, if a readable one exists.

        A record whose data cannot be rebuilt into state is discarded.
        """
        record = self.load_autosave()
        if record is None:
            return False

        try:
            state = self._deserialize(record.data)
        except Exception as e:
            logger.warning(f"Discarding unusable autosave: {type(e).__name__}: {e}")
            discard_autosave(self._store, self.config.autosave_key)
            return False

        restored = self.reset(state, description=f"Restored autosave from {record.timestamp:%Y-%m-%d %H:%M}")
        if not restored:
            logger.warning("Discarding autosave that could not be loaded into history")
            discard_autosave(self._store, self.config.autosave_key)
            return False
        logger.info(f"Restored autosave written at {record.timestamp.isoformat()}")
        return True

    def close(self) -> None:
        """Stop the timer and write a final autosave."""
        self.stop_autosave_timer()
        self.autosave()

    # --- Internals ---

    def _make_entry(
        self,
        state: T,
        action_type: ActionType,
        description: str,
        changed_ids: Optional[Iterable[str]] = None,
    ) -> HistoryEntry[T]:
        snapshot = copy.deepcopy(state)
        now = self._clock()
        if getattr(self, "_entries", None) and now < self._entries[-1].timestamp:
            now = self._entries[-1].timestamp
        return HistoryEntry(
            id=f"entry-{next(self._ids)}",
            timestamp=now,
            action_type=action_type,
            description=description,
            snapshot=snapshot,
            fingerprint=state_fingerprint(self._serialize(snapshot)),
            changed_ids=tuple(changed_ids or ()),
        )

    def _changed(self) -> None:
        history = self.history
        for listener in list(self._listeners):
            try:
                listener(history)
            except Exception:
                logger.exception("History listener failed")
        self.autosave()


def roster_history(
    shifts: List[Shift],
    config: Optional[RosterConfig] = None,
    store: Optional[KeyValueStore] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> HistoryManager[List[Shift]]:
    """History manager over a roster shift list, with JSON-ready autosave."""
    return HistoryManager(
        shifts,
        config,
        serialize=shifts_to_data,
        deserialize=shifts_from_data,
        store=store,
        clock=clock,
    )
