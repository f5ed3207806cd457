"""
Pattern Store
=============
Owns the recurring shift patterns of one roster.

Instantiate once at application start and pass it to whoever needs it.
Listeners registered with ``subscribe`` receive the full pattern list
after every change.
"""
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional

from roster.errors import DuplicatePatternError, PatternNotFoundError
from roster.models.pattern import RecurringShiftPattern
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.patterns.store")

PatternListener = Callable[[List[RecurringShiftPattern]], None]


class PatternStore:
    """
    In-memory owner of recurring shift patterns.

    Usage:
        store = PatternStore(initial_patterns)
        unsubscribe = store.subscribe(lambda patterns: refresh(patterns))
        store.add(pattern)
        store.deactivate(pattern.id)
    """

    def __init__(self, patterns: Optional[Iterable[RecurringShiftPattern]] = None):
        self._patterns: Dict[str, RecurringShiftPattern] = {}
        self._listeners: List[PatternListener] = []
        for p in patterns or []:
            if p.id in self._patterns:
                raise DuplicatePatternError(f"Duplicate pattern id: {p.id}")
            self._patterns[p.id] = p

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: str) -> bool:
        return pattern_id in self._patterns

    def __iter__(self):
        return iter(list(self._patterns.values()))

    # --- Queries ---

    def get(self, pattern_id: str) -> Optional[RecurringShiftPattern]:
        return self._patterns.get(pattern_id)

    def all(self) -> List[RecurringShiftPattern]:
        """All patterns in insertion order."""
        return list(self._patterns.values())

    def active(self) -> List[RecurringShiftPattern]:
        """Patterns that take part in generation."""
        return [p for p in self._patterns.values() if p.is_active]

    def assigned(self) -> List[RecurringShiftPattern]:
        """Patterns with a fixed staff member."""
        return [p for p in self._patterns.values() if p.assigned_staff_id]

    # --- Mutations ---

    def add(self, pattern: RecurringShiftPattern) -> RecurringShiftPattern:
        if pattern.id in self._patterns:
            raise DuplicatePatternError(f"Duplicate pattern id: {pattern.id}")
        self._patterns[pattern.id] = pattern
        logger.info(f"Added pattern {pattern.id} ({pattern.name!r}, {pattern.days_label})")
        self._notify()
        return pattern

    def update(self, pattern_id: str, **changes) -> RecurringShiftPattern:
        """
        Replace fields of a stored pattern.

        The stored object is swapped for an updated copy, so references
        held by callers keep their previous values.
        """
        current = self._require(pattern_id)
        if "id" in changes and changes["id"] != pattern_id:
            raise ValueError("Pattern id cannot be changed")
        updated = replace(current, **changes)
        self._patterns[pattern_id] = updated
        logger.debug(f"Updated pattern {pattern_id}: {sorted(changes)}")
        self._notify()
        return updated

    def set_active(self, pattern_id: str, is_active: bool) -> RecurringShiftPattern:
        return self.update(pattern_id, is_active=is_active)

    def deactivate(self, pattern_id: str) -> RecurringShiftPattern:
        """Retire a pattern while keeping it for shifts that reference it."""
        return self.set_active(pattern_id, False)

    def toggle_active(self, pattern_id: str) -> RecurringShiftPattern:
        current = self._require(pattern_id)
        return self.set_active(pattern_id, not current.is_active)

    def delete(self, pattern_id: str) -> RecurringShiftPattern:
        """Hard delete. Prefer ``deactivate`` for patterns that already generated shifts."""
        removed = self._require(pattern_id)
        del self._patterns[pattern_id]
        logger.info(f"Deleted pattern {pattern_id}")
        self._notify()
        return removed

    # --- Subscriptions ---

    def subscribe(self, listener: PatternListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        snapshot = self.all()
        for listener in list(self._listeners):
            listener(snapshot)

    def _require(self, pattern_id: str) -> RecurringShiftPattern:
        pattern = self._patterns.get(pattern_id)
        if pattern is None:
            raise PatternNotFoundError(pattern_id)
        return pattern
