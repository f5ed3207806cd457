"""Exception hierarchy for the roster core."""


class RosterError(Exception):
    """Base exception for roster core operations."""


class PatternNotFoundError(RosterError, KeyError):
    """Raised when a pattern id is not held by the store."""

    def __init__(self, pattern_id: str):
        super().__init__(pattern_id)
        self.pattern_id = pattern_id

    def __str__(self) -> str:
        return f"Unknown pattern: {self.pattern_id}"


class DuplicatePatternError(RosterError):
    """Raised when adding a pattern whose id is already in the store."""


class AutosaveError(RosterError):
    """Base class for autosave storage problems."""


class AutosaveCorruptedError(AutosaveError):
    """Raised when a stored autosave record cannot be parsed."""
