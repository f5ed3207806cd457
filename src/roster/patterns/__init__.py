# roster/patterns - Recurring pattern ownership and expansion
from .expander import (
    BulkGenerationResult,
    PatternGenerationSummary,
    count_by_date,
    expand,
    generate_bulk_shifts_from_patterns,
    to_roster_shifts,
)
from .store import PatternStore

__all__ = [
    "PatternStore",
    "expand",
    "generate_bulk_shifts_from_patterns",
    "to_roster_shifts",
    "count_by_date",
    "BulkGenerationResult",
    "PatternGenerationSummary",
]
