# roster/io - CSV import/export
from .csv_loader import (
    load_patterns,
    load_shifts,
    load_staff,
    match_results_to_dataframe,
    save_patterns,
    save_shifts,
    shifts_to_dataframe,
)

__all__ = [
    "load_patterns",
    "save_patterns",
    "load_staff",
    "load_shifts",
    "save_shifts",
    "shifts_to_dataframe",
    "match_results_to_dataframe",
]
