"""
Sheets module - Google Sheets persistence for workout records.
"""
from app.services.sheets.store import (
    SHEET_COLUMNS,
    SheetsError,
    WorkoutStore,
)

__all__ = [
    "SHEET_COLUMNS",
    "SheetsError",
    "WorkoutStore",
]
