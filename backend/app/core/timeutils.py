"""
Time helpers shared by ingestion and the statistics engine.

Handles the loose formats found in the sheet and in CSV uploads:
- dates as ISO ``YYYY-MM-DD`` or US locale ``M/D/YYYY``
- times of day as ``H:MM`` or ``H:MM:SS``
- durations as minutes (number or numeric string) or ``H:MM``
"""
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

from app.core.logging import get_logger

logger = get_logger(__name__)

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_US_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_HOURS_MINUTES_PATTERN = re.compile(r"^(\d+):([0-5]?\d)$")


# ========================================
# Times and durations
# ========================================

def is_valid_time(value: Optional[str]) -> bool:
    """Check a time of day against the ``H:MM`` / ``H:MM:SS`` pattern."""
    return bool(value) and TIME_PATTERN.match(value.strip()) is not None


def parse_time_of_day(value: Optional[str]) -> Optional[float]:
    """
    Parse a time of day into minutes since midnight.

    Seconds contribute a fractional minute. Returns None when the value
    does not match the time pattern.
    """
    if not is_valid_time(value):
        return None
    parts = [int(p) for p in value.strip().split(":")]
    hours, minutes = parts[0], parts[1]
    seconds = parts[2] if len(parts) == 3 else 0
    return hours * 60 + minutes + seconds / 60


def derive_duration(start_time: str, end_time: str) -> int:
    """
    Elapsed whole minutes between two times of day.

    Rounds half up. Overnight spans are not wrapped: an end time before
    the start time gives a negative result.

    Raises:
        ValueError: If either time does not match the time pattern
    """
    start = parse_time_of_day(start_time)
    end = parse_time_of_day(end_time)
    if start is None or end is None:
        raise ValueError(f"Invalid time range: {start_time!r} - {end_time!r}")
    return math.floor(end - start + 0.5)


def _read_duration(value: Any) -> Optional[float]:
    """Decimal minutes, or None when the value is not a duration."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        text = str(value).strip()
        match = _HOURS_MINUTES_PATTERN.match(text)
        if match:
            hours, minutes = match.groups()
            return float(int(hours) * 60 + int(minutes))
        try:
            parsed = float(text)
        except ValueError:
            return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return parsed


def parse_duration(value: Any) -> float:
    """
    Parse a duration into decimal minutes.

    Accepts numbers, numeric strings and ``H:MM`` strings
    (``"1:30"`` -> 90). Anything else is logged and counted as 0.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0

    parsed = _read_duration(value)
    if parsed is None:
        logger.warning("Unparseable duration", value=value)
        return 0.0
    return parsed


def require_duration(value: Any) -> float:
    """
    Parse a duration entered by a person.

    Same formats as ``parse_duration``, but unreadable input is an error
    instead of 0.

    Raises:
        ValueError: If the value is neither a number nor ``H:MM``
    """
    parsed = _read_duration(value)
    if parsed is None:
        raise ValueError(f"Invalid duration: {value}")
    return parsed


# ========================================
# Dates and bucket keys
# ========================================

def parse_workout_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO or ``M/D/YYYY`` date. Returns None when unparseable."""
    if not value:
        return None
    text = str(value).strip()

    if ISO_DATE_PATTERN.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None

    match = _US_DATE_PATTERN.match(text)
    if match:
        month, day, year = (int(p) for p in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    # Sheets with USER_ENTERED values sometimes hand back a full timestamp
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def week_start(day: date) -> date:
    """Start of the week containing ``day``; weeks start on Sunday."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_key(day: date) -> str:
    return week_start(day).isoformat()


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def quarter_key(day: date) -> str:
    """Quarter bucket, e.g. ``2024-01`` for Q1 2024."""
    quarter = (day.month - 1) // 3 + 1
    return f"{day.year:04d}-{quarter:02d}"


def year_key(day: date) -> str:
    return f"{day.year:04d}"


def day_label(day: date) -> str:
    """Short chart label, e.g. ``Jan 15``."""
    return day.strftime("%b %d")


def day_of_week(value: Optional[str]) -> str:
    """English weekday name for a date string, empty when unparseable."""
    parsed = parse_workout_date(value)
    if parsed is None:
        return ""
    return parsed.strftime("%A")
