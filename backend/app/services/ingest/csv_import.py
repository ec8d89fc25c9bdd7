"""
CSV Import - Parse, validate and upload bulk workout files.

Error tiers:
- A structurally broken file (no data rows, missing columns) raises
  CsvFormatError before any row is processed.
- Per-row problems are collected on the row and never raised; invalid rows
  are kept so they can be shown next to the valid ones.
- Store failures during upload are counted per row; the upload continues.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List

from app.core.logging import get_logger
from app.core.timeutils import ISO_DATE_PATTERN, is_valid_time, parse_time_of_day, require_duration
from app.models.workout import PERSON_NAMES, WORKOUT_TYPES, CamelModel, Workout
from app.services.sheets import SheetsError, WorkoutStore

logger = get_logger(__name__)

REQUIRED_COLUMNS = ["personName", "workoutType", "startTime", "endTime", "duration", "date"]

CSV_TEMPLATE = (
    "personName,workoutType,startTime,endTime,duration,date\n"
    "Greg,Gym,09:00,09:45,45,2024-01-15\n"
    "Cortese,HIIT,18:00,18:30,30,2024-01-15\n"
    "Greg,Cardio,07:00,08:00,60,2024-01-16\n"
    "Cortese,Activity,12:00,12:25,25,2024-01-16\n"
)
CSV_TEMPLATE_FILENAME = "workout_template.csv"

_POSITIVE_INT_PATTERN = re.compile(r"^\d+$")


class CsvFormatError(ValueError):
    """The file as a whole cannot be processed."""


class CsvWorkoutRow(CamelModel):
    """One parsed CSV line with its validation outcome."""

    row_number: int
    person_name: str = ""
    workout_type: str = ""
    start_time: str = ""
    end_time: str = ""
    duration: float = 0.0
    date: str = ""
    is_valid: bool = False
    errors: List[str] = []

    def to_workout(self) -> Workout:
        return Workout(
            person_name=self.person_name,
            workout_type=self.workout_type,
            start_time=self.start_time or None,
            end_time=self.end_time or None,
            duration=self.duration,
            date=self.date,
        )


class CsvImportPreview(CamelModel):
    rows: List[CsvWorkoutRow]
    total: int
    valid: int
    invalid: int

    @property
    def valid_rows(self) -> List[CsvWorkoutRow]:
        return [row for row in self.rows if row.is_valid]

    @property
    def message(self) -> str:
        return f"Processed {self.total} rows: {self.valid} valid, {self.invalid} invalid"


def validate_row(row: Dict[str, str], row_number: int = 0, strict: bool = True) -> CsvWorkoutRow:
    """
    Validate one CSV row.

    Args:
        row: Mapping of header name to raw cell value
        row_number: Line number in the file, for display
        strict: Also require roster membership and a positive integer duration

    Returns:
        CsvWorkoutRow with ``is_valid`` set iff no errors were found
    """
    errors: List[str] = []

    person_name = row.get("personName", "").strip()
    workout_type = row.get("workoutType", "").strip()
    start_time = row.get("startTime", "").strip()
    end_time = row.get("endTime", "").strip()
    raw_duration = row.get("duration", "").strip()
    workout_date = row.get("date", "").strip()

    if not person_name or (strict and person_name not in PERSON_NAMES):
        errors.append(f"Invalid person name: {person_name}")

    if not workout_type or (strict and workout_type not in WORKOUT_TYPES):
        errors.append(f"Invalid workout type: {workout_type}")

    start_ok = is_valid_time(start_time)
    if not start_ok:
        errors.append(f"Invalid start time: {start_time} (use HH:MM format)")

    end_ok = is_valid_time(end_time)
    if not end_ok:
        errors.append(f"Invalid end time: {end_time} (use HH:MM format)")

    if start_ok and end_ok and parse_time_of_day(end_time) < parse_time_of_day(start_time):
        errors.append(f"End time {end_time} is before start time {start_time}")

    duration = 0.0
    if not raw_duration:
        errors.append("Invalid duration: (empty)")
    elif strict:
        if _POSITIVE_INT_PATTERN.match(raw_duration) and int(raw_duration) > 0:
            duration = float(int(raw_duration))
        else:
            errors.append(f"Invalid duration: {raw_duration}")
    else:
        try:
            duration = require_duration(raw_duration)
        except ValueError:
            errors.append(f"Invalid duration: {raw_duration}")
        else:
            if duration < 0:
                duration = 0.0
                errors.append(f"Invalid duration: {raw_duration}")

    if not workout_date or not ISO_DATE_PATTERN.match(workout_date):
        errors.append(f"Invalid date format: {workout_date} (use YYYY-MM-DD)")

    return CsvWorkoutRow(
        row_number=row_number,
        person_name=person_name,
        workout_type=workout_type,
        start_time=start_time,
        end_time=end_time,
        duration=duration,
        date=workout_date,
        is_valid=not errors,
        errors=errors,
    )


def parse_csv(text: str, strict: bool = True) -> CsvImportPreview:
    """
    Parse and validate CSV text.

    Fields are split on commas; quoted fields are not supported.

    Raises:
        CsvFormatError: If there is no data row or required columns are missing
    """
    lines = [(number, line) for number, line in enumerate(text.splitlines(), start=1) if line.strip()]

    if len(lines) < 2:
        raise CsvFormatError("CSV file must contain at least a header row and one data row")

    headers = [h.strip() for h in lines[0][1].split(",")]
    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise CsvFormatError(f"Missing required columns: {', '.join(missing)}")

    rows = []
    for line_number, line in lines[1:]:
        values = [v.strip() for v in line.split(",")]
        raw = {
            header: values[index] if index < len(values) else ""
            for index, header in enumerate(headers)
        }
        rows.append(validate_row(raw, row_number=line_number, strict=strict))

    valid = sum(1 for row in rows if row.is_valid)
    preview = CsvImportPreview(rows=rows, total=len(rows), valid=valid, invalid=len(rows) - valid)

    logger.info("Parsed CSV", total=preview.total, valid=preview.valid, invalid=preview.invalid)
    return preview


@dataclass
class BulkUploadResult:
    success_count: int = 0
    error_count: int = 0
    failed_rows: List[int] = field(default_factory=list)
    simulated: bool = False

    @property
    def message(self) -> str:
        if self.simulated:
            return f"Demo mode: {self.success_count} workouts would be added to Google Sheets"
        if self.error_count == 0:
            return f"Successfully uploaded {self.success_count} workouts!"
        return f"Uploaded {self.success_count} workouts, {self.error_count} failed"


async def upload_rows(store: WorkoutStore, rows: List[CsvWorkoutRow]) -> BulkUploadResult:
    """
    Append valid rows one at a time.

    A failed append is logged and counted; the remaining rows are still
    processed and nothing is rolled back. Invalid rows are ignored.
    Without a configured store the upload is simulated.
    """
    result = BulkUploadResult()

    if not store.is_configured():
        result.simulated = True
        result.success_count = sum(1 for row in rows if row.is_valid)
        logger.info("Google Sheets not configured, simulating CSV upload", count=result.success_count)
        return result

    for row in rows:
        if not row.is_valid:
            continue
        try:
            await store.append_workout(row.to_workout())
            result.success_count += 1
        except SheetsError as e:
            logger.warning("Failed to upload CSV row", row=row.row_number, error=str(e))
            result.error_count += 1
            result.failed_rows.append(row.row_number)

    logger.info(
        "CSV upload finished",
        success_count=result.success_count,
        error_count=result.error_count,
    )
    return result
