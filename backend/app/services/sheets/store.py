"""
Workout Store - Google Sheets backed row store.

Each data row of the worksheet is one workout. Row 1 is the header.
Columns A-H: dayOfWeek, personName, workoutType, duration, date, name,
startTime, endTime.

A workout's id is its sheet row number, so ids shift when rows are deleted.
"""
import asyncio
from typing import Any, List, Optional

import gspread
from google.oauth2.service_account import Credentials
from pydantic import ValidationError

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.core.timeutils import day_of_week, parse_duration
from app.models.workout import Workout

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

SHEET_COLUMNS = [
    "dayOfWeek",
    "personName",
    "workoutType",
    "duration",
    "date",
    "name",
    "startTime",
    "endTime",
]
SHEET_RANGE = "A:H"
FIRST_DATA_ROW = 2


class SheetsError(Exception):
    """Raised when the backing spreadsheet cannot be read or written."""


class WorkoutStore:
    """
    Spreadsheet store for workout records.

    Usage:
        store = WorkoutStore.from_settings()
        if store.is_configured():
            workouts = await store.get_workouts()

    gspread is blocking, so every sheet call runs in a worker thread.
    """

    def __init__(
        self,
        sheet_id: Optional[str] = None,
        sheet_name: str = "Workouts",
        client_email: Optional[str] = None,
        private_key: Optional[str] = None,
        worksheet: Optional[Any] = None,
    ):
        """
        Initialize the store.

        Args:
            sheet_id: Spreadsheet key
            sheet_name: Worksheet (tab) name
            client_email: Service account email
            private_key: Service account private key (PEM)
            worksheet: Pre-built worksheet object, skips authorization
        """
        self.sheet_id = sheet_id
        self.sheet_name = sheet_name
        self.client_email = client_email
        self.private_key = private_key
        self._worksheet = worksheet

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "WorkoutStore":
        return cls(
            sheet_id=config.GOOGLE_SHEET_ID,
            sheet_name=config.GOOGLE_SHEET_NAME,
            client_email=config.GOOGLE_CLIENT_EMAIL,
            private_key=config.get_private_key(),
        )

    def is_configured(self) -> bool:
        """Check if the store has what it needs to reach the sheet."""
        if self._worksheet is not None:
            return True
        return bool(self.sheet_id and self.client_email and self.private_key)

    # ========================================
    # Reads
    # ========================================

    async def get_workouts(self) -> List[Workout]:
        """
        Fetch every workout row.

        Rows that cannot be turned into a workout are logged and skipped.

        Returns:
            Workouts in sheet order

        Raises:
            SheetsError: If the sheet cannot be read
        """
        rows = await self._call("get_all_values")
        if not rows or len(rows) <= 1:
            return []

        workouts = []
        for offset, row in enumerate(rows[1:]):
            row_number = FIRST_DATA_ROW + offset
            if not any(cell.strip() for cell in row if isinstance(cell, str)):
                continue
            try:
                workouts.append(self._row_to_workout(row, row_number))
            except ValidationError as e:
                logger.warning("Skipping malformed sheet row", row=row_number, error=str(e))

        logger.info("Loaded workouts from sheet", count=len(workouts), sheet=self.sheet_name)
        return workouts

    # ========================================
    # Writes
    # ========================================

    async def append_workout(self, workout: Workout) -> None:
        """
        Append one workout as a new row.

        Raises:
            SheetsError: If the append fails
        """
        await self._call(
            "append_row",
            self._workout_to_row(workout),
            value_input_option="USER_ENTERED",
            table_range=SHEET_RANGE,
        )
        logger.info(
            "Workout appended",
            person=workout.person_name,
            workout_type=workout.workout_type,
            date=workout.date,
        )

    async def update_workout(self, workout_id: str, workout: Workout) -> None:
        """
        Overwrite the row identified by ``workout_id``.

        Raises:
            SheetsError: If the id is not a data row or the write fails
        """
        row_number = self._row_number(workout_id)
        await self._call(
            "update",
            values=[self._workout_to_row(workout)],
            range_name=f"A{row_number}:H{row_number}",
            value_input_option="USER_ENTERED",
        )
        logger.info("Workout updated", workout_id=workout_id)

    async def delete_workout(self, workout_id: str) -> None:
        """
        Delete the row identified by ``workout_id``.

        Later rows move up, which changes their ids.

        Raises:
            SheetsError: If the id is not a data row or the delete fails
        """
        row_number = self._row_number(workout_id)
        await self._call("delete_rows", row_number)
        logger.info("Workout deleted", workout_id=workout_id)

    async def get_workout(self, workout_id: str) -> Optional[Workout]:
        """Fetch a single workout by id, None if the row is empty or missing."""
        row_number = self._row_number(workout_id)
        row = await self._call("row_values", row_number)
        if not row or not any(cell.strip() for cell in row if isinstance(cell, str)):
            return None
        return self._row_to_workout(row, row_number)

    # ========================================
    # Internals
    # ========================================

    def _get_worksheet(self) -> Any:
        if self._worksheet is None:
            if not self.is_configured():
                raise SheetsError("Google Sheets is not configured")
            credentials = Credentials.from_service_account_info(
                {
                    "type": "service_account",
                    "client_email": self.client_email,
                    "private_key": self.private_key,
                    "token_uri": TOKEN_URI,
                },
                scopes=SCOPES,
            )
            spreadsheet = gspread.authorize(credentials).open_by_key(self.sheet_id)
            self._worksheet = spreadsheet.worksheet(self.sheet_name)
        return self._worksheet

    async def _call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        """Run a worksheet method in a thread, wrapping failures in SheetsError."""

        def run() -> Any:
            worksheet = self._get_worksheet()
            return getattr(worksheet, method)(*args, **kwargs)

        try:
            return await asyncio.to_thread(run)
        except SheetsError:
            raise
        except Exception as e:
            logger.error("Sheet call failed", method=method, error=str(e))
            raise SheetsError(str(e)) from e

    @staticmethod
    def _row_number(workout_id: str) -> int:
        try:
            row_number = int(workout_id)
        except (TypeError, ValueError):
            raise SheetsError(f"Invalid workout id: {workout_id}")
        if row_number < FIRST_DATA_ROW:
            raise SheetsError(f"Invalid workout id: {workout_id}")
        return row_number

    @staticmethod
    def _row_to_workout(row: List[str], row_number: int) -> Workout:
        cells = list(row) + [""] * (len(SHEET_COLUMNS) - len(row))
        _, person_name, workout_type, duration, workout_date, name, start, end = cells[:8]
        minutes = parse_duration(duration)
        if minutes < 0:
            logger.warning("Negative duration in sheet row, counting as 0", row=row_number, duration=duration)
            minutes = 0.0
        return Workout(
            id=str(row_number),
            person_name=person_name.strip(),
            workout_type=workout_type.strip() or "Gym",
            duration=minutes,
            date=workout_date.strip(),
            name=name or None,
            start_time=start.strip() or None,
            end_time=end.strip() or None,
        )

    @staticmethod
    def _workout_to_row(workout: Workout) -> List[Any]:
        duration = workout.duration
        if float(duration).is_integer():
            duration = int(duration)
        return [
            day_of_week(workout.date),
            workout.person_name,
            workout.workout_type,
            duration,
            workout.date,
            workout.name or "",
            workout.start_time or "",
            workout.end_time or "",
        ]
