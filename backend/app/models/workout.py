"""
Workout schemas.

A workout is one exercise session as stored in the sheet. JSON payloads use
camelCase (``personName``); Python code uses snake_case attribute names.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.core.timeutils import (
    day_of_week,
    derive_duration,
    is_valid_time,
    parse_duration,
    parse_time_of_day,
    parse_workout_date,
    require_duration,
)

PERSON_NAMES = (
    "Cortese",
    "Greg",
    "JP",
    "Kyle",
    "Nick",
    "Amanda",
    "Niki",
    "Stu",
)

WORKOUT_TYPES = ("Gym", "HIIT", "Cardio", "Activity")


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkoutBase(CamelModel):
    person_name: str
    workout_type: str
    date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    name: Optional[str] = None


class Workout(WorkoutBase):
    """Workout record read back from the store."""

    id: Optional[str] = None
    duration: float = 0.0

    @field_validator("duration", mode="before")
    @classmethod
    def _normalize_duration(cls, value: Any) -> float:
        return parse_duration(value)

    @computed_field(alias="dayOfWeek")
    @property
    def day_of_week(self) -> str:
        return day_of_week(self.date)


class WorkoutCreate(WorkoutBase):
    """
    Incoming workout from the admin form, an AI confirmation or a CSV row.

    Duration is optional when both times are given; it is then derived
    from the time range. Overnight ranges are rejected.
    """

    duration: Optional[float] = Field(default=None, ge=0)

    @field_validator("person_name", "workout_type")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("date")
    @classmethod
    def _valid_date(cls, value: str) -> str:
        value = value.strip()
        if parse_workout_date(value) is None:
            raise ValueError(f"Invalid date: {value} (use YYYY-MM-DD or M/D/YYYY)")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not is_valid_time(value):
            raise ValueError(f"Invalid time: {value} (use HH:MM format)")
        return value

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return require_duration(value)

    @model_validator(mode="after")
    def _check_time_range(self) -> "WorkoutCreate":
        if self.start_time and self.end_time:
            if parse_time_of_day(self.end_time) < parse_time_of_day(self.start_time):
                raise ValueError(
                    f"End time {self.end_time} is before start time {self.start_time}"
                )
            if self.duration is None:
                self.duration = float(derive_duration(self.start_time, self.end_time))
        if self.duration is None:
            raise ValueError("duration is required when start and end times are not both given")
        return self

    def to_workout(self, workout_id: Optional[str] = None) -> Workout:
        return Workout(
            id=workout_id,
            person_name=self.person_name,
            workout_type=self.workout_type,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            duration=self.duration,
            name=self.name,
        )


class WorkoutUpdate(CamelModel):
    """
    Partial update; only fields that are set are applied.

    The merged workout goes through the same validation as a new one. An
    explicit null duration is cleared and derived again from the times.
    """

    person_name: Optional[str] = None
    workout_type: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[float] = Field(default=None, ge=0)
    name: Optional[str] = None

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if value is None:
            return None
        return require_duration(value)

    def apply_to(self, workout: Workout) -> Workout:
        """
        Merge the set fields into ``workout`` and validate the result.

        Raises:
            ValidationError: If the merged workout is not a valid workout
        """
        merged = workout.model_dump(include=set(WorkoutCreate.model_fields))
        merged.update(self.model_dump(exclude_unset=True))
        return WorkoutCreate.model_validate(merged).to_workout(workout.id)


class ExtractedWorkout(CamelModel):
    """
    Structured guess produced by AI image extraction.

    Confidence is advisory; the workout must be confirmed by a person
    before it is submitted.
    """

    workout_type: str
    start_time: str = ""
    end_time: str = ""
    duration: float = 0.0
    date: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    extracted_text: str = ""
