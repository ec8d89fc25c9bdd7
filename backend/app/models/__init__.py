from app.models.workout import (
    PERSON_NAMES,
    WORKOUT_TYPES,
    Workout,
    WorkoutCreate,
    WorkoutUpdate,
    ExtractedWorkout,
)
from app.models.stats import (
    WorkoutStats,
    PersonStats,
    LeaderboardEntry,
    CumulativePoint,
    WeeklyPoint,
    DashboardSnapshot,
)

__all__ = [
    "PERSON_NAMES",
    "WORKOUT_TYPES",
    "Workout",
    "WorkoutCreate",
    "WorkoutUpdate",
    "ExtractedWorkout",
    "WorkoutStats",
    "PersonStats",
    "LeaderboardEntry",
    "CumulativePoint",
    "WeeklyPoint",
    "DashboardSnapshot",
]
