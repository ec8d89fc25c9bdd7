"""
Workouts module - Snapshot loading with demo fallback.
"""
from app.services.workouts.demo import demo_workouts
from app.services.workouts.loader import (
    SOURCE_DEMO,
    SOURCE_SHEETS,
    WorkoutSnapshot,
    load_workouts,
)

__all__ = [
    "demo_workouts",
    "SOURCE_DEMO",
    "SOURCE_SHEETS",
    "WorkoutSnapshot",
    "load_workouts",
]
