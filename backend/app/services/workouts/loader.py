"""
Workout Loader - Fetch the workout snapshot for one request.
"""
from dataclasses import dataclass
from typing import List

from app.core.logging import get_logger
from app.models.workout import Workout
from app.services.sheets import SheetsError, WorkoutStore
from app.services.workouts.demo import demo_workouts

logger = get_logger(__name__)

SOURCE_SHEETS = "sheets"
SOURCE_DEMO = "demo"


@dataclass
class WorkoutSnapshot:
    """Workouts fetched once per request, with where they came from."""
    workouts: List[Workout]
    source: str

    @property
    def is_demo(self) -> bool:
        return self.source == SOURCE_DEMO


async def load_workouts(store: WorkoutStore) -> WorkoutSnapshot:
    """
    Load every workout, degrading to the demo dataset.

    The demo dataset is used when the store is not configured or the
    read fails; the failure is logged, never raised.
    """
    if not store.is_configured():
        logger.info("Google Sheets not configured, using demo data")
        return WorkoutSnapshot(workouts=demo_workouts(), source=SOURCE_DEMO)

    try:
        workouts = await store.get_workouts()
    except SheetsError as e:
        logger.error("Error fetching workouts, falling back to demo data", error=str(e))
        return WorkoutSnapshot(workouts=demo_workouts(), source=SOURCE_DEMO)

    return WorkoutSnapshot(workouts=workouts, source=SOURCE_SHEETS)
