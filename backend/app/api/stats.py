"""
Dashboard statistics endpoints.

Each request loads the workout snapshot once and runs the pure
statistics functions over it.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_workout_store
from app.core.logging import get_logger
from app.models.stats import (
    CumulativePoint,
    DashboardSnapshot,
    LeaderboardEntry,
    PersonStats,
    WeeklyPoint,
    WorkoutStats,
)
from app.models.workout import PERSON_NAMES
from app.services.analytics import (
    compute_cumulative_series,
    compute_leaderboard,
    compute_person_stats,
    compute_stats,
    compute_weekly_breakdown,
    list_people,
)
from app.services.sheets import WorkoutStore
from app.services.workouts import load_workouts

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=WorkoutStats)
async def get_stats(
    store: WorkoutStore = Depends(get_workout_store),
):
    """Aggregate statistics over everyone's workouts."""
    snapshot = await load_workouts(store)
    return compute_stats(snapshot.workouts)


@router.get("/people", response_model=list[str])
async def get_people(
    store: WorkoutStore = Depends(get_workout_store),
):
    """Roster names followed by anyone else found in the data."""
    snapshot = await load_workouts(store)
    return list_people(snapshot.workouts, PERSON_NAMES)


@router.get("/people/{person_name}", response_model=PersonStats)
async def get_person_stats(
    person_name: str,
    store: WorkoutStore = Depends(get_workout_store),
):
    """Statistics for one person (exact name match)."""
    snapshot = await load_workouts(store)
    return compute_person_stats(snapshot.workouts, person_name)


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    store: WorkoutStore = Depends(get_workout_store),
):
    snapshot = await load_workouts(store)
    return compute_leaderboard(snapshot.workouts)


@router.get("/cumulative", response_model=list[CumulativePoint])
async def get_cumulative(
    store: WorkoutStore = Depends(get_workout_store),
):
    snapshot = await load_workouts(store)
    return compute_cumulative_series(snapshot.workouts)


@router.get("/weekly", response_model=list[WeeklyPoint])
async def get_weekly(
    store: WorkoutStore = Depends(get_workout_store),
):
    snapshot = await load_workouts(store)
    return compute_weekly_breakdown(snapshot.workouts)


@router.get("/dashboard", response_model=DashboardSnapshot)
async def get_dashboard(
    person: Optional[str] = Query(None, description="Selected person, defaults to the first roster name"),
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Everything the dashboard renders, computed from a single snapshot.
    """
    snapshot = await load_workouts(store)
    selected = person or PERSON_NAMES[0]

    logger.info(
        "Building dashboard",
        person=selected,
        source=snapshot.source,
        workouts=len(snapshot.workouts),
    )

    return DashboardSnapshot(
        source=snapshot.source,
        person=compute_person_stats(snapshot.workouts, selected),
        leaderboard=compute_leaderboard(snapshot.workouts),
        cumulative=compute_cumulative_series(snapshot.workouts),
        weekly=compute_weekly_breakdown(snapshot.workouts),
    )
