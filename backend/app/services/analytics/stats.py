"""
Workout Statistics Engine - Aggregations over a snapshot of workouts.

All functions are pure: they take the workout list as a parameter, do no
I/O and return new objects. A malformed record (bad date, bad duration)
never aborts an aggregation; it is skipped for the affected buckets and
reported through the logger.
"""
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.logging import get_logger
from app.core.timeutils import (
    day_label,
    month_key,
    parse_duration,
    parse_workout_date,
    quarter_key,
    week_key,
    week_start,
    year_key,
)
from app.models.stats import (
    CumulativePoint,
    LeaderboardEntry,
    PersonStats,
    WeeklyPoint,
    WorkoutStats,
)
from app.models.workout import Workout

logger = get_logger(__name__)


def _increment(bucket: Dict[str, int], key: str) -> None:
    bucket[key] = bucket.get(key, 0) + 1


def _dated(workouts: Iterable[Workout]) -> List[Tuple[date, Workout]]:
    """Pair each workout with its parsed date, dropping unparseable ones."""
    dated = []
    for workout in workouts:
        parsed = parse_workout_date(workout.date)
        if parsed is None:
            logger.warning(
                "Skipping workout with unparseable date",
                person=workout.person_name,
                date=workout.date,
            )
            continue
        dated.append((parsed, workout))
    return dated


def compute_stats(workouts: List[Workout]) -> WorkoutStats:
    """
    Compute aggregate statistics.

    Counts by week start (Sunday), month, quarter, year and workout type,
    plus total and average duration in minutes.
    """
    stats = WorkoutStats(total_workouts=len(workouts))

    for workout in workouts:
        _increment(stats.workouts_by_type, workout.workout_type)
        stats.total_duration += parse_duration(workout.duration)

    for day, _ in _dated(workouts):
        _increment(stats.workouts_by_week, week_key(day))
        _increment(stats.workouts_by_month, month_key(day))
        _increment(stats.workouts_by_quarter, quarter_key(day))
        _increment(stats.workouts_by_year, year_key(day))

    if stats.total_workouts > 0:
        stats.average_duration = stats.total_duration / stats.total_workouts

    return stats


def compute_person_stats(workouts: List[Workout], person_name: str) -> PersonStats:
    """Aggregate statistics for the workouts of one person (exact name match)."""
    person_workouts = [w for w in workouts if w.person_name == person_name]
    stats = compute_stats(person_workouts)
    return PersonStats(person_name=person_name, **stats.model_dump())


def compute_leaderboard(workouts: List[Workout]) -> List[LeaderboardEntry]:
    """
    Rank people by workout count.

    Ranks run 1..N without gaps. People with equal counts keep the order in
    which they first appear and still get distinct ranks.
    """
    counts: Dict[str, int] = {}
    for workout in workouts:
        _increment(counts, workout.person_name)

    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    return [
        LeaderboardEntry(person_name=name, total_workouts=total, rank=index)
        for index, (name, total) in enumerate(ordered, start=1)
    ]


def compute_cumulative_series(workouts: List[Workout]) -> List[CumulativePoint]:
    """
    Running workout totals per person, one point per workout day.

    Every point carries the totals of everyone seen so far, so a person who
    did not work out that day keeps their previous total.
    """
    dated = sorted(_dated(workouts), key=lambda pair: pair[0])

    running: Dict[str, int] = {}
    points: Dict[date, CumulativePoint] = {}

    for day, workout in dated:
        _increment(running, workout.person_name)
        points[day] = CumulativePoint(
            date=day.isoformat(),
            label=day_label(day),
            totals=dict(running),
        )

    return list(points.values())


def compute_weekly_breakdown(workouts: List[Workout]) -> List[WeeklyPoint]:
    """Workout counts per person for each week, in chronological order."""
    weekly: Dict[date, Dict[str, int]] = defaultdict(dict)

    for day, workout in _dated(workouts):
        _increment(weekly[week_start(day)], workout.person_name)

    return [
        WeeklyPoint(week=start.isoformat(), label=day_label(start), counts=counts)
        for start, counts in sorted(weekly.items())
    ]


def list_people(workouts: List[Workout], roster: Optional[Iterable[str]] = None) -> List[str]:
    """Roster names first, then anyone else found in the data."""
    people = list(roster or [])
    for workout in workouts:
        if workout.person_name and workout.person_name not in people:
            people.append(workout.person_name)
    return people
