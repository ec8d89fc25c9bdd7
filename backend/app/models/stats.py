"""
Workout statistics schemas.

Produced by the statistics engine from a snapshot of workouts:
- Aggregate counts per week, month, quarter, year and workout type
- Leaderboard entries
- Chart series (cumulative per-person totals, weekly per-person counts)
"""
from typing import Dict, List

from pydantic import Field

from app.models.workout import CamelModel


class WorkoutStats(CamelModel):
    """Aggregate statistics over a list of workouts."""

    total_workouts: int = 0
    workouts_by_week: Dict[str, int] = Field(default_factory=dict)
    workouts_by_month: Dict[str, int] = Field(default_factory=dict)
    workouts_by_quarter: Dict[str, int] = Field(default_factory=dict)
    workouts_by_year: Dict[str, int] = Field(default_factory=dict)
    workouts_by_type: Dict[str, int] = Field(default_factory=dict)
    total_duration: float = 0.0
    average_duration: float = 0.0


class PersonStats(WorkoutStats):
    """Aggregate statistics for a single person."""

    person_name: str


class LeaderboardEntry(CamelModel):
    person_name: str
    total_workouts: int
    rank: int


class CumulativePoint(CamelModel):
    """Running workout totals per person as of one day."""

    date: str
    label: str
    totals: Dict[str, int] = Field(default_factory=dict)


class WeeklyPoint(CamelModel):
    """Workout counts per person within one week (weeks start on Sunday)."""

    week: str
    label: str
    counts: Dict[str, int] = Field(default_factory=dict)


class DashboardSnapshot(CamelModel):
    """Everything the dashboard renders for one selected person."""

    source: str
    person: PersonStats
    leaderboard: List[LeaderboardEntry]
    cumulative: List[CumulativePoint]
    weekly: List[WeeklyPoint]
