"""
Analytics module - Workout statistics over a snapshot of workouts.

This module provides:
- Aggregate counts per period and workout type
- Per-person statistics and the leaderboard
- Chart series (cumulative totals, weekly breakdown)
"""
from app.services.analytics.stats import (
    compute_stats,
    compute_person_stats,
    compute_leaderboard,
    compute_cumulative_series,
    compute_weekly_breakdown,
    list_people,
)

__all__ = [
    "compute_stats",
    "compute_person_stats",
    "compute_leaderboard",
    "compute_cumulative_series",
    "compute_weekly_breakdown",
    "list_people",
]
