"""
Bundled demo dataset, served when the sheet is not configured or unreachable.
"""
from typing import List

from app.models.workout import Workout

_DEMO_ROWS = [
    ("Greg", "Gym", 60, "2024-01-15", "Chest and Triceps"),
    ("Cortese", "HIIT", 45, "2024-01-16", "Morning HIIT"),
    ("JP", "Cardio", 30, "2024-01-17", "Treadmill Run"),
    ("Kyle", "Activity", 90, "2024-01-18", "Basketball"),
    ("Nick", "Gym", 75, "2024-01-19", "Back and Biceps"),
    ("Amanda", "HIIT", 40, "2024-01-20", "Weekend HIIT"),
    ("Niki", "Cardio", 35, "2024-01-21", "Sunday Jog"),
    ("Stu", "Gym", 65, "2024-01-22", "Leg Day"),
    ("Greg", "Cardio", 25, "2024-01-23", "Quick Run"),
    ("Cortese", "Gym", 70, "2024-01-24", "Full Body"),
    ("JP", "Activity", 120, "2024-01-25", "Rock Climbing"),
    ("Kyle", "HIIT", 50, "2024-01-26", "Friday HIIT"),
    ("Nick", "Cardio", 40, "2024-01-27", "Weekend Bike Ride"),
    ("Amanda", "Activity", 60, "2024-01-28", "Hiking"),
    ("Niki", "Gym", 55, "2024-01-29", "Upper Body"),
    ("Stu", "HIIT", 35, "2024-01-30", "Quick HIIT"),
]


def demo_workouts() -> List[Workout]:
    """Fresh copies of the demo workouts (ids demo-1, demo-2, ...)."""
    return [
        Workout(
            id=f"demo-{index}",
            person_name=person,
            workout_type=workout_type,
            duration=duration,
            date=day,
            name=name,
        )
        for index, (person, workout_type, duration, day, name) in enumerate(_DEMO_ROWS, start=1)
    ]
