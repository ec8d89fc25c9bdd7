"""
Prompt templates for reading workouts out of screenshots and photos.
"""
from datetime import date
from typing import Iterable, Optional

EXTRACTION_SYSTEM_PROMPT = """You read workout details from images.
The images are usually screenshots of fitness apps (Whoop, Apple Health, Strava,
gym machines) or photos taken at the gym.
Answer with a single JSON object and nothing else."""


def generate_extraction_prompt(
    workout_types: Iterable[str],
    today: Optional[date] = None,
) -> str:
    """Build the user prompt asking for one workout as JSON."""
    today = today or date.today()
    types = ", ".join(workout_types)

    return f"""
Extract the workout shown in this image.

Return JSON with exactly these fields:
- "workoutType": one of {types}
- "startTime": start time of day as HH:MM (24h), or "" if not visible
- "endTime": end time of day as HH:MM (24h), or "" if not visible
- "duration": duration in whole minutes
- "date": date as YYYY-MM-DD; use {today.isoformat()} if no date is visible
- "confidence": number between 0 and 1 for how sure you are overall
- "extractedText": the relevant text you read from the image

Use "Activity" when the workout does not clearly fit another type.
"""
