"""
Shared API dependencies.
"""
from functools import lru_cache
from typing import Optional

from app.core.config import settings
from app.services.adapter import is_ai_configured
from app.services.ai import ImageExtractionService
from app.services.sheets import WorkoutStore


@lru_cache
def get_workout_store() -> WorkoutStore:
    """
    Workout store built from the current settings.

    Cached so the authorized worksheet is reused across requests.
    """
    return WorkoutStore.from_settings(settings)


def get_extraction_service() -> Optional[ImageExtractionService]:
    """Image extraction service, None when no AI provider key is configured."""
    if not is_ai_configured():
        return None
    return ImageExtractionService()
