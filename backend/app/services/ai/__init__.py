"""
AI Services module - Workout extraction from images.
"""
from app.services.ai.extractor import (
    ExtractionError,
    ImageExtractionService,
    clean_json_string,
    parse_extraction,
)

__all__ = [
    "ExtractionError",
    "ImageExtractionService",
    "clean_json_string",
    "parse_extraction",
]
