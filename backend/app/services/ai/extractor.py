"""
Image Extraction Service - Turn a workout screenshot into a workout guess.

The result is advisory: callers show it for confirmation and only then
submit it through the regular ingest endpoint.
"""
import json
import re
from datetime import date
from typing import Any, Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.core.timeutils import derive_duration, is_valid_time, parse_duration, parse_workout_date
from app.models.workout import WORKOUT_TYPES, ExtractedWorkout
from app.prompts import EXTRACTION_SYSTEM_PROMPT, generate_extraction_prompt
from app.services.adapter import (
    AIProviderAdapter,
    AIProviderError,
    ChatMessage,
    ImageAttachment,
    get_ai_adapter,
)

logger = get_logger(__name__)

DEFAULT_WORKOUT_TYPE = "Activity"


class ExtractionError(Exception):
    """Raised when the image cannot be turned into a workout."""


def clean_json_string(text: str) -> str:
    """Extract JSON from text, handling markdown blocks and extra text."""
    # Try to find JSON block in markdown
    json_match = re.search(r"```json\s*([\s\S]*?)\s*```", text)
    if json_match:
        return json_match.group(1).strip()

    # Try to find any markdown code block
    code_match = re.search(r"```\s*([\s\S]*?)\s*```", text)
    if code_match:
        return code_match.group(1).strip()

    # Try to find the first '{' and last '}'
    bracket_match = re.search(r"(\{[\s\S]*\})", text)
    if bracket_match:
        return bracket_match.group(1).strip()

    return text.strip()


def _normalize_type(value: Any) -> str:
    text = str(value or "").strip()
    for workout_type in WORKOUT_TYPES:
        if text.lower() == workout_type.lower():
            return workout_type
    return DEFAULT_WORKOUT_TYPE


def _normalize_time(value: Any) -> str:
    text = str(value or "").strip()
    return text if is_valid_time(text) else ""


def _normalize_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if confidence != confidence:  # NaN
        return 0.0
    return min(max(confidence, 0.0), 1.0)


def parse_extraction(content: str, today: Optional[date] = None) -> ExtractedWorkout:
    """
    Parse the model's answer into an ExtractedWorkout.

    Unknown types become ``Activity``, confidence is clamped to [0, 1],
    a missing duration is derived from the times and a missing or
    unreadable date becomes today.

    Raises:
        ExtractionError: If the answer holds no JSON object
    """
    cleaned = clean_json_string(content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse extraction JSON", error=str(e), content=cleaned[:500])
        raise ExtractionError("Could not read workout details from the AI response") from e

    if not isinstance(data, dict):
        raise ExtractionError("Could not read workout details from the AI response")

    start_time = _normalize_time(data.get("startTime"))
    end_time = _normalize_time(data.get("endTime"))

    duration = parse_duration(data.get("duration"))
    if duration <= 0 and start_time and end_time:
        duration = float(max(derive_duration(start_time, end_time), 0))

    workout_date = str(data.get("date") or "").strip()
    if parse_workout_date(workout_date) is None:
        workout_date = (today or date.today()).isoformat()

    return ExtractedWorkout(
        workout_type=_normalize_type(data.get("workoutType")),
        start_time=start_time,
        end_time=end_time,
        duration=max(duration, 0.0),
        date=workout_date,
        confidence=_normalize_confidence(data.get("confidence")),
        extracted_text=str(data.get("extractedText") or ""),
    )


class ImageExtractionService:
    """
    Service for extracting workout details from images.

    Usage:
        service = ImageExtractionService()
        workout = await service.extract(image_bytes, "image/png")
    """

    def __init__(self, adapter: Optional[AIProviderAdapter] = None):
        self.adapter = adapter or get_ai_adapter()

    async def extract(self, image: bytes, mime_type: str = "image/jpeg") -> ExtractedWorkout:
        """
        Send the image to the AI provider and parse its answer.

        Args:
            image: Raw image bytes
            mime_type: Image content type

        Returns:
            ExtractedWorkout awaiting human confirmation

        Raises:
            ExtractionError: If the provider fails or the answer is unusable
        """
        if not image:
            raise ExtractionError("Image is empty")

        messages = [
            ChatMessage(role="system", content=EXTRACTION_SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=generate_extraction_prompt(WORKOUT_TYPES),
                images=[ImageAttachment(data=image, mime_type=mime_type)],
            ),
        ]

        logger.info("Extracting workout from image", mime_type=mime_type, size=len(image))

        try:
            response = await self.adapter.chat_completion(
                messages=messages,
                temperature=settings.AI_TEMPERATURE,
            )
        except AIProviderError as e:
            raise ExtractionError(str(e)) from e

        workout = parse_extraction(response.content)
        logger.info(
            "Workout extracted from image",
            workout_type=workout.workout_type,
            confidence=workout.confidence,
        )
        return workout
