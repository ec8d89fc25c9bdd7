from app.prompts.extraction import (
    EXTRACTION_SYSTEM_PROMPT,
    generate_extraction_prompt,
)

__all__ = [
    "EXTRACTION_SYSTEM_PROMPT",
    "generate_extraction_prompt",
]
