"""
AI Adapter module - Provider abstraction layer.

Supports multiple vision-capable AI providers:
- OpenAI (and compatible APIs like DeepSeek)
- Anthropic Claude
- Google Gemini
"""
from app.services.adapter.provider import (
    AIProviderAdapter,
    AIProviderError,
    ChatMessage,
    ClaudeAdapter,
    GeminiAdapter,
    ImageAttachment,
    OpenAICompatibleAdapter,
    AIResponse,
    get_ai_adapter,
    is_ai_configured,
)

__all__ = [
    "AIProviderAdapter",
    "AIProviderError",
    "ChatMessage",
    "ClaudeAdapter",
    "GeminiAdapter",
    "ImageAttachment",
    "OpenAICompatibleAdapter",
    "AIResponse",
    "get_ai_adapter",
    "is_ai_configured",
]
