"""
AI Provider Adapter - Abstract layer for multiple vision-capable LLM providers.
Supports OpenAI (and compatible APIs), Claude and Gemini with inline images.
"""
import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

import httpx

from app.core.config import settings
from app.core.logging import get_logger, AIDebugLogger

logger = get_logger(__name__)
debug_logger = AIDebugLogger(logger)


# Provider configurations
PROVIDER_CONFIG = {
    "openai": {
        "base_url": "https://api.openai.com/v1",
        "default_model": "gpt-4o",
    },
    "deepseek": {
        "base_url": "https://api.deepseek.com",
        "default_model": "deepseek-chat",
    },
    "claude": {
        "base_url": "https://api.anthropic.com/v1",
        "default_model": "claude-3-5-sonnet-20240620",
    },
    "gemini": {
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "default_model": "gemini-2.0-flash-exp",
    },
}


class AIProviderError(Exception):
    """Raised when the provider call fails or times out."""


@dataclass
class ImageAttachment:
    """Inline image sent along with a message."""
    data: bytes
    mime_type: str = "image/jpeg"

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


@dataclass
class ChatMessage:
    """Chat message structure."""
    role: str
    content: str
    images: List[ImageAttachment] = field(default_factory=list)


@dataclass
class AIResponse:
    """AI response structure."""
    content: str
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class AIProviderAdapter(ABC):
    """Abstract base class for AI provider adapters."""

    endpoint_name = "chat/completions"
    max_tokens = 2048

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout or settings.AI_REQUEST_TIMEOUT
        self.provider_name = "unknown"

    async def chat_completion(
        self,
        messages: List[ChatMessage],
        temperature: float = 0.2,
    ) -> AIResponse:
        """Send a completion request to the AI provider."""
        with debug_logger.track_call(
            provider=self.provider_name,
            model=self.model,
            endpoint=self.endpoint_name,
        ) as call:
            for msg in messages:
                call.add_message(msg.role, msg.content, [len(img.data) for img in msg.images])
            call.set_request_params(temperature=temperature, max_tokens=self.max_tokens)

            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._send(client, messages, temperature)
            except httpx.TimeoutException:
                call.set_error("timeout", f"Request timed out after {self.timeout}s")
                raise AIProviderError("AI request timed out, please try again")
            except httpx.HTTPError as e:
                call.set_error("transport", str(e))
                raise AIProviderError(f"AI request failed: {e}") from e

            if response.status_code != 200:
                error_msg = self._error_message(response)
                call.set_error("api_error", f"HTTP {response.status_code}: {error_msg}")
                raise AIProviderError(f"AI API Error: {response.status_code} - {error_msg}")

            try:
                result = self._parse(response.json())
            except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
                call.set_error("invalid_response", f"{type(e).__name__}: {e}")
                raise AIProviderError("AI response could not be read, please try again") from e

            call.set_response(
                content=result.content,
                prompt_tokens=result.prompt_tokens,
                completion_tokens=result.completion_tokens,
                total_tokens=result.total_tokens,
            )
            return result

    @abstractmethod
    async def _send(
        self,
        client: httpx.AsyncClient,
        messages: List[ChatMessage],
        temperature: float,
    ) -> httpx.Response:
        """Issue the HTTP request in the provider's wire format."""

    @abstractmethod
    def _parse(self, data: dict[str, Any]) -> AIResponse:
        """Extract text content and token usage from a successful response."""

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            error_data = response.json() if response.content else {}
        except ValueError:
            return response.text or str(response.status_code)
        error = error_data.get("error", {}) if isinstance(error_data, dict) else {}
        if isinstance(error, dict):
            return error.get("message", str(response.status_code))
        return str(error)


class OpenAICompatibleAdapter(AIProviderAdapter):
    """
    Adapter for OpenAI-compatible APIs.
    Works with OpenAI, DeepSeek, and most LLM APIs.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        provider_name: str = "openai",
    ):
        super().__init__(api_key, base_url, model)
        self.provider_name = provider_name

    @staticmethod
    def _message_payload(msg: ChatMessage) -> dict[str, Any]:
        if not msg.images:
            return {"role": msg.role, "content": msg.content}
        parts: List[dict[str, Any]] = [{"type": "text", "text": msg.content}]
        for image in msg.images:
            parts.append({"type": "image_url", "image_url": {"url": image.to_data_url()}})
        return {"role": msg.role, "content": parts}

    async def _send(self, client, messages, temperature):
        return await client.post(
            f"{self.base_url}/chat/completions",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            json={
                "model": self.model,
                "messages": [self._message_payload(m) for m in messages],
                "temperature": temperature,
                "max_tokens": self.max_tokens,
            },
        )

    def _parse(self, data):
        choices = data.get("choices") or [{}]
        content = choices[0].get("message", {}).get("content", "") or ""
        usage = data.get("usage", {})
        return AIResponse(
            content=content,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            total_tokens=usage.get("total_tokens"),
        )


class ClaudeAdapter(AIProviderAdapter):
    """Adapter for Anthropic Claude API."""

    endpoint_name = "messages"

    def __init__(self, api_key: str, model: str = "claude-3-5-sonnet-20240620", base_url: Optional[str] = None):
        super().__init__(api_key, base_url or PROVIDER_CONFIG["claude"]["base_url"], model)
        self.provider_name = "claude"

    async def _send(self, client, messages, temperature):
        # Claude takes the system prompt as a separate field
        system_content = ""
        chat_messages = []
        for msg in messages:
            if msg.role == "system":
                system_content += msg.content + "\n"
                continue
            blocks: List[dict[str, Any]] = [
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": image.mime_type,
                        "data": image.to_base64(),
                    },
                }
                for image in msg.images
            ]
            blocks.append({"type": "text", "text": msg.content})
            chat_messages.append({"role": msg.role, "content": blocks})

        request_body = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": chat_messages,
            "temperature": temperature,
        }
        if system_content:
            request_body["system"] = system_content.strip()

        return await client.post(
            f"{self.base_url}/messages",
            headers={
                "Content-Type": "application/json",
                "x-api-key": self.api_key,
                "anthropic-version": "2023-06-01",
            },
            json=request_body,
        )

    def _parse(self, data):
        content = ""
        for block in data.get("content", []):
            if block.get("type") == "text":
                content += block.get("text", "")

        usage = data.get("usage", {})
        input_tokens = usage.get("input_tokens")
        output_tokens = usage.get("output_tokens")
        return AIResponse(
            content=content,
            prompt_tokens=input_tokens,
            completion_tokens=output_tokens,
            total_tokens=(input_tokens or 0) + (output_tokens or 0),
        )


class GeminiAdapter(AIProviderAdapter):
    """Adapter for Google Gemini API."""

    endpoint_name = "generateContent"

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash-exp", base_url: Optional[str] = None):
        super().__init__(api_key, base_url or PROVIDER_CONFIG["gemini"]["base_url"], model)
        self.provider_name = "gemini"

    def _convert_messages_to_gemini_format(
        self,
        messages: List[ChatMessage]
    ) -> tuple[str, list[dict]]:
        """Convert chat messages to Gemini contents plus system instruction."""
        system_instruction = ""
        contents = []

        for msg in messages:
            if msg.role == "system":
                if system_instruction:
                    system_instruction += "\n\n"
                system_instruction += msg.content
                continue
            parts: List[dict[str, Any]] = [
                {"inline_data": {"mime_type": image.mime_type, "data": image.to_base64()}}
                for image in msg.images
            ]
            parts.append({"text": msg.content})
            contents.append({
                "role": "user" if msg.role == "user" else "model",
                "parts": parts,
            })

        return system_instruction, contents

    async def _send(self, client, messages, temperature):
        system_instruction, contents = self._convert_messages_to_gemini_format(messages)

        request_body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if system_instruction:
            request_body["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        return await client.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            headers={"Content-Type": "application/json"},
            params={"key": self.api_key},
            json=request_body,
        )

    def _parse(self, data):
        content = ""
        candidates = data.get("candidates", [])
        if candidates:
            for part in candidates[0].get("content", {}).get("parts", []):
                if "text" in part:
                    content += part["text"]

        usage_metadata = data.get("usageMetadata", {})
        return AIResponse(
            content=content,
            prompt_tokens=usage_metadata.get("promptTokenCount"),
            completion_tokens=usage_metadata.get("candidatesTokenCount"),
            total_tokens=usage_metadata.get("totalTokenCount"),
        )


def is_ai_configured() -> bool:
    """Check if an API key is available for the configured provider."""
    return bool(settings.get_api_key(settings.AI_PROVIDER.lower()))


def get_ai_adapter() -> AIProviderAdapter:
    """
    Factory function to get the configured AI adapter.

    Supports:
    - openai: OpenAI GPT models
    - gemini: Google Gemini models
    - claude: Anthropic Claude models
    - deepseek: DeepSeek models
    """
    provider = settings.AI_PROVIDER.lower()

    # Get provider-specific API key or fall back to generic key
    api_key = settings.get_api_key(provider)

    if not api_key:
        raise ValueError(
            f"API key not set for provider '{provider}'. "
            f"Set {provider.upper()}_API_KEY or AI_API_KEY environment variable."
        )

    # Get provider config
    config = PROVIDER_CONFIG.get(provider, PROVIDER_CONFIG["openai"])

    # Allow custom overrides
    base_url = settings.AI_BASE_URL or config["base_url"]
    model = settings.AI_MODEL or config["default_model"]

    logger.info(
        "Initializing AI adapter",
        provider=provider,
        model=model,
        base_url=base_url if provider not in ["gemini"] else "[gemini-api]",
    )

    if provider == "claude":
        return ClaudeAdapter(api_key=api_key, model=model, base_url=base_url)
    elif provider == "gemini":
        return GeminiAdapter(api_key=api_key, model=model)
    else:
        # OpenAI-compatible providers (openai, deepseek, etc.)
        return OpenAICompatibleAdapter(
            api_key=api_key,
            base_url=base_url,
            model=model,
            provider_name=provider,
        )
