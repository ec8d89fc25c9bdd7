"""
Structured logging configuration.
Designed for easy debugging without exposing sensitive data.
"""
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional, Generator

import structlog
from structlog.types import Processor

from app.core.config import settings


def setup_logging() -> None:
    """Configure structured logging for the application."""

    # Common processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        # JSON format for production
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console format for development
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def _truncate_content(content: str, max_length: int = 0) -> str:
    """Truncate content if max_length is set."""
    if max_length <= 0:
        return content
    if len(content) <= max_length:
        return content
    return content[:max_length] + f"... [truncated, total {len(content)} chars]"



# ========================================
# AI Call Logging
# ========================================

@dataclass
class MessageSummary:
    """What was sent in one message; image bytes are never kept."""
    role: str
    content_length: int
    image_count: int = 0
    image_bytes: int = 0


@dataclass
class AICallLog:
    """Summary of one AI provider call."""
    call_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    provider: str = ""
    model: str = ""
    endpoint: str = ""
    messages: List[MessageSummary] = field(default_factory=list)
    temperature: float = 0.2
    max_tokens: int = 0
    response_chars: int = 0
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    duration_ms: float = 0.0
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_type is None

    @property
    def image_count(self) -> int:
        return sum(m.image_count for m in self.messages)

    @property
    def image_bytes(self) -> int:
        return sum(m.image_bytes for m in self.messages)


class AIDebugLogger:
    """
    Tracks AI provider calls.

    A one-line summary is always logged when the call ends. With
    AI_DEBUG_LOG enabled, prompt and response text are logged as well
    (truncated to AI_DEBUG_LOG_MAX_LENGTH). Images are only counted.

    Usage:
        debug_logger = AIDebugLogger(logger)
        with debug_logger.track_call("openai", "gpt-4o") as call:
            call.add_message("user", prompt, image_sizes=[len(image)])
            # ... make API call ...
            call.set_response(response_content, total_tokens=tokens)
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger):
        self.logger = logger
        self.enabled = settings.AI_DEBUG_LOG
        self.max_length = settings.AI_DEBUG_LOG_MAX_LENGTH

    @contextmanager
    def track_call(
        self,
        provider: str,
        model: str,
        endpoint: str = "chat/completions"
    ) -> Generator["AICallTracker", None, None]:
        tracker = AICallTracker(self, AICallLog(provider=provider, model=model, endpoint=endpoint))
        started = time.perf_counter()
        try:
            yield tracker
        except Exception as e:
            if tracker.log.success:
                tracker.set_error(type(e).__name__, str(e))
            raise
        finally:
            tracker.log.duration_ms = (time.perf_counter() - started) * 1000
            tracker.finish()


class AICallTracker:
    """Collects request and response details for a single call."""

    def __init__(self, owner: AIDebugLogger, log: AICallLog):
        self.logger = owner.logger
        self.enabled = owner.enabled
        self.max_length = owner.max_length
        self.log = log

    def add_message(self, role: str, content: str, image_sizes: Optional[List[int]] = None) -> None:
        image_sizes = image_sizes or []
        summary = MessageSummary(
            role=role,
            content_length=len(content),
            image_count=len(image_sizes),
            image_bytes=sum(image_sizes),
        )
        self.log.messages.append(summary)

        if self.enabled:
            self.logger.debug(
                "AI request message",
                call_id=self.log.call_id,
                role=role,
                image_count=summary.image_count,
                image_bytes=summary.image_bytes,
                content=_truncate_content(content, self.max_length),
            )

    def set_request_params(self, temperature: float = 0.2, max_tokens: int = 0) -> None:
        self.log.temperature = temperature
        self.log.max_tokens = max_tokens

    def set_response(
        self,
        content: str,
        prompt_tokens: Optional[int] = None,
        completion_tokens: Optional[int] = None,
        total_tokens: Optional[int] = None,
    ) -> None:
        self.log.response_chars = len(content)
        self.log.prompt_tokens = prompt_tokens
        self.log.completion_tokens = completion_tokens
        self.log.total_tokens = total_tokens

        if self.enabled:
            self.logger.debug(
                "AI response content",
                call_id=self.log.call_id,
                content=_truncate_content(content, self.max_length),
            )

    def set_error(self, error_type: str, error_message: str) -> None:
        self.log.error_type = error_type
        self.log.error_message = error_message

    def finish(self) -> None:
        """Log the call summary."""
        summary = dict(
            call_id=self.log.call_id,
            provider=self.log.provider,
            model=self.log.model,
            endpoint=self.log.endpoint,
            duration_ms=round(self.log.duration_ms, 2),
            image_count=self.log.image_count,
            image_bytes=self.log.image_bytes,
        )
        if self.log.success:
            self.logger.info(
                "AI call completed",
                **summary,
                response_chars=self.log.response_chars,
                total_tokens=self.log.total_tokens,
            )
        else:
            self.logger.error(
                "AI call failed",
                **summary,
                error_type=self.log.error_type,
                error_message=self.log.error_message,
            )
