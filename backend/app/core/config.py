"""
Application configuration.
All sensitive values loaded from environment variables.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Google Sheets backing store
    # When any of the credentials is missing the service runs in demo mode
    GOOGLE_SHEET_ID: Optional[str] = None
    GOOGLE_SHEET_NAME: str = "Workouts"
    GOOGLE_CLIENT_EMAIL: Optional[str] = None
    GOOGLE_PRIVATE_KEY: Optional[str] = None

    # AI Provider Configuration (image extraction)
    # Supported providers: openai, deepseek, claude, gemini
    AI_PROVIDER: str = "openai"
    AI_API_KEY: str = ""
    AI_BASE_URL: Optional[str] = None  # Custom base URL if needed
    AI_MODEL: Optional[str] = None  # Custom model name
    AI_TEMPERATURE: float = 0.2
    AI_REQUEST_TIMEOUT: float = 300.0

    # Provider-specific API keys (optional, falls back to AI_API_KEY)
    OPENAI_API_KEY: Optional[str] = None
    GEMINI_API_KEY: Optional[str] = None
    CLAUDE_API_KEY: Optional[str] = None
    DEEPSEEK_API_KEY: Optional[str] = None

    # CSV import: roster membership and positive integer durations
    CSV_STRICT_VALIDATION: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # AI Debug Logging - enables detailed message content logging
    # WARNING: Set to True only for debugging, logs may contain sensitive data
    AI_DEBUG_LOG: bool = False
    # Maximum length of message content to log (0 = unlimited)
    AI_DEBUG_LOG_MAX_LENGTH: int = 2000

    def get_api_key(self, provider: str) -> str:
        """Get API key for a specific provider."""
        provider_keys = {
            "openai": self.OPENAI_API_KEY,
            "gemini": self.GEMINI_API_KEY,
            "claude": self.CLAUDE_API_KEY,
            "deepseek": self.DEEPSEEK_API_KEY,
        }
        # Return provider-specific key if set, otherwise fall back to AI_API_KEY
        return provider_keys.get(provider.lower()) or self.AI_API_KEY

    def get_private_key(self) -> Optional[str]:
        """Private key with escaped newlines restored (as stored in .env files)."""
        if not self.GOOGLE_PRIVATE_KEY:
            return None
        return self.GOOGLE_PRIVATE_KEY.replace("\\n", "\n")

    @property
    def sheets_configured(self) -> bool:
        return bool(
            self.GOOGLE_SHEET_ID
            and self.GOOGLE_CLIENT_EMAIL
            and self.GOOGLE_PRIVATE_KEY
        )

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
