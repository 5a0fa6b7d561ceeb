"""
Settings - Pydantic-based Configuration Management

Loads the bot configuration from environment variables (and an optional
.env file) and validates it once at startup. Missing required values raise
pydantic.ValidationError, which the entry point treats as fatal.

Files that USE this module:
- tasabot.app (loads settings for bot, server and scheduler configuration)
- tests.conftest, tests.test_settings (settings built from explicit values)

Files that this module USES:
- tasabot.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from functools import lru_cache  # Cache the settings instance for the process lifetime
from typing import List, Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from tasabot.shared.validators import (
    validate_bot_token,  # Validate Telegram bot token format
    validate_chat_id,  # Validate Telegram chat ID format
    validate_http_url,  # Validate http(s) URLs
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Telegram ---
    bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")
    chat_id: str = Field(..., alias="TELEGRAM_CHAT_ID")
    message_thread_id: Optional[int] = Field(default=None, alias="TELEGRAM_MESSAGE_THREAD_ID", gt=0)
    image_url: Optional[str] = Field(default=None, alias="TELEGRAM_IMAGE_URL")

    # --- Rate API ---
    rate_api_url: Optional[str] = Field(default=None, alias="PYDOLARVE_API_URL")
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- HTTP server ---
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=10000, alias="PORT", ge=1, le=65535)
    max_port_attempts: int = Field(default=10, alias="MAX_PORT_ATTEMPTS", ge=1, le=100)
    shutdown_grace_seconds: float = Field(default=5.0, alias="SHUTDOWN_GRACE_SECONDS", gt=0)

    # --- Scheduling (cron equivalent: "0 14 * * *" in Etc/GMT-3) ---
    daily_hour: int = Field(default=14, alias="DAILY_REPORT_HOUR", ge=0, le=23)
    daily_minute: int = Field(default=0, alias="DAILY_REPORT_MINUTE", ge=0, le=59)

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("message_thread_id", "image_url", "rate_api_url", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        """Treat empty environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format."""
        if not validate_bot_token(v):
            raise ValueError("Invalid TELEGRAM_BOT_TOKEN format")
        return v

    @field_validator("chat_id")
    @classmethod
    def validate_chat_id(cls, v: str) -> str:
        """Validate chat ID format."""
        if not validate_chat_id(v):
            raise ValueError("Invalid TELEGRAM_CHAT_ID format")
        return v

    @field_validator("image_url", "rate_api_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not validate_http_url(v):
            raise ValueError("URL must start with http:// or https://")
        return v

    def missing_optional(self) -> List[str]:
        """
        Describe optional settings that are not configured.

        Returns:
            One warning line per missing optional value, in startup order
        """
        warnings = []
        if self.message_thread_id is None:
            warnings.append(
                "TELEGRAM_MESSAGE_THREAD_ID is not defined. Messages will be sent "
                "to the main chat, not a specific topic/thread."
            )
        if not self.image_url:
            warnings.append(
                "TELEGRAM_IMAGE_URL is not defined. Reports will be sent as text without a photo."
            )
        if not self.rate_api_url:
            warnings.append("PYDOLARVE_API_URL is not defined. Dollar rates cannot be fetched.")
        return warnings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        pydantic.ValidationError: If required values are missing or malformed
    """
    return Settings()
