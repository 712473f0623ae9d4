"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class LLMSettings(BaseSettings):
    """AI provider configuration.

    The chat provider is picked in priority order: Groq, OpenAI, then any
    OpenAI-compatible endpoint (``base_url`` + ``api_key``). Speech synthesis
    never uses Groq.
    """

    groq_api_key: str | None = Field(
        None,
        description="Groq API key; preferred chat provider when set",
    )
    openai_api_key: str | None = Field(
        None,
        description="OpenAI API key; used for chat when Groq is absent and for TTS",
    )
    base_url: str | None = Field(
        None,
        description="Custom OpenAI-compatible endpoint (used with api_key)",
    )
    api_key: str | None = Field(
        None,
        description="API key for the custom OpenAI-compatible endpoint",
    )
    chat_model: str | None = Field(
        None,
        description="Override the chat model (defaults depend on the provider)",
    )
    max_completion_tokens: int = Field(
        8192,
        description="Upper bound on generated tokens per chat reply",
        ge=1,
    )
    tts_model: str = Field(
        "tts-1",
        description="Speech synthesis model",
    )
    timeout_seconds: float = Field(
        45.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    max_message_chars: int = Field(
        10000,
        description="Maximum chat message length in characters",
    )
    max_tts_chars: int = Field(
        4096,
        description="Maximum text length accepted for speech synthesis",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on the chat endpoint",
    )
    rate_limit_requests: int = Field(
        20,
        description="Maximum number of chat requests admitted per window (per client)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Rate limit window length in seconds",
        ge=1,
    )
    rate_limit_cleanup_interval_seconds: float = Field(
        60.0,
        description="How often expired rate limit windows are purged from memory",
        gt=0,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    rate_limit_trust_forwarded_for: bool = Field(
        False,
        description="Identify clients by the first X-Forwarded-For hop (behind a proxy)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class AdminSettings(BaseSettings):
    """Admin access configuration."""

    password: str | None = Field(
        None,
        description="Password for the admin dashboard; admin access is disabled when unset",
    )

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10_000_000, description="Rotate log file after this many bytes (0 disables)")
    backup_count: int = Field(5, description="Rotated log files to keep")
    request_id_header: str = Field("X-Request-ID", description="Header carrying the correlation id")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=LLMSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
