"""
Application configuration loaded from environment variables.

Uses Pydantic Settings to:
1. Read from .env file automatically
2. Validate types at startup
3. Provide type-safe access throughout the app

Usage:
    from interview_analyzer.config import settings
    print(settings.ANTHROPIC_MODEL)

Note: We use a validator that prefers .env values over empty shell
environment variables, so an exported-but-blank API key does not
shadow the real value in .env.
"""

import logging

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All application configuration in one place."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def prefer_dotenv_over_empty_env(cls, data):
        """If an env var is empty but .env has a value, use the .env value."""
        from dotenv import dotenv_values

        dotenv_vals = dotenv_values(".env")
        for key, dotenv_value in dotenv_vals.items():
            if dotenv_value and (key not in data or not data.get(key)):
                data[key] = dotenv_value
        return data

    # --- AI APIs ---
    # Keys are optional at import time; endpoints that need them fail
    # with an upstream error instead of the whole app refusing to start.
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_MAX_TOKENS: int = 4096
    LLM_TEMPERATURE: float = 0.3

    ASSEMBLYAI_API_KEY: str = ""
    TRANSCRIPTION_LANGUAGE: str = "en"

    # --- Uploads ---
    MAX_UPLOAD_MB: int = 25

    # --- Reports ---
    REPORT_DEFAULT_FILENAME: str = "interview_evaluation_report"
    REPORT_GROUP_LABEL: str = "Technical Interview"

    # --- Application ---
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024


def configure_logging(level: str | None = None) -> None:
    """Apply the log level and format once, at application start-up."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Singleton instance - import this everywhere
settings = Settings()
