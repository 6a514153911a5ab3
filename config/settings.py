"""Application settings loaded from environment variables.

Uses pydantic-settings for validation and type coercion. All keys use
the ``LEARNALOUD_`` prefix and may also be supplied through a ``.env``
file in the working directory.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Central configuration for the LearnAloud service."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNALOUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── App ────────────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"

    # ── API ────────────────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:5173,http://localhost:8000"

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # ── Voice commands ─────────────────────────────────────────────────
    recognition_language: str = "en-US"
    default_voice_sensitivity: int = Field(default=3, ge=1, le=5)
    recognition_restart_attempts: int = Field(default=3, ge=1)
    prune_stale_click_commands: bool = True
    voice_session_idle_timeout: float = Field(default=300.0, gt=0)  # seconds

    # ── Announcements ──────────────────────────────────────────────────
    announce_debounce_seconds: float = Field(default=0.5, ge=0)

    # ── Derived Properties ─────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Module-level singleton: import ``settings`` everywhere.
settings = Settings()
