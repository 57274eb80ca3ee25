"""
Configuration settings for forne.

Uses Pydantic Settings for environment variable management with .env file support.
Every setting can be overridden with a FORNE_-prefixed environment variable,
e.g. FORNE_LOG_LEVEL=DEBUG.
"""
from __future__ import annotations

import getpass
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _login_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "user"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FORNE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Sessions
    # ========================================
    default_method: str = Field(
        default="speed",
        description="Method used by `forne new` and `forne learn` when none is given",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for card selection (None for a different order every run)",
    )
    custom_method_owner: str = Field(
        default_factory=_login_name,
        description="Prefix for custom method names, e.g. '<owner>/my-method.py'",
    )

    # ========================================
    # Persistence
    # ========================================
    json_indent: int | None = Field(
        default=None,
        description="Indentation of saved sets (None for compact JSON)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
