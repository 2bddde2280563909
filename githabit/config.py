"""
Application configuration using Pydantic settings.

Usage:
    from githabit.config import get_settings
    settings = get_settings()

For constants, import from githabit.constants:
    from githabit.constants import HANDLE_KEY, REPOS_PAGE_SIZE
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEBOUNCE_QUIET_PERIOD_MS, GITHUB_API_BASE


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    Nothing is required; an unauthenticated client works within GitHub's
    anonymous rate limit.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App settings
    app_name: str = "GitHabit"
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # GitHub API
    github_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "PAT_TOKEN"),
    )
    github_api_base: str = Field(default=GITHUB_API_BASE, validation_alias="GITHUB_API_BASE")
    request_timeout: float = Field(default=30.0, gt=0, validation_alias="GITHABIT_REQUEST_TIMEOUT")

    # Handle persistence
    database_url: str = Field(default="sqlite:///githabit.db", validation_alias="GITHABIT_DATABASE_URL")
    debounce_ms: int = Field(default=DEBOUNCE_QUIET_PERIOD_MS, validation_alias="GITHABIT_DEBOUNCE_MS")

    # Overlapping fetch triggers
    discard_stale_results: bool = Field(default=True, validation_alias="GITHABIT_DISCARD_STALE_RESULTS")

    @field_validator("debounce_ms")
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        """A zero window would write on every keystroke."""
        if v <= 0:
            raise ValueError(f"GITHABIT_DEBOUNCE_MS must be positive (got {v})")
        return v

    @field_validator("github_token")
    @classmethod
    def blank_token_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def debounce_seconds(self) -> float:
        """Quiet period expressed in seconds for asyncio timers."""
        return self.debounce_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
