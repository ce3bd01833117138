"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from github_thread_triage.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_PACING_DELAY_SECONDS,
    DEFAULT_TEAM_CACHE_DIR,
    DEFAULT_TEAM_CACHE_TTL_HOURS,
)


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    LOG_LEVEL: str = "info"

    # GitHub API settings
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL
    GITHUB_TOKEN: str | None = None
    GITHUB_USER: str | None = None

    # Team cache settings
    TEAM_CACHE_DIR: Path = Path(DEFAULT_TEAM_CACHE_DIR)
    TEAM_CACHE_TTL_HOURS: float = DEFAULT_TEAM_CACHE_TTL_HOURS

    # Rate limit pacing
    PACING_DELAY_SECONDS: float = DEFAULT_PACING_DELAY_SECONDS


settings = Settings()
