"""Utility modules for shared functionality."""

from .constants import (
    BOT_ACCOUNT_TYPE,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_PACING_DELAY_SECONDS,
    DEFAULT_TEAM_CACHE_DIR,
    DEFAULT_TEAM_CACHE_TTL_HOURS,
    DEPENDENCY_BOT_LOGIN,
    PULL_REQUEST_API_URL_PATTERN,
)
from .retry import retry_on_rate_limit

__all__ = [
    "BOT_ACCOUNT_TYPE",
    "DEFAULT_GITHUB_API_URL",
    "DEFAULT_PACING_DELAY_SECONDS",
    "DEFAULT_TEAM_CACHE_DIR",
    "DEFAULT_TEAM_CACHE_TTL_HOURS",
    "DEPENDENCY_BOT_LOGIN",
    "PULL_REQUEST_API_URL_PATTERN",
    "retry_on_rate_limit",
]
