"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class TriageConfig:
    """Configuration for the process and test-connection commands."""

    github_token: str
    github_user: str
    github_api_url: str
    log_level: str
    dry_run: bool
    invalidate_cache: bool
    team_cache_dir: Path
    team_cache_ttl_hours: float
    pacing_delay: float
