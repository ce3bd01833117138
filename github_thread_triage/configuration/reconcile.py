"""Reconciles configuration between CLI arguments and environment variables."""

from pathlib import Path

from github_thread_triage.configuration.env import settings
from github_thread_triage.configuration.exceptions import InvalidConfigurationElementError, RequiredConfigurationElementError
from github_thread_triage.configuration.models import TriageConfig
from github_thread_triage.utils.logging_config import LOG_LEVELS


async def reconcile_triage_configuration(
    cli_github_token: str | None,
    cli_github_user: str | None,
    cli_github_api_url: str | None = None,
    cli_log_level: str | None = None,
    cli_dry_run: bool = False,
    cli_invalidate_cache: bool = False,
    cli_team_cache_dir: Path | None = None,
) -> TriageConfig:
    """Reconciles CLI arguments with environment settings, CLI values taking precedence.

    Raises:
        RequiredConfigurationElementError: If the token or the username is missing.
        InvalidConfigurationElementError: If the log level is not recognized.

    Returns:
        TriageConfig: The reconciled configuration.
    """
    github_token = cli_github_token or settings.GITHUB_TOKEN
    if not github_token:
        raise RequiredConfigurationElementError(name="GitHub token", cli_name="--token", env_name="GITHUB_TOKEN")

    github_user = cli_github_user or settings.GITHUB_USER
    if not github_user:
        raise RequiredConfigurationElementError(name="GitHub username", cli_name="--user", env_name="GITHUB_USER")

    log_level = (cli_log_level or settings.LOG_LEVEL).lower()
    if log_level not in LOG_LEVELS:
        raise InvalidConfigurationElementError(name="log level", value=log_level, allowed=sorted(LOG_LEVELS))

    return TriageConfig(
        github_token=github_token,
        github_user=github_user,
        github_api_url=cli_github_api_url or settings.GITHUB_API_URL,
        log_level=log_level,
        dry_run=cli_dry_run,
        invalidate_cache=cli_invalidate_cache,
        team_cache_dir=cli_team_cache_dir or settings.TEAM_CACHE_DIR,
        team_cache_ttl_hours=settings.TEAM_CACHE_TTL_HOURS,
        pacing_delay=settings.PACING_DELAY_SECONDS,
    )
