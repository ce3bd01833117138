"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from github_thread_triage.cache.team_cache import TeamCache
from github_thread_triage.configuration.driver import get_triage_config
from github_thread_triage.configuration.env import settings
from github_thread_triage.configuration.exceptions import InvalidConfigurationElementError, RequiredConfigurationElementError
from github_thread_triage.configuration.models import TriageConfig
from github_thread_triage.github.adapter import GitHubKitAdapter
from github_thread_triage.triage.exceptions import ThreadListingError
from github_thread_triage.triage.processor import ThreadProcessor
from github_thread_triage.utils.logging_config import configure_logging

load_dotenv()

typer_app = typer.Typer(
    pretty_exceptions_show_locals=False,
    help="Automatically mark GitHub notification threads as done when they don't require action.",
)

TokenOption = Annotated[str | None, Option("--token", "-t", envvar="GITHUB_TOKEN", help="GitHub Personal Access Token.")]
UserOption = Annotated[str | None, Option("--user", "-u", envvar="GITHUB_USER", help="GitHub username.")]
InvalidateCacheOption = Annotated[bool, Option("--invalidate-cache", "-i", help="Invalidate the team cache and fetch fresh data.")]
LogLevelOption = Annotated[str | None, Option("--log-level", "-l", envvar="LOG_LEVEL", help="Log level (debug, info, warning, error).")]
GitHubApiUrlOption = Annotated[str | None, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")]
TeamCacheDirOption = Annotated[Path | None, Option(envvar="TEAM_CACHE_DIR", help="Directory holding cached team memberships.")]


def load_config_or_exit(**kwargs: object) -> TriageConfig:
    """Reconcile configuration and configure logging, exiting with status 1 on error."""
    try:
        config = get_triage_config(**kwargs)  # type: ignore[arg-type]
    except (RequiredConfigurationElementError, InvalidConfigurationElementError) as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(1) from exc
    configure_logging(config.log_level)
    return config


def build_processor(config: TriageConfig) -> ThreadProcessor:
    """Build a thread processor wired to GitHub and the on-disk team cache."""
    return ThreadProcessor(
        gateway=GitHubKitAdapter.create(github_token=config.github_token, github_api_url=config.github_api_url),
        team_cache=TeamCache(cache_dir=config.team_cache_dir, ttl_hours=config.team_cache_ttl_hours),
        username=config.github_user,
        dry_run=config.dry_run,
        invalidate_cache=config.invalidate_cache,
        pacing_delay=config.pacing_delay,
    )


@typer_app.command(name="process")
def process_cli(
    token: TokenOption = None,
    user: UserOption = None,
    dry_run: Annotated[bool, Option("--dry-run", "-d", help="Preview what would be marked as done without doing it.")] = False,
    invalidate_cache: InvalidateCacheOption = False,
    log_level: LogLevelOption = None,
    github_api_url: GitHubApiUrlOption = None,
    team_cache_dir: TeamCacheDirOption = None,
) -> None:
    """Process unread GitHub threads and mark qualifying ones as done."""
    config = load_config_or_exit(
        github_token=token,
        github_user=user,
        github_api_url=github_api_url,
        log_level=log_level,
        dry_run=dry_run,
        invalidate_cache=invalidate_cache,
        team_cache_dir=team_cache_dir,
    )
    typer.echo(f"Processing threads for user: {config.github_user}")
    if config.dry_run:
        typer.echo("DRY RUN MODE - no threads will actually be marked as done")
    if config.invalidate_cache:
        typer.echo("CACHE INVALIDATION - fetching fresh team data")

    processor = build_processor(config)
    try:
        summary = asyncio.run(processor.process_threads())
    except ThreadListingError as exc:
        typer.echo(f"GitHub thread processing failed: {exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(summary.describe())


@typer_app.command(name="test-connection")
def test_connection_cli(
    token: TokenOption = None,
    user: UserOption = None,
    invalidate_cache: InvalidateCacheOption = False,
    log_level: LogLevelOption = None,
    github_api_url: GitHubApiUrlOption = None,
    team_cache_dir: TeamCacheDirOption = None,
) -> None:
    """Test GitHub API connection and credentials without resolving anything."""
    config = load_config_or_exit(
        github_token=token,
        github_user=user,
        github_api_url=github_api_url,
        log_level=log_level,
        dry_run=True,
        invalidate_cache=invalidate_cache,
        team_cache_dir=team_cache_dir,
    )
    processor = build_processor(config)
    try:
        report = asyncio.run(processor.test_connection())
    except ThreadListingError as exc:
        typer.echo(f"GitHub API connection test failed: {exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo("Successfully connected to GitHub API")
    typer.echo(f"Found {report.unread_threads} unread threads")
    typer.echo(f"Loaded {report.teams} teams for user {config.github_user}")
    if report.cache_invalidated:
        typer.echo("Cache invalidation was requested and completed")


@typer_app.command(name="clear-cache")
def clear_cache_cli(
    team_cache_dir: TeamCacheDirOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Delete every cached team membership snapshot."""
    configure_logging(log_level or settings.LOG_LEVEL)
    cache_dir = team_cache_dir or settings.TEAM_CACHE_DIR
    asyncio.run(TeamCache(cache_dir=cache_dir).clear_all())
    typer.echo(f"Cleared team cache in {cache_dir}")


if __name__ == "__main__":
    typer_app()
