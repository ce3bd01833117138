"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from github_thread_triage.configuration import reconcile
from github_thread_triage.configuration.models import TriageConfig


def get_triage_config(
    github_token: str | None = None,
    github_user: str | None = None,
    github_api_url: str | None = None,
    log_level: str | None = None,
    dry_run: bool = False,
    invalidate_cache: bool = False,
    team_cache_dir: Path | None = None,
) -> TriageConfig:
    """Synchronously get the reconciled triage configuration."""
    return asyncio.run(
        reconcile.reconcile_triage_configuration(
            cli_github_token=github_token,
            cli_github_user=github_user,
            cli_github_api_url=github_api_url,
            cli_log_level=log_level,
            cli_dry_run=dry_run,
            cli_invalidate_cache=invalidate_cache,
            cli_team_cache_dir=team_cache_dir,
        )
    )
