# This file is intended to orchestrate a triage run over the unread threads.

"""Orchestrates loading teams, listing unread threads and resolving the ones that need no action."""

import asyncio
import time

import structlog
from structlog.stdlib import BoundLogger

from github_thread_triage.cache.team_cache import TeamCache
from github_thread_triage.github.abc import ThreadGatewayBase
from github_thread_triage.schemas.notifications import Notification, PullRequestDetail
from github_thread_triage.triage.exceptions import ThreadListingError
from github_thread_triage.triage.results import ConnectionReport, TriageSummary
from github_thread_triage.triage.rules import CompositeRule, TeamSnapshotHolder, build_default_rules
from github_thread_triage.utils.constants import DEFAULT_PACING_DELAY_SECONDS
from github_thread_triage.utils.github import extract_pull_request_reference

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


class ThreadProcessor:
    """Runs one triage pass over a user's unread notification threads.

    Threads are handled one at a time with a short pause between them. A
    failure on one thread is logged and counted; only failing to list the
    threads at all stops the run.
    """

    def __init__(
        self,
        gateway: ThreadGatewayBase,
        team_cache: TeamCache,
        username: str,
        dry_run: bool = False,
        invalidate_cache: bool = False,
        pacing_delay: float = DEFAULT_PACING_DELAY_SECONDS,
        rules: CompositeRule | None = None,
    ) -> None:
        """Initialize the processor; rules default to the standard set for the user."""
        self.gateway = gateway
        self.team_cache = team_cache
        self.username = username
        self.dry_run = dry_run
        self.invalidate_cache = invalidate_cache
        self.pacing_delay = pacing_delay
        self.team_snapshot = TeamSnapshotHolder()
        self.rules = rules if rules is not None else build_default_rules(username, self.team_snapshot)

    async def load_user_teams(self) -> None:
        """Load the user's teams from the cache or GitHub, once per processor.

        Any failure leaves the snapshot empty so that threads are still
        processed, only with less team information.
        """
        if self.team_snapshot.loaded:
            return

        logger.info("Loading teams for user", username=self.username)
        try:
            teams = None
            if self.invalidate_cache:
                logger.info("Cache invalidation requested, fetching fresh teams", username=self.username)
                await self.team_cache.invalidate(self.username)
            else:
                teams = await self.team_cache.get(self.username)

            if teams is None:
                teams = await self.gateway.list_teams_for_user(self.username)
                await self.team_cache.put(self.username, teams)
            else:
                logger.info("Using cached teams for user", username=self.username, teams=[team.display_name for team in teams])
        except Exception as exc:
            logger.warning("Failed to load teams for user, continuing without team data", username=self.username, error=str(exc))
            teams = []

        self.team_snapshot.load(teams)
        logger.info("Loaded teams for user", username=self.username, count=len(self.team_snapshot.teams))

    async def list_threads(self) -> list[Notification]:
        """List the unread threads, raising ThreadListingError if that is impossible."""
        try:
            return await self.gateway.list_unread_threads()
        except Exception as exc:
            logger.error("Failed to fetch unread threads", error=str(exc))
            raise ThreadListingError(exc) from exc

    async def fetch_pull_request_detail(self, notification: Notification) -> PullRequestDetail | None:
        """Fetch the pull request behind a thread, or None if it cannot be determined."""
        if not notification.is_pull_request:
            return None

        reference = extract_pull_request_reference(notification.subject.url)
        if reference is None:
            logger.warning("Could not parse pull request reference", thread_id=notification.id, url=notification.subject.url)
            return None

        try:
            return await self.gateway.get_pull_request_detail(reference.owner, reference.repo, reference.number)
        except Exception as exc:
            logger.warning(
                "Failed to fetch pull request details for thread",
                thread_id=notification.id,
                owner=reference.owner,
                repo=reference.repo,
                pr_number=reference.number,
                error=str(exc),
            )
            return None

    async def process_thread(self, notification: Notification, summary: TriageSummary) -> None:
        """Decide on a single thread and resolve it if no action is needed."""
        logger.debug("Processing thread", thread_id=notification.id, title=notification.subject.title)
        pr_detail = await self.fetch_pull_request_detail(notification)
        decision = self.rules.evaluate(notification, pr_detail)

        if not decision.resolve:
            logger.debug("Keeping thread", thread_id=notification.id, title=notification.subject.title)
            summary.kept += 1
            return

        if self.dry_run:
            logger.info("[DRY RUN] Would mark thread as done", thread_id=notification.id, title=notification.subject.title, rule=decision.rule_name)
            summary.resolved += 1
            return

        try:
            await self.gateway.resolve_thread(notification.id)
        except Exception as exc:
            logger.error("Failed to mark thread as done", thread_id=notification.id, error=str(exc))
            summary.errors += 1
            return
        logger.info("Marked thread as done", thread_id=notification.id, title=notification.subject.title, rule=decision.rule_name)
        summary.resolved += 1

    async def process_threads(self) -> TriageSummary:
        """Run the full triage pass and return its summary."""
        logger.info("Starting thread processing", username=self.username, dry_run=self.dry_run)
        start_time = time.time()
        await self.load_user_teams()
        notifications = await self.list_threads()

        summary = TriageSummary(dry_run=self.dry_run)
        if not notifications:
            logger.info("No unread threads found")
            return summary

        for notification in notifications:
            summary.examined += 1
            try:
                await self.process_thread(notification, summary)
            except Exception as exc:
                logger.error("Error processing thread", thread_id=notification.id, error=str(exc))
                summary.errors += 1
            await asyncio.sleep(self.pacing_delay)

        logger.info(
            "Processing complete",
            examined=summary.examined,
            resolved=summary.resolved,
            kept=summary.kept,
            errors=summary.errors,
            dry_run=self.dry_run,
            duration=time.time() - start_time,
        )
        return summary

    async def test_connection(self) -> ConnectionReport:
        """Load teams and list unread threads without resolving anything."""
        logger.info("Testing GitHub API connection", username=self.username)
        await self.load_user_teams()
        notifications = await self.list_threads()
        report = ConnectionReport(
            unread_threads=len(notifications),
            teams=len(self.team_snapshot.teams),
            cache_invalidated=self.invalidate_cache,
        )
        logger.info("Successfully connected to GitHub API", unread_threads=report.unread_threads, teams=report.teams)
        return report
