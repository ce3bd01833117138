"""GitHub thread gateway adapter for the githubkit library."""

import asyncio
from typing import Any, Awaitable, Callable, Self

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from pydantic import ValidationError

from github_thread_triage.schemas.notifications import Notification, PullRequestDetail
from github_thread_triage.schemas.teams import Team, TeamOrganization
from github_thread_triage.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_PER_PAGE, NOTIFICATIONS_PER_PAGE, PAGINATION_DELAY_SECONDS
from github_thread_triage.utils.github import has_next_page
from github_thread_triage.utils.retry import retry_on_rate_limit

from .abc import ThreadGatewayBase
from .client import GitHubClient, get_github_token_client

logger = structlog.get_logger(__name__)

PageFetcher = Callable[[int], Awaitable[Response[Any]]]


class GitHubKitAdapter(ThreadGatewayBase):
    """Thread gateway adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, per_page: int = DEFAULT_PER_PAGE, page_delay: float = PAGINATION_DELAY_SECONDS) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.per_page = per_page
        self.page_delay = page_delay

    @classmethod
    def create(cls, github_token: str, github_api_url: str = DEFAULT_GITHUB_API_URL) -> Self:
        """Create a new adapter authenticated with a personal access token."""
        logger.info("Creating client for GitHub instance", github_api_url=github_api_url)
        return cls(get_github_token_client(github_token, github_api_url))

    async def _paginate(self, fetch_page: PageFetcher, description: str) -> list[dict[str, Any]]:
        """Collect every item from a paginated endpoint.

        Pages are followed for as long as the Link header advertises a next
        page; some endpoints cap the page size below the requested one, so the
        length of a page says nothing about whether more follow.
        """
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            logger.debug(f"Fetching {description} page {page}")
            response = await fetch_page(page)
            page_items: list[dict[str, Any]] = response.json()
            if not page_items:
                break
            items.extend(page_items)
            if not has_next_page(response.headers.get("link")):
                break
            page += 1
            await asyncio.sleep(self.page_delay)
        logger.debug(f"Fetched all {description}", total=len(items))
        return items

    # Notification threads
    async def list_unread_threads(self) -> list[Notification]:
        """List every unread notification thread of the authenticated user.

        A thread whose payload cannot be parsed is logged and skipped.
        """
        per_page = min(self.per_page, NOTIFICATIONS_PER_PAGE)

        @retry_on_rate_limit()
        async def _fetch_page(page: int) -> Response[Any]:
            return await self.client.rest.activity.async_list_notifications_for_authenticated_user(all=False, per_page=per_page, page=page)

        raw_threads = await self._paginate(_fetch_page, "unread threads")
        threads: list[Notification] = []
        for raw_thread in raw_threads:
            try:
                threads.append(Notification.model_validate(raw_thread))
            except ValidationError as exc:
                thread_id = raw_thread.get("id") if isinstance(raw_thread, dict) else None
                logger.warning("Skipping thread with unexpected payload", thread_id=thread_id, error=str(exc))
        logger.info("Found unread threads", count=len(threads), skipped=len(raw_threads) - len(threads))
        return threads

    @retry_on_rate_limit()
    async def resolve_thread(self, thread_id: str) -> None:
        """Mark a notification thread as done."""
        logger.debug("Marking thread as done", thread_id=thread_id)
        await self.client.rest.activity.async_mark_thread_as_done(thread_id=int(thread_id))

    # Pull requests
    @retry_on_rate_limit()
    async def get_pull_request_detail(self, owner: str, repo: str, number: int) -> PullRequestDetail:
        """Get the live state of a pull request."""
        logger.debug("Fetching pull request details", owner=owner, repo=repo, pr_number=number)
        response: Response[Any] = await self.client.rest.pulls.async_get(owner=owner, repo=repo, pull_number=number)
        return PullRequestDetail.model_validate(response.json())

    # Teams
    async def list_organizations(self, username: str) -> list[dict[str, Any]]:
        """List the organizations to search for the user's teams.

        The authenticated user's organizations include private memberships;
        when that listing is not permitted the user's public organizations are
        used instead.
        """

        @retry_on_rate_limit()
        async def _fetch_own_page(page: int) -> Response[Any]:
            return await self.client.rest.orgs.async_list_for_authenticated_user(per_page=self.per_page, page=page)

        @retry_on_rate_limit()
        async def _fetch_public_page(page: int) -> Response[Any]:
            return await self.client.rest.orgs.async_list_for_user(username=username, per_page=self.per_page, page=page)

        try:
            orgs = await self._paginate(_fetch_own_page, "organizations for authenticated user")
        except RequestFailed as exc:
            logger.debug("Could not list authenticated user's organizations, using public organizations", username=username, error=str(exc))
            orgs = await self._paginate(_fetch_public_page, f"public organizations for {username}")
        logger.debug("Found organizations", username=username, orgs=[org["login"] for org in orgs])
        return orgs

    async def list_org_teams(self, org_login: str) -> list[dict[str, Any]]:
        """List every team of an organization."""

        @retry_on_rate_limit()
        async def _fetch_page(page: int) -> Response[Any]:
            return await self.client.rest.teams.async_list(org=org_login, per_page=self.per_page, page=page)

        return await self._paginate(_fetch_page, f"teams for {org_login}")

    @retry_on_rate_limit()
    async def _get_membership(self, org_login: str, team_slug: str, username: str) -> None:
        await self.client.rest.teams.async_get_membership_for_user_in_org(org=org_login, team_slug=team_slug, username=username)

    async def is_team_member(self, org_login: str, team_slug: str, username: str) -> bool:
        """Check whether a user is a member of a team."""
        try:
            await self._get_membership(org_login, team_slug, username)
        except RequestFailed as exc:
            logger.debug("User is not a member of team", username=username, org=org_login, team=team_slug, status_code=exc.response.status_code)
            return False
        return True

    async def list_teams_for_user(self, username: str) -> list[Team]:
        """List the teams the user belongs to across their organizations."""
        teams: list[Team] = []
        for org in await self.list_organizations(username):
            org_login: str = org["login"]
            try:
                org_teams = await self.list_org_teams(org_login)
            except RequestFailed as exc:
                logger.debug("Could not fetch teams for organization, skipping it", org=org_login, error=str(exc))
                continue

            for raw_team in org_teams:
                if await self.is_team_member(org_login, raw_team["slug"], username):
                    team = Team(
                        id=raw_team["id"],
                        name=raw_team["name"],
                        slug=raw_team["slug"],
                        organization=TeamOrganization(login=org_login, id=org.get("id")),
                    )
                    logger.debug("User is a member of team", username=username, team=team.display_name)
                    teams.append(team)

        logger.info("Found teams for user", username=username, count=len(teams), teams=[team.display_name for team in teams])
        return teams
