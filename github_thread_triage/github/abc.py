"""Base ABC for the remote thread gateway."""

from abc import ABC, abstractmethod

from github_thread_triage.schemas.notifications import Notification, PullRequestDetail
from github_thread_triage.schemas.teams import Team


class ThreadGatewayBase(ABC):
    """Base ABC for clients that list, enrich and resolve notification threads."""

    # Notification threads
    @abstractmethod
    async def list_unread_threads(self) -> list[Notification]:
        """List every unread notification thread of the authenticated user."""
        pass

    @abstractmethod
    async def resolve_thread(self, thread_id: str) -> None:
        """Mark a notification thread as done."""
        pass

    # Pull requests
    @abstractmethod
    async def get_pull_request_detail(self, owner: str, repo: str, number: int) -> PullRequestDetail:
        """Get the live state of a pull request."""
        pass

    # Teams
    @abstractmethod
    async def list_teams_for_user(self, username: str) -> list[Team]:
        """List the teams the user belongs to across their organizations."""
        pass
