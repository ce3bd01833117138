"""Pydantic schemas for notification threads and pull request details."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PULL_REQUEST_SUBJECT_TYPE = "PullRequest"


class GitHubAccount(BaseModel):
    """Pydantic model for a GitHub user or bot account."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    login: str
    id: int | None = None
    type: str | None = None


class NotificationSubject(BaseModel):
    """Pydantic model for the resource a notification thread refers to."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str
    url: str | None = None
    latest_comment_url: str | None = None
    type: str


class NotificationRepository(BaseModel):
    """Pydantic model for the repository owning a notification thread."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int | None = None
    name: str
    full_name: str
    owner: GitHubAccount


class Notification(BaseModel):
    """Pydantic model for a GitHub notification thread."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    unread: bool = True
    reason: str | None = None
    updated_at: str | None = None
    last_read_at: str | None = None
    subject: NotificationSubject
    repository: NotificationRepository

    @property
    def is_pull_request(self) -> bool:
        """Whether the thread refers to a pull request."""
        return self.subject.type == PULL_REQUEST_SUBJECT_TYPE


class RequestedTeam(BaseModel):
    """Pydantic model for a team requested to review a pull request."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    slug: str | None = None
    id: int | None = None


class PullRequestDetail(BaseModel):
    """Pydantic model for the live state of a pull request."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int | None = None
    number: int
    state: Literal["open", "closed"]
    merged: bool = False
    merged_at: str | None = None
    closed_at: str | None = None
    user: GitHubAccount
    requested_reviewers: tuple[GitHubAccount, ...] = Field(default_factory=tuple)
    requested_teams: tuple[RequestedTeam, ...] = Field(default_factory=tuple)
    assignees: tuple[GitHubAccount, ...] = Field(default_factory=tuple)


class PullRequestReference(BaseModel):
    """Owner, repository and number identifying a pull request."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
