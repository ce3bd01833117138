"""Fixtures for unit tests."""

from typing import Any, Callable, Generator

import pytest
import structlog

from github_thread_triage.schemas.notifications import Notification, PullRequestDetail
from github_thread_triage.schemas.teams import Team


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


def notification_payload(
    thread_id: str = "1",
    subject_type: str = "PullRequest",
    subject_url: str | None = "https://api.github.com/repos/octo-org/octo-repo/pulls/42",
    title: str = "Bump dependency",
) -> dict[str, Any]:
    """Raw notification thread as returned by the GitHub API."""
    return {
        "id": thread_id,
        "unread": True,
        "reason": "subscribed",
        "updated_at": "2024-05-01T12:00:00Z",
        "last_read_at": None,
        "subject": {
            "title": title,
            "url": subject_url,
            "latest_comment_url": subject_url,
            "type": subject_type,
        },
        "repository": {
            "id": 1296269,
            "name": "octo-repo",
            "full_name": "octo-org/octo-repo",
            "owner": {"login": "octo-org", "id": 9919, "type": "Organization"},
        },
        "url": f"https://api.github.com/notifications/threads/{thread_id}",
        "subscription_url": f"https://api.github.com/notifications/threads/{thread_id}/subscription",
    }


def pull_request_payload(
    number: int = 42,
    state: str = "closed",
    merged: bool = False,
    author: str = "alice",
    author_type: str = "User",
    requested_reviewers: list[str] | None = None,
    requested_teams: list[str] | None = None,
    assignees: list[str] | None = None,
) -> dict[str, Any]:
    """Raw pull request as returned by the GitHub API."""
    return {
        "id": 1000 + number,
        "number": number,
        "state": state,
        "merged": merged,
        "merged_at": "2024-05-01T12:00:00Z" if merged else None,
        "closed_at": "2024-05-01T12:00:00Z" if state == "closed" else None,
        "user": {"login": author, "id": 1, "type": author_type},
        "requested_reviewers": [{"login": login, "id": index, "type": "User"} for index, login in enumerate(requested_reviewers or [])],
        "requested_teams": [{"name": name, "slug": name.lower(), "id": index} for index, name in enumerate(requested_teams or [])],
        "assignees": [{"login": login, "id": index, "type": "User"} for index, login in enumerate(assignees or [])],
        "title": "Some change",
    }


def team_payload(name: str = "Core Reviewers", slug: str = "core-reviewers", team_id: int = 7, org: str = "octo-org") -> dict[str, Any]:
    """Team entry as stored in the team cache."""
    return {"id": team_id, "name": name, "slug": slug, "organization": {"login": org, "id": 9919}}


@pytest.fixture
def make_notification() -> Callable[..., Notification]:
    """Factory building Notification models."""

    def _make(**kwargs: Any) -> Notification:
        return Notification.model_validate(notification_payload(**kwargs))

    return _make


@pytest.fixture
def make_pr_detail() -> Callable[..., PullRequestDetail]:
    """Factory building PullRequestDetail models."""

    def _make(**kwargs: Any) -> PullRequestDetail:
        return PullRequestDetail.model_validate(pull_request_payload(**kwargs))

    return _make


@pytest.fixture
def make_team() -> Callable[..., Team]:
    """Factory building Team models."""

    def _make(**kwargs: Any) -> Team:
        return Team.model_validate(team_payload(**kwargs))

    return _make


@pytest.fixture
def raw_notification() -> Callable[..., dict[str, Any]]:
    """Factory building raw notification payloads."""
    return notification_payload


@pytest.fixture
def raw_pull_request() -> Callable[..., dict[str, Any]]:
    """Factory building raw pull request payloads."""
    return pull_request_payload
