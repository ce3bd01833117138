"""Contains utility functions for GitHub interactions."""

from github_thread_triage.schemas.notifications import PullRequestReference
from github_thread_triage.utils.constants import LINK_NEXT_PAGE_PATTERN, PULL_REQUEST_API_URL_PATTERN


def extract_pull_request_reference(url: str | None) -> PullRequestReference | None:
    """Extracts the owner, repository and number from a pull request API URL.

    Returns None when the URL is missing or does not point at a pull request.
    """
    if not url:
        return None
    match = PULL_REQUEST_API_URL_PATTERN.search(url)
    if match is None:
        return None
    owner, repo, number = match.groups()
    return PullRequestReference(owner=owner, repo=repo, number=int(number))


def has_next_page(link_header: str | None) -> bool:
    """Whether a Link response header advertises a next page."""
    if not link_header:
        return False
    return LINK_NEXT_PAGE_PATTERN.search(link_header) is not None
