# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up the authenticated githubkit client."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy

from github_thread_triage.utils.constants import DEFAULT_GITHUB_API_URL

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy]


def get_github_token_client(github_token: str, github_api_url: str = DEFAULT_GITHUB_API_URL) -> GitHubClient:
    """Returns an authenticated GitHub client using a personal access token.

    Supports a custom base URL for GitHub Enterprise Server (GHES).
    Raises RuntimeError if no token is given.
    """
    if not github_token:
        raise RuntimeError("GitHub authentication requires a personal access token.")
    # Disable HTTP caching so every run sees the current unread threads
    return GitHub(auth=TokenAuthStrategy(github_token), base_url=github_api_url, http_cache=False)
