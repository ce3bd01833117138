"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# GitHub API Constants
# --------------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub REST API base URL (override for GitHub Enterprise Server)."""

DEFAULT_PER_PAGE = 100
"""Maximum page size accepted by the GitHub REST API."""

NOTIFICATIONS_PER_PAGE = 50
"""Maximum page size honoured by the notifications endpoint."""

PAGINATION_DELAY_SECONDS = 0.1
"""Delay between successive page requests."""

# Regex Patterns
LINK_NEXT_PAGE_PATTERN = re.compile(r'<[^>]+>;\s*rel="next"')
"""Pattern to match the next page entry of a Link response header."""

PULL_REQUEST_API_URL_PATTERN = re.compile(r"/repos/([^/]+)/([^/]+)/pulls/(\d+)")
"""Pattern to match pull request API URLs (e.g., https://api.github.com/repos/owner/repo/pulls/123)."""

# Thread Triage Constants
# -----------------------

DEPENDENCY_BOT_LOGIN = "renovate-sh-app[bot]"
"""Login of the automated dependency update app whose pull requests may be auto-resolved."""

BOT_ACCOUNT_TYPE = "Bot"
"""Account type GitHub reports for app (bot) accounts."""

DEFAULT_PACING_DELAY_SECONDS = 0.1
"""Delay inserted after processing each thread to stay under rate limits."""

# Team Cache Constants
# --------------------

DEFAULT_TEAM_CACHE_DIR = ".cache"
"""Default directory holding per-user team membership snapshots."""

DEFAULT_TEAM_CACHE_TTL_HOURS = 24.0
"""Default time-to-live of a team membership snapshot."""

TEAM_CACHE_FILE_TEMPLATE = "teams-{username}.json"
"""File name template for a user's team membership snapshot."""
