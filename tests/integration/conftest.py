"""Pytest configuration for integration tests against the live GitHub API."""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Earlier files win; load_dotenv never overrides a variable that is already set.
CREDENTIAL_ENV_FILES = (".env.integration", ".env")
CREDENTIAL_VARIABLES = ("GITHUB_TOKEN", "GITHUB_USER")


@pytest.fixture(autouse=True, scope="session")
def github_credentials() -> dict[str, str]:
    """Load the triage credentials, skipping the session when they are incomplete.

    The token must be able to read notifications and organization teams of
    GITHUB_USER. Runs only ever preview resolutions, so no thread is touched.
    """
    for env_file in CREDENTIAL_ENV_FILES:
        path = PROJECT_ROOT / env_file
        if path.is_file():
            load_dotenv(dotenv_path=path)

    missing = [name for name in CREDENTIAL_VARIABLES if not os.getenv(name)]
    if missing:
        pytest.skip(f"Thread triage integration tests need {', '.join(missing)}")
    return {name: os.environ[name] for name in CREDENTIAL_VARIABLES}
