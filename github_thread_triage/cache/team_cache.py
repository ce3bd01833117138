"""Per-user persisted cache of team membership snapshots.

Resolving a user's teams costs one request per organization plus one
membership lookup per team, so the result is kept on disk for a limited
time. Each record carries the username it was computed for and is only
trusted when both that username and the record's age check out. The cache
is a performance optimization: read problems are reported as a miss and
write problems are logged, never raised.
"""

import shutil
import time
from pathlib import Path
from typing import Callable

import structlog
from pydantic import ValidationError

from github_thread_triage.schemas.teams import Team, TeamCacheRecord
from github_thread_triage.utils.constants import (
    DEFAULT_TEAM_CACHE_DIR,
    DEFAULT_TEAM_CACHE_TTL_HOURS,
    TEAM_CACHE_FILE_TEMPLATE,
)

logger = structlog.get_logger(__name__)

MILLISECONDS_PER_HOUR = 60 * 60 * 1000


def epoch_millis() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class TeamCache:
    """File-backed team membership cache keyed by username."""

    def __init__(
        self,
        cache_dir: Path | str = DEFAULT_TEAM_CACHE_DIR,
        ttl_hours: float = DEFAULT_TEAM_CACHE_TTL_HOURS,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        """Initialize the cache.

        Args:
            cache_dir: Directory holding one JSON file per user
            ttl_hours: Maximum age of a snapshot before it is considered stale
            clock: Callable returning the current time in epoch milliseconds
        """
        self.cache_dir = Path(cache_dir)
        self.ttl_ms = int(ttl_hours * MILLISECONDS_PER_HOUR)
        self.clock = clock

    def cache_file_path(self, username: str) -> Path:
        """Location of the snapshot file for a user."""
        return self.cache_dir / TEAM_CACHE_FILE_TEMPLATE.format(username=username)

    async def get(self, username: str) -> list[Team] | None:
        """Return the cached teams for a user, or None if there is no usable snapshot."""
        cache_file = self.cache_file_path(username)
        if not cache_file.is_file():
            logger.debug("No team cache file found", username=username, path=str(cache_file))
            return None

        try:
            record = TeamCacheRecord.model_validate_json(cache_file.read_text(encoding="utf-8"))
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Failed to read team cache, ignoring it", username=username, path=str(cache_file), error=str(exc))
            return None

        if record.username != username:
            logger.debug("Team cache belongs to a different user, ignoring it", username=username, cached_username=record.username)
            return None

        age_ms = self.clock() - record.timestamp
        if age_ms > self.ttl_ms:
            logger.debug("Team cache is expired", username=username, age_hours=round(age_ms / MILLISECONDS_PER_HOUR, 1))
            return None

        logger.debug(
            "Using cached teams",
            username=username,
            team_count=len(record.teams),
            age_hours=round(age_ms / MILLISECONDS_PER_HOUR, 1),
        )
        return record.teams

    async def put(self, username: str, teams: list[Team]) -> None:
        """Persist a snapshot for a user, replacing any previous one."""
        record = TeamCacheRecord(teams=teams, timestamp=self.clock(), username=username)
        cache_file = self.cache_file_path(username)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            cache_file.write_text(record.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to save team cache", username=username, path=str(cache_file), error=str(exc))
            return
        logger.debug("Saved teams to cache", username=username, team_count=len(teams), path=str(cache_file))

    async def invalidate(self, username: str) -> None:
        """Delete the snapshot for a user if one exists."""
        cache_file = self.cache_file_path(username)
        try:
            cache_file.unlink()
        except FileNotFoundError:
            logger.debug("No team cache file to invalidate", username=username)
            return
        except OSError as exc:
            logger.warning("Failed to invalidate team cache", username=username, error=str(exc))
            return
        logger.info("Invalidated team cache", username=username)

    async def clear_all(self) -> None:
        """Delete every cached snapshot."""
        if not self.cache_dir.exists():
            logger.debug("No team cache directory to clear", path=str(self.cache_dir))
            return
        try:
            shutil.rmtree(self.cache_dir)
        except OSError as exc:
            logger.warning("Failed to clear team cache", path=str(self.cache_dir), error=str(exc))
            return
        logger.info("Cleared all team cache files", path=str(self.cache_dir))
