"""Pydantic schemas for team membership and its cached form."""

from pydantic import BaseModel, ConfigDict


class TeamOrganization(BaseModel):
    """Pydantic model for the organization owning a team."""

    model_config = ConfigDict(extra="ignore")

    login: str
    id: int | None = None


class Team(BaseModel):
    """Pydantic model for a team the current user belongs to."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    slug: str
    organization: TeamOrganization

    @property
    def display_name(self) -> str:
        """Team name qualified by its organization, e.g. ``core@octo-org``."""
        return f"{self.name}@{self.organization.login}"


class TeamCacheRecord(BaseModel):
    """Persisted team membership snapshot for one user."""

    teams: list[Team]
    timestamp: int
    username: str
