"""Thread triage decision engine and orchestration."""

from .exceptions import ThreadListingError
from .processor import ThreadProcessor
from .results import ConnectionReport, TriageSummary
from .rules import (
    CompositeRule,
    DependencyBotPullRequestRule,
    MergedClosedPullRequestRule,
    TeamSnapshotHolder,
    ThreadRule,
    TriageDecision,
    build_default_rules,
)

__all__ = [
    "ThreadRule",
    "TeamSnapshotHolder",
    "MergedClosedPullRequestRule",
    "DependencyBotPullRequestRule",
    "CompositeRule",
    "TriageDecision",
    "build_default_rules",
    "ThreadProcessor",
    "TriageSummary",
    "ConnectionReport",
    "ThreadListingError",
]
