"""Contains results of thread triage runs."""

from dataclasses import dataclass


@dataclass
class TriageSummary:
    """Counts reported at the end of a triage run."""

    examined: int = 0
    resolved: int = 0
    kept: int = 0
    errors: int = 0
    dry_run: bool = False

    def describe(self) -> str:
        """One-line human readable summary."""
        action = "would be marked" if self.dry_run else "marked"
        return f"Processed {self.examined} threads, {self.resolved} {action} as done, {self.kept} kept, {self.errors} errors"


@dataclass
class ConnectionReport:
    """Result of a connectivity check."""

    unread_threads: int
    teams: int
    cache_invalidated: bool
