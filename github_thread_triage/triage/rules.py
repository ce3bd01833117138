"""Rules deciding whether a notification thread can be resolved automatically.

Each rule answers one question: does this thread still need the current
user's attention? A rule returns True only when it is positive the answer is
no. Missing information (no pull request detail, a non pull request thread)
always keeps the thread.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from github_thread_triage.schemas.notifications import Notification, PullRequestDetail
from github_thread_triage.schemas.teams import Team
from github_thread_triage.utils.constants import BOT_ACCOUNT_TYPE, DEPENDENCY_BOT_LOGIN

logger = structlog.get_logger(__name__)


class TeamSnapshotHolder:
    """Holds the current user's team snapshot once it has been loaded.

    Rules are built before teams are known, so they keep a reference to the
    holder and read from it on every decision.
    """

    def __init__(self) -> None:
        """Initialize an empty, not yet loaded holder."""
        self._teams: tuple[Team, ...] = ()
        self.loaded = False

    @property
    def teams(self) -> tuple[Team, ...]:
        """Teams of the current user; empty until loaded."""
        return self._teams

    def load(self, teams: Iterable[Team]) -> None:
        """Replace the snapshot."""
        self._teams = tuple(teams)
        self.loaded = True


class ThreadRule(ABC):
    """Base ABC for thread resolution rules."""

    name: str = "rule"

    @abstractmethod
    def should_resolve(self, notification: Notification, pr_detail: PullRequestDetail | None = None) -> bool:
        """Return True if the thread no longer needs the current user's attention."""
        pass


class PullRequestInvolvementRule(ThreadRule):
    """Shared involvement checks for rules that act on pull request threads."""

    def __init__(self, current_user: str, team_snapshot: TeamSnapshotHolder) -> None:
        """Initialize the rule for a user and the holder of their teams."""
        self.current_user = current_user
        self.team_snapshot = team_snapshot

    def is_requested_reviewer(self, pr_detail: PullRequestDetail) -> bool:
        """Whether the user was individually requested to review."""
        return any(reviewer.login == self.current_user for reviewer in pr_detail.requested_reviewers)

    def is_team_reviewer(self, pr_detail: PullRequestDetail) -> bool:
        """Whether one of the user's teams was requested to review.

        A requested team matches a user team when its name equals either the
        user team's name or its slug.
        """
        user_teams = self.team_snapshot.teams
        for requested_team in pr_detail.requested_teams:
            for team in user_teams:
                if requested_team.name in (team.name, team.slug):
                    logger.debug(
                        "User is a reviewer through team membership",
                        username=self.current_user,
                        pr_number=pr_detail.number,
                        team=team.display_name,
                    )
                    return True
        return False

    def is_author(self, pr_detail: PullRequestDetail) -> bool:
        """Whether the user opened the pull request."""
        return pr_detail.user.login == self.current_user

    def is_assignee(self, pr_detail: PullRequestDetail) -> bool:
        """Whether the user is assigned to the pull request."""
        return any(assignee.login == self.current_user for assignee in pr_detail.assignees)

    def involvement(self, pr_detail: PullRequestDetail, include_teams: bool) -> str | None:
        """Describe how the user is involved in the pull request, or None if they are not."""
        if self.is_requested_reviewer(pr_detail):
            return "requested reviewer"
        if include_teams and self.is_team_reviewer(pr_detail):
            return "team reviewer"
        if self.is_author(pr_detail):
            return "author"
        if self.is_assignee(pr_detail):
            return "assignee"
        return None

    def applicable_detail(self, notification: Notification, pr_detail: PullRequestDetail | None) -> PullRequestDetail | None:
        """Return the pull request detail if this thread can be judged at all."""
        if not notification.is_pull_request:
            return None
        if pr_detail is None:
            logger.debug("No pull request details available", rule=self.name, thread_id=notification.id)
            return None
        return pr_detail


class MergedClosedPullRequestRule(PullRequestInvolvementRule):
    """Resolve threads for merged or closed pull requests the user is not involved in."""

    name = "merged-closed-pull-request"

    def should_resolve(self, notification: Notification, pr_detail: PullRequestDetail | None = None) -> bool:
        """Return True for finished pull requests with no review, authorship or assignment by the user."""
        pr_detail = self.applicable_detail(notification, pr_detail)
        if pr_detail is None:
            return False

        if not (pr_detail.state == "closed" or pr_detail.merged):
            logger.debug("Pull request is still open", rule=self.name, pr_number=pr_detail.number)
            return False

        involvement = self.involvement(pr_detail, include_teams=True)
        if involvement is not None:
            logger.debug(
                "User is involved in pull request",
                rule=self.name,
                pr_number=pr_detail.number,
                username=self.current_user,
                involvement=involvement,
            )
            return False

        logger.info(
            "Pull request is finished and user is not involved",
            rule=self.name,
            pr_number=pr_detail.number,
            pr_state="merged" if pr_detail.merged else "closed",
        )
        return True


class DependencyBotPullRequestRule(PullRequestInvolvementRule):
    """Resolve threads for dependency bot pull requests the user is not involved in.

    Team review requests do not count as involvement here; only an individual
    review request, authorship or assignment keeps the thread. The pull
    request's open or closed state is not considered.
    """

    name = "dependency-bot-pull-request"

    def __init__(
        self,
        current_user: str,
        team_snapshot: TeamSnapshotHolder,
        bot_login: str = DEPENDENCY_BOT_LOGIN,
        bot_account_type: str = BOT_ACCOUNT_TYPE,
    ) -> None:
        """Initialize the rule for a user and the bot account to recognize."""
        super().__init__(current_user, team_snapshot)
        self.bot_login = bot_login
        self.bot_account_type = bot_account_type

    def is_bot_pull_request(self, pr_detail: PullRequestDetail) -> bool:
        """Whether the pull request was opened by the dependency bot."""
        return pr_detail.user.login == self.bot_login and pr_detail.user.type == self.bot_account_type

    def should_resolve(self, notification: Notification, pr_detail: PullRequestDetail | None = None) -> bool:
        """Return True for bot pull requests with no individual review, authorship or assignment by the user."""
        pr_detail = self.applicable_detail(notification, pr_detail)
        if pr_detail is None:
            return False

        if not self.is_bot_pull_request(pr_detail):
            logger.debug("Pull request is not from the dependency bot", rule=self.name, pr_number=pr_detail.number)
            return False

        involvement = self.involvement(pr_detail, include_teams=False)
        if involvement is not None:
            logger.debug(
                "User is involved in dependency bot pull request",
                rule=self.name,
                pr_number=pr_detail.number,
                username=self.current_user,
                involvement=involvement,
            )
            return False

        logger.info(
            "Dependency bot pull request and user is not involved",
            rule=self.name,
            pr_number=pr_detail.number,
            author=pr_detail.user.login,
        )
        return True


@dataclass(frozen=True)
class TriageDecision:
    """Outcome of evaluating the rules against one thread."""

    resolve: bool
    rule_name: str | None = None


class CompositeRule(ThreadRule):
    """Resolve a thread as soon as any of its rules says so, in order."""

    name = "composite"

    def __init__(self, rules: Iterable[ThreadRule]) -> None:
        """Initialize with an ordered collection of rules."""
        self.rules: tuple[ThreadRule, ...] = tuple(rules)

    def evaluate(self, notification: Notification, pr_detail: PullRequestDetail | None = None) -> TriageDecision:
        """Evaluate the rules in order and report which one fired, if any."""
        for rule in self.rules:
            if rule.should_resolve(notification, pr_detail):
                logger.debug("Rule matched thread", rule=rule.name, thread_id=notification.id)
                return TriageDecision(resolve=True, rule_name=rule.name)
        logger.debug("No rules matched thread", thread_id=notification.id)
        return TriageDecision(resolve=False)

    def should_resolve(self, notification: Notification, pr_detail: PullRequestDetail | None = None) -> bool:
        """Return True if any rule resolves the thread."""
        return self.evaluate(notification, pr_detail).resolve


def build_default_rules(current_user: str, team_snapshot: TeamSnapshotHolder) -> CompositeRule:
    """Build the standard rule set for a user."""
    return CompositeRule(
        [
            MergedClosedPullRequestRule(current_user, team_snapshot),
            DependencyBotPullRequestRule(current_user, team_snapshot),
        ]
    )
