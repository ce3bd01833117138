"""Unit tests for the thread resolution rules."""

from typing import Callable

import pytest

from github_thread_triage.schemas.notifications import Notification, PullRequestDetail
from github_thread_triage.schemas.teams import Team
from github_thread_triage.triage.rules import (
    CompositeRule,
    DependencyBotPullRequestRule,
    MergedClosedPullRequestRule,
    TeamSnapshotHolder,
    ThreadRule,
    TriageDecision,
    build_default_rules,
)

BOT_LOGIN = "renovate-sh-app[bot]"

NotificationFactory = Callable[..., Notification]
PullRequestFactory = Callable[..., PullRequestDetail]
TeamFactory = Callable[..., Team]


@pytest.fixture
def snapshot() -> TeamSnapshotHolder:
    """Empty, not yet loaded team snapshot."""
    return TeamSnapshotHolder()


@pytest.fixture
def merged_closed_rule(snapshot: TeamSnapshotHolder) -> MergedClosedPullRequestRule:
    """Merged/closed rule for bob."""
    return MergedClosedPullRequestRule("bob", snapshot)


@pytest.fixture
def bot_rule(snapshot: TeamSnapshotHolder) -> DependencyBotPullRequestRule:
    """Dependency bot rule for bob."""
    return DependencyBotPullRequestRule("bob", snapshot)


class AlwaysRule(ThreadRule):
    """Rule returning a fixed answer and recording calls."""

    def __init__(self, name: str, answer: bool) -> None:
        self.name = name
        self.answer = answer
        self.calls = 0

    def should_resolve(self, notification: Notification, pr_detail: PullRequestDetail | None = None) -> bool:
        self.calls += 1
        return self.answer


def test_snapshot_holder_starts_empty(snapshot: TeamSnapshotHolder) -> None:
    """Test that a new snapshot holder reports no teams and is not loaded."""
    assert snapshot.teams == ()
    assert snapshot.loaded is False


def test_snapshot_holder_load(snapshot: TeamSnapshotHolder, make_team: TeamFactory) -> None:
    """Test that loading teams replaces the snapshot."""
    snapshot.load([make_team()])
    assert snapshot.loaded is True
    assert [team.slug for team in snapshot.teams] == ["core-reviewers"]


@pytest.mark.parametrize(
    "subject_type",
    [
        pytest.param("Issue", id="issue"),
        pytest.param("Release", id="release"),
        pytest.param("Discussion", id="discussion"),
        pytest.param("CheckSuite", id="check suite"),
    ],
)
def test_non_pull_request_threads_are_kept(
    subject_type: str,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
) -> None:
    """Test that only pull request threads can be resolved, whatever the detail says."""
    rules = build_default_rules("bob", TeamSnapshotHolder())
    notification = make_notification(subject_type=subject_type)
    assert rules.should_resolve(notification, make_pr_detail(state="closed", merged=True)) is False
    assert rules.should_resolve(notification, make_pr_detail(author=BOT_LOGIN, author_type="Bot")) is False
    assert rules.should_resolve(notification, None) is False


def test_pull_request_without_detail_is_kept(make_notification: NotificationFactory) -> None:
    """Test that missing pull request details never resolve a thread."""
    rules = build_default_rules("bob", TeamSnapshotHolder())
    assert rules.should_resolve(make_notification(), None) is False


def test_closed_pull_request_not_involved_is_resolved(make_notification: NotificationFactory, make_pr_detail: PullRequestFactory) -> None:
    """Closed, unmerged pull request with no involvement from bob is resolved."""
    rules = build_default_rules("bob", TeamSnapshotHolder())
    pr_detail = make_pr_detail(state="closed", merged=False, author="alice")
    assert rules.should_resolve(make_notification(), pr_detail) is True


def test_closed_pull_request_with_direct_reviewer_is_kept(make_notification: NotificationFactory, make_pr_detail: PullRequestFactory) -> None:
    """Same as the resolved case, but bob is a requested reviewer."""
    rules = build_default_rules("bob", TeamSnapshotHolder())
    pr_detail = make_pr_detail(state="closed", merged=False, author="alice", requested_reviewers=["bob"])
    assert rules.should_resolve(make_notification(), pr_detail) is False


@pytest.mark.parametrize(
    "state,merged,expected",
    [
        pytest.param("open", False, False, id="open"),
        pytest.param("closed", False, True, id="closed"),
        pytest.param("closed", True, True, id="merged"),
        pytest.param("open", True, True, id="merged flag with open state"),
    ],
)
def test_merged_closed_rule_state(
    state: str,
    merged: bool,
    expected: bool,
    merged_closed_rule: MergedClosedPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
) -> None:
    """Test that the merged flag and closed state are checked independently."""
    pr_detail = make_pr_detail(state=state, merged=merged)
    assert merged_closed_rule.should_resolve(make_notification(), pr_detail) is expected


@pytest.mark.parametrize(
    "involvement",
    [
        pytest.param({"author": "bob"}, id="author"),
        pytest.param({"assignees": ["carol", "bob"]}, id="assignee"),
        pytest.param({"requested_reviewers": ["bob"]}, id="requested reviewer"),
    ],
)
@pytest.mark.parametrize("merged", [True, False], ids=["merged", "closed"])
def test_merged_closed_rule_keeps_involved_user(
    involvement: dict[str, object],
    merged: bool,
    merged_closed_rule: MergedClosedPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
) -> None:
    """Test that authorship, assignment and review requests always keep the thread."""
    pr_detail = make_pr_detail(state="closed", merged=merged, **involvement)
    assert merged_closed_rule.should_resolve(make_notification(), pr_detail) is False


@pytest.mark.parametrize(
    "requested_team,expected",
    [
        pytest.param("Core Reviewers", False, id="matches team name"),
        pytest.param("core-reviewers", False, id="matches team slug"),
        pytest.param("core reviewers", True, id="case differs"),
        pytest.param("platform", True, id="other team"),
    ],
)
def test_merged_closed_rule_team_reviewer(
    requested_team: str,
    expected: bool,
    snapshot: TeamSnapshotHolder,
    merged_closed_rule: MergedClosedPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
    make_team: TeamFactory,
) -> None:
    """Test that a requested team matches a user team by name or by slug, case sensitively."""
    snapshot.load([make_team(name="Core Reviewers", slug="core-reviewers")])
    pr_detail = make_pr_detail(state="closed", merged=True, requested_teams=[requested_team])
    assert merged_closed_rule.should_resolve(make_notification(), pr_detail) is expected


def test_merged_closed_rule_reads_snapshot_at_call_time(
    snapshot: TeamSnapshotHolder,
    merged_closed_rule: MergedClosedPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
    make_team: TeamFactory,
) -> None:
    """Test that teams loaded after the rule was built are taken into account."""
    pr_detail = make_pr_detail(state="closed", requested_teams=["core-reviewers"])
    assert merged_closed_rule.should_resolve(make_notification(), pr_detail) is True

    snapshot.load([make_team()])
    assert merged_closed_rule.should_resolve(make_notification(), pr_detail) is False


def test_bot_rule_resolves_bot_pull_request(
    bot_rule: DependencyBotPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
) -> None:
    """Test that a merged bot pull request bob is not involved in is resolved."""
    pr_detail = make_pr_detail(state="closed", merged=True, author=BOT_LOGIN, author_type="Bot")
    assert bot_rule.should_resolve(make_notification(), pr_detail) is True


def test_bot_rule_fires_on_open_pull_request(
    bot_rule: DependencyBotPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
) -> None:
    """The dependency bot rule has no open/closed gate: an open bot pull request is resolved.

    The merged/closed rule still keeps the same thread, so the composite
    outcome comes from the bot rule alone.
    """
    pr_detail = make_pr_detail(state="open", merged=False, author=BOT_LOGIN, author_type="Bot")
    notification = make_notification()
    assert MergedClosedPullRequestRule("bob", TeamSnapshotHolder()).should_resolve(notification, pr_detail) is False
    assert bot_rule.should_resolve(notification, pr_detail) is True
    decision = build_default_rules("bob", TeamSnapshotHolder()).evaluate(notification, pr_detail)
    assert decision == TriageDecision(resolve=True, rule_name="dependency-bot-pull-request")


@pytest.mark.parametrize(
    "author,author_type",
    [
        pytest.param(BOT_LOGIN, "User", id="login without bot type"),
        pytest.param("dependabot[bot]", "Bot", id="other bot"),
        pytest.param("alice", "User", id="human"),
    ],
)
def test_bot_rule_requires_exact_bot_identity(
    author: str,
    author_type: str,
    bot_rule: DependencyBotPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
) -> None:
    """Test that both the login and the account type must match."""
    pr_detail = make_pr_detail(state="open", author=author, author_type=author_type)
    assert bot_rule.should_resolve(make_notification(), pr_detail) is False


@pytest.mark.parametrize(
    "involvement",
    [
        pytest.param({"assignees": ["bob"]}, id="assignee"),
        pytest.param({"requested_reviewers": ["bob"]}, id="requested reviewer"),
    ],
)
def test_bot_rule_keeps_involved_user(
    involvement: dict[str, object],
    bot_rule: DependencyBotPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
) -> None:
    """Test that individual review requests and assignment keep bot pull requests."""
    pr_detail = make_pr_detail(state="open", author=BOT_LOGIN, author_type="Bot", **involvement)
    assert bot_rule.should_resolve(make_notification(), pr_detail) is False


def test_bot_rule_ignores_team_review_requests(
    snapshot: TeamSnapshotHolder,
    bot_rule: DependencyBotPullRequestRule,
    make_notification: NotificationFactory,
    make_pr_detail: PullRequestFactory,
    make_team: TeamFactory,
) -> None:
    """Test that a review request for one of bob's teams does not keep a bot pull request."""
    snapshot.load([make_team(name="Core Reviewers", slug="core-reviewers")])
    pr_detail = make_pr_detail(state="open", author=BOT_LOGIN, author_type="Bot", requested_teams=["core-reviewers"])
    assert bot_rule.should_resolve(make_notification(), pr_detail) is True


def test_bot_rule_with_custom_identity(make_notification: NotificationFactory, make_pr_detail: PullRequestFactory) -> None:
    """Test that the recognized bot account can be configured."""
    rule = DependencyBotPullRequestRule("bob", TeamSnapshotHolder(), bot_login="dependabot[bot]")
    pr_detail = make_pr_detail(state="open", author="dependabot[bot]", author_type="Bot")
    assert rule.should_resolve(make_notification(), pr_detail) is True


def test_composite_rule_short_circuits(make_notification: NotificationFactory) -> None:
    """Test that evaluation stops at the first rule that fires."""
    first = AlwaysRule("first", False)
    second = AlwaysRule("second", True)
    third = AlwaysRule("third", True)
    composite = CompositeRule([first, second, third])

    decision = composite.evaluate(make_notification())

    assert decision == TriageDecision(resolve=True, rule_name="second")
    assert (first.calls, second.calls, third.calls) == (1, 1, 0)


def test_composite_rule_keeps_when_nothing_fires(make_notification: NotificationFactory) -> None:
    """Test that a thread is kept when no rule fires."""
    composite = CompositeRule([AlwaysRule("first", False), AlwaysRule("second", False)])
    assert composite.evaluate(make_notification()) == TriageDecision(resolve=False, rule_name=None)
    assert composite.should_resolve(make_notification()) is False


def test_composite_rule_with_no_rules_keeps(make_notification: NotificationFactory) -> None:
    """Test that an empty rule set keeps every thread."""
    assert CompositeRule([]).should_resolve(make_notification()) is False


def test_default_rule_order() -> None:
    """Test that the merged/closed rule is evaluated before the bot rule."""
    composite = build_default_rules("bob", TeamSnapshotHolder())
    assert [rule.name for rule in composite.rules] == ["merged-closed-pull-request", "dependency-bot-pull-request"]


def test_decision_is_repeatable(make_notification: NotificationFactory, make_pr_detail: PullRequestFactory, make_team: TeamFactory) -> None:
    """Test that evaluating the same inputs twice gives the same decision."""
    snapshot = TeamSnapshotHolder()
    snapshot.load([make_team()])
    composite = build_default_rules("bob", snapshot)
    notification = make_notification()
    pr_detail = make_pr_detail(state="closed", merged=True, requested_teams=["platform"])

    assert composite.evaluate(notification, pr_detail) == composite.evaluate(notification, pr_detail)
