# mypy: ignore-errors
# tests/services/test_reputation_ledger.py
"""Unit tests for reputation bookkeeping and leaderboard badges."""

from datetime import timedelta

import pytest

from quorum_stage.core.errors import InvalidArgumentError
from quorum_stage.db.time import utcnow
from quorum_stage.models import ReputationEvent
from quorum_stage.services import leaderboard
from quorum_stage.services.reputation import apply_reputation_delta, reputation_history


def test_delta_updates_total_and_history(db_session, test_user, test_question) -> None:
    """Each delta moves the total and appends one event."""
    apply_reputation_delta(db_session, test_user.id, 10, "Answer upvoted", question_id=test_question.id)
    apply_reputation_delta(db_session, test_user.id, -2, "Answer downvoted")
    db_session.commit()

    db_session.refresh(test_user)
    history = reputation_history(db_session, test_user.id)
    assert test_user.reputation == 8
    assert [event.change for event in history] == [-2, 10]
    assert history[1].related_question_id == test_question.id


def test_zero_delta_is_noop(db_session, test_user) -> None:
    """A zero change writes nothing."""
    assert apply_reputation_delta(db_session, test_user.id, 0, "Nothing") is None
    db_session.commit()
    assert db_session.query(ReputationEvent).count() == 0


def test_reputation_may_go_negative(db_session, test_user) -> None:
    """Totals are not clamped at zero."""
    apply_reputation_delta(db_session, test_user.id, -2, "Question downvoted")
    db_session.commit()
    db_session.refresh(test_user)
    assert test_user.reputation == -2


def test_history_limit(db_session, test_user) -> None:
    """The history can be truncated to the newest entries."""
    for change in (1, 2, 3):
        apply_reputation_delta(db_session, test_user.id, change, "Bump")
    db_session.commit()
    assert [event.change for event in reputation_history(db_session, test_user.id, limit=2)] == [3, 2]


@pytest.mark.parametrize(
    ("rank", "reputation", "answers", "badge"),
    [
        (1, 0, 0, "Gold"),
        (2, 5000, 0, "Silver"),
        (3, 0, 0, "Bronze"),
        (4, 1000, 0, "Expert"),
        (4, 999, 0, "Contributor"),
        (5, 500, 80, "Contributor"),
        (5, 499, 50, "Helper"),
        (9, 499, 49, "Newcomer"),
    ],
)
def test_badge_for(rank, reputation, answers, badge) -> None:
    """Medals win, then reputation tiers, then answer volume."""
    assert leaderboard.badge_for(rank, reputation, answers) == badge


def test_window_start() -> None:
    """Week and month ranges look back a fixed number of days."""
    assert leaderboard.window_start("all") is None
    week = leaderboard.window_start("week")
    assert abs((utcnow() - week) - timedelta(days=7)) < timedelta(seconds=5)
    month = leaderboard.window_start("month")
    assert abs((utcnow() - month) - timedelta(days=30)) < timedelta(seconds=5)


def test_rank_validates_arguments(db_session) -> None:
    """Bad ranges and limits are rejected by the service itself."""
    with pytest.raises(InvalidArgumentError):
        leaderboard.rank(db_session, "year")
    with pytest.raises(InvalidArgumentError):
        leaderboard.rank(db_session, "all", 0)
    with pytest.raises(InvalidArgumentError):
        leaderboard.rank(db_session, "all", 101)


def test_month_counts_only_recent_content(db_session, make_user, make_question) -> None:
    """Windowed entries count only content created inside the window."""
    author = make_user("Author", reputation=20)
    make_question(author, "Recent question")
    make_question(author, "Ancient question", created_at=utcnow() - timedelta(days=90))
    db_session.add(ReputationEvent(user_id=author.id, change=20, reason="Question upvoted"))
    db_session.commit()

    [entry] = leaderboard.rank(db_session, "month")
    assert entry.questions == 1
    assert entry.score == 20
    assert leaderboard.rank(db_session, "all")[0].questions == 2
