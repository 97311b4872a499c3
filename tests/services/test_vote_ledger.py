# mypy: ignore-errors
# tests/services/test_vote_ledger.py
"""Unit tests for the vote ledger service."""

import pytest
from sqlalchemy import func
from sqlalchemy.orm import sessionmaker

from quorum_stage.core.errors import ConflictError, InvalidArgumentError, NotFoundError, SelfVoteError
from quorum_stage.models import AnswerRef, ContentVote, Notification, QuestionRef, ReputationEvent, User
from quorum_stage.services import votes as vote_service
from quorum_stage.services.notifications import notify as real_notify


def _ledger_total(db_session, user_id):
    return db_session.query(func.coalesce(func.sum(ReputationEvent.change), 0)).filter(
        ReputationEvent.user_id == user_id
    ).scalar()


def test_parse_vote_type() -> None:
    """Vote types map onto directions."""
    assert vote_service.parse_vote_type("upvote") == 1
    assert vote_service.parse_vote_type("downvote") == -1
    with pytest.raises(InvalidArgumentError):
        vote_service.parse_vote_type("meh")


def test_vote_sequence_keeps_counters_and_ledger_consistent(
    db_session, make_user, test_answer, other_user
) -> None:
    """Counters always equal the stored votes and reputation equals the event sum."""
    voters = [make_user(f"Voter {i}") for i in range(3)]
    ref = AnswerRef(test_answer.id)

    for voter, vote_type in [
        (voters[0], "upvote"),
        (voters[1], "upvote"),
        (voters[2], "downvote"),
        (voters[0], "downvote"),
        (voters[1], "upvote"),
    ]:
        vote_service.apply_vote(db_session, ref, voter, vote_type)

    db_session.refresh(test_answer)
    db_session.refresh(other_user)
    rows = db_session.query(ContentVote).filter_by(content_type="answer", content_id=test_answer.id).all()
    assert test_answer.upvotes == sum(1 for row in rows if row.direction == 1)
    assert test_answer.downvotes == sum(1 for row in rows if row.direction == -1)
    assert (test_answer.upvotes, test_answer.downvotes) == (0, 2)
    assert other_user.reputation == -4
    assert other_user.reputation == _ledger_total(db_session, other_user.id)


def test_outcome_reports_transition(db_session, other_user, test_question) -> None:
    """The outcome carries the previous and resulting direction."""
    ref = QuestionRef(test_question.id)
    first = vote_service.apply_vote(db_session, ref, other_user, "downvote")
    second = vote_service.apply_vote(db_session, ref, other_user, "upvote")

    assert (first.previous_direction, first.direction) == (0, -1)
    assert (second.previous_direction, second.direction) == (-1, 1)
    assert second.content.net_votes == 1


def test_self_vote_is_rejected(db_session, test_user, test_question) -> None:
    """Authors cannot vote on their own question."""
    with pytest.raises(SelfVoteError):
        vote_service.apply_vote(db_session, QuestionRef(test_question.id), test_user, "upvote")
    assert db_session.query(ContentVote).count() == 0


def test_missing_content(db_session, test_user) -> None:
    """Votes on absent content raise NotFoundError."""
    with pytest.raises(NotFoundError):
        vote_service.apply_vote(db_session, AnswerRef(123456), test_user, "upvote")


def test_notification_failure_does_not_undo_vote(
    db_session, monkeypatch, other_user, test_question, test_user
) -> None:
    """A notification that cannot be stored leaves the vote committed."""

    def broken_notify(db, **kwargs):
        kwargs["type_"] = "not-a-notification-type"
        return real_notify(db, **kwargs)

    monkeypatch.setattr(vote_service, "notify", broken_notify)

    outcome = vote_service.apply_vote(db_session, QuestionRef(test_question.id), other_user, "upvote")
    assert outcome.direction == 1

    db_session.refresh(test_question)
    db_session.refresh(test_user)
    assert test_question.upvotes == 1
    assert test_user.reputation == 5
    assert db_session.query(Notification).count() == 0


def test_get_my_vote(db_session, other_user, test_question) -> None:
    """Reading a vote never changes it."""
    ref = QuestionRef(test_question.id)
    assert vote_service.get_my_vote(db_session, ref, other_user.id) == 0
    vote_service.apply_vote(db_session, ref, other_user, "upvote")
    assert vote_service.get_my_vote(db_session, ref, other_user.id) == 1
    assert vote_service.get_my_vote(db_session, ref, other_user.id) == 1


def test_stale_vote_read_is_rejected(
    engine, db_session, other_user, test_question, test_user
) -> None:
    """A request computed from an outdated vote cannot apply its transition twice."""
    ref = QuestionRef(test_question.id)
    vote_service.apply_vote(db_session, ref, other_user, "upvote")

    second_session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        # The second request has already read the upvote when the first flips it.
        stale_voter = second_session.get(User, other_user.id)
        stale_vote = second_session.get(ContentVote, ("question", test_question.id, other_user.id))
        assert stale_vote.direction == 1

        vote_service.apply_vote(db_session, ref, other_user, "downvote")
        with pytest.raises(ConflictError):
            vote_service.apply_vote(second_session, ref, stale_voter, "downvote")
    finally:
        second_session.close()

    db_session.refresh(test_question)
    db_session.refresh(test_user)
    assert (test_question.upvotes, test_question.downvotes) == (0, 1)
    assert test_user.reputation == -2
    assert test_user.reputation == _ledger_total(db_session, test_user.id)
    rows = db_session.query(ContentVote).filter_by(content_type="question").all()
    assert [row.direction for row in rows] == [-1]


def test_stale_withdrawal_is_rejected(
    engine, db_session, other_user, test_question, test_user
) -> None:
    """Withdrawing a vote that another request already withdrew changes nothing."""
    ref = QuestionRef(test_question.id)
    vote_service.apply_vote(db_session, ref, other_user, "upvote")

    second_session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        stale_voter = second_session.get(User, other_user.id)
        stale_vote = second_session.get(ContentVote, ("question", test_question.id, other_user.id))

        vote_service.apply_vote(db_session, ref, other_user, "upvote")
        with pytest.raises(ConflictError):
            vote_service.apply_vote(second_session, ref, stale_voter, "upvote")
    finally:
        second_session.close()

    db_session.refresh(test_question)
    db_session.refresh(test_user)
    assert (test_question.upvotes, test_question.downvotes) == (0, 0)
    assert test_user.reputation == 0
    assert db_session.query(ContentVote).count() == 0
