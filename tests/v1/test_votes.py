# mypy: ignore-errors
# tests/v1/test_votes.py
"""Tests for vote-related endpoints."""

from fastapi import status

from quorum_stage.models import ContentVote, Notification, ReputationEvent


def _vote(client, path, vote_type, headers):
    return client.post(path, json={"vote_type": vote_type}, headers=headers)


def test_upvote_question(client, db_session, other_auth_token, test_question, test_user) -> None:
    """An upvote bumps the counter and credits the asker."""
    response = _vote(
        client, f"/api/v1/questions/{test_question.id}/vote", "upvote", other_auth_token
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["content_type"] == "question"
    assert body["upvotes"] == 1
    assert body["downvotes"] == 0
    assert body["net_votes"] == 1
    assert body["direction"] == 1

    db_session.refresh(test_user)
    assert test_user.reputation == 5


def test_upvote_answer_credits_answerer(
    client, db_session, auth_token, test_answer, other_user
) -> None:
    """Answer upvotes are worth more than question upvotes."""
    response = _vote(client, f"/api/v1/answers/{test_answer.id}/vote", "upvote", auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["content_type"] == "answer"

    db_session.refresh(other_user)
    assert other_user.reputation == 10


def test_repeat_vote_withdraws_it(
    client, db_session, other_auth_token, test_question, test_user, other_user
) -> None:
    """Sending the same vote twice removes it and reverses the reputation."""
    path = f"/api/v1/questions/{test_question.id}/vote"
    _vote(client, path, "upvote", other_auth_token)
    response = _vote(client, path, "upvote", other_auth_token)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["upvotes"] == 0
    assert body["direction"] == 0

    db_session.refresh(test_user)
    assert test_user.reputation == 0
    assert db_session.get(ContentVote, ("question", test_question.id, other_user.id)) is None


def test_switching_vote_moves_both_counters(
    client, db_session, other_auth_token, test_question, test_user
) -> None:
    """Flipping an upvote to a downvote applies the difference in one step."""
    path = f"/api/v1/questions/{test_question.id}/vote"
    _vote(client, path, "upvote", other_auth_token)
    response = _vote(client, path, "downvote", other_auth_token)

    body = response.json()
    assert body["upvotes"] == 0
    assert body["downvotes"] == 1
    assert body["net_votes"] == -1
    assert body["direction"] == -1

    db_session.refresh(test_user)
    assert test_user.reputation == -2
    reasons = [
        event.reason
        for event in db_session.query(ReputationEvent).order_by(ReputationEvent.id).all()
    ]
    assert reasons == ["Question upvoted", "Question vote changed"]


def test_cannot_vote_on_own_question(client, auth_token, test_question) -> None:
    """Authors cannot vote on their own content."""
    response = _vote(client, f"/api/v1/questions/{test_question.id}/vote", "upvote", auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_vote_invalid_type(client, other_auth_token, test_question) -> None:
    """Only upvote and downvote are accepted."""
    response = _vote(
        client, f"/api/v1/questions/{test_question.id}/vote", "sideways", other_auth_token
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_vote_nonexistent_question(client, auth_token) -> None:
    """Voting on a missing question is a 404."""
    response = _vote(client, "/api/v1/questions/99999/vote", "upvote", auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vote_on_deleted_answer_is_404(client, db_session, auth_token, test_answer) -> None:
    """Soft-deleted content cannot be voted on."""
    test_answer.is_deleted = True
    db_session.commit()

    response = _vote(client, f"/api/v1/answers/{test_answer.id}/vote", "upvote", auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vote_requires_auth(client, test_question) -> None:
    """Anonymous callers cannot vote."""
    response = client.post(
        f"/api/v1/questions/{test_question.id}/vote", json={"vote_type": "upvote"}
    )
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_banned_user_cannot_vote(client, db_session, other_auth_token, other_user, test_question) -> None:
    """Banned accounts are refused on writes."""
    other_user.is_banned = True
    db_session.commit()

    response = _vote(
        client, f"/api/v1/questions/{test_question.id}/vote", "upvote", other_auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Your account has been banned"


def test_vote_notifies_author(client, db_session, other_auth_token, test_question, test_user) -> None:
    """The content author receives a vote notification."""
    _vote(client, f"/api/v1/questions/{test_question.id}/vote", "upvote", other_auth_token)

    notifications = db_session.query(Notification).filter_by(recipient_id=test_user.id).all()
    assert [n.type for n in notifications] == ["vote"]
    assert notifications[0].related_question_id == test_question.id


def test_my_vote_reports_direction(client, other_auth_token, test_question) -> None:
    """The caller can read back their own vote."""
    path = f"/api/v1/votes/question/{test_question.id}/my-vote"
    assert client.get(path, headers=other_auth_token).json() == {"direction": 0}

    _vote(client, f"/api/v1/questions/{test_question.id}/vote", "downvote", other_auth_token)
    assert client.get(path, headers=other_auth_token).json() == {"direction": -1}


def test_independent_voters_accumulate(
    client, db_session, make_user, headers_for, test_question, test_user
) -> None:
    """Each voter contributes exactly one vote."""
    for index in range(3):
        voter = make_user(f"Voter {index}")
        _vote(client, f"/api/v1/questions/{test_question.id}/vote", "upvote", headers_for(voter))

    db_session.refresh(test_question)
    db_session.refresh(test_user)
    assert test_question.upvotes == 3
    assert test_user.reputation == 15
