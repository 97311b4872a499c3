# mypy: ignore-errors
# tests/v1/test_users.py
"""Tests for profile, activity, stats and reputation history endpoints."""

from fastapi import status


def test_public_profile(client, test_user) -> None:
    """Profiles expose the public summary only."""
    response = client.get(f"/api/v1/users/{test_user.id}")
    assert response.status_code == status.HTTP_200_OK

    body = response.json()
    assert body["name"] == "Test User"
    assert "email" not in body


def test_profile_not_found(client) -> None:
    """Unknown users are a 404."""
    assert client.get("/api/v1/users/4040").status_code == status.HTTP_404_NOT_FOUND


def test_ban_status_for_active_user(client, auth_token) -> None:
    """Active accounts report no ban."""
    response = client.get("/api/v1/users/me/ban-status", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"is_banned": False, "ban_reason": None, "banned_at": None}


def test_stats_count_live_content(
    client, db_session, auth_token, test_user, test_question, make_question, test_answer
) -> None:
    """Stats aggregate questions, views and received votes, skipping deleted content."""
    make_question(test_user, "Deleted question here", is_deleted=True)
    test_question.upvotes = 3
    test_question.views = 12
    db_session.commit()

    body = client.get("/api/v1/users/me/stats", headers=auth_token).json()
    assert body["questions"] == 1
    assert body["answers"] == 0
    assert body["votes_received"] == 3
    assert body["views"] == 12


def test_other_user_stats(client, test_answer, other_user) -> None:
    """Anyone can read another user's stats."""
    body = client.get(f"/api/v1/users/{other_user.id}/stats").json()
    assert body["answers"] == 1
    assert body["accepted_answers"] == 0


def test_reputation_history_matches_total(
    client, auth_token, other_auth_token, test_question, test_answer
) -> None:
    """The reputation total equals the sum of the history entries."""
    client.post(
        f"/api/v1/questions/{test_question.id}/vote",
        json={"vote_type": "upvote"},
        headers=other_auth_token,
    )
    client.post(
        f"/api/v1/questions/{test_question.id}/vote",
        json={"vote_type": "downvote"},
        headers=other_auth_token,
    )

    body = client.get("/api/v1/users/me/reputation", headers=auth_token).json()
    assert body["reputation"] == -2
    assert sum(event["change"] for event in body["history"]) == body["reputation"]
    assert body["history"][0]["reason"] == "Question vote changed"


def test_update_profile(client, db_session, auth_token, test_user) -> None:
    """The caller can change their name and email; the email is normalised."""
    response = client.put(
        "/api/v1/users/me",
        json={"name": "  Renamed  ", "email": "New.Address@Example.com"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["name"] == "Renamed"
    assert body["email"] == "new.address@example.com"

    db_session.refresh(test_user)
    assert test_user.email == "new.address@example.com"


def test_update_profile_email_taken(client, auth_token, other_user) -> None:
    """Another account's email cannot be claimed."""
    response = client.put(
        "/api/v1/users/me",
        json={"name": "Test User", "email": other_user.email},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_update_profile_keeps_own_email(client, auth_token, test_user) -> None:
    """Resubmitting your own email is not a conflict."""
    response = client.put(
        "/api/v1/users/me",
        json={"name": "Same Email", "email": test_user.email},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Same Email"


def test_update_profile_rejects_blank_name(client, auth_token, test_user) -> None:
    """A whitespace-only name is invalid."""
    response = client.put(
        "/api/v1/users/me",
        json={"name": "   ", "email": test_user.email},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_my_questions(
    client, auth_token, make_question, make_answer, test_user, other_user
) -> None:
    """The caller's list holds only their live questions and honours the filters."""
    answered = make_question(test_user, "Answered about asyncio", tags=("asyncio",))
    make_answer(answered, other_user)
    lonely = make_question(test_user, "Nobody looked at this", tags=("pydantic",))
    make_question(test_user, "Removed question text", is_deleted=True)
    make_question(other_user, "Someone else asked this")

    body = client.get("/api/v1/users/me/questions?sort=oldest", headers=auth_token).json()
    assert [q["id"] for q in body["questions"]] == [answered.id, lonely.id]
    assert body["pagination"]["total"] == 2

    unanswered = client.get("/api/v1/users/me/questions?filter=unanswered", headers=auth_token).json()
    assert [q["id"] for q in unanswered["questions"]] == [lonely.id]

    answered_only = client.get("/api/v1/users/me/questions?filter=answered", headers=auth_token).json()
    assert [q["id"] for q in answered_only["questions"]] == [answered.id]

    by_tag_text = client.get("/api/v1/users/me/questions?search=pydant", headers=auth_token).json()
    assert [q["id"] for q in by_tag_text["questions"]] == [lonely.id]

    most_answered = client.get("/api/v1/users/me/questions?sort=answers", headers=auth_token).json()
    assert most_answered["questions"][0]["id"] == answered.id


def test_my_answers(
    client, db_session, other_auth_token, make_answer, test_question, test_answer, other_user
) -> None:
    """The caller's answers carry their question title and filter on acceptance."""
    accepted = make_answer(test_question, other_user, "A second, accepted reply", is_accepted=True)
    make_answer(test_question, other_user, "Removed reply", is_deleted=True)

    body = client.get("/api/v1/users/me/answers", headers=other_auth_token).json()
    assert {a["id"] for a in body["answers"]} == {test_answer.id, accepted.id}
    assert body["answers"][0]["question_title"] == test_question.title

    only_accepted = client.get("/api/v1/users/me/answers?filter=accepted", headers=other_auth_token).json()
    assert [a["id"] for a in only_accepted["answers"]] == [accepted.id]

    not_accepted = client.get(
        "/api/v1/users/me/answers?filter=not-accepted", headers=other_auth_token
    ).json()
    assert [a["id"] for a in not_accepted["answers"]] == [test_answer.id]

    searched = client.get("/api/v1/users/me/answers?search=second", headers=other_auth_token).json()
    assert [a["id"] for a in searched["answers"]] == [accepted.id]


def test_my_activity(client, other_auth_token, test_question, test_answer) -> None:
    """Activity merges questions, answers and bookmarks, newest first."""
    client.post("/api/v1/bookmarks/", json={"question_id": test_question.id}, headers=other_auth_token)

    response = client.get("/api/v1/users/me/activity", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK

    activity = response.json()["activity"]
    assert [item["type"] for item in activity] == ["bookmark", "answer"]
    assert activity[0]["title"] == f"Bookmarked: {test_question.title}"
    assert activity[1]["title"] == f"Answered: {test_question.title}"
    assert activity[1]["id"] == test_answer.id
    assert activity[1]["question_id"] == test_question.id


def test_activity_is_capped(client, auth_token, make_question, test_user) -> None:
    """Each kind contributes at most five entries."""
    for index in range(7):
        make_question(test_user, f"Question about topic {index}")

    activity = client.get("/api/v1/users/me/activity", headers=auth_token).json()["activity"]
    assert len(activity) == 5
    assert activity[0]["title"] == "Question about topic 6"
    assert activity[0]["views"] == 0
