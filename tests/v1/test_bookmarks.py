# mypy: ignore-errors
# tests/v1/test_bookmarks.py
"""Tests for bookmark endpoints."""

from fastapi import status

from quorum_stage.models import Notification


def test_bookmark_question(client, db_session, other_auth_token, test_question, test_user) -> None:
    """Bookmarking returns the saved question and tells its author."""
    response = client.post(
        "/api/v1/bookmarks/",
        json={"question_id": test_question.id},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["question"]["title"] == test_question.title

    notice = db_session.query(Notification).filter_by(recipient_id=test_user.id).one()
    assert notice.type == "bookmark"


def test_bookmark_twice_conflicts(client, auth_token, test_question) -> None:
    """A question can be bookmarked only once per user."""
    payload = {"question_id": test_question.id}
    assert client.post("/api/v1/bookmarks/", json=payload, headers=auth_token).status_code == 201
    response = client.post("/api/v1/bookmarks/", json=payload, headers=auth_token)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_own_bookmark_sends_no_notification(client, db_session, auth_token, test_question) -> None:
    """Authors bookmarking their own question are not notified."""
    client.post("/api/v1/bookmarks/", json={"question_id": test_question.id}, headers=auth_token)
    assert db_session.query(Notification).count() == 0


def test_bookmark_missing_question(client, auth_token) -> None:
    """Only existing questions can be bookmarked."""
    response = client.post("/api/v1/bookmarks/", json={"question_id": 5150}, headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_and_check_bookmarks(client, db_session, auth_token, make_question, test_user, test_question) -> None:
    """The list hides deleted questions and the check endpoint reflects state."""
    gone = make_question(test_user, "Soon to be deleted")
    for question in (test_question, gone):
        client.post("/api/v1/bookmarks/", json={"question_id": question.id}, headers=auth_token)
    gone.is_deleted = True
    db_session.commit()

    body = client.get("/api/v1/bookmarks/", headers=auth_token).json()
    assert [item["question_id"] for item in body["bookmarks"]] == [test_question.id]
    assert body["pagination"]["total"] == 1

    check = client.get(f"/api/v1/bookmarks/{test_question.id}", headers=auth_token).json()
    assert check == {"question_id": test_question.id, "bookmarked": True}


def test_remove_bookmark(client, auth_token, test_question) -> None:
    """Removing a bookmark works once, then reports 404."""
    client.post("/api/v1/bookmarks/", json={"question_id": test_question.id}, headers=auth_token)

    removed = client.delete(f"/api/v1/bookmarks/{test_question.id}", headers=auth_token)
    assert removed.status_code == status.HTTP_200_OK
    check = client.get(f"/api/v1/bookmarks/{test_question.id}", headers=auth_token).json()
    assert check["bookmarked"] is False

    again = client.delete(f"/api/v1/bookmarks/{test_question.id}", headers=auth_token)
    assert again.status_code == status.HTTP_404_NOT_FOUND


def test_banned_user_cannot_remove_bookmark(client, db_session, auth_token, test_question, test_user) -> None:
    """Removing a bookmark is a write, so banned accounts are refused."""
    client.post("/api/v1/bookmarks/", json={"question_id": test_question.id}, headers=auth_token)
    test_user.is_banned = True
    test_user.ban_reason = "Spam"
    db_session.commit()

    response = client.delete(f"/api/v1/bookmarks/{test_question.id}", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    check = client.get(f"/api/v1/bookmarks/{test_question.id}", headers=auth_token).json()
    assert check["bookmarked"] is True
