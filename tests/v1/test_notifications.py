# mypy: ignore-errors
# tests/v1/test_notifications.py
"""Tests for the notification inbox."""

import pytest
from fastapi import status

from quorum_stage.services.notifications import notify


@pytest.fixture()
def inbox(db_session, test_user, other_user):
    """Three notifications for the primary user and one for someone else."""
    created = [
        notify(db_session, recipient_id=test_user.id, type_="vote", title="Vote", message="v"),
        notify(db_session, recipient_id=test_user.id, type_="answer", title="Answer", message="a"),
        notify(db_session, recipient_id=test_user.id, type_="admin", title="Admin", message="m"),
    ]
    notify(db_session, recipient_id=other_user.id, type_="vote", title="Vote", message="v")
    return created


def test_list_notifications(client, auth_token, inbox) -> None:
    """The inbox lists only the caller's notifications, newest first."""
    response = client.get("/api/v1/notifications/", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK

    body = response.json()
    assert [item["id"] for item in body["notifications"]] == [n.id for n in reversed(inbox)]
    assert body["unread_count"] == 3
    assert body["pagination"]["total"] == 3


def test_filter_by_type(client, auth_token, inbox) -> None:
    """A type filter narrows the inbox."""
    body = client.get("/api/v1/notifications/?filter=answer", headers=auth_token).json()
    assert [item["type"] for item in body["notifications"]] == ["answer"]


def test_mark_read(client, auth_token, inbox) -> None:
    """Marking read updates the unread count and the unread filter."""
    response = client.put(
        "/api/v1/notifications/read",
        json={"notification_ids": [inbox[0].id, inbox[1].id]},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"updated": 2}

    count = client.get("/api/v1/notifications/unread-count", headers=auth_token).json()
    assert count == {"unread_count": 1}

    unread = client.get("/api/v1/notifications/?filter=unread", headers=auth_token).json()
    assert [item["id"] for item in unread["notifications"]] == [inbox[2].id]


def test_cannot_mark_someone_elses_notification(
    client, db_session, other_auth_token, inbox
) -> None:
    """Ids owned by another user are ignored."""
    response = client.put(
        "/api/v1/notifications/read",
        json={"notification_ids": [inbox[0].id]},
        headers=other_auth_token,
    )
    assert response.json() == {"updated": 0}

    db_session.refresh(inbox[0])
    assert inbox[0].is_read is False


def test_mark_read_requires_ids(client, auth_token) -> None:
    """An empty id list is malformed input."""
    response = client.put(
        "/api/v1/notifications/read",
        json={"notification_ids": []},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_banned_user_cannot_mark_read(client, db_session, auth_token, inbox, test_user) -> None:
    """Banned accounts can read their inbox but not change it."""
    test_user.is_banned = True
    test_user.ban_reason = "Spam"
    db_session.commit()

    response = client.put(
        "/api/v1/notifications/read",
        json={"notification_ids": [inbox[0].id]},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    listing = client.get("/api/v1/notifications/", headers=auth_token)
    assert listing.status_code == status.HTTP_200_OK
    assert listing.json()["unread_count"] == 3
