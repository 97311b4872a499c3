# mypy: ignore-errors
# tests/v1/test_leaderboard.py
"""Tests for the leaderboard endpoint."""

from datetime import timedelta

from fastapi import status

from quorum_stage.db.time import utcnow
from quorum_stage.models import ReputationEvent


def _entries(client, query=""):
    response = client.get(f"/api/v1/leaderboard/{query}")
    assert response.status_code == status.HTTP_200_OK
    return response.json()["entries"]


def test_all_time_ranks_by_reputation(client, make_user) -> None:
    """All-time ranking is by total reputation with medals for the top three."""
    low = make_user("Low", reputation=10)
    high = make_user("High", reputation=900)
    mid = make_user("Mid", reputation=300)
    tail = make_user("Tail", reputation=1)

    entries = _entries(client)
    assert [entry["user_id"] for entry in entries] == [high.id, mid.id, low.id, tail.id]
    assert [entry["rank"] for entry in entries] == [1, 2, 3, 4]
    assert [entry["badge"] for entry in entries] == ["Gold", "Silver", "Bronze", "Newcomer"]
    assert entries[0]["score"] == 900


def test_admins_are_excluded(client, db_session, make_user, admin_user) -> None:
    """Admin accounts never appear on the leaderboard."""
    admin_user.reputation = 10_000
    db_session.commit()
    user = make_user("Regular", reputation=1)

    entries = _entries(client)
    assert [entry["user_id"] for entry in entries] == [user.id]


def test_ties_break_on_user_id(client, make_user) -> None:
    """Equal scores keep the older account first."""
    first = make_user("First", reputation=50)
    second = make_user("Second", reputation=50)

    entries = _entries(client)
    assert [entry["user_id"] for entry in entries] == [first.id, second.id]


def test_limit_applies_after_sorting(client, make_user) -> None:
    """The limit keeps the best users, not the first rows."""
    for reputation in (1, 2, 3):
        make_user(f"Filler {reputation}", reputation=reputation)
    best = make_user("Best", reputation=99)

    entries = _entries(client, "?limit=1")
    assert [entry["user_id"] for entry in entries] == [best.id]


def test_week_range_uses_recent_events(client, db_session, make_user) -> None:
    """Windowed ranges sum only reputation earned inside the window."""
    veteran = make_user("Veteran", reputation=5000)
    rising = make_user("Rising", reputation=40)
    db_session.add_all(
        [
            ReputationEvent(
                user_id=veteran.id,
                change=5000,
                reason="Old glory",
                created_at=utcnow() - timedelta(days=60),
            ),
            ReputationEvent(user_id=rising.id, change=40, reason="Answer upvoted"),
        ]
    )
    db_session.commit()

    week = _entries(client, "?range=week")
    assert [entry["user_id"] for entry in week] == [rising.id, veteran.id]
    assert week[0]["score"] == 40
    assert week[1]["score"] == 0

    overall = _entries(client, "?range=all")
    assert overall[0]["user_id"] == veteran.id


def test_counts_and_badges(client, make_user, make_question, make_answer) -> None:
    """Entries carry authored-content counts; deleted content is not counted."""
    gold = make_user("Gold", reputation=5)
    make_user("Silver", reputation=4)
    make_user("Bronze", reputation=3)
    fourth = make_user("Fourth", reputation=2)
    question = make_question(gold)
    make_question(gold, "A deleted question", is_deleted=True)
    make_answer(question, fourth)

    entries = {entry["user_id"]: entry for entry in _entries(client)}
    assert entries[gold.id]["questions"] == 1
    assert entries[fourth.id]["answers"] == 1
    assert entries[fourth.id]["badge"] == "Newcomer"


def test_invalid_range(client) -> None:
    """Unknown ranges are rejected."""
    response = client.get("/api/v1/leaderboard/?range=decade")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_limit_bounds(client) -> None:
    """The limit must stay between 1 and the configured maximum."""
    assert client.get("/api/v1/leaderboard/?limit=0").status_code == status.HTTP_400_BAD_REQUEST
    assert client.get("/api/v1/leaderboard/?limit=101").status_code == status.HTTP_400_BAD_REQUEST
