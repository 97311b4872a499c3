"""Leaderboard ranking over the reputation ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quorum_stage.core.errors import InvalidArgumentError
from quorum_stage.core.settings import settings
from quorum_stage.db.time import days_ago
from quorum_stage.models import Answer, Question, ReputationEvent, User
from quorum_stage.models.user import ROLE_ADMIN

logger = logging.getLogger(__name__)

LEADERBOARD_RANGES = ("all", "week", "month")

RANK_BADGES = {1: "Gold", 2: "Silver", 3: "Bronze"}
EXPERT_REPUTATION = 1000
CONTRIBUTOR_REPUTATION = 500
HELPER_ANSWERS = 50


@dataclass(frozen=True)
class LeaderboardEntry:
    """One ranked row of the leaderboard."""

    rank: int
    user_id: int
    name: str
    image: str | None
    score: int
    reputation: int
    answers: int
    questions: int
    badge: str


def badge_for(rank: int, reputation: int, answers: int) -> str:
    """Return the display badge for a ranked user.

    The top three ranks always get a medal; below that the badge is
    decided by reputation, then by answer volume.
    """
    if rank in RANK_BADGES:
        return RANK_BADGES[rank]
    if reputation >= EXPERT_REPUTATION:
        return "Expert"
    if reputation >= CONTRIBUTOR_REPUTATION:
        return "Contributor"
    if answers >= HELPER_ANSWERS:
        return "Helper"
    return "Newcomer"


def window_start(range_: str) -> datetime | None:
    """Return the cutoff instant for a range, or ``None`` for all time."""
    if range_ == "week":
        return days_ago(settings.leaderboard_week_days)
    if range_ == "month":
        return days_ago(settings.leaderboard_month_days)
    return None


def _authored_counts(
    db: Session,
    model: type[Question] | type[Answer],
    user_ids: list[int],
    cutoff: datetime | None,
) -> dict[int, int]:
    if not user_ids:
        return {}
    query = db.query(model.author_id, func.count(model.id)).filter(
        model.author_id.in_(user_ids),
        model.is_deleted.is_(False),
    )
    if cutoff is not None:
        query = query.filter(model.created_at >= cutoff)
    return dict(query.group_by(model.author_id).all())


def rank(db: Session, range_: str = "all", limit: int = 10) -> list[LeaderboardEntry]:
    """Rank non-admin users by reputation earned in the given range.

    ``all`` ranks by total reputation. ``week`` and ``month`` rank by the sum
    of reputation events inside the window, so users with no recent events
    score 0. Ties are broken by user id ascending. The full population is
    sorted in the database before ``limit`` is applied.
    """
    if range_ not in LEADERBOARD_RANGES:
        raise InvalidArgumentError(f"Unknown leaderboard range '{range_}'")
    if limit < 1 or limit > settings.leaderboard_max_limit:
        raise InvalidArgumentError(
            f"limit must be between 1 and {settings.leaderboard_max_limit}"
        )

    cutoff = window_start(range_)
    if cutoff is None:
        score = User.reputation
        query = db.query(User, score)
    else:
        windowed = (
            select(
                ReputationEvent.user_id.label("user_id"),
                func.sum(ReputationEvent.change).label("score"),
            )
            .where(ReputationEvent.created_at >= cutoff)
            .group_by(ReputationEvent.user_id)
            .subquery()
        )
        score = func.coalesce(windowed.c.score, 0)
        query = db.query(User, score).outerjoin(windowed, windowed.c.user_id == User.id)

    rows = (
        query.filter(User.role != ROLE_ADMIN)
        .order_by(score.desc(), User.id.asc())
        .limit(limit)
        .all()
    )

    user_ids = [user.id for user, _ in rows]
    answers = _authored_counts(db, Answer, user_ids, cutoff)
    questions = _authored_counts(db, Question, user_ids, cutoff)

    entries = []
    for position, (user, user_score) in enumerate(rows, start=1):
        answer_count = answers.get(user.id, 0)
        entries.append(
            LeaderboardEntry(
                rank=position,
                user_id=user.id,
                name=user.name,
                image=user.image,
                score=int(user_score or 0),
                reputation=user.reputation,
                answers=answer_count,
                questions=questions.get(user.id, 0),
                badge=badge_for(position, user.reputation, answer_count),
            )
        )
    logger.debug("Ranked %d users for range %s", len(entries), range_)
    return entries
