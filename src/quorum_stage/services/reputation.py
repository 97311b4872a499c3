"""Reputation ledger: the single write path for reputation changes."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import update
from sqlalchemy.orm import Session

from quorum_stage.models import ReputationEvent, User

logger = logging.getLogger(__name__)

__all__ = [
    "apply_reputation_delta",
    "reputation_history",
]


def apply_reputation_delta(
    db: Session,
    user_id: int,
    delta: int,
    reason: str,
    *,
    question_id: int | None = None,
    answer_id: int | None = None,
) -> ReputationEvent | None:
    """Adjust a user's reputation and append the matching history entry.

    The counter is incremented in SQL and the event is added to the same
    session; the caller owns the transaction and commits both together.
    A zero delta is a no-op.
    """
    if delta == 0:
        return None

    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(reputation=User.reputation + delta)
    )
    event = ReputationEvent(
        user_id=user_id,
        change=delta,
        reason=reason,
        related_question_id=question_id,
        related_answer_id=answer_id,
    )
    db.add(event)
    logger.debug("Reputation %+d for user %s (%s)", delta, user_id, reason)
    return event


def reputation_history(
    db: Session,
    user_id: int,
    *,
    limit: int | None = None,
) -> Sequence[ReputationEvent]:
    """Return a user's reputation events, newest first."""
    query = (
        db.query(ReputationEvent)
        .filter(ReputationEvent.user_id == user_id)
        .order_by(ReputationEvent.created_at.desc(), ReputationEvent.id.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()
