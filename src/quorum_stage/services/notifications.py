"""Notification fan-out and inbox queries.

Sending a notification is best effort: a failure is logged and rolled back
but never propagates to the action that triggered it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quorum_stage.core.errors import InvalidArgumentError
from quorum_stage.models import Notification
from quorum_stage.models.notification import NOTIFICATION_TYPES

logger = logging.getLogger(__name__)

__all__ = [
    "notify",
    "list_notifications",
    "mark_read",
    "unread_count",
]


def notify(
    db: Session,
    *,
    recipient_id: int,
    type_: str,
    title: str,
    message: str,
    sender_id: int | None = None,
    question_id: int | None = None,
    answer_id: int | None = None,
) -> Notification | None:
    """Persist a notification in its own transaction.

    Call this after the triggering action has committed. Returns ``None``
    when the notification could not be stored.
    """
    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type_,
        title=title,
        message=message,
        related_question_id=question_id,
        related_answer_id=answer_id,
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to deliver %s notification to user %s", type_, recipient_id)
        return None
    return notification


def _inbox_query(db: Session, user_id: int, filter_: str):
    query = db.query(Notification).filter(Notification.recipient_id == user_id)
    if filter_ == "all":
        return query
    if filter_ == "unread":
        return query.filter(Notification.is_read.is_(False))
    if filter_ in NOTIFICATION_TYPES:
        return query.filter(Notification.type == filter_)
    raise InvalidArgumentError(f"Unknown notification filter '{filter_}'")


def list_notifications(
    db: Session,
    user_id: int,
    *,
    filter_: str = "all",
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[Notification], int]:
    """Return one page of a user's notifications, newest first, and the total."""
    query = _inbox_query(db, user_id, filter_)
    total = query.count()
    items = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def mark_read(db: Session, user_id: int, notification_ids: Sequence[int]) -> int:
    """Mark the given notifications as read; ids owned by others are ignored."""
    if not notification_ids:
        return 0
    result = db.execute(
        update(Notification)
        .where(
            Notification.recipient_id == user_id,
            Notification.id.in_(list(notification_ids)),
        )
        .values(is_read=True)
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    return result.rowcount or 0


def unread_count(db: Session, user_id: int) -> int:
    """Count unread notifications for a user."""
    return db.query(func.count(Notification.id)).filter(
        Notification.recipient_id == user_id,
        Notification.is_read.is_(False),
    ).scalar() or 0
