"""Aggregate counts for the admin dashboard."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quorum_stage.db.time import days_ago
from quorum_stage.models import Answer, Bookmark, Comment, Flag, Question, User
from quorum_stage.models.flag import FLAG_STATUS_PENDING
from quorum_stage.models.user import ROLE_ADMIN


def _count(db: Session, column, *criteria) -> int:
    return db.query(func.count(column)).filter(*criteria).scalar() or 0


def dashboard_stats(db: Session) -> dict[str, int]:
    """Return headline totals for the admin dashboard."""
    return {
        "total_users": _count(db, User.id),
        "banned_users": _count(db, User.id, User.is_banned.is_(True)),
        "admins": _count(db, User.id, User.role == ROLE_ADMIN),
        "total_questions": _count(db, Question.id, Question.is_deleted.is_(False)),
        "total_answers": _count(db, Answer.id, Answer.is_deleted.is_(False)),
        "deleted_questions": _count(db, Question.id, Question.is_deleted.is_(True)),
        "deleted_answers": _count(db, Answer.id, Answer.is_deleted.is_(True)),
        "pending_flags": _count(db, Flag.id, Flag.status == FLAG_STATUS_PENDING),
        "total_flags": _count(db, Flag.id),
    }


def _activity_since(db: Session, since: datetime) -> dict[str, int]:
    return {
        "new_users": _count(db, User.id, User.created_at >= since),
        "new_questions": _count(db, Question.id, Question.created_at >= since),
        "new_answers": _count(db, Answer.id, Answer.created_at >= since),
        "new_comments": _count(db, Comment.id, Comment.created_at >= since),
        "new_bookmarks": _count(db, Bookmark.id, Bookmark.created_at >= since),
        "new_flags": _count(db, Flag.id, Flag.created_at >= since),
    }


def analytics(db: Session, period_days: int = 30) -> dict[str, object]:
    """Return totals plus activity inside the last ``period_days`` days."""
    since = days_ago(period_days)
    unanswered = db.query(func.count(Question.id)).filter(
        Question.is_deleted.is_(False),
        ~Question.id.in_(
            select(Answer.question_id).where(Answer.is_deleted.is_(False))
        ),
    ).scalar() or 0
    return {
        "period_days": period_days,
        "since": since,
        "totals": dashboard_stats(db),
        "activity": _activity_since(db, since),
        "unanswered_questions": unanswered,
    }
