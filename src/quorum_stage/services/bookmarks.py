"""Bookmark helpers: save, unsave and list questions."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorum_stage.core.errors import ConflictError, NotFoundError
from quorum_stage.models import Bookmark, Question, User
from quorum_stage.services.content import get_question_or_404
from quorum_stage.services.notifications import notify

logger = logging.getLogger(__name__)

__all__ = [
    "add_bookmark",
    "remove_bookmark",
    "list_bookmarks",
    "is_bookmarked",
]


def add_bookmark(db: Session, user: User, question_id: int) -> Bookmark:
    """Bookmark a live question for ``user``."""
    question = get_question_or_404(db, question_id)
    if is_bookmarked(db, user.id, question.id):
        raise ConflictError("Question already bookmarked")

    bookmark = Bookmark(user_id=user.id, question_id=question.id)
    db.add(bookmark)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Question already bookmarked") from err
    db.refresh(bookmark)

    if question.author_id != user.id:
        notify(
            db,
            recipient_id=question.author_id,
            sender_id=user.id,
            type_="bookmark",
            title="Question bookmarked",
            message=f"{user.name} bookmarked your question \"{question.title}\"",
            question_id=question.id,
        )
    return bookmark


def remove_bookmark(db: Session, user: User, question_id: int) -> None:
    """Delete ``user``'s bookmark on a question."""
    bookmark = db.query(Bookmark).filter(
        Bookmark.user_id == user.id,
        Bookmark.question_id == question_id,
    ).first()
    if bookmark is None:
        raise NotFoundError("Bookmark not found")
    db.delete(bookmark)
    db.commit()


def list_bookmarks(
    db: Session,
    user_id: int,
    *,
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[tuple[Bookmark, Question]], int]:
    """Return one page of bookmarked live questions, newest bookmark first."""
    query = (
        db.query(Bookmark, Question)
        .join(Question, Question.id == Bookmark.question_id)
        .filter(Bookmark.user_id == user_id, Question.is_deleted.is_(False))
    )
    total = query.count()
    rows = (
        query.order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def is_bookmarked(db: Session, user_id: int, question_id: int) -> bool:
    """Return True when the user has bookmarked the question."""
    return db.query(Bookmark.id).filter(
        Bookmark.user_id == user_id,
        Bookmark.question_id == question_id,
    ).first() is not None
