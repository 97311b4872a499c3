"""Question follow helpers: follow, unfollow, check and list."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorum_stage.models import Question, QuestionFollow, User
from quorum_stage.services.content import get_question_or_404

logger = logging.getLogger(__name__)

__all__ = [
    "follow_question",
    "unfollow_question",
    "is_following",
    "list_followed",
]


def follow_question(db: Session, user: User, question_id: int) -> None:
    """Follow a live question; following it again changes nothing."""
    question = get_question_or_404(db, question_id)
    if is_following(db, user.id, question.id):
        return

    db.add(QuestionFollow(user_id=user.id, question_id=question.id))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request created the same follow.
        db.rollback()
        return
    logger.info("User %s followed question %s", user.id, question.id)


def unfollow_question(db: Session, user: User, question_id: int) -> None:
    """Stop following a question; unknown pairs are ignored."""
    deleted = db.query(QuestionFollow).filter(
        QuestionFollow.user_id == user.id,
        QuestionFollow.question_id == question_id,
    ).delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info("User %s unfollowed question %s", user.id, question_id)


def is_following(db: Session, user_id: int, question_id: int) -> bool:
    """Return True when the user follows the question."""
    return db.query(QuestionFollow.id).filter(
        QuestionFollow.user_id == user_id,
        QuestionFollow.question_id == question_id,
    ).first() is not None


def list_followed(db: Session, user_id: int) -> Sequence[Question]:
    """Return the live questions the user follows, most recently followed first."""
    return (
        db.query(Question)
        .join(QuestionFollow, QuestionFollow.question_id == Question.id)
        .filter(QuestionFollow.user_id == user_id, Question.is_deleted.is_(False))
        .order_by(QuestionFollow.created_at.desc(), QuestionFollow.id.desc())
        .all()
    )
