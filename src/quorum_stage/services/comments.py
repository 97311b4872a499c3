"""Comments on answers."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from quorum_stage.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from quorum_stage.db.time import utcnow
from quorum_stage.models import Comment, User
from quorum_stage.services.content import get_answer_or_404

__all__ = [
    "create_comment",
    "list_comments",
    "edit_comment",
    "delete_comment",
]


def create_comment(
    db: Session,
    author: User,
    answer_id: int,
    *,
    content: str,
    parent_id: int | None = None,
) -> Comment:
    """Add a comment (or a reply) under a live answer."""
    answer = get_answer_or_404(db, answer_id)
    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        if parent is None or parent.is_deleted:
            raise NotFoundError("Parent comment not found")
        if parent.answer_id != answer.id:
            raise InvalidArgumentError("Parent comment belongs to a different answer")

    comment = Comment(
        answer_id=answer.id,
        author_id=author.id,
        parent_id=parent_id,
        content=content.strip(),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def list_comments(db: Session, answer_id: int) -> Sequence[Comment]:
    """Return the live comments of an answer in posting order."""
    get_answer_or_404(db, answer_id)
    return (
        db.query(Comment)
        .filter(Comment.answer_id == answer_id, Comment.is_deleted.is_(False))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def _get_own_comment(db: Session, comment_id: int, user: User) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None or comment.is_deleted:
        raise NotFoundError("Comment not found")
    if comment.author_id != user.id:
        raise ForbiddenError("Only the author can change this comment")
    return comment


def edit_comment(db: Session, comment_id: int, user: User, *, content: str) -> Comment:
    """Replace the text of the caller's own comment."""
    comment = _get_own_comment(db, comment_id, user)
    comment.content = content.strip()
    comment.edited = True
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: int, user: User) -> None:
    """Soft-delete the caller's own comment."""
    comment = _get_own_comment(db, comment_id, user)
    comment.is_deleted = True
    comment.deleted_at = utcnow()
    db.commit()
