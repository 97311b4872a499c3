"""CRUD-style helpers for accounts, plus ban and unban."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorum_stage.core import security
from quorum_stage.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from quorum_stage.db.time import naive_utc, utcnow
from quorum_stage.models import Answer, Bookmark, Question, User
from quorum_stage.models.user import ROLE_ADMIN, ROLE_USER
from quorum_stage.services.notifications import notify

logger = logging.getLogger(__name__)

__all__ = [
    "get_user",
    "get_user_or_404",
    "create_user",
    "authenticate",
    "list_users",
    "apply_ban",
    "ban_user",
    "unban_user",
    "user_stats",
    "update_profile",
    "recent_activity",
]

USER_FILTERS = ("all", "banned", "active", "admin", "user")
USER_SORTS = ("newest", "oldest", "name", "email", "reputation")


def get_user(db: Session, user_id: int) -> User | None:
    """Return a single user by primary key."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_or_404(db: Session, user_id: int) -> User:
    """Return a user or raise ``NotFoundError``."""
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> User:
    """Persist a new account with a hashed password."""
    normalized_email = email.strip().lower()
    if db.query(User).filter(User.email == normalized_email).first() is not None:
        raise ConflictError("An account with this email already exists")

    db_user = User(
        name=name.strip(),
        email=normalized_email,
        password_hash=security.hash_password(password),
        role=role,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("An account with this email already exists") from err
    db.refresh(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the account matching the credentials."""
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None or not user.password_hash:
        raise UnauthorizedError("Incorrect email or password")
    if not security.verify_password(password, user.password_hash):
        raise UnauthorizedError("Incorrect email or password")
    return user


def list_users(
    db: Session,
    *,
    search: str | None = None,
    filter_: str = "all",
    sort: str = "newest",
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[User], int]:
    """Return one page of accounts for the admin back-office and the total."""
    if filter_ not in USER_FILTERS:
        raise InvalidArgumentError(f"Unknown user filter '{filter_}'")
    if sort not in USER_SORTS:
        raise InvalidArgumentError(f"Unknown user sort '{sort}'")

    query = db.query(User)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    if filter_ == "banned":
        query = query.filter(User.is_banned.is_(True))
    elif filter_ == "active":
        query = query.filter(User.is_banned.is_(False))
    elif filter_ == "admin":
        query = query.filter(User.role == ROLE_ADMIN)
    elif filter_ == "user":
        query = query.filter(User.role != ROLE_ADMIN)

    ordering = {
        "newest": (User.created_at.desc(), User.id.desc()),
        "oldest": (User.created_at.asc(), User.id.asc()),
        "name": (User.name.asc(), User.id.asc()),
        "email": (User.email.asc(),),
        "reputation": (User.reputation.desc(), User.id.asc()),
    }[sort]

    total = query.count()
    users = query.order_by(*ordering).offset((page - 1) * limit).limit(limit).all()
    return users, total


def apply_ban(db: Session, *, target: User, admin: User, reason: str) -> None:
    """Write the ban fields on ``target`` without committing.

    Raises:
        InvalidArgumentError: For an empty reason, a self-ban or an admin target.
    """
    if not reason or not reason.strip():
        raise InvalidArgumentError("Ban reason is required")
    if target.id == admin.id:
        raise InvalidArgumentError("You cannot ban yourself")
    if target.is_admin:
        raise InvalidArgumentError("Admins cannot be banned")

    target.is_banned = True
    target.ban_reason = reason.strip()
    target.banned_at = utcnow()
    target.banned_by_id = admin.id


def _require_admin(admin: User) -> None:
    if not admin.is_admin:
        raise ForbiddenError("Admin access required")


def ban_user(db: Session, admin: User, target_id: int, reason: str) -> User:
    """Ban a user on behalf of an admin."""
    _require_admin(admin)
    target = get_user_or_404(db, target_id)
    apply_ban(db, target=target, admin=admin, reason=reason)
    db.commit()
    db.refresh(target)
    logger.info("Admin %s banned user %s: %s", admin.id, target.id, target.ban_reason)

    notify(
        db,
        recipient_id=target.id,
        sender_id=admin.id,
        type_="admin",
        title="Account banned",
        message=f"Your account has been banned: {target.ban_reason}",
    )
    return target


def unban_user(db: Session, admin: User, target_id: int) -> User:
    """Clear all ban fields on a user."""
    _require_admin(admin)
    target = get_user_or_404(db, target_id)
    target.is_banned = False
    target.ban_reason = None
    target.banned_at = None
    target.banned_by_id = None
    db.commit()
    db.refresh(target)
    logger.info("Admin %s unbanned user %s", admin.id, target.id)

    notify(
        db,
        recipient_id=target.id,
        sender_id=admin.id,
        type_="admin",
        title="Account restored",
        message="Your account ban has been lifted",
    )
    return target


@dataclass(frozen=True)
class UserStats:
    """Activity summary for a single user."""

    questions: int
    answers: int
    accepted_answers: int
    votes_received: int
    views: int
    bookmarks: int
    reputation: int


def user_stats(db: Session, user: User) -> UserStats:
    """Aggregate a user's live (non-deleted) activity."""
    question_row = db.query(
        func.count(Question.id),
        func.coalesce(func.sum(Question.upvotes - Question.downvotes), 0),
        func.coalesce(func.sum(Question.views), 0),
    ).filter(Question.author_id == user.id, Question.is_deleted.is_(False)).one()
    answer_row = db.query(
        func.count(Answer.id),
        func.coalesce(func.sum(Answer.upvotes - Answer.downvotes), 0),
    ).filter(Answer.author_id == user.id, Answer.is_deleted.is_(False)).one()
    accepted = db.query(func.count(Answer.id)).filter(
        Answer.author_id == user.id,
        Answer.is_deleted.is_(False),
        Answer.is_accepted.is_(True),
    ).scalar() or 0
    bookmarks = db.query(func.count(Bookmark.id)).filter(Bookmark.user_id == user.id).scalar() or 0

    return UserStats(
        questions=question_row[0],
        answers=answer_row[0],
        accepted_answers=accepted,
        votes_received=int(question_row[1]) + int(answer_row[1]),
        views=int(question_row[2]),
        bookmarks=bookmarks,
        reputation=user.reputation,
    )


def update_profile(db: Session, user: User, *, name: str, email: str) -> User:
    """Change the caller's display name and email.

    Raises:
        InvalidArgumentError: If either value is blank.
        ConflictError: If another account already uses the email.
    """
    name = name.strip()
    normalized_email = email.strip().lower()
    if not name or not normalized_email:
        raise InvalidArgumentError("Name and email are required")

    taken = db.query(User.id).filter(
        User.email == normalized_email,
        User.id != user.id,
    ).first()
    if taken is not None:
        raise ConflictError("Email is already taken")

    user.name = name
    user.email = normalized_email
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Email is already taken") from err
    db.refresh(user)
    logger.info("User %s updated their profile", user.id)
    return user


ACTIVITY_PER_KIND = 5
ACTIVITY_LIMIT = 10


@dataclass(frozen=True)
class ActivityItem:
    """One entry of a user's recent activity feed."""

    type: str
    id: int
    question_id: int
    title: str
    created_at: datetime
    content: str | None = None
    votes: int | None = None
    views: int | None = None


def recent_activity(db: Session, user_id: int) -> list[ActivityItem]:
    """Merge the user's latest questions, answers and bookmarks, newest first."""
    questions = (
        db.query(Question)
        .filter(Question.author_id == user_id, Question.is_deleted.is_(False))
        .order_by(Question.created_at.desc(), Question.id.desc())
        .limit(ACTIVITY_PER_KIND)
        .all()
    )
    answers = (
        db.query(Answer, Question.title)
        .join(Question, Question.id == Answer.question_id)
        .filter(Answer.author_id == user_id, Answer.is_deleted.is_(False))
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .limit(ACTIVITY_PER_KIND)
        .all()
    )
    bookmarks = (
        db.query(Bookmark, Question.title)
        .join(Question, Question.id == Bookmark.question_id)
        .filter(Bookmark.user_id == user_id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .limit(ACTIVITY_PER_KIND)
        .all()
    )

    items = [
        ActivityItem(
            type="question",
            id=question.id,
            question_id=question.id,
            title=question.title,
            created_at=question.created_at,
            content=question.content,
            votes=question.upvotes + question.downvotes,
            views=question.views,
        )
        for question in questions
    ]
    items += [
        ActivityItem(
            type="answer",
            id=answer.id,
            question_id=answer.question_id,
            title=f"Answered: {title}",
            created_at=answer.created_at,
            content=answer.content,
            votes=answer.upvotes + answer.downvotes,
        )
        for answer, title in answers
    ]
    items += [
        ActivityItem(
            type="bookmark",
            id=bookmark.id,
            question_id=bookmark.question_id,
            title=f"Bookmarked: {title}",
            created_at=bookmark.created_at,
        )
        for bookmark, title in bookmarks
    ]
    items.sort(key=lambda item: naive_utc(item.created_at), reverse=True)
    return items[:ACTIVITY_LIMIT]
