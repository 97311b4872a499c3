# src/quorum_stage/services/moderation.py
"""Flag intake and admin moderation for Quorum."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import and_, exists, or_
from sqlalchemy.orm import Session

from quorum_stage.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    QuorumError,
)
from quorum_stage.db.time import utcnow
from quorum_stage.models import Answer, ContentRef, Flag, Question, User
from quorum_stage.models.content import ContentType, content_ref, resolve_content
from quorum_stage.models.flag import (
    ACTIVE_FLAG_STATUSES,
    FLAG_REASONS,
    FLAG_STATUSES,
    MODERATION_ACTIONS,
)
from quorum_stage.services.notifications import notify
from quorum_stage.services.users import apply_ban

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModerationResult:
    """Outcome of the side effect attached to a moderation decision."""

    action: str
    message: str
    content_type: str
    content_id: int
    banned_user_id: int | None = None


@dataclass(frozen=True)
class FlagView:
    """A flag paired with the live content it points at."""

    flag: Flag
    content: Question | Answer


def _require_admin(user: User) -> None:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")


def _live_content_clause():
    # Flags whose target vanished or was soft-deleted are stale.
    question_alive = exists().where(
        Question.id == Flag.content_id,
        Question.is_deleted.is_(False),
    )
    answer_alive = exists().where(
        Answer.id == Flag.content_id,
        Answer.is_deleted.is_(False),
    )
    return or_(
        and_(Flag.content_type == ContentType.QUESTION.value, question_alive),
        and_(Flag.content_type == ContentType.ANSWER.value, answer_alive),
    )


class ModerationService:
    """Service handling flag intake and the flag status state machine."""

    @staticmethod
    def create_flag(db: Session, ref: ContentRef, reporter: User, reason: str) -> Flag:
        """File a report against a question or answer.

        Args:
            db: Database session
            ref: Content being reported
            reporter: User filing the report
            reason: One of ``FLAG_REASONS``

        Raises:
            InvalidArgumentError: If the reason is not recognised.
            NotFoundError: If the content is missing or soft-deleted.
            ConflictError: If the reporter already has a pending or resolved flag on it.
        """
        if reason not in FLAG_REASONS:
            raise InvalidArgumentError("Invalid flag reason")

        if resolve_content(db, ref) is None:
            raise NotFoundError(f"{ref.content_type.value.capitalize()} not found")

        duplicate = db.query(Flag).filter(
            Flag.content_type == ref.content_type.value,
            Flag.content_id == ref.id,
            Flag.reporter_id == reporter.id,
            Flag.status.in_(ACTIVE_FLAG_STATUSES),
        ).first()
        if duplicate is not None:
            raise ConflictError("You have already flagged this content")

        flag = Flag(
            content_type=ref.content_type.value,
            content_id=ref.id,
            reason=reason,
            reporter_id=reporter.id,
        )
        db.add(flag)
        db.commit()
        db.refresh(flag)
        logger.info(
            "User %s flagged %s %s as %s",
            reporter.id,
            ref.content_type.value,
            ref.id,
            reason,
        )
        return flag

    @staticmethod
    def list_flags(
        db: Session,
        admin: User,
        *,
        status: str = "pending",
        content_type: str = "all",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[FlagView], int]:
        """Return one page of flags with their content, newest first, and the total.

        Flags pointing at missing or soft-deleted content are left out.
        """
        _require_admin(admin)
        if status != "all" and status not in FLAG_STATUSES:
            raise InvalidArgumentError(f"Unknown flag status '{status}'")
        if content_type != "all" and content_type not in {kind.value for kind in ContentType}:
            raise InvalidArgumentError(f"Unknown content type '{content_type}'")

        query = db.query(Flag).filter(_live_content_clause())
        if status != "all":
            query = query.filter(Flag.status == status)
        if content_type != "all":
            query = query.filter(Flag.content_type == content_type)

        total = query.count()
        flags: Sequence[Flag] = (
            query.order_by(Flag.created_at.desc(), Flag.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        views: list[FlagView] = []
        for flag in flags:
            content = resolve_content(db, content_ref(flag.content_type, flag.content_id))
            if content is not None:
                views.append(FlagView(flag=flag, content=content))
        return views, total

    @staticmethod
    def moderate_flag(
        db: Session,
        flag_id: int,
        *,
        action: str,
        status: str,
        admin: User,
    ) -> tuple[Flag, ModerationResult]:
        """Record an admin decision on a flag and apply its side effect.

        The status write and the side effect are committed together; if the
        side effect fails nothing is persisted.
        """
        _require_admin(admin)
        if action not in MODERATION_ACTIONS:
            raise InvalidArgumentError("Invalid moderation action")
        if status not in FLAG_STATUSES:
            raise InvalidArgumentError("Invalid flag status")

        flag = db.get(Flag, flag_id)
        if flag is None:
            raise NotFoundError("Flag not found")

        ref = content_ref(flag.content_type, flag.content_id)
        try:
            flag.status = status
            flag.moderated_by_id = admin.id
            flag.moderated_at = utcnow()
            result = ModerationService._apply_action(db, flag, ref, action, admin)
            db.commit()
        except QuorumError:
            db.rollback()
            raise

        db.refresh(flag)
        logger.info(
            "Admin %s moderated flag %s: action=%s status=%s",
            admin.id,
            flag.id,
            action,
            status,
        )

        notify(
            db,
            recipient_id=flag.reporter_id,
            sender_id=admin.id,
            type_="flag",
            title="Report reviewed",
            message=f"Your report was marked as {status}",
            question_id=ref.id if ref.content_type is ContentType.QUESTION else None,
            answer_id=ref.id if ref.content_type is ContentType.ANSWER else None,
        )
        if result.banned_user_id is not None:
            notify(
                db,
                recipient_id=result.banned_user_id,
                sender_id=admin.id,
                type_="admin",
                title="Account banned",
                message=f"Your account has been banned: Content flagged as {flag.reason}",
            )
        return flag, result

    @staticmethod
    def _apply_action(
        db: Session,
        flag: Flag,
        ref: ContentRef,
        action: str,
        admin: User,
    ) -> ModerationResult:
        if action in ("dismiss", "resolve"):
            return ModerationResult(
                action=action,
                message=f"Flag {'dismissed' if action == 'dismiss' else 'resolved'}",
                content_type=ref.content_type.value,
                content_id=ref.id,
            )

        content = resolve_content(db, ref, include_deleted=True)
        if content is None:
            raise NotFoundError("Flagged content not found")

        if action == "soft-delete":
            content.is_deleted = True
            content.deleted_at = utcnow()
            return ModerationResult(
                action=action,
                message="Content has been deleted",
                content_type=ref.content_type.value,
                content_id=ref.id,
            )

        author = db.get(User, content.author_id)
        if author is None:
            raise NotFoundError("Content author not found")
        apply_ban(db, target=author, admin=admin, reason=f"Content flagged as {flag.reason}")
        return ModerationResult(
            action=action,
            message="User has been banned",
            content_type=ref.content_type.value,
            content_id=ref.id,
            banned_user_id=author.id,
        )

    @staticmethod
    def delete_flag(db: Session, flag_id: int, admin: User) -> None:
        """Permanently remove a flag."""
        _require_admin(admin)
        flag = db.get(Flag, flag_id)
        if flag is None:
            raise NotFoundError("Flag not found")
        db.delete(flag)
        db.commit()
        logger.info("Admin %s deleted flag %s", admin.id, flag_id)
