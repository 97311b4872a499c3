# src/quorum_stage/models/flag.py
"""Models tracking user reports against questions and answers."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from quorum_stage.db.session import Base
from quorum_stage.db.time import utcnow

FLAG_STATUS_PENDING = "pending"
FLAG_STATUS_RESOLVED = "resolved"
FLAG_STATUS_DISMISSED = "dismissed"
FLAG_STATUSES = (FLAG_STATUS_PENDING, FLAG_STATUS_RESOLVED, FLAG_STATUS_DISMISSED)

# Statuses that block the same reporter from flagging the same content again.
ACTIVE_FLAG_STATUSES = (FLAG_STATUS_PENDING, FLAG_STATUS_RESOLVED)

FLAG_REASONS = ("spam", "inappropriate", "offensive", "duplicate", "misleading", "other")

MODERATION_ACTIONS = ("dismiss", "resolve", "soft-delete", "ban-user")


class Flag(Base):
    """A report filed by a user against a piece of content.

    Status moves from ``pending`` to ``resolved`` or ``dismissed`` when an
    admin moderates it.
    """

    __tablename__ = "flag"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'resolved', 'dismissed')",
            name="ck_flag_status",
        ),
        CheckConstraint(
            "content_type IN ('question', 'answer')",
            name="ck_flag_content_type",
        ),
        Index("ix_flag_content", "content_type", "content_id"),
        Index("ix_flag_status_created", "status", "created_at"),
        Index("ix_flag_reporter", "reporter_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_type: Mapped[str] = mapped_column(Text, nullable=False)
    content_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=FLAG_STATUS_PENDING)
    reporter_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
    )
    moderated_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
    )
    moderated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
