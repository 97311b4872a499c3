# src/quorum_stage/models/notification.py
"""In-app notifications delivered to users."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from quorum_stage.db.session import Base
from quorum_stage.db.time import utcnow

NOTIFICATION_TYPES = ("answer", "vote", "accept", "flag", "admin", "bookmark")


class Notification(Base):
    """Message addressed to a single recipient."""

    __tablename__ = "notification"
    __table_args__ = (
        CheckConstraint(
            "type IN ('answer', 'vote', 'accept', 'flag', 'admin', 'bookmark')",
            name="ck_notification_type",
        ),
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
    )
    type: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    related_question_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    related_answer_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
