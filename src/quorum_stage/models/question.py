# src/quorum_stage/models/question.py
"""SQLAlchemy models for questions and their tags."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quorum_stage.db.session import Base
from quorum_stage.db.time import utcnow

BOUNTY_NONE = "none"
BOUNTY_OPEN = "open"
BOUNTY_AWARDED = "awarded"


class Question(Base):
    """A question asked by a user.

    ``upvotes`` and ``downvotes`` are counters maintained alongside the
    ``content_vote`` ledger and are only changed with SQL-side increments.
    """

    __tablename__ = "question"
    __table_args__ = (
        CheckConstraint(
            "bounty_status IN ('none', 'open', 'awarded')",
            name="ck_question_bounty_status",
        ),
        Index("ix_question_author_id", "author_id"),
        Index("ix_question_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Plain column: answer.question_id already points back at this table.
    accepted_answer_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    bounty_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bounty_status: Mapped[str] = mapped_column(Text, nullable=False, default=BOUNTY_NONE)
    bounty_awarded_to_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
    )
    bounty_awarded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    tag_rows: Mapped[list[QuestionTag]] = relationship(
        "QuestionTag",
        cascade="all, delete-orphan",
        order_by="QuestionTag.position",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        """Return tag names in the order they were supplied."""
        return [row.tag for row in self.tag_rows]

    @property
    def net_votes(self) -> int:
        """Return upvotes minus downvotes."""
        return self.upvotes - self.downvotes


class QuestionTag(Base):
    """Lower-cased tag attached to a question."""

    __tablename__ = "question_tag"
    __table_args__ = (
        Index("ix_question_tag_tag", "tag"),
    )

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("question.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(Text, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
