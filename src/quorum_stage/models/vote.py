# src/quorum_stage/models/vote.py
"""Models capturing votes on questions and answers."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from quorum_stage.db.session import Base
from quorum_stage.db.time import utcnow

VOTE_UP = 1
VOTE_DOWN = -1


class ContentVote(Base):
    """Per-user vote on a question or an answer.

    A voter holds at most one row per content item, so a voter can never be
    counted as both an upvoter and a downvoter.
    """

    __tablename__ = "content_vote"
    __table_args__ = (
        CheckConstraint("direction IN (1, -1)", name="ck_content_vote_direction"),
        CheckConstraint(
            "content_type IN ('question', 'answer')",
            name="ck_content_vote_content_type",
        ),
        Index("ix_content_vote_content", "content_type", "content_id"),
    )

    # Composite primary key prevents duplicate votes from the same user.
    content_type: Mapped[str] = mapped_column(Text, primary_key=True)
    content_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    voter_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # 1 = upvote, -1 = downvote.
    direction: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
