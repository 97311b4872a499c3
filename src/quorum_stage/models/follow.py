# src/quorum_stage/models/follow.py
"""Questions a user follows."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from quorum_stage.db.session import Base
from quorum_stage.db.time import utcnow


class QuestionFollow(Base):
    """A user following a question; one per (user, question) pair."""

    __tablename__ = "question_follow"
    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_question_follow_user_question"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("question.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
