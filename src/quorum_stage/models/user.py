# src/quorum_stage/models/user.py
"""SQLAlchemy models for user accounts, roles and ban state."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from quorum_stage.db.session import Base
from quorum_stage.db.time import utcnow

ROLE_GUEST = "guest"
ROLE_USER = "user"
ROLE_ADMIN = "admin"
USER_ROLES = (ROLE_GUEST, ROLE_USER, ROLE_ADMIN)


class User(Base):
    """Registered account with a role, a reputation score and ban metadata.

    ``reputation`` is a denormalised total of the user's ``ReputationEvent``
    rows and must only be changed through the reputation service.
    """

    __tablename__ = "app_user"
    __table_args__ = (
        CheckConstraint("role IN ('guest', 'user', 'admin')", name="ck_app_user_role"),
        Index("ix_app_user_reputation", "reputation"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default=ROLE_USER)
    reputation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # All four ban fields are written together; unban clears them.
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ban_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    banned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    banned_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    @property
    def is_admin(self) -> bool:
        """Return True when the account carries the admin role."""
        return self.role == ROLE_ADMIN
