"""question follows

Revision ID: 8e2d4b61c0a3
Revises: 5c1f0a7d2b94
Create Date: 2026-10-18 15:40:02.193877

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8e2d4b61c0a3"
down_revision: Union[str, Sequence[str], None] = "5c1f0a7d2b94"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the question_follow table."""
    op.create_table(
        "question_follow",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["question_id"], ["question.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "question_id", name="uq_question_follow_user_question"),
    )


def downgrade() -> None:
    """Drop the question_follow table."""
    op.drop_table("question_follow")
