"""Flag and moderation Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import PageMeta

FlagReason = Literal["spam", "inappropriate", "offensive", "duplicate", "misleading", "other"]
FlagStatus = Literal["pending", "resolved", "dismissed"]
ModerationActionName = Literal["dismiss", "resolve", "soft-delete", "ban-user"]


class FlagCreate(BaseModel):
    """Schema for reporting content."""

    content_type: Literal["question", "answer"]
    content_id: int
    reason: FlagReason


class FlagResponse(BaseModel):
    """Schema for flag information returned by the API."""

    id: int
    content_type: str
    content_id: int
    reason: str
    status: str
    reporter_id: int
    moderated_by_id: int | None = None
    moderated_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FlaggedContent(BaseModel):
    """Excerpt of the flagged question or answer."""

    id: int
    author_id: int
    title: str | None = None
    content: str
    is_deleted: bool


class FlagWithContent(FlagResponse):
    """Flag plus the content it references."""

    content: FlaggedContent


class FlagListResponse(BaseModel):
    """Paginated admin flag listing."""

    flags: list[FlagWithContent]
    pagination: PageMeta


class ModerationAction(BaseModel):
    """Admin decision on a flag."""

    action: ModerationActionName
    status: FlagStatus = Field(..., description="Status written to the flag")


class ModerationResultResponse(BaseModel):
    """Outcome of the moderation side effect."""

    action: str
    message: str
    content_type: str
    content_id: int
    banned_user_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class ModerationResponse(BaseModel):
    """Updated flag and moderation outcome."""

    flag: FlagResponse
    moderation_result: ModerationResultResponse
