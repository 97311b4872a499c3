"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import PageMeta


class SignupRequest(BaseModel):
    """Schema for account registration."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Login email address")
    password: str = Field(..., min_length=6, max_length=128, description="Plain-text password")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject names that are only whitespace."""
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v.strip()


class TokenResponse(BaseModel):
    """Response returned after successful login or signup."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")


class UserSummary(BaseModel):
    """Public view of a user embedded in other payloads."""

    id: int
    name: str
    image: str | None = None
    reputation: int

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """Full account view returned to the account owner and admins."""

    email: str
    role: str
    is_banned: bool
    ban_reason: str | None = None
    banned_at: datetime | None = None
    banned_by_id: int | None = None
    created_at: datetime


class UserListResponse(BaseModel):
    """Paginated admin user listing."""

    users: list[UserResponse]
    pagination: PageMeta


class BanRequest(BaseModel):
    """Admin request to ban a user."""

    reason: str = Field(..., min_length=1, max_length=500, description="Reason shown to the user")


class BanStatusResponse(BaseModel):
    """Ban state of the calling account."""

    is_banned: bool
    ban_reason: str | None = None
    banned_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserStatsResponse(BaseModel):
    """Activity summary for a user."""

    questions: int
    answers: int
    accepted_answers: int
    votes_received: int
    views: int
    bookmarks: int
    reputation: int

    model_config = ConfigDict(from_attributes=True)


class ReputationEventResponse(BaseModel):
    """A single reputation history entry."""

    id: int
    change: int
    reason: str
    related_question_id: int | None = None
    related_answer_id: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReputationHistoryResponse(BaseModel):
    """Current reputation plus its history, newest first."""

    reputation: int
    history: list[ReputationEventResponse]


class ProfileUpdate(BaseModel):
    """Replacement name and email for the caller's account."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Login email address")


class ActivityItemResponse(BaseModel):
    """One entry of the recent activity feed."""

    type: Literal["question", "answer", "bookmark"]
    id: int
    question_id: int
    title: str
    content: str | None = None
    votes: int | None = None
    views: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActivityResponse(BaseModel):
    """The caller's latest questions, answers and bookmarks."""

    activity: list[ActivityItemResponse]
