"""Schemas for bookmarks, follows, notifications, comments and the leaderboard."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import PageMeta
from .question import QuestionResponse


class BookmarkCreate(BaseModel):
    """Question to bookmark."""

    question_id: int


class BookmarkResponse(BaseModel):
    """A bookmark with the saved question."""

    id: int
    question_id: int
    created_at: datetime
    question: QuestionResponse


class BookmarkListResponse(BaseModel):
    """Paginated bookmarks."""

    bookmarks: list[BookmarkResponse]
    pagination: PageMeta


class BookmarkCheckResponse(BaseModel):
    """Whether the caller has bookmarked a question."""

    question_id: int
    bookmarked: bool


class FollowStatusResponse(BaseModel):
    """Whether the caller follows a question."""

    question_id: int
    followed: bool


class FollowedQuestionsResponse(BaseModel):
    """Live questions the caller follows."""

    questions: list[QuestionResponse]


class NotificationResponse(BaseModel):
    """Schema for notification information returned by the API."""

    id: int
    type: str
    title: str
    message: str
    sender_id: int | None = None
    related_question_id: int | None = None
    related_answer_id: int | None = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    """Paginated notifications plus the unread total."""

    notifications: list[NotificationResponse]
    unread_count: int
    pagination: PageMeta


class MarkReadRequest(BaseModel):
    """Notifications to mark as read."""

    notification_ids: list[int] = Field(..., min_length=1)


class MarkReadResponse(BaseModel):
    """Number of notifications updated."""

    updated: int


class CommentCreate(BaseModel):
    """Schema for commenting on an answer."""

    content: str = Field(..., min_length=1, max_length=2000)
    parent_id: int | None = Field(None, description="Comment being replied to")


class CommentUpdate(BaseModel):
    """Replacement comment text."""

    content: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    answer_id: int
    author_id: int
    parent_id: int | None = None
    content: str
    edited: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LeaderboardEntryResponse(BaseModel):
    """One ranked leaderboard row."""

    rank: int
    user_id: int
    name: str
    image: str | None = None
    score: int
    reputation: int
    answers: int
    questions: int
    badge: str

    model_config = ConfigDict(from_attributes=True)


class LeaderboardResponse(BaseModel):
    """Leaderboard for a time range."""

    range: str
    entries: list[LeaderboardEntryResponse]
