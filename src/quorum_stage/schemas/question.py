"""Question and answer Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import PageMeta


class QuestionCreate(BaseModel):
    """Schema for asking a new question."""

    title: str = Field(..., min_length=5, max_length=300, description="Question title")
    content: str = Field(..., min_length=1, max_length=20_000, description="Markdown body")
    tags: list[str] = Field(..., min_length=1, max_length=5, description="1-5 topic tags")
    is_anonymous: bool = Field(False, description="Hide the author's name from other users")


class QuestionUpdate(BaseModel):
    """Partial update of a question."""

    title: str | None = Field(None, min_length=5, max_length=300)
    content: str | None = Field(None, min_length=1, max_length=20_000)
    tags: list[str] | None = Field(None, min_length=1, max_length=5)


class QuestionResponse(BaseModel):
    """Schema for question information returned by the API."""

    id: int
    title: str
    content: str
    author_id: int | None
    tags: list[str]
    is_anonymous: bool
    views: int
    upvotes: int
    downvotes: int
    net_votes: int
    accepted_answer_id: int | None = None
    bounty_amount: int
    bounty_status: str
    bounty_awarded_to_id: int | None = None
    is_deleted: bool
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionListResponse(BaseModel):
    """Paginated question listing."""

    questions: list[QuestionResponse]
    pagination: PageMeta


class AnswerCreate(BaseModel):
    """Schema for posting an answer."""

    content: str = Field(..., min_length=1, max_length=20_000, description="Markdown body")


class AnswerResponse(BaseModel):
    """Schema for answer information returned by the API."""

    id: int
    question_id: int
    author_id: int
    content: str
    eli5_content: str | None = None
    is_accepted: bool
    upvotes: int
    downvotes: int
    net_votes: int
    is_deleted: bool
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionDetailResponse(QuestionResponse):
    """A question together with its live answers."""

    answers: list[AnswerResponse]


class AcceptAnswerRequest(BaseModel):
    """Question author's choice of accepted answer."""

    answer_id: int


class BountyOfferRequest(BaseModel):
    """Reputation offered as a bounty."""

    amount: int = Field(..., gt=0, description="Reputation points to escrow")


class BountyAwardRequest(BaseModel):
    """Answer receiving the open bounty."""

    answer_id: int


class Eli5Response(BaseModel):
    """Plain-language explanation of an answer, or why it could not be produced."""

    answer_id: int
    eli5_content: str | None
    error: str | None = None
    stored: bool = False


class DeletedContentResponse(BaseModel):
    """Paginated soft-deleted questions or answers."""

    content_type: Literal["question", "answer"]
    questions: list[QuestionResponse] = Field(default_factory=list)
    answers: list[AnswerResponse] = Field(default_factory=list)
    pagination: PageMeta


class AnswerWithQuestionResponse(AnswerResponse):
    """An answer listed outside its question, carrying the question title."""

    question_title: str


class AnswerListResponse(BaseModel):
    """Paginated answers across questions."""

    answers: list[AnswerWithQuestionResponse]
    pagination: PageMeta
