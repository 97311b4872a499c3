"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote on a question or an answer."""

    vote_type: Literal["upvote", "downvote"] = Field(
        ...,
        description="Repeat the vote you already hold to withdraw it",
    )


class VoteResponse(BaseModel):
    """Counters after a vote and the caller's resulting vote."""

    content_type: Literal["question", "answer"]
    content_id: int
    upvotes: int
    downvotes: int
    net_votes: int
    direction: Literal[-1, 0, 1] = Field(..., description="1 upvoted, -1 downvoted, 0 no vote")


class MyVoteResponse(BaseModel):
    """The caller's current vote on a content item."""

    direction: Literal[-1, 0, 1]
