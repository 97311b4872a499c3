"""Vote-related endpoints for the Quorum API."""

from typing import Literal

from fastapi import APIRouter
from sqlalchemy.orm import Session

from quorum_stage.api.v1.dependencies import ActiveUserDep, CurrentUserDep, SessionDep
from quorum_stage.models import AnswerRef, ContentRef, QuestionRef, User
from quorum_stage.models.content import content_ref
from quorum_stage.schemas.vote import MyVoteResponse, VoteCreate, VoteResponse
from quorum_stage.services import votes as vote_service

router = APIRouter(tags=["votes"])


def _cast(db: Session, ref: ContentRef, voter: User, vote_data: VoteCreate) -> VoteResponse:
    outcome = vote_service.apply_vote(db, ref, voter, vote_data.vote_type)
    content = outcome.content
    return VoteResponse(
        content_type=ref.content_type.value,
        content_id=content.id,
        upvotes=content.upvotes,
        downvotes=content.downvotes,
        net_votes=content.net_votes,
        direction=outcome.direction,
    )


@router.post("/questions/{question_id}/vote", response_model=VoteResponse)
async def vote_on_question(
    question_id: int,
    vote_data: VoteCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Upvote or downvote a question; repeating a vote withdraws it."""
    return _cast(db, QuestionRef(question_id), current_user, vote_data)


@router.post("/answers/{answer_id}/vote", response_model=VoteResponse)
async def vote_on_answer(
    answer_id: int,
    vote_data: VoteCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Upvote or downvote an answer; repeating a vote withdraws it."""
    return _cast(db, AnswerRef(answer_id), current_user, vote_data)


@router.get("/votes/{content_type}/{content_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    content_type: Literal["question", "answer"],
    content_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get current user's vote on a question or answer."""
    direction = vote_service.get_my_vote(db, content_ref(content_type, content_id), current_user.id)
    return MyVoteResponse(direction=direction)
