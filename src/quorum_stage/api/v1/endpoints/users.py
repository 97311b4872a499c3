"""User profile, activity, stats and reputation endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query

from quorum_stage.api.v1.dependencies import (
    ActiveUserDep,
    CurrentUserDep,
    LimitDep,
    PageDep,
    SessionDep,
)
from quorum_stage.api.v1.endpoints.answers import answer_with_question
from quorum_stage.api.v1.endpoints.questions import question_response
from quorum_stage.schemas.common import PageMeta
from quorum_stage.schemas.question import AnswerListResponse, QuestionListResponse
from quorum_stage.schemas.user import (
    ActivityItemResponse,
    ActivityResponse,
    BanStatusResponse,
    ProfileUpdate,
    ReputationEventResponse,
    ReputationHistoryResponse,
    UserResponse,
    UserStatsResponse,
    UserSummary,
)
from quorum_stage.services import content as content_service
from quorum_stage.services import reputation as reputation_service
from quorum_stage.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/ban-status", response_model=BanStatusResponse)
async def check_ban(current_user: CurrentUserDep) -> BanStatusResponse:
    """Report whether the caller's account is banned."""
    return BanStatusResponse.model_validate(current_user)


@router.get("/me/stats", response_model=UserStatsResponse)
async def my_stats(current_user: CurrentUserDep, db: SessionDep) -> UserStatsResponse:
    """Activity summary for the caller."""
    return UserStatsResponse.model_validate(user_service.user_stats(db, current_user))


@router.get("/me/reputation", response_model=ReputationHistoryResponse)
async def my_reputation(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> ReputationHistoryResponse:
    """Current reputation and its history, newest first."""
    history = reputation_service.reputation_history(db, current_user.id, limit=limit)
    db.refresh(current_user)
    return ReputationHistoryResponse(
        reputation=current_user.reputation,
        history=[ReputationEventResponse.model_validate(event) for event in history],
    )


@router.put("/me", response_model=UserResponse)
async def update_profile(
    payload: ProfileUpdate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> UserResponse:
    """Change the caller's name and email."""
    user = user_service.update_profile(db, current_user, name=payload.name, email=payload.email)
    return UserResponse.model_validate(user)


@router.get("/me/questions", response_model=QuestionListResponse)
async def my_questions(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: PageDep = 1,
    limit: LimitDep = 10,
    sort: Literal["newest", "oldest", "votes", "views", "answers"] = "newest",
    filter_: Annotated[
        Literal["all", "answered", "unanswered"],
        Query(alias="filter"),
    ] = "all",
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> QuestionListResponse:
    """The caller's live questions."""
    items, total = content_service.list_questions(
        db,
        page=page,
        limit=limit,
        sort=sort,
        filter_=filter_,
        search=search,
        author_id=current_user.id,
    )
    return QuestionListResponse(
        questions=[question_response(item, current_user) for item in items],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/me/answers", response_model=AnswerListResponse)
async def my_answers(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: PageDep = 1,
    limit: LimitDep = 10,
    sort: Literal["newest", "oldest", "votes", "accepted"] = "newest",
    filter_: Annotated[
        Literal["all", "accepted", "not-accepted"],
        Query(alias="filter"),
    ] = "all",
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> AnswerListResponse:
    """The caller's live answers with their question titles."""
    rows, total = content_service.list_answers_with_questions(
        db,
        page=page,
        limit=limit,
        sort=sort,
        filter_=filter_,
        search=search,
        author_id=current_user.id,
    )
    return AnswerListResponse(
        answers=[answer_with_question(answer, title) for answer, title in rows],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/me/activity", response_model=ActivityResponse)
async def my_activity(current_user: CurrentUserDep, db: SessionDep) -> ActivityResponse:
    """Latest questions, answers and bookmarks of the caller, newest first."""
    items = user_service.recent_activity(db, current_user.id)
    return ActivityResponse(
        activity=[ActivityItemResponse.model_validate(item) for item in items],
    )


@router.get("/{user_id}", response_model=UserSummary)
async def get_profile(user_id: int, db: SessionDep) -> UserSummary:
    """Public profile of any user."""
    return UserSummary.model_validate(user_service.get_user_or_404(db, user_id))


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
async def get_user_stats(user_id: int, db: SessionDep) -> UserStatsResponse:
    """Public activity summary of any user."""
    user = user_service.get_user_or_404(db, user_id)
    return UserStatsResponse.model_validate(user_service.user_stats(db, user))
