"""Admin back-office endpoints: users, bans, content listings and analytics."""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Query

from quorum_stage.api.v1.dependencies import AdminUserDep, LimitDep, PageDep, SessionDep
from quorum_stage.api.v1.endpoints.answers import answer_with_question
from quorum_stage.models import ContentType
from quorum_stage.schemas.common import PageMeta
from quorum_stage.schemas.question import (
    AnswerListResponse,
    AnswerResponse,
    DeletedContentResponse,
    QuestionListResponse,
    QuestionResponse,
)
from quorum_stage.schemas.user import BanRequest, UserListResponse, UserResponse
from quorum_stage.services import analytics as analytics_service
from quorum_stage.services import content as content_service
from quorum_stage.services import users as user_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserListResponse)
async def list_users(
    admin: AdminUserDep,
    db: SessionDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
    filter_: Annotated[
        Literal["all", "banned", "active", "admin", "user"],
        Query(alias="filter"),
    ] = "all",
    sort: Literal["newest", "oldest", "name", "email", "reputation"] = "newest",
    page: PageDep = 1,
    limit: LimitDep = 10,
) -> UserListResponse:
    """Search and page through accounts."""
    users, total = user_service.list_users(
        db,
        search=search,
        filter_=filter_,
        sort=sort,
        page=page,
        limit=limit,
    )
    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.post("/users/{user_id}/ban", response_model=UserResponse)
async def ban_user(
    user_id: int,
    payload: BanRequest,
    admin: AdminUserDep,
    db: SessionDep,
) -> UserResponse:
    """Ban a user with a reason."""
    return UserResponse.model_validate(user_service.ban_user(db, admin, user_id, payload.reason))


@router.post("/users/{user_id}/unban", response_model=UserResponse)
async def unban_user(user_id: int, admin: AdminUserDep, db: SessionDep) -> UserResponse:
    """Lift a user's ban."""
    return UserResponse.model_validate(user_service.unban_user(db, admin, user_id))


@router.get("/deleted-content", response_model=DeletedContentResponse)
async def list_deleted_content(
    admin: AdminUserDep,
    db: SessionDep,
    content_type: Annotated[Literal["question", "answer"], Query(alias="type")] = "question",
    page: PageDep = 1,
    limit: LimitDep = 10,
) -> DeletedContentResponse:
    """Page through soft-deleted questions or answers."""
    kind = ContentType(content_type)
    items, total = content_service.list_deleted(db, kind, page=page, limit=limit)
    pagination = PageMeta.build(page=page, limit=limit, total=total)
    if kind is ContentType.QUESTION:
        return DeletedContentResponse(
            content_type=content_type,
            questions=[QuestionResponse.model_validate(item) for item in items],
            pagination=pagination,
        )
    return DeletedContentResponse(
        content_type=content_type,
        answers=[AnswerResponse.model_validate(item) for item in items],
        pagination=pagination,
    )


@router.get("/questions", response_model=QuestionListResponse)
async def list_all_questions(
    admin: AdminUserDep,
    db: SessionDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
    filter_: Annotated[
        Literal["all", "answered", "unanswered"],
        Query(alias="filter"),
    ] = "all",
    sort: Literal["newest", "oldest", "votes", "views"] = "newest",
    page: PageDep = 1,
    limit: LimitDep = 10,
) -> QuestionListResponse:
    """Page through every question, soft-deleted ones included."""
    items, total = content_service.list_questions(
        db,
        page=page,
        limit=limit,
        sort=sort,
        filter_=filter_,
        search=search,
        include_deleted=True,
    )
    return QuestionListResponse(
        questions=[QuestionResponse.model_validate(item) for item in items],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/answers", response_model=AnswerListResponse)
async def list_all_answers(
    admin: AdminUserDep,
    db: SessionDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
    filter_: Annotated[
        Literal["all", "accepted", "not-accepted"],
        Query(alias="filter"),
    ] = "all",
    sort: Literal["newest", "oldest", "votes"] = "newest",
    page: PageDep = 1,
    limit: LimitDep = 10,
) -> AnswerListResponse:
    """Page through every answer, soft-deleted ones included."""
    rows, total = content_service.list_answers_with_questions(
        db,
        page=page,
        limit=limit,
        sort=sort,
        filter_=filter_,
        search=search,
        include_deleted=True,
    )
    return AnswerListResponse(
        answers=[answer_with_question(answer, title) for answer, title in rows],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/dashboard-stats")
async def dashboard_stats(admin: AdminUserDep, db: SessionDep) -> dict[str, int]:
    """Headline totals for the admin dashboard."""
    return analytics_service.dashboard_stats(db)


@router.get("/analytics")
async def analytics(
    admin: AdminUserDep,
    db: SessionDep,
    period: Annotated[int, Query(ge=1, le=365, description="Days of activity")] = 30,
) -> dict[str, Any]:
    """Totals plus recent activity."""
    return analytics_service.analytics(db, period)
