"""Flag intake and admin moderation endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query, status

from quorum_stage.api.v1.dependencies import (
    ActiveUserDep,
    AdminUserDep,
    LimitDep,
    PageDep,
    SessionDep,
)
from quorum_stage.models import Question
from quorum_stage.models.content import content_ref
from quorum_stage.schemas.common import MessageResponse, PageMeta
from quorum_stage.schemas.flag import (
    FlagCreate,
    FlaggedContent,
    FlagListResponse,
    FlagResponse,
    FlagWithContent,
    ModerationAction,
    ModerationResponse,
    ModerationResultResponse,
)
from quorum_stage.services.moderation import FlagView, ModerationService

router = APIRouter(prefix="/flags", tags=["moderation"])


def _flag_with_content(view: FlagView) -> FlagWithContent:
    content = view.content
    return FlagWithContent(
        **FlagResponse.model_validate(view.flag).model_dump(),
        content=FlaggedContent(
            id=content.id,
            author_id=content.author_id,
            title=content.title if isinstance(content, Question) else None,
            content=content.content,
            is_deleted=content.is_deleted,
        ),
    )


@router.post("/", response_model=FlagResponse, status_code=status.HTTP_201_CREATED)
async def create_flag(
    payload: FlagCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> FlagResponse:
    """Report a question or an answer."""
    flag = ModerationService.create_flag(
        db,
        content_ref(payload.content_type, payload.content_id),
        current_user,
        payload.reason,
    )
    return FlagResponse.model_validate(flag)


@router.get("/", response_model=FlagListResponse)
async def list_flags(
    admin: AdminUserDep,
    db: SessionDep,
    flag_status: Annotated[
        Literal["pending", "resolved", "dismissed", "all"],
        Query(alias="status"),
    ] = "pending",
    content_type: Annotated[
        Literal["question", "answer", "all"],
        Query(alias="type"),
    ] = "all",
    page: PageDep = 1,
    limit: LimitDep = 10,
) -> FlagListResponse:
    """List flags for review, newest first (admin)."""
    views, total = ModerationService.list_flags(
        db,
        admin,
        status=flag_status,
        content_type=content_type,
        page=page,
        limit=limit,
    )
    return FlagListResponse(
        flags=[_flag_with_content(view) for view in views],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.put("/{flag_id}", response_model=ModerationResponse)
async def moderate_flag(
    flag_id: int,
    payload: ModerationAction,
    admin: AdminUserDep,
    db: SessionDep,
) -> ModerationResponse:
    """Record a moderation decision and apply its action (admin)."""
    flag, result = ModerationService.moderate_flag(
        db,
        flag_id,
        action=payload.action,
        status=payload.status,
        admin=admin,
    )
    return ModerationResponse(
        flag=FlagResponse.model_validate(flag),
        moderation_result=ModerationResultResponse.model_validate(result),
    )


@router.delete("/{flag_id}", response_model=MessageResponse)
async def delete_flag(flag_id: int, admin: AdminUserDep, db: SessionDep) -> MessageResponse:
    """Permanently delete a flag (admin)."""
    ModerationService.delete_flag(db, flag_id, admin)
    return MessageResponse(message="Flag deleted")
