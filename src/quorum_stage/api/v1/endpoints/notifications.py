"""Notification inbox endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query

from quorum_stage.api.v1.dependencies import (
    ActiveUserDep,
    CurrentUserDep,
    LimitDep,
    PageDep,
    SessionDep,
)
from quorum_stage.schemas.common import PageMeta
from quorum_stage.schemas.engagement import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from quorum_stage.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])

InboxFilter = Literal["all", "unread", "answer", "vote", "accept", "flag", "admin", "bookmark"]


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    filter_: Annotated[InboxFilter, Query(alias="filter")] = "all",
    page: PageDep = 1,
    limit: LimitDep = 10,
) -> NotificationListResponse:
    """List the caller's notifications, newest first."""
    items, total = notification_service.list_notifications(
        db,
        current_user.id,
        filter_=filter_,
        page=page,
        limit=limit,
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(item) for item in items],
        unread_count=notification_service.unread_count(db, current_user.id),
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/unread-count")
async def unread_count(current_user: CurrentUserDep, db: SessionDep) -> dict[str, int]:
    """Number of unread notifications."""
    return {"unread_count": notification_service.unread_count(db, current_user.id)}


@router.put("/read", response_model=MarkReadResponse)
async def mark_read(
    payload: MarkReadRequest,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> MarkReadResponse:
    """Mark notifications as read."""
    updated = notification_service.mark_read(db, current_user.id, payload.notification_ids)
    return MarkReadResponse(updated=updated)
