"""Bookmark endpoints."""

from fastapi import APIRouter, status

from quorum_stage.api.v1.dependencies import (
    ActiveUserDep,
    CurrentUserDep,
    LimitDep,
    PageDep,
    SessionDep,
)
from quorum_stage.api.v1.endpoints.questions import question_response
from quorum_stage.schemas.common import MessageResponse, PageMeta
from quorum_stage.schemas.engagement import (
    BookmarkCheckResponse,
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkResponse,
)
from quorum_stage.services import bookmarks as bookmark_service
from quorum_stage.services.content import get_question_or_404

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("/", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
async def add_bookmark(
    payload: BookmarkCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> BookmarkResponse:
    """Bookmark a question."""
    bookmark = bookmark_service.add_bookmark(db, current_user, payload.question_id)
    question = get_question_or_404(db, bookmark.question_id)
    return BookmarkResponse(
        id=bookmark.id,
        question_id=bookmark.question_id,
        created_at=bookmark.created_at,
        question=question_response(question, current_user),
    )


@router.get("/", response_model=BookmarkListResponse)
async def list_bookmarks(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: PageDep = 1,
    limit: LimitDep = 10,
) -> BookmarkListResponse:
    """List the caller's bookmarks, newest first."""
    rows, total = bookmark_service.list_bookmarks(db, current_user.id, page=page, limit=limit)
    return BookmarkListResponse(
        bookmarks=[
            BookmarkResponse(
                id=bookmark.id,
                question_id=bookmark.question_id,
                created_at=bookmark.created_at,
                question=question_response(question, current_user),
            )
            for bookmark, question in rows
        ],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/{question_id}", response_model=BookmarkCheckResponse)
async def check_bookmark(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BookmarkCheckResponse:
    """Report whether the caller bookmarked a question."""
    return BookmarkCheckResponse(
        question_id=question_id,
        bookmarked=bookmark_service.is_bookmarked(db, current_user.id, question_id),
    )


@router.delete("/{question_id}", response_model=MessageResponse)
async def remove_bookmark(
    question_id: int,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Remove a bookmark."""
    bookmark_service.remove_bookmark(db, current_user, question_id)
    return MessageResponse(message="Bookmark removed")
