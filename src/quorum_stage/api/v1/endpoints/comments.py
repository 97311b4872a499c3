"""Comment endpoints for answers."""

from fastapi import APIRouter, status

from quorum_stage.api.v1.dependencies import ActiveUserDep, SessionDep
from quorum_stage.schemas.common import MessageResponse
from quorum_stage.schemas.engagement import CommentCreate, CommentResponse, CommentUpdate
from quorum_stage.services import comments as comment_service

router = APIRouter(tags=["comments"])


@router.post(
    "/answers/{answer_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    answer_id: int,
    payload: CommentCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> CommentResponse:
    """Comment on an answer or reply to a comment."""
    comment = comment_service.create_comment(
        db,
        current_user,
        answer_id,
        content=payload.content,
        parent_id=payload.parent_id,
    )
    return CommentResponse.model_validate(comment)


@router.get("/answers/{answer_id}/comments", response_model=list[CommentResponse])
async def list_comments(answer_id: int, db: SessionDep) -> list[CommentResponse]:
    """List an answer's comments in posting order."""
    return [
        CommentResponse.model_validate(comment)
        for comment in comment_service.list_comments(db, answer_id)
    ]


@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: int,
    payload: CommentUpdate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> CommentResponse:
    """Edit the caller's comment."""
    comment = comment_service.edit_comment(db, comment_id, current_user, content=payload.content)
    return CommentResponse.model_validate(comment)


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete the caller's comment."""
    comment_service.delete_comment(db, comment_id, current_user)
    return MessageResponse(message="Comment deleted")
