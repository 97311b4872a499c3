"""Question endpoints: CRUD, acceptance, bounties, follows and restore."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query, status

from quorum_stage.api.v1.dependencies import (
    ActiveUserDep,
    AdminUserDep,
    CurrentUserDep,
    LimitDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
)
from quorum_stage.models import Question, QuestionRef, User
from quorum_stage.schemas.common import MessageResponse, PageMeta
from quorum_stage.schemas.engagement import FollowedQuestionsResponse, FollowStatusResponse
from quorum_stage.schemas.question import (
    AcceptAnswerRequest,
    AnswerResponse,
    BountyAwardRequest,
    BountyOfferRequest,
    QuestionCreate,
    QuestionDetailResponse,
    QuestionListResponse,
    QuestionResponse,
    QuestionUpdate,
)
from quorum_stage.services import bounty as bounty_service
from quorum_stage.services import content as content_service
from quorum_stage.services import follows as follow_service

router = APIRouter(prefix="/questions", tags=["questions"])


def question_response(question: Question, viewer: User | None) -> QuestionResponse:
    """Serialize a question, hiding the author of anonymous posts from other users."""
    data = QuestionResponse.model_validate(question)
    can_see_author = viewer is not None and (viewer.id == question.author_id or viewer.is_admin)
    if question.is_anonymous and not can_see_author:
        data.author_id = None
    return data


@router.post("/", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
    payload: QuestionCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> QuestionResponse:
    """Ask a new question."""
    question = content_service.create_question(
        db,
        current_user,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        is_anonymous=payload.is_anonymous,
    )
    return question_response(question, current_user)


@router.get("/", response_model=QuestionListResponse)
async def list_questions(
    db: SessionDep,
    viewer: OptionalUserDep,
    page: PageDep = 1,
    limit: LimitDep = 10,
    sort: Literal["newest", "recent", "oldest", "votes", "views", "answers"] = "newest",
    filter_: Annotated[
        Literal["all", "unanswered", "answered"],
        Query(alias="filter"),
    ] = "all",
    tag: str | None = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> QuestionListResponse:
    """List live questions with sorting, filtering and search."""
    items, total = content_service.list_questions(
        db,
        page=page,
        limit=limit,
        sort=sort,
        filter_=filter_,
        tag=tag,
        search=search,
    )
    return QuestionListResponse(
        questions=[question_response(item, viewer) for item in items],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/followed", response_model=FollowedQuestionsResponse)
async def list_followed_questions(
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FollowedQuestionsResponse:
    """Live questions the caller follows, most recently followed first."""
    questions = follow_service.list_followed(db, current_user.id)
    return FollowedQuestionsResponse(
        questions=[question_response(question, current_user) for question in questions],
    )


@router.get("/{question_id}", response_model=QuestionDetailResponse)
async def get_question(
    question_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> QuestionDetailResponse:
    """Fetch a question with its answers; counts one view."""
    question = content_service.view_question(db, question_id)
    answers = content_service.list_answers(db, question_id)
    base = question_response(question, viewer)
    return QuestionDetailResponse(
        **base.model_dump(),
        answers=[AnswerResponse.model_validate(answer) for answer in answers],
    )


@router.put("/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: int,
    payload: QuestionUpdate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> QuestionResponse:
    """Edit a question (author or admin)."""
    question = content_service.update_question(
        db,
        question_id,
        current_user,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
    )
    return question_response(question, current_user)


@router.delete("/{question_id}", response_model=MessageResponse)
async def delete_question(
    question_id: int,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Soft-delete a question (author or admin)."""
    content_service.soft_delete(db, QuestionRef(question_id), current_user)
    return MessageResponse(message="Question deleted")


@router.post("/{question_id}/restore", response_model=QuestionResponse)
async def restore_question(
    question_id: int,
    admin: AdminUserDep,
    db: SessionDep,
) -> QuestionResponse:
    """Restore a soft-deleted question (admin)."""
    question = content_service.restore(db, QuestionRef(question_id), admin)
    return question_response(question, admin)


@router.post("/{question_id}/accept", response_model=AnswerResponse)
async def accept_answer(
    question_id: int,
    payload: AcceptAnswerRequest,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> AnswerResponse:
    """Accept one of the question's answers (question author)."""
    answer = content_service.accept_answer(db, question_id, payload.answer_id, current_user)
    return AnswerResponse.model_validate(answer)


@router.post("/{question_id}/bounty", response_model=QuestionResponse)
async def offer_bounty(
    question_id: int,
    payload: BountyOfferRequest,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> QuestionResponse:
    """Escrow reputation as a bounty on the caller's question."""
    question = bounty_service.offer_bounty(db, question_id, current_user, payload.amount)
    return question_response(question, current_user)


@router.post("/{question_id}/bounty/award", response_model=QuestionResponse)
async def award_bounty(
    question_id: int,
    payload: BountyAwardRequest,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> QuestionResponse:
    """Pay the open bounty to an answer."""
    question = bounty_service.award_bounty(db, question_id, current_user, payload.answer_id)
    return question_response(question, current_user)


@router.get("/{question_id}/follow", response_model=FollowStatusResponse)
async def check_follow(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FollowStatusResponse:
    """Report whether the caller follows a question."""
    return FollowStatusResponse(
        question_id=question_id,
        followed=follow_service.is_following(db, current_user.id, question_id),
    )


@router.post("/{question_id}/follow", response_model=FollowStatusResponse)
async def follow_question(
    question_id: int,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> FollowStatusResponse:
    """Follow a question."""
    follow_service.follow_question(db, current_user, question_id)
    return FollowStatusResponse(question_id=question_id, followed=True)


@router.delete("/{question_id}/follow", response_model=FollowStatusResponse)
async def unfollow_question(
    question_id: int,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> FollowStatusResponse:
    """Stop following a question."""
    follow_service.unfollow_question(db, current_user, question_id)
    return FollowStatusResponse(question_id=question_id, followed=False)
