"""Answer endpoints, including plain-language explanations."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quorum_stage.api.v1.dependencies import ActiveUserDep, AdminUserDep, SessionDep
from quorum_stage.models import Answer, AnswerRef
from quorum_stage.schemas.common import MessageResponse
from quorum_stage.schemas.question import (
    AnswerCreate,
    AnswerResponse,
    AnswerWithQuestionResponse,
    Eli5Response,
)
from quorum_stage.services import content as content_service
from quorum_stage.services.text_generation import (
    GenerationResult,
    TextGenerationClient,
    get_text_generation_client,
)

router = APIRouter(tags=["answers"])

TextGenerationDep = Annotated[TextGenerationClient, Depends(get_text_generation_client)]


def answer_with_question(answer: Answer, question_title: str) -> AnswerWithQuestionResponse:
    """Serialize an answer listed outside its question page."""
    return AnswerWithQuestionResponse(
        **AnswerResponse.model_validate(answer).model_dump(),
        question_title=question_title,
    )


@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_answer(
    question_id: int,
    payload: AnswerCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> AnswerResponse:
    """Answer a question."""
    answer = content_service.create_answer(db, question_id, current_user, content=payload.content)
    return AnswerResponse.model_validate(answer)


@router.get("/questions/{question_id}/answers", response_model=list[AnswerResponse])
async def list_answers(
    question_id: int,
    db: SessionDep,
    sort: Literal["newest", "oldest", "votes", "accepted"] = "votes",
) -> list[AnswerResponse]:
    """List the live answers of a question."""
    answers = content_service.list_answers(db, question_id, sort=sort)
    return [AnswerResponse.model_validate(answer) for answer in answers]


@router.get("/answers/{answer_id}", response_model=AnswerResponse)
async def get_answer(answer_id: int, db: SessionDep) -> AnswerResponse:
    """Fetch a single live answer."""
    return AnswerResponse.model_validate(content_service.get_answer_or_404(db, answer_id))


@router.put("/answers/{answer_id}", response_model=AnswerResponse)
async def update_answer(
    answer_id: int,
    payload: AnswerCreate,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> AnswerResponse:
    """Edit an answer (author or admin)."""
    answer = content_service.update_answer(db, answer_id, current_user, content=payload.content)
    return AnswerResponse.model_validate(answer)


@router.delete("/answers/{answer_id}", response_model=MessageResponse)
async def delete_answer(
    answer_id: int,
    current_user: ActiveUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Soft-delete an answer (author or admin)."""
    content_service.soft_delete(db, AnswerRef(answer_id), current_user)
    return MessageResponse(message="Answer deleted")


@router.post("/answers/{answer_id}/restore", response_model=AnswerResponse)
async def restore_answer(
    answer_id: int,
    admin: AdminUserDep,
    db: SessionDep,
) -> AnswerResponse:
    """Restore a soft-deleted answer (admin)."""
    answer = content_service.restore(db, AnswerRef(answer_id), admin)
    return AnswerResponse.model_validate(answer)


async def _explain(
    db: Session,
    answer_id: int,
    client: TextGenerationClient,
) -> tuple[Answer, GenerationResult]:
    answer = content_service.get_answer_or_404(db, answer_id)
    question = content_service.get_question_or_404(db, answer.question_id)
    result = await client.explain_simply(title=question.title, content=answer.content)
    return answer, result


@router.get("/answers/{answer_id}/eli5", response_model=Eli5Response)
async def preview_eli5(
    answer_id: int,
    db: SessionDep,
    client: TextGenerationDep,
) -> Eli5Response:
    """Generate a plain-language explanation without storing it."""
    answer, result = await _explain(db, answer_id, client)
    return Eli5Response(answer_id=answer.id, eli5_content=result.text, error=result.error)


@router.post("/answers/{answer_id}/eli5", response_model=Eli5Response)
async def store_eli5(
    answer_id: int,
    current_user: ActiveUserDep,
    db: SessionDep,
    client: TextGenerationDep,
) -> Eli5Response:
    """Generate a plain-language explanation and save it on the answer."""
    answer, result = await _explain(db, answer_id, client)
    if not result.ok:
        return Eli5Response(answer_id=answer.id, eli5_content=None, error=result.error)
    content_service.store_eli5(db, answer, result.text)
    return Eli5Response(answer_id=answer.id, eli5_content=result.text, stored=True)
