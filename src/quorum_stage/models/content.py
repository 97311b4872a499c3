# src/quorum_stage/models/content.py
"""Typed references to votable and flaggable content."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from sqlalchemy.orm import Session

from .answer import Answer
from .question import Question


class ContentType(str, Enum):
    """Kinds of content that can be voted on or flagged."""

    QUESTION = "question"
    ANSWER = "answer"


@dataclass(frozen=True)
class QuestionRef:
    """Reference to a question by id."""

    id: int
    content_type = ContentType.QUESTION


@dataclass(frozen=True)
class AnswerRef:
    """Reference to an answer by id."""

    id: int
    content_type = ContentType.ANSWER


ContentRef = QuestionRef | AnswerRef


def content_ref(content_type: ContentType | str, content_id: int) -> ContentRef:
    """Build a reference from a ``(type, id)`` pair.

    Raises:
        ValueError: If ``content_type`` is not a known content type.
    """
    kind = ContentType(content_type)
    if kind is ContentType.QUESTION:
        return QuestionRef(content_id)
    if kind is ContentType.ANSWER:
        return AnswerRef(content_id)
    assert_never(kind)


def content_model(ref: ContentRef) -> type[Question] | type[Answer]:
    """Return the ORM class backing a reference."""
    if isinstance(ref, QuestionRef):
        return Question
    if isinstance(ref, AnswerRef):
        return Answer
    assert_never(ref)


def resolve_content(
    db: Session,
    ref: ContentRef,
    *,
    include_deleted: bool = False,
) -> Question | Answer | None:
    """Load the row a reference points at.

    Soft-deleted rows resolve to ``None`` unless ``include_deleted`` is set.
    """
    content = db.get(content_model(ref), ref.id)
    if content is None:
        return None
    if content.is_deleted and not include_deleted:
        return None
    return content
