"""Question and answer storage: CRUD, soft delete, restore and acceptance."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import exists, func, select, update
from sqlalchemy.orm import Session

from quorum_stage.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from quorum_stage.core.settings import settings
from quorum_stage.db.time import utcnow
from quorum_stage.models import Answer, ContentRef, Question, QuestionTag, User
from quorum_stage.models.content import ContentType, resolve_content
from quorum_stage.services.notifications import notify
from quorum_stage.services.reputation import apply_reputation_delta

logger = logging.getLogger(__name__)

__all__ = [
    "normalize_tags",
    "create_question",
    "list_questions",
    "get_question_or_404",
    "view_question",
    "update_question",
    "create_answer",
    "list_answers",
    "list_answers_with_questions",
    "get_answer_or_404",
    "update_answer",
    "accept_answer",
    "soft_delete",
    "restore",
    "list_deleted",
    "store_eli5",
]

QUESTION_SORTS = ("newest", "recent", "oldest", "votes", "views", "answers")
QUESTION_FILTERS = ("all", "unanswered", "answered")
ANSWER_SORTS = ("newest", "oldest", "votes", "accepted")
ANSWER_FILTERS = ("all", "accepted", "not-accepted")


def _require_author_or_admin(user: User, author_id: int, noun: str) -> None:
    if user.id != author_id and not user.is_admin:
        raise ForbiddenError(f"Not authorized to modify this {noun}")


def normalize_tags(tags: Sequence[str]) -> list[str]:
    """Lower-case, strip and de-duplicate tags, keeping their order."""
    cleaned: list[str] = []
    for tag in tags:
        value = tag.strip().lower()
        if value and value not in cleaned:
            cleaned.append(value)
    if not cleaned:
        raise InvalidArgumentError("At least one tag is required")
    if len(cleaned) > settings.max_question_tags:
        raise InvalidArgumentError(f"At most {settings.max_question_tags} tags are allowed")
    return cleaned


def _set_tags(question: Question, tags: list[str]) -> None:
    question.tag_rows = [
        QuestionTag(tag=tag, position=position) for position, tag in enumerate(tags)
    ]


def create_question(
    db: Session,
    author: User,
    *,
    title: str,
    content: str,
    tags: Sequence[str],
    is_anonymous: bool = False,
) -> Question:
    """Persist a new question."""
    question = Question(
        title=title.strip(),
        content=content,
        author_id=author.id,
        is_anonymous=is_anonymous,
    )
    _set_tags(question, normalize_tags(tags))
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("User %s asked question %s", author.id, question.id)
    return question


def list_questions(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    sort: str = "newest",
    filter_: str = "all",
    tag: str | None = None,
    search: str | None = None,
    author_id: int | None = None,
    include_deleted: bool = False,
) -> tuple[Sequence[Question], int]:
    """Return one page of questions and the total match count.

    Soft-deleted questions are only listed with ``include_deleted``. Search
    matches the title, the body or a tag.
    """
    if sort not in QUESTION_SORTS:
        raise InvalidArgumentError(f"Unknown sort '{sort}'")
    if filter_ not in QUESTION_FILTERS:
        raise InvalidArgumentError(f"Unknown filter '{filter_}'")

    query = db.query(Question)
    if not include_deleted:
        query = query.filter(Question.is_deleted.is_(False))
    if author_id is not None:
        query = query.filter(Question.author_id == author_id)
    if filter_ != "all":
        has_answer = exists().where(
            Answer.question_id == Question.id,
            Answer.is_deleted.is_(False),
        )
        query = query.filter(~has_answer if filter_ == "unanswered" else has_answer)
    if tag:
        tagged = exists().where(
            QuestionTag.question_id == Question.id,
            QuestionTag.tag == tag.strip().lower(),
        )
        query = query.filter(tagged)
    if search:
        pattern = f"%{search.strip()}%"
        tag_match = exists().where(
            QuestionTag.question_id == Question.id,
            QuestionTag.tag.ilike(pattern),
        )
        query = query.filter(
            Question.title.ilike(pattern) | Question.content.ilike(pattern) | tag_match
        )

    answer_count = (
        select(func.count(Answer.id))
        .where(Answer.question_id == Question.id, Answer.is_deleted.is_(False))
        .correlate(Question)
        .scalar_subquery()
    )
    ordering = {
        "newest": (Question.created_at.desc(), Question.id.desc()),
        "recent": (Question.updated_at.desc(), Question.id.desc()),
        "oldest": (Question.created_at.asc(), Question.id.asc()),
        "votes": ((Question.upvotes - Question.downvotes).desc(), Question.id.desc()),
        "views": (Question.views.desc(), Question.id.desc()),
        "answers": (answer_count.desc(), Question.id.desc()),
    }[sort]

    total = query.count()
    items = query.order_by(*ordering).offset((page - 1) * limit).limit(limit).all()
    return items, total


def get_question_or_404(db: Session, question_id: int, *, include_deleted: bool = False) -> Question:
    """Return a question or raise ``NotFoundError``."""
    question = db.get(Question, question_id)
    if question is None or (question.is_deleted and not include_deleted):
        raise NotFoundError("Question not found")
    return question


def view_question(db: Session, question_id: int) -> Question:
    """Return a live question after counting one view."""
    question = get_question_or_404(db, question_id)
    db.execute(
        update(Question)
        .where(Question.id == question_id)
        .values(views=Question.views + 1)
    )
    db.commit()
    db.refresh(question)
    return question


def update_question(
    db: Session,
    question_id: int,
    user: User,
    *,
    title: str | None = None,
    content: str | None = None,
    tags: Sequence[str] | None = None,
) -> Question:
    """Edit a question; only its author or an admin may do so."""
    question = get_question_or_404(db, question_id)
    _require_author_or_admin(user, question.author_id, "question")
    if title is not None:
        question.title = title.strip()
    if content is not None:
        question.content = content
    if tags is not None:
        _set_tags(question, normalize_tags(tags))
    db.commit()
    db.refresh(question)
    return question


def create_answer(db: Session, question_id: int, author: User, *, content: str) -> Answer:
    """Post an answer to a live question and tell the asker."""
    question = get_question_or_404(db, question_id)
    answer = Answer(question_id=question.id, author_id=author.id, content=content)
    db.add(answer)
    db.commit()
    db.refresh(answer)
    logger.info("User %s answered question %s", author.id, question.id)

    if question.author_id != author.id:
        notify(
            db,
            recipient_id=question.author_id,
            sender_id=author.id,
            type_="answer",
            title="New answer",
            message=f"{author.name} answered your question \"{question.title}\"",
            question_id=question.id,
            answer_id=answer.id,
        )
    return answer


def list_answers(db: Session, question_id: int, *, sort: str = "votes") -> Sequence[Answer]:
    """Return the live answers of a live question."""
    if sort not in ANSWER_SORTS:
        raise InvalidArgumentError(f"Unknown sort '{sort}'")
    get_question_or_404(db, question_id)

    net = (Answer.upvotes - Answer.downvotes).desc()
    ordering = {
        "newest": (Answer.created_at.desc(), Answer.id.desc()),
        "oldest": (Answer.created_at.asc(), Answer.id.asc()),
        "votes": (Answer.is_accepted.desc(), net, Answer.id.asc()),
        "accepted": (Answer.is_accepted.desc(), Answer.created_at.desc(), Answer.id.desc()),
    }[sort]
    return (
        db.query(Answer)
        .filter(Answer.question_id == question_id, Answer.is_deleted.is_(False))
        .order_by(*ordering)
        .all()
    )


def list_answers_with_questions(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    sort: str = "newest",
    filter_: str = "all",
    search: str | None = None,
    author_id: int | None = None,
    include_deleted: bool = False,
) -> tuple[Sequence[tuple[Answer, str]], int]:
    """Return one page of answers across questions, each with its question title."""
    if sort not in ANSWER_SORTS:
        raise InvalidArgumentError(f"Unknown sort '{sort}'")
    if filter_ not in ANSWER_FILTERS:
        raise InvalidArgumentError(f"Unknown filter '{filter_}'")

    query = db.query(Answer, Question.title).join(Question, Question.id == Answer.question_id)
    if not include_deleted:
        query = query.filter(Answer.is_deleted.is_(False))
    if author_id is not None:
        query = query.filter(Answer.author_id == author_id)
    if filter_ == "accepted":
        query = query.filter(Answer.is_accepted.is_(True))
    elif filter_ == "not-accepted":
        query = query.filter(Answer.is_accepted.is_(False))
    if search:
        query = query.filter(Answer.content.ilike(f"%{search.strip()}%"))

    ordering = {
        "newest": (Answer.created_at.desc(), Answer.id.desc()),
        "oldest": (Answer.created_at.asc(), Answer.id.asc()),
        "votes": ((Answer.upvotes - Answer.downvotes).desc(), Answer.id.desc()),
        "accepted": (Answer.is_accepted.desc(), Answer.created_at.desc(), Answer.id.desc()),
    }[sort]

    total = query.count()
    rows = query.order_by(*ordering).offset((page - 1) * limit).limit(limit).all()
    return [(answer, title) for answer, title in rows], total


def get_answer_or_404(db: Session, answer_id: int, *, include_deleted: bool = False) -> Answer:
    """Return an answer or raise ``NotFoundError``."""
    answer = db.get(Answer, answer_id)
    if answer is None or (answer.is_deleted and not include_deleted):
        raise NotFoundError("Answer not found")
    return answer


def update_answer(db: Session, answer_id: int, user: User, *, content: str) -> Answer:
    """Edit an answer; only its author or an admin may do so."""
    answer = get_answer_or_404(db, answer_id)
    _require_author_or_admin(user, answer.author_id, "answer")
    answer.content = content
    # A stored explanation no longer matches edited content.
    answer.eli5_content = None
    db.commit()
    db.refresh(answer)
    return answer


def accept_answer(db: Session, question_id: int, answer_id: int, user: User) -> Answer:
    """Mark an answer as the accepted one for its question.

    Any previously accepted answer is un-accepted and its author loses the
    acceptance bonus. Accepting the already accepted answer is a no-op.
    """
    question = get_question_or_404(db, question_id)
    if question.author_id != user.id:
        raise ForbiddenError("Only the question author can accept an answer")
    answer = get_answer_or_404(db, answer_id)
    if answer.question_id != question.id:
        raise InvalidArgumentError("Answer does not belong to this question")
    if answer.is_accepted:
        return answer

    bonus = settings.reputation_answer_accepted
    previous = db.query(Answer).filter(
        Answer.question_id == question.id,
        Answer.is_accepted.is_(True),
    ).first()
    if previous is not None:
        previous.is_accepted = False
        db.flush()
        if previous.author_id != question.author_id:
            apply_reputation_delta(
                db,
                previous.author_id,
                -bonus,
                "Accepted answer revoked",
                question_id=question.id,
                answer_id=previous.id,
            )

    answer.is_accepted = True
    question.accepted_answer_id = answer.id
    if answer.author_id != question.author_id:
        apply_reputation_delta(
            db,
            answer.author_id,
            bonus,
            "Answer accepted",
            question_id=question.id,
            answer_id=answer.id,
        )
    db.commit()
    db.refresh(answer)
    logger.info("Question %s accepted answer %s", question.id, answer.id)

    if answer.author_id != user.id:
        notify(
            db,
            recipient_id=answer.author_id,
            sender_id=user.id,
            type_="accept",
            title="Answer accepted",
            message=f"Your answer to \"{question.title}\" was accepted",
            question_id=question.id,
            answer_id=answer.id,
        )
    return answer


def soft_delete(db: Session, ref: ContentRef, user: User) -> Question | Answer:
    """Hide content without removing it; author or admin only."""
    content = resolve_content(db, ref)
    if content is None:
        raise NotFoundError(f"{ref.content_type.value.capitalize()} not found")
    _require_author_or_admin(user, content.author_id, ref.content_type.value)
    content.is_deleted = True
    content.deleted_at = utcnow()
    db.commit()
    db.refresh(content)
    logger.info("User %s deleted %s %s", user.id, ref.content_type.value, ref.id)
    return content


def restore(db: Session, ref: ContentRef, admin: User) -> Question | Answer:
    """Bring soft-deleted content back; admin only."""
    if not admin.is_admin:
        raise ForbiddenError("Admin access required")
    content = resolve_content(db, ref, include_deleted=True)
    if content is None:
        raise NotFoundError(f"{ref.content_type.value.capitalize()} not found")
    if not content.is_deleted:
        raise InvalidArgumentError(f"{ref.content_type.value.capitalize()} is not deleted")
    content.is_deleted = False
    content.deleted_at = None
    db.commit()
    db.refresh(content)
    logger.info("Admin %s restored %s %s", admin.id, ref.content_type.value, ref.id)
    return content


def list_deleted(
    db: Session,
    content_type: ContentType,
    *,
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[Question | Answer], int]:
    """Return one page of soft-deleted questions or answers, most recently deleted first."""
    model = Question if content_type is ContentType.QUESTION else Answer
    query = db.query(model).filter(model.is_deleted.is_(True))
    total = query.count()
    items = (
        query.order_by(model.deleted_at.desc(), model.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def store_eli5(db: Session, answer: Answer, text: str) -> Answer:
    """Save a generated plain-language explanation on an answer."""
    answer.eli5_content = text
    db.commit()
    db.refresh(answer)
    return answer
