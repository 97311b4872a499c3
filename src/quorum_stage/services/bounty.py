"""Reputation bounties on questions."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from quorum_stage.core.errors import ForbiddenError, InvalidArgumentError
from quorum_stage.db.time import utcnow
from quorum_stage.models import Question, User
from quorum_stage.models.question import BOUNTY_AWARDED, BOUNTY_OPEN
from quorum_stage.services.content import get_answer_or_404, get_question_or_404
from quorum_stage.services.notifications import notify
from quorum_stage.services.reputation import apply_reputation_delta

logger = logging.getLogger(__name__)


def offer_bounty(db: Session, question_id: int, user: User, amount: int) -> Question:
    """Move ``amount`` reputation from the asker into the question's bounty.

    Offering again while a bounty is open adds to it.
    """
    question = get_question_or_404(db, question_id)
    if question.author_id != user.id:
        raise ForbiddenError("Only the question author can offer a bounty")
    if amount <= 0:
        raise InvalidArgumentError("Bounty amount must be positive")
    if question.bounty_status == BOUNTY_AWARDED:
        raise InvalidArgumentError("Bounty has already been awarded")

    db.refresh(user)
    if user.reputation < amount:
        raise InvalidArgumentError("Insufficient reputation for this bounty")

    apply_reputation_delta(db, user.id, -amount, "Bounty offered", question_id=question.id)
    question.bounty_amount = question.bounty_amount + amount
    question.bounty_status = BOUNTY_OPEN
    db.commit()
    db.refresh(question)
    logger.info("User %s offered %d bounty on question %s", user.id, amount, question.id)
    return question


def award_bounty(db: Session, question_id: int, user: User, answer_id: int) -> Question:
    """Pay the open bounty of a question to one of its answers."""
    question = get_question_or_404(db, question_id)
    if question.author_id != user.id:
        raise ForbiddenError("Only the question author can award the bounty")
    if question.bounty_status != BOUNTY_OPEN or question.bounty_amount <= 0:
        raise InvalidArgumentError("No open bounty on this question")
    answer = get_answer_or_404(db, answer_id)
    if answer.question_id != question.id:
        raise InvalidArgumentError("Answer does not belong to this question")
    if answer.author_id == user.id:
        raise InvalidArgumentError("You cannot award a bounty to yourself")

    amount = question.bounty_amount
    apply_reputation_delta(
        db,
        answer.author_id,
        amount,
        "Bounty awarded",
        question_id=question.id,
        answer_id=answer.id,
    )
    question.bounty_status = BOUNTY_AWARDED
    question.bounty_awarded_to_id = answer.author_id
    question.bounty_awarded_at = utcnow()
    db.commit()
    db.refresh(question)
    logger.info("Question %s bounty of %d awarded to answer %s", question.id, amount, answer.id)

    notify(
        db,
        recipient_id=answer.author_id,
        sender_id=user.id,
        type_="accept",
        title="Bounty awarded",
        message=f"You received a {amount} reputation bounty on \"{question.title}\"",
        question_id=question.id,
        answer_id=answer.id,
    )
    return question
