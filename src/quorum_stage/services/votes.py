"""Vote ledger for questions and answers.

Each voter holds at most one ``ContentVote`` row per content item. Casting a
vote inserts, flips or deletes that row and moves the content's counters
with SQL-side increments in the same transaction, so concurrent voters never
overwrite each other's changes. Flips and withdrawals only apply while the
row still holds the direction they were computed from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorum_stage.core.errors import ConflictError, InvalidArgumentError, NotFoundError, SelfVoteError
from quorum_stage.core.settings import settings
from quorum_stage.db.time import utcnow
from quorum_stage.models import Answer, ContentRef, ContentVote, Question, User
from quorum_stage.models.content import AnswerRef, content_model, resolve_content
from quorum_stage.models.vote import VOTE_DOWN, VOTE_UP
from quorum_stage.services.notifications import notify
from quorum_stage.services.reputation import apply_reputation_delta

logger = logging.getLogger(__name__)

VOTE_TYPES = {"upvote": VOTE_UP, "downvote": VOTE_DOWN}


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a vote call: the refreshed content and the voter's new state."""

    content: Question | Answer
    previous_direction: int
    direction: int


def parse_vote_type(vote_type: str) -> int:
    """Translate ``upvote``/``downvote`` into a direction."""
    try:
        return VOTE_TYPES[vote_type]
    except KeyError as err:
        raise InvalidArgumentError("Invalid vote type") from err


def _next_direction(previous: int, requested: int) -> int:
    # Repeating the vote you already hold withdraws it.
    return 0 if previous == requested else requested


def _update_ledger(
    db: Session,
    *,
    ref: ContentRef,
    voter_id: int,
    previous: int,
    direction: int,
) -> bool:
    """Move the voter's row from ``previous`` to ``direction``.

    Existing rows are only touched while they still hold ``previous``; returns
    False when another request changed the row first.
    """
    if previous == 0:
        # A racing insert fails on the primary key at commit.
        db.add(
            ContentVote(
                content_type=ref.content_type.value,
                content_id=ref.id,
                voter_id=voter_id,
                direction=direction,
            )
        )
        return True

    current_row = (
        ContentVote.content_type == ref.content_type.value,
        ContentVote.content_id == ref.id,
        ContentVote.voter_id == voter_id,
        ContentVote.direction == previous,
    )
    if direction == 0:
        result = db.execute(delete(ContentVote).where(*current_row))
    else:
        result = db.execute(
            update(ContentVote)
            .where(*current_row)
            .values(direction=direction, updated_at=utcnow())
        )
    return result.rowcount == 1


def _update_counters(db: Session, ref: ContentRef, previous: int, direction: int) -> None:
    up_delta = int(direction == VOTE_UP) - int(previous == VOTE_UP)
    down_delta = int(direction == VOTE_DOWN) - int(previous == VOTE_DOWN)
    if not up_delta and not down_delta:
        return
    model = content_model(ref)
    db.execute(
        update(model)
        .where(model.id == ref.id)
        .values(
            upvotes=model.upvotes + up_delta,
            downvotes=model.downvotes + down_delta,
        )
    )


def _vote_reason(ref: ContentRef, previous: int, direction: int) -> str:
    noun = ref.content_type.value.capitalize()
    if direction == 0:
        return f"{noun} vote removed"
    if previous:
        return f"{noun} vote changed"
    return f"{noun} {'upvoted' if direction == VOTE_UP else 'downvoted'}"


def _reputation_delta(ref: ContentRef, previous: int, direction: int) -> int:
    rewards = settings.vote_rewards[ref.content_type.value]
    return rewards.get(direction, 0) - rewards.get(previous, 0)


def apply_vote(db: Session, ref: ContentRef, voter: User, vote_type: str) -> VoteOutcome:
    """Cast, flip or withdraw ``voter``'s vote on the referenced content.

    Raises:
        InvalidArgumentError: If ``vote_type`` is unknown.
        NotFoundError: If the content does not exist or is soft-deleted.
        SelfVoteError: If the voter authored the content.
        ConflictError: If a concurrent request from the same voter changed the
            vote first.
    """
    requested = parse_vote_type(vote_type)
    content = resolve_content(db, ref)
    if content is None:
        raise NotFoundError(f"{ref.content_type.value.capitalize()} not found")
    if content.author_id == voter.id:
        raise SelfVoteError()

    existing = db.get(ContentVote, (ref.content_type.value, ref.id, voter.id))
    previous = existing.direction if existing is not None else 0
    direction = _next_direction(previous, requested)

    question_id = content.question_id if isinstance(ref, AnswerRef) else content.id
    answer_id = content.id if isinstance(ref, AnswerRef) else None

    if not _update_ledger(
        db,
        ref=ref,
        voter_id=voter.id,
        previous=previous,
        direction=direction,
    ):
        db.rollback()
        raise ConflictError("Vote was changed by another request, please retry")
    _update_counters(db, ref, previous, direction)
    apply_reputation_delta(
        db,
        content.author_id,
        _reputation_delta(ref, previous, direction),
        _vote_reason(ref, previous, direction),
        question_id=question_id,
        answer_id=answer_id,
    )

    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Vote is already being recorded") from err

    db.refresh(content)
    logger.info(
        "User %s vote on %s %s: %s -> %s",
        voter.id,
        ref.content_type.value,
        ref.id,
        previous,
        direction,
    )

    # Authors hear about every vote call, withdrawals included.
    notify(
        db,
        recipient_id=content.author_id,
        sender_id=voter.id,
        type_="vote",
        title="New vote",
        message=f"{voter.name} voted on your {ref.content_type.value}",
        question_id=question_id,
        answer_id=answer_id,
    )
    return VoteOutcome(content=content, previous_direction=previous, direction=direction)


def get_my_vote(db: Session, ref: ContentRef, voter_id: int) -> int:
    """Return the voter's direction on the content, or 0 when they hold no vote."""
    vote = db.get(ContentVote, (ref.content_type.value, ref.id, voter_id))
    return vote.direction if vote is not None else 0
