# src/quorum_stage/models/__init__.py
"""SQLAlchemy models for the Quorum application."""

from .answer import Answer
from .bookmark import Bookmark
from .comment import Comment
from .content import AnswerRef, ContentRef, ContentType, QuestionRef, content_ref, resolve_content
from .flag import Flag
from .follow import QuestionFollow
from .notification import Notification
from .question import Question, QuestionTag
from .reputation import ReputationEvent
from .user import User
from .vote import ContentVote

__all__ = [
    "Answer",
    "Bookmark",
    "Comment",
    "AnswerRef", "ContentRef", "ContentType", "QuestionRef", "content_ref", "resolve_content",
    "Flag",
    "QuestionFollow",
    "Notification",
    "Question", "QuestionTag",
    "ReputationEvent",
    "User",
    "ContentVote",
]
