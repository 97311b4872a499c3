# src/quorum_stage/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import MessageResponse, PageMeta
from .flag import FlagCreate, FlagResponse, ModerationAction, ModerationResponse
from .question import AnswerCreate, AnswerResponse, QuestionCreate, QuestionResponse
from .user import SignupRequest, TokenResponse, UserResponse, UserSummary
from .vote import MyVoteResponse, VoteCreate, VoteResponse

__all__ = [
    "MessageResponse", "PageMeta",
    "FlagCreate", "FlagResponse", "ModerationAction", "ModerationResponse",
    "AnswerCreate", "AnswerResponse", "QuestionCreate", "QuestionResponse",
    "SignupRequest", "TokenResponse", "UserResponse", "UserSummary",
    "MyVoteResponse", "VoteCreate", "VoteResponse",
]
