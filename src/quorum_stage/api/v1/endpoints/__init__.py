# src/quorum_stage/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .answers import router as answers_router
from .auth import router as auth_router
from .bookmarks import router as bookmarks_router
from .comments import router as comments_router
from .flags import router as flags_router
from .leaderboard import router as leaderboard_router
from .notifications import router as notifications_router
from .questions import router as questions_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "admin_router",
    "answers_router",
    "auth_router",
    "bookmarks_router",
    "comments_router",
    "flags_router",
    "leaderboard_router",
    "notifications_router",
    "questions_router",
    "users_router",
    "votes_router",
]
