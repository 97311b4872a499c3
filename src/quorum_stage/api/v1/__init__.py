# src/quorum_stage/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    answers_router,
    auth_router,
    bookmarks_router,
    comments_router,
    flags_router,
    leaderboard_router,
    notifications_router,
    questions_router,
    users_router,
    votes_router,
)

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
