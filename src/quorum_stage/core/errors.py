"""Domain error taxonomy shared by services and the HTTP layer.

Services raise these exceptions; ``quorum_stage.main`` registers handlers
that translate each kind into an HTTP status code.
"""

from __future__ import annotations

from fastapi import status


class QuorumError(RuntimeError):
    """Base exception for all domain failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class UnauthorizedError(QuorumError):
    """Raised when no valid identity accompanies the request."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(QuorumError):
    """Raised when the caller lacks the role or standing for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(QuorumError):
    """Raised when a referenced entity does not exist or is soft-deleted."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidArgumentError(QuorumError):
    """Raised for malformed input or an operation that is not allowed on the target."""

    status_code = status.HTTP_400_BAD_REQUEST


class SelfVoteError(InvalidArgumentError):
    """Raised when a user votes on content they authored."""

    def __init__(self, detail: str = "You cannot vote on your own content") -> None:
        super().__init__(detail)


class ConflictError(QuorumError):
    """Raised when a uniqueness rule would be violated."""

    status_code = status.HTTP_409_CONFLICT
