"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from quorum_stage.core.settings import settings
from quorum_stage.db.session import get_db
from quorum_stage.models import User

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_user_id(token: str) -> int:
    """Extract the numeric user id from a JWT.

    Raises:
        HTTPException: If the token is invalid or carries no usable subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise _credentials_error() from err

    subject = payload.get("sub")
    if subject is None:
        raise _credentials_error()
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise _credentials_error() from err


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    user_id = _decode_user_id(credentials.credentials)
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the caller when a valid token is present, otherwise ``None``."""
    if credentials is None:
        return None
    return get_current_user(credentials, db)


def get_active_user(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Reject banned accounts on write operations."""
    if current_user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been banned",
        )
    return current_user


def get_admin_user(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Allow only admin accounts."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


# Type aliases for identity dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
ActiveUserDep = Annotated[User, Depends(get_active_user)]
AdminUserDep = Annotated[User, Depends(get_admin_user)]

# Shared pagination parameters
PageDep = Annotated[int, Query(ge=1, description="1-based page number")]
LimitDep = Annotated[
    int,
    Query(ge=1, le=settings.max_page_size, description="Items per page"),
]
