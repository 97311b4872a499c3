"""Authentication endpoints for the Quorum API."""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from quorum_stage.api.v1.dependencies import CurrentUserDep, SessionDep
from quorum_stage.core.security import create_access_token
from quorum_stage.schemas.user import SignupRequest, TokenResponse, UserResponse
from quorum_stage.services import users as user_service

router = APIRouter(prefix="/auth", tags=["authentication"])


class LoginRequest(BaseModel):
    """Email and password login."""

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def signup(payload: SignupRequest, db: SessionDep) -> TokenResponse:
    """Register a new account and return an access token for it."""
    user = user_service.create_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    return TokenResponse(access_token=create_access_token(user.id))


@router.post("/login", response_model=TokenResponse, summary="Exchange credentials for a token")
async def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Authenticate with email and password."""
    user = user_service.authenticate(db, payload.email, payload.password)
    return TokenResponse(access_token=create_access_token(user.id))


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: CurrentUserDep) -> UserResponse:
    """Return the authenticated account."""
    return UserResponse.model_validate(current_user)
