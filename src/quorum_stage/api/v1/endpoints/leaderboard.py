"""Leaderboard endpoint."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query

from quorum_stage.api.v1.dependencies import SessionDep
from quorum_stage.core.settings import settings
from quorum_stage.schemas.engagement import LeaderboardEntryResponse, LeaderboardResponse
from quorum_stage.services.leaderboard import rank

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/", response_model=LeaderboardResponse)
async def get_leaderboard(
    db: SessionDep,
    range_: Annotated[Literal["all", "week", "month"], Query(alias="range")] = "all",
    limit: Annotated[int, Query(ge=1, le=settings.leaderboard_max_limit)] = 10,
) -> LeaderboardResponse:
    """Rank non-admin users by reputation for the given time range."""
    entries = rank(db, range_, limit)
    return LeaderboardResponse(
        range=range_,
        entries=[LeaderboardEntryResponse.model_validate(entry) for entry in entries],
    )
