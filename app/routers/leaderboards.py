"""API Leaderboards: classifiche della home calcolate in parallelo."""

from fastapi import APIRouter, Depends, Query

from app.core.database import get_session_factory
from app.schemas.leaderboards import LeaderboardsResponse
from app.services.leaderboard_service import DEFAULT_LIMIT, get_leaderboards

router = APIRouter(prefix="/api/leaderboards", tags=["leaderboards"])


@router.get("", response_model=LeaderboardsResponse)
async def leaderboards(
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
    session_factory=Depends(get_session_factory),
):
    """
    Cinque classifiche sui tornei ufficiali. Ogni blocco e' indipendente:
    un blocco con ok=False non invalida gli altri.
    """
    return await get_leaderboards(session_factory, limit=limit)
