"""API Teams: statistiche squadra e radar contro le squadre della stessa lega."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.teams import TeamStatsResponse
from app.services.common import INVALID_ID_ERROR
from app.services.team_service import get_team_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("/{team_id}/stats", response_model=TeamStatsResponse)
def team_stats(team_id: str, scope: str = "recent", db: Session = Depends(get_db)):
    """
    Totali, per-partita e radar di lega della squadra.
    Se il DB non risponde: ok=False con error, mai 500.
    """
    result = get_team_stats(team_id, db, scope=scope)
    if result.error == INVALID_ID_ERROR:
        logger.info("Richiesta con team_id non valido: %r", team_id)
        return JSONResponse(status_code=400, content=result.model_dump())
    return result
