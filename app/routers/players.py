"""
API Players: radar percentile per cluster, statistiche aggregate, profilo.

L'id arriva come stringa e viene validato dal service: id non numerici o
non positivi -> 400 con lo stesso corpo della risposta (ok=False).
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.players import PlayerProfileResponse, PlayerRadarResponse, PlayerStatsResponse
from app.services.common import INVALID_ID_ERROR
from app.services.player_service import get_player_profile, get_player_radar, get_player_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/players", tags=["players"])


def _bad_request(result, raw_id: str) -> JSONResponse:
    logger.info("Richiesta con player_id non valido: %r", raw_id)
    return JSONResponse(status_code=400, content=result.model_dump())


@router.get("/{player_id}/radar", response_model=PlayerRadarResponse)
def player_radar(
    player_id: str,
    role: str | None = None,
    tournament_ids: list[int] | None = Query(default=None),
    db: Session = Depends(get_db),
):
    """
    Radar del giocatore contro i pari cluster nei tornei ufficiali.

    Parametri opzionali:
      - role: codice ruolo (es. ЦЗ) al posto del ruolo rilevato
      - tournament_ids: allow-list di tornei (ripetibile)

    ready=False + reason quando il radar non e' calcolabile (mai errore HTTP).
    """
    result = get_player_radar(player_id, db, role=role, tournament_ids=tournament_ids)
    if result.error == INVALID_ID_ERROR:
        return _bad_request(result, player_id)
    return result


@router.get("/{player_id}/stats", response_model=PlayerStatsResponse)
def player_stats(player_id: str, scope: str = "recent", db: Session = Depends(get_db)):
    """Totali e per-partita. scope=recent (stagioni ufficiali) oppure all."""
    result = get_player_stats(player_id, db, scope=scope)
    if result.error == INVALID_ID_ERROR:
        return _bad_request(result, player_id)
    return result


@router.get("/{player_id}/profile", response_model=PlayerProfileResponse)
def player_profile(player_id: str, db: Session = Depends(get_db)):
    result = get_player_profile(player_id, db)
    if result.error == INVALID_ID_ERROR:
        return _bad_request(result, player_id)
    return result
