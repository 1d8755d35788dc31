"""
Servizio statistiche squadra: totali e per-partita sui tornei eleggibili,
radar percentile contro le squadre della stessa lega.

La lega della squadra e' quella del torneo della sua ultima partita nello
scope. Il pool e' l'insieme delle squadre con partite nei tornei di quella
lega; il radar della squadra usa la SUA riga di quello stesso pool.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.analytics.aggregation import aggregate, empty_totals, per_match, public_totals
from app.analytics.eligibility import SCOPE_RECENT, VALID_SCOPES, MatchScope, league_label, resolve_official
from app.analytics.peer_pool import build_pool, group_rows
from app.analytics.radar import build_team_radar
from app.core.config import get_season_min, get_team_min_matches
from app.schemas.teams import TeamStatsResponse
from app.services.common import INVALID_ID_ERROR, radar_out, rounded, validate_entity_id
from app.services.data_source import DataUnavailableError, MatchDataSource

logger = logging.getLogger(__name__)


def _empty_result(result: TeamStatsResponse, error: str) -> TeamStatsResponse:
    """Risposta degradata: totali a zero, nessun radar."""
    empty = empty_totals()
    result.ok = False
    result.error = error
    result.matches = 0
    result.totals = rounded(public_totals(empty))
    result.per_match = rounded(per_match(empty))
    result.radar = []
    return result


def get_team_stats(
    team_id: Any,
    db: Session,
    scope: str = SCOPE_RECENT,
    min_season: int | None = None,
    min_matches: int | None = None,
) -> TeamStatsResponse:
    """
    Statistiche squadra + radar di lega.

    Flusso:
      1. Tornei eleggibili (scope recent: stagione >= min_season; all: qualsiasi stagione)
      2. Totali della squadra sullo scope
      3. Etichetta di lega dall'ultima partita
      4. Pool delle squadre della lega (tornei dello scope con la stessa etichetta)
      5. Radar: percentile della riga della squadra nel pool

    Se il pool non e' disponibile il radar resta vuoto ma i totali vengono restituiti.
    """
    tid = validate_entity_id(team_id)
    if tid is None:
        return TeamStatsResponse(ok=False, error=INVALID_ID_ERROR)
    if scope not in VALID_SCOPES:
        scope = SCOPE_RECENT
    min_season = get_season_min() if min_season is None else min_season
    min_matches = get_team_min_matches() if min_matches is None else min_matches

    source = MatchDataSource(db)
    result = TeamStatsResponse(team_id=tid, scope=scope)

    try:
        team = source.fetch_team(tid)
        result.team_name = team["name"] if team else None

        all_tournaments = source.fetch_tournaments()
        match_scope, used = resolve_official(all_tournaments, min_season, scope)
        totals = aggregate(source.fetch_team_appearances(tid, match_scope))
    except DataUnavailableError as e:
        logger.warning("Stats team_id=%s: dati non disponibili: %s", tid, e)
        return _empty_result(result, str(e))
    except Exception as e:
        logger.exception("Errore stats team_id=%s: %s", tid, e)
        return _empty_result(result, f"{type(e).__name__}: {e}")

    result.matches = totals["matches"]
    result.totals = rounded(public_totals(totals))
    result.per_match = rounded(per_match(totals))
    if totals["matches"] == 0:
        return result

    try:
        latest = source.fetch_team_latest_tournament(tid, match_scope)
        label = league_label(latest) if latest else None
        result.league_label = label
        if label is None:
            return result

        league_scope = MatchScope.from_ids(t["id"] for t in used if league_label(t["name"]) == label)
        grouped = group_rows(source.fetch_pool_appearances(league_scope), "team_id")
        pool = build_pool(grouped, min_matches)
        result.teams_in_league = len(pool)

        team_league_totals = aggregate(grouped.get(tid, []))
        result.radar = radar_out(build_team_radar(team_league_totals, pool))
    except DataUnavailableError as e:
        # totali gia' calcolati: si degrada al solo radar vuoto
        logger.warning("Radar lega team_id=%s non disponibile: %s", tid, e)
        result.ok = False
        result.error = str(e)
    except Exception as e:
        logger.exception("Errore radar lega team_id=%s: %s", tid, e)
        result.ok = False
        result.radar = []
        result.error = f"{type(e).__name__}: {e}"

    return result
