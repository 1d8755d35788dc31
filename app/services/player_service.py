"""
Servizio metriche giocatore: radar percentile per cluster, statistiche
aggregate e profilo (ruolo attuale, distribuzione ruoli e leghe).

Radar, sequenza di gate (il primo che fallisce interrompe il calcolo):
  1. ruolo attuale non determinabile
  2. ruolo fuori dai cluster noti
  3. nessun torneo ufficiale
  4. campione insufficiente (< MIN_SAMPLE_SIZE partite nel cluster)
  5. ready

Lo scope (tornei + codici ruolo del cluster) viene costruito UNA volta e
usato per un'unica lettura del pool: il soggetto e' estratto dallo stesso
insieme di righe, quindi soggetto e pool non possono divergere.

Errori DB -> risposta ok=False con error; errori imprevisti vengono loggati
con traceback e degradano allo stesso modo. Mai eccezioni verso il chiamante.
"""

import logging
from enum import Enum
from typing import Any

from sqlalchemy.orm import Session

from app.analytics.aggregation import AggregateTotals, aggregate, per_match, public_totals
from app.analytics.eligibility import (
    SCOPE_RECENT,
    VALID_SCOPES,
    MatchScope,
    is_eligible,
    league_distribution,
    resolve_official,
)
from app.analytics.peer_pool import PeerPoolRow, build_pool, group_rows
from app.analytics.radar import build_radar
from app.analytics.roles import (
    Cluster,
    RoleResolution,
    cluster_distribution,
    cluster_for_role,
    resolve_current_role,
    role_codes_for,
    role_distribution,
)
from app.core.config import get_min_sample_size, get_recent_role_matches, get_season_min
from app.schemas.players import (
    ClusterShare,
    LeagueShare,
    PlayerProfileResponse,
    PlayerRadarResponse,
    PlayerStatsResponse,
    RoleShare,
)
from app.services.common import INVALID_ID_ERROR, radar_out, rounded, validate_entity_id
from app.services.data_source import DataUnavailableError, MatchDataSource, attach_opponent_xg

logger = logging.getLogger(__name__)


class ReadinessReason(str, Enum):
    ROLE_UNRESOLVED = "Current role could not be determined"
    CLUSTER_UNRESOLVED = "Role is not part of a known cluster"
    NO_ELIGIBLE_TOURNAMENTS = "No official tournaments in scope"
    INSUFFICIENT_SAMPLE = "Not enough matches in cluster, radar unavailable"


# ---------------------------------------------------------------------------
# Ruolo e scope
# ---------------------------------------------------------------------------

def resolve_player_role(source: MatchDataSource, player_id: int, limit: int) -> RoleResolution:
    """Ruolo attuale = moda dei codici ruolo nelle ultime `limit` partite."""
    return resolve_current_role(source.fetch_recent_roles(player_id, limit))


def resolve_scope(
    source: MatchDataSource,
    min_season: int,
    scope: str = SCOPE_RECENT,
    tournament_ids: list[int] | None = None,
) -> tuple[MatchScope, dict[int, str]]:
    """
    Scope dei tornei eleggibili e mappa id -> nome.
    Con tournament_ids esplicito il filtro sui nomi non viene rieseguito.
    """
    all_tournaments = source.fetch_tournaments()
    names = {t["id"]: t["name"] for t in all_tournaments}
    if tournament_ids is not None:
        return MatchScope.from_ids(tournament_ids), names
    match_scope, _ = resolve_official(all_tournaments, min_season, scope)
    return match_scope, names


def build_cluster_comparison(
    source: MatchDataSource,
    player_id: int,
    cluster: Cluster,
    match_scope: MatchScope,
    min_sample_size: int,
) -> tuple[AggregateTotals, list[PeerPoolRow]]:
    """
    Totali del giocatore e pool del cluster da UN'unica lettura sullo stesso scope.
    Il soggetto fa parte del pool se supera la soglia.
    """
    cluster_scope = match_scope.with_roles(role_codes_for(cluster))
    rows = source.fetch_pool_appearances(cluster_scope)
    if cluster == Cluster.GOALKEEPER:
        rows = attach_opponent_xg(rows, source.fetch_opponent_xg(cluster_scope))

    grouped = group_rows(rows, "player_id")
    totals = aggregate(grouped.get(player_id, []))
    pool = build_pool(grouped, min_sample_size)
    return totals, pool


# ---------------------------------------------------------------------------
# API pubblica
# ---------------------------------------------------------------------------

def get_player_radar(
    player_id: Any,
    db: Session,
    role: str | None = None,
    tournament_ids: list[int] | None = None,
    min_season: int | None = None,
    min_sample_size: int | None = None,
    recent_limit: int | None = None,
) -> PlayerRadarResponse:
    """
    Radar percentile del giocatore contro i pari cluster nei tornei ufficiali.

    Parametri opzionali:
      - role: codice ruolo imposto dal chiamante (salta l'auto-detect)
      - tournament_ids: allow-list di tornei gia' risolta dal chiamante
    """
    pid = validate_entity_id(player_id)
    if pid is None:
        return PlayerRadarResponse(ok=False, error=INVALID_ID_ERROR)

    min_season = get_season_min() if min_season is None else min_season
    min_sample_size = get_min_sample_size() if min_sample_size is None else min_sample_size
    recent_limit = get_recent_role_matches() if recent_limit is None else recent_limit

    source = MatchDataSource(db)
    result = PlayerRadarResponse(
        player_id=pid,
        debug={"min_season": min_season, "min_sample_size": min_sample_size},
    )

    try:
        # --- 1-2. Ruolo e cluster ---
        current_role = (role or "").strip() or None
        if current_role is None:
            current_role = resolve_player_role(source, pid, recent_limit).role
        result.current_role = current_role
        if current_role is None:
            result.reason = ReadinessReason.ROLE_UNRESOLVED.value
            return result

        cluster = cluster_for_role(current_role)
        if cluster is None:
            result.reason = ReadinessReason.CLUSTER_UNRESOLVED.value
            return result
        result.cluster = cluster.value

        # --- 3. Tornei ufficiali ---
        match_scope, names = resolve_scope(source, min_season, tournament_ids=tournament_ids)
        player_tournaments = [
            t for t in source.fetch_tournaments(player_id=pid)
            if t["id"] in match_scope.tournament_ids
        ]
        result.tournaments_used = [t["name"] or names.get(t["id"], "") for t in player_tournaments]
        if not player_tournaments:
            result.reason = ReadinessReason.NO_ELIGIBLE_TOURNAMENTS.value
            return result

        # --- 4. Campione ---
        totals, pool = build_cluster_comparison(source, pid, cluster, match_scope, min_sample_size)
        result.matches_in_scope = totals["matches"]
        result.debug["pool_size"] = len(pool)
        if totals["matches"] < min_sample_size or not pool:
            result.reason = ReadinessReason.INSUFFICIENT_SAMPLE.value
            return result

        # --- 5. Radar ---
        result.radar = radar_out(build_radar(cluster, totals, pool))
        result.ready = True
        return result

    except DataUnavailableError as e:
        logger.warning("Radar player_id=%s: dati non disponibili: %s", pid, e)
        result.ok = False
        result.ready = False
        result.error = str(e)
        return result
    except Exception as e:
        logger.exception("Errore radar player_id=%s: %s", pid, e)
        result.ok = False
        result.ready = False
        result.radar = []
        result.error = f"{type(e).__name__}: {e}"
        return result


def get_player_stats(
    player_id: Any,
    db: Session,
    scope: str = SCOPE_RECENT,
    min_season: int | None = None,
) -> PlayerStatsResponse:
    """
    Statistiche complete del giocatore (tutti i ruoli) sui tornei eleggibili.
    Nessuna partita -> totali a zero e per-partita None, ok=True.
    """
    pid = validate_entity_id(player_id)
    if pid is None:
        return PlayerStatsResponse(ok=False, error=INVALID_ID_ERROR)
    if scope not in VALID_SCOPES:
        scope = SCOPE_RECENT
    min_season = get_season_min() if min_season is None else min_season

    source = MatchDataSource(db)
    try:
        tournaments = source.fetch_tournaments(player_id=pid)
        match_scope = MatchScope.from_ids(
            t["id"] for t in tournaments if is_eligible(t["name"], min_season, scope)
        )
        totals = aggregate(source.fetch_appearances(pid, match_scope))
        return PlayerStatsResponse(
            player_id=pid,
            scope=scope,
            matches=totals["matches"],
            totals=rounded(public_totals(totals)),
            per_match=rounded(per_match(totals)),
        )
    except DataUnavailableError as e:
        logger.warning("Stats player_id=%s: dati non disponibili: %s", pid, e)
        return PlayerStatsResponse(ok=False, player_id=pid, scope=scope, error=str(e))
    except Exception as e:
        logger.exception("Errore stats player_id=%s: %s", pid, e)
        return PlayerStatsResponse(ok=False, player_id=pid, scope=scope, error=f"{type(e).__name__}: {e}")


def get_player_profile(
    player_id: Any,
    db: Session,
    recent_limit: int | None = None,
) -> PlayerProfileResponse:
    """
    Profilo: nickname, squadra attuale, ruolo attuale, distribuzione ruoli
    (ultime N partite) e leghe. Ogni blocco e' indipendente: se una query
    fallisce il blocco resta vuoto e l'errore finisce in debug.
    """
    pid = validate_entity_id(player_id)
    if pid is None:
        return PlayerProfileResponse(ok=False, error=INVALID_ID_ERROR)
    recent_limit = get_recent_role_matches() if recent_limit is None else recent_limit

    source = MatchDataSource(db)
    out = PlayerProfileResponse(player_id=pid, nickname=f"User #{pid}")

    try:
        player = source.fetch_player(pid)
        if player:
            out.nickname = player.get("gamertag") or player.get("username") or out.nickname
        out.team = source.fetch_last_team_name(pid)
    except DataUnavailableError as e:
        out.debug["user_error"] = str(e)
    except Exception as e:
        logger.exception("Errore profilo player_id=%s (%s): %s", pid, "user_error", e)
        out.debug["user_error"] = f"{type(e).__name__}: {e}"

    try:
        recent = source.fetch_recent_roles(pid, recent_limit)
        resolution = resolve_current_role(recent)
        out.current_role = resolution.role
        out.cluster = resolution.cluster.value if resolution.cluster else None
        role_rows = role_distribution(recent)
        out.roles = [RoleShare(**r) for r in role_rows]
        out.clusters = [ClusterShare(**c) for c in cluster_distribution(role_rows)]
    except DataUnavailableError as e:
        out.debug["roles_error"] = str(e)
    except Exception as e:
        logger.exception("Errore profilo player_id=%s (%s): %s", pid, "roles_error", e)
        out.debug["roles_error"] = f"{type(e).__name__}: {e}"

    try:
        out.leagues = [LeagueShare(**x) for x in league_distribution(source.fetch_tournaments(player_id=pid))]
    except DataUnavailableError as e:
        out.debug["leagues_error"] = str(e)
    except Exception as e:
        logger.exception("Errore profilo player_id=%s (%s): %s", pid, "leagues_error", e)
        out.debug["leagues_error"] = f"{type(e).__name__}: {e}"

    return out
