"""
Accesso ai dati partita per il motore statistiche.

MatchDataSource avvolge una Session SQLAlchemy ricevuta dall'esterno: il
motore non crea mai connessioni proprie. Ogni metodo e' una lettura
indipendente; gli errori del DB diventano DataUnavailableError (dopo
rollback) e vengono gestiti dal service chiamante.

Mappatura fissa: match_appearances.position_id -> field_positions.code.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.analytics.aggregation import COUNTER_FIELDS
from app.analytics.eligibility import MatchScope
from app.models import FieldPosition, Match, MatchAppearance, Player, Team, Tournament

logger = logging.getLogger(__name__)

# Colonne contatore presenti in tabella (opp_xg e' calcolato a parte)
_COUNTER_COLUMNS = [getattr(MatchAppearance, f) for f in COUNTER_FIELDS if f != "opp_xg"]


class DataUnavailableError(RuntimeError):
    """Query fallita: il chiamante degrada a risultato parziale/vuoto."""


class MatchDataSource:
    """Query di sola lettura su match_appearances e tabelle collegate."""

    def __init__(self, db: Session):
        self._db = db

    # ------------------------------------------------------------------
    # Helper
    # ------------------------------------------------------------------

    def _all(self, stmt, what: str) -> list[dict[str, Any]]:
        try:
            return [dict(r) for r in self._db.execute(stmt).mappings().all()]
        except SQLAlchemyError as e:
            logger.warning("Query %s fallita: %s", what, e)
            try:
                self._db.rollback()
            except SQLAlchemyError:
                logger.exception("Rollback fallito dopo errore su %s", what)
            raise DataUnavailableError(f"{what}: {type(e).__name__}") from e

    @staticmethod
    def _appearance_select():
        return (
            select(
                MatchAppearance.player_id,
                MatchAppearance.team_id,
                MatchAppearance.match_id,
                Match.tournament_id,
                Match.timestamp,
                FieldPosition.code.label("role_code"),
                *_COUNTER_COLUMNS,
            )
            .join(Match, Match.id == MatchAppearance.match_id)
            .outerjoin(FieldPosition, FieldPosition.id == MatchAppearance.position_id)
        )

    @staticmethod
    def _apply_scope(stmt, scope: MatchScope):
        stmt = stmt.where(Match.tournament_id.in_(sorted(scope.tournament_ids)))
        if scope.role_codes is not None:
            stmt = stmt.where(FieldPosition.code.in_(sorted(scope.role_codes)))
        return stmt

    # ------------------------------------------------------------------
    # Anagrafica
    # ------------------------------------------------------------------

    def fetch_player(self, player_id: int) -> dict[str, Any] | None:
        stmt = select(Player.id, Player.gamertag, Player.username).where(Player.id == player_id)
        rows = self._all(stmt, "player")
        return rows[0] if rows else None

    def fetch_player_names(self, player_ids: list[int]) -> dict[int, str]:
        """Nickname (gamertag, poi username) per una lista di id."""
        if not player_ids:
            return {}
        stmt = select(Player.id, Player.gamertag, Player.username).where(Player.id.in_(player_ids))
        return {
            r["id"]: r["gamertag"] or r["username"] or f"User #{r['id']}"
            for r in self._all(stmt, "player names")
        }

    def fetch_last_team_name(self, player_id: int) -> str | None:
        stmt = (
            select(Team.name)
            .select_from(MatchAppearance)
            .join(Match, Match.id == MatchAppearance.match_id)
            .join(Team, Team.id == MatchAppearance.team_id)
            .where(MatchAppearance.player_id == player_id)
            .order_by(Match.timestamp.desc(), Match.id.desc())
            .limit(1)
        )
        rows = self._all(stmt, "last team")
        return rows[0]["name"] if rows else None

    def fetch_team(self, team_id: int) -> dict[str, Any] | None:
        rows = self._all(select(Team.id, Team.name).where(Team.id == team_id), "team")
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Ruoli e tornei
    # ------------------------------------------------------------------

    def fetch_recent_roles(self, player_id: int, limit: int) -> list[str | None]:
        """Codici ruolo delle ultime `limit` partite, dalla piu' recente."""
        stmt = (
            select(FieldPosition.code.label("role_code"))
            .select_from(MatchAppearance)
            .join(Match, Match.id == MatchAppearance.match_id)
            .outerjoin(FieldPosition, FieldPosition.id == MatchAppearance.position_id)
            .where(MatchAppearance.player_id == player_id)
            .order_by(Match.timestamp.desc(), Match.id.desc())
            .limit(limit)
        )
        return [r["role_code"] for r in self._all(stmt, "recent roles")]

    def fetch_tournaments(
        self,
        player_id: int | None = None,
        team_id: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Tornei con numero di partite distinte: {id, name, matches}.
        Filtrati per giocatore o squadra se indicati, altrimenti tutti.
        Ordinati per matches DESC.
        """
        matches_col = func.count(func.distinct(Match.id)).label("matches")
        stmt = (
            select(Tournament.id, Tournament.name, matches_col)
            .select_from(Tournament)
            .join(Match, Match.tournament_id == Tournament.id)
        )
        if player_id is not None or team_id is not None:
            stmt = stmt.join(MatchAppearance, MatchAppearance.match_id == Match.id)
            if player_id is not None:
                stmt = stmt.where(MatchAppearance.player_id == player_id)
            if team_id is not None:
                stmt = stmt.where(MatchAppearance.team_id == team_id)
        stmt = stmt.group_by(Tournament.id, Tournament.name).order_by(matches_col.desc(), Tournament.id)
        return self._all(stmt, "tournaments")

    def fetch_team_latest_tournament(self, team_id: int, scope: MatchScope) -> str | None:
        """Nome del torneo dell'ultima partita della squadra nello scope."""
        if scope.is_empty:
            return None
        stmt = (
            select(Tournament.name)
            .select_from(MatchAppearance)
            .join(Match, Match.id == MatchAppearance.match_id)
            .join(Tournament, Tournament.id == Match.tournament_id)
            .where(MatchAppearance.team_id == team_id)
            .where(Match.tournament_id.in_(sorted(scope.tournament_ids)))
            .order_by(Match.timestamp.desc(), Match.id.desc())
            .limit(1)
        )
        rows = self._all(stmt, "team latest tournament")
        return rows[0]["name"] if rows else None

    # ------------------------------------------------------------------
    # Righe partita
    # ------------------------------------------------------------------

    def fetch_appearances(self, player_id: int, scope: MatchScope) -> list[dict[str, Any]]:
        if scope.is_empty:
            return []
        stmt = self._apply_scope(self._appearance_select(), scope)
        stmt = stmt.where(MatchAppearance.player_id == player_id)
        return self._all(stmt, "player appearances")

    def fetch_team_appearances(self, team_id: int, scope: MatchScope) -> list[dict[str, Any]]:
        if scope.is_empty:
            return []
        stmt = self._apply_scope(self._appearance_select(), scope)
        stmt = stmt.where(MatchAppearance.team_id == team_id)
        return self._all(stmt, "team appearances")

    def fetch_pool_appearances(self, scope: MatchScope) -> list[dict[str, Any]]:
        """Tutte le righe nello scope (tornei + ruoli), per il pool di confronto."""
        if scope.is_empty:
            return []
        stmt = self._apply_scope(self._appearance_select(), scope)
        return self._all(stmt, "pool appearances")

    def fetch_opponent_xg(self, scope: MatchScope) -> dict[tuple[int, int], float]:
        """
        xG degli avversari per (match_id, team_id): somma degli xg delle righe
        della stessa partita con team diverso. Solo tornei dello scope.
        """
        if scope.is_empty:
            return {}
        stmt = (
            select(
                MatchAppearance.match_id,
                MatchAppearance.team_id,
                func.coalesce(func.sum(MatchAppearance.xg), 0.0).label("xg"),
            )
            .join(Match, Match.id == MatchAppearance.match_id)
            .where(Match.tournament_id.in_(sorted(scope.tournament_ids)))
            .group_by(MatchAppearance.match_id, MatchAppearance.team_id)
        )
        rows = self._all(stmt, "opponent xg")

        match_total: dict[int, float] = {}
        for r in rows:
            match_total[r["match_id"]] = match_total.get(r["match_id"], 0.0) + float(r["xg"] or 0)
        return {
            (r["match_id"], r["team_id"]): match_total[r["match_id"]] - float(r["xg"] or 0)
            for r in rows
        }


def attach_opponent_xg(
    rows: list[dict[str, Any]],
    opponent_xg: dict[tuple[int, int], float],
) -> list[dict[str, Any]]:
    """Aggiunge opp_xg ad ogni riga (0 se la partita non ha avversari registrati)."""
    return [
        {**r, "opp_xg": opponent_xg.get((r.get("match_id"), r.get("team_id")), 0.0)}
        for r in rows
    ]
