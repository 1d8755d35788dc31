"""
Classifiche della home: cinque aggregati indipendenti sui tornei ufficiali.

Ogni classifica gira in un thread con la PROPRIA sessione presa dalla
factory: una query lenta o fallita non blocca ne' invalida le altre.
Una classifica fallita torna con ok=False ed error, le altre restano valide.
"""

import asyncio
import logging
from typing import Any, Callable

from sqlalchemy.orm import Session, sessionmaker

from app.analytics.aggregation import AggregateTotals, aggregate, per_match_value
from app.analytics.eligibility import resolve_official
from app.analytics.peer_pool import group_rows
from app.core.config import get_season_min
from app.schemas.leaderboards import LeaderboardBlock, LeaderboardRow, LeaderboardsResponse
from app.services.common import round_value
from app.services.data_source import DataUnavailableError, MatchDataSource

logger = logging.getLogger(__name__)

# Type alias: {key, label, value: totals -> float | None, min_matches}
BoardConfig = dict[str, Any]
BoardValue = Callable[[AggregateTotals], float | None]

DEFAULT_LIMIT = 10
# Soglia per le classifiche per-partita e percentuali
MIN_MATCHES_FOR_RATES = 10

BOARDS: list[BoardConfig] = [
    {"key": "goals", "label": "Goals", "value": lambda t: t["goals"], "min_matches": 1},
    {"key": "assists", "label": "Assists", "value": lambda t: t["assists"], "min_matches": 1},
    {
        "key": "goal_contrib_per_match",
        "label": "Goals+assists per match",
        "value": lambda t: per_match_value(t["goal_contrib"], t["matches"]),
        "min_matches": MIN_MATCHES_FOR_RATES,
    },
    {
        "key": "pass_acc",
        "label": "Pass accuracy %",
        "value": lambda t: t["pass_acc"],
        "min_matches": MIN_MATCHES_FOR_RATES,
    },
    {"key": "clean_sheets", "label": "Clean sheets", "value": lambda t: t["clean_sheet"], "min_matches": 1},
]


# ---------------------------------------------------------------------------
# Singola classifica (sincrona, gira in un thread)
# ---------------------------------------------------------------------------

def compute_board(
    db: Session,
    board: BoardConfig,
    min_season: int,
    limit: int,
) -> tuple[list[LeaderboardRow], int]:
    """Top `limit` giocatori per la metrica della classifica. Restituisce (righe, tornei usati)."""
    source = MatchDataSource(db)
    match_scope, used = resolve_official(source.fetch_tournaments(), min_season)
    grouped = group_rows(source.fetch_pool_appearances(match_scope), "player_id")

    value_fn: BoardValue = board["value"]
    min_matches = board.get("min_matches", 1)

    ranked: list[tuple[int, int, float]] = []
    for player_id, rows in grouped.items():
        if player_id is None:
            continue
        totals = aggregate(rows)
        if totals["matches"] < min_matches:
            continue
        value = value_fn(totals)
        if value is None or value <= 0:
            continue
        ranked.append((player_id, totals["matches"], float(value)))

    # a parita' di valore: meno partite prima, poi id
    ranked.sort(key=lambda r: (-r[2], r[1], r[0]))
    top = ranked[:limit]

    names = source.fetch_player_names([pid for pid, _, _ in top])
    rows_out = [
        LeaderboardRow(
            player_id=pid,
            nickname=names.get(pid, f"User #{pid}"),
            matches=matches,
            value=round_value(value),
        )
        for pid, matches, value in top
    ]
    return rows_out, len(used)


def _run_board(
    session_factory: sessionmaker,
    board: BoardConfig,
    min_season: int,
    limit: int,
) -> tuple[LeaderboardBlock, int]:
    db = session_factory()
    try:
        rows, used = compute_board(db, board, min_season, limit)
        return LeaderboardBlock(key=board["key"], label=board["label"], rows=rows), used
    except DataUnavailableError as e:
        logger.warning("Classifica %s non disponibile: %s", board["key"], e)
        return LeaderboardBlock(key=board["key"], label=board["label"], ok=False, error=str(e)), 0
    except Exception as e:
        # errore nel calcolo: solo questa classifica fallisce
        logger.exception("Errore classifica %s: %s", board["key"], e)
        return LeaderboardBlock(
            key=board["key"], label=board["label"], ok=False, error=f"{type(e).__name__}: {e}",
        ), 0
    finally:
        db.close()


# ---------------------------------------------------------------------------
# API pubblica
# ---------------------------------------------------------------------------

async def get_leaderboards(
    session_factory: sessionmaker,
    min_season: int | None = None,
    limit: int = DEFAULT_LIMIT,
    boards: list[BoardConfig] | None = None,
) -> LeaderboardsResponse:
    """
    Tutte le classifiche in parallelo (asyncio.gather + to_thread).
    L'ordine dei blocchi nella risposta e' quello di BOARDS.
    """
    min_season = get_season_min() if min_season is None else min_season
    boards = BOARDS if boards is None else boards

    results = await asyncio.gather(
        *(asyncio.to_thread(_run_board, session_factory, b, min_season, limit) for b in boards)
    )

    blocks = [block for block, _ in results]
    failed = sum(1 for b in blocks if not b.ok)
    if failed:
        logger.info("Classifiche: %d/%d fallite", failed, len(blocks))

    return LeaderboardsResponse(
        min_season=min_season,
        tournaments_used=max((used for _, used in results), default=0),
        boards=blocks,
    )
