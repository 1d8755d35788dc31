"""
Pool di confronto per i percentili.

Stessa aggregazione del soggetto, raggruppata per entita' (giocatore o
squadra). Entrano solo le entita' con matches >= min_sample_size.
Tutto in-memory, ricalcolato ad ogni richiesta.
"""

import logging
from typing import Any, Iterable

from app.analytics.aggregation import AggregateTotals, aggregate

logger = logging.getLogger(__name__)

# Type alias: riga del pool = AggregateTotals + entity_id
PeerPoolRow = dict[str, Any]


def group_rows(rows: Iterable[dict[str, Any]], key: str) -> dict[Any, list[dict[str, Any]]]:
    """Raggruppa righe partita per entita', preservando l'ordine di arrivo."""
    grouped: dict[Any, list[dict[str, Any]]] = {}
    for r in rows:
        grouped.setdefault(r.get(key), []).append(r)
    return grouped


def build_pool(
    rows_by_entity: dict[Any, list[dict[str, Any]]],
    min_sample_size: int,
) -> list[PeerPoolRow]:
    """
    Una riga per entita' qualificata, con gli stessi campi di AggregateTotals.
    Le righe arrivano gia' filtrate sullo scope (tornei + ruoli) del soggetto.
    """
    pool: list[PeerPoolRow] = []
    skipped = 0
    for entity_id, rows in rows_by_entity.items():
        if entity_id is None:
            continue
        totals: AggregateTotals = aggregate(rows)
        if totals["matches"] < min_sample_size:
            skipped += 1
            continue
        row = dict(totals)
        row["entity_id"] = entity_id
        pool.append(row)

    logger.info(
        "Pool di confronto: %d entita' qualificate, %d sotto soglia (min=%d)",
        len(pool), skipped, min_sample_size,
    )
    return pool
