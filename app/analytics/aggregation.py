"""
Aggregatore metriche: dalle righe partita (MatchAppearance) ai totali.

Regole:
  1. I contatori si SOMMANO sulle partite nello scope
  2. matches = numero di match_id distinti
  3. Le metriche derivate sono rapporti di somme, mai medie di rapporti
     per partita (pass_acc = sum(completati) / sum(tentati))
  4. Denominatore <= 0 -> None, mai NaN o divisione per zero
  5. Per-partita: volume / matches solo se matches > 0, altrimenti None

Nessun accesso al DB: le righe arrivano dal data source.
"""

from typing import Any, Iterable

# Type alias: totali aggregati per (entita', scope)
AggregateTotals = dict[str, Any]

# ---------------------------------------------------------------------------
# Costanti
# ---------------------------------------------------------------------------

COUNTER_FIELDS: tuple[str, ...] = (
    "goals",
    "assists",
    "xg",
    "xa",
    "shots_on",
    "shots_off",
    "passes_total",
    "passes_completed",
    "key_passes",
    "pre_assists",
    "crosses_total",
    "crosses_completed",
    "dribbles_total",
    "dribbles_completed",
    "aerial_duels",
    "aerial_duels_won",
    "off_duels_won",
    "off_duels_lost",
    "interceptions",
    "tackles_total",
    "tackles_won",
    "completed_tackles",
    "blocks",
    "clearances",
    "outplayed",
    "penalised_fails",
    "saves",
    "goals_conceded",
    "clean_sheet",
    # xG degli avversari nella partita, valorizzato solo per i portieri
    "opp_xg",
)

FLOAT_COUNTERS = frozenset({"xg", "xa", "opp_xg"})

# Volumi derivati (somme di contatori)
DERIVED_VOLUME_FIELDS: tuple[str, ...] = (
    "shots",
    "goal_contrib",
    "xg_delta",
    "def_actions",
    "beaten",
    "off_duels_total",
)

# Campi divisi per matches nella vista per-partita
PER_MATCH_FIELDS: tuple[str, ...] = tuple(
    f for f in COUNTER_FIELDS + DERIVED_VOLUME_FIELDS if f != "opp_xg"
)

RATIO_FIELDS: tuple[str, ...] = (
    "shots_on_target_pct",
    "shots_per_goal",
    "pass_acc",
    "pxa",
    "dribble_pct",
    "beaten_rate",
    "aerial_pct",
    "off_duels_win_pct",
    "cross_acc",
    "tackle_success",
    "save_pct",
)


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def ratio(numerator: int | float | None, denominator: int | float | None) -> float | None:
    """Rapporto sicuro: None se dati mancanti o denominatore <= 0."""
    if numerator is None or denominator is None or denominator <= 0:
        return None
    return numerator / denominator


def per_match_value(value: int | float | None, matches: int) -> float | None:
    if value is None or matches <= 0:
        return None
    return value / matches


def _num(val: Any, is_float: bool) -> int | float:
    if val is None:
        return 0.0 if is_float else 0
    try:
        return float(val) if is_float else int(val)
    except (ValueError, TypeError):
        return 0.0 if is_float else 0


# ---------------------------------------------------------------------------
# Somme
# ---------------------------------------------------------------------------

def sum_counters(rows: Iterable[dict[str, Any]]) -> AggregateTotals:
    """Somma i contatori e conta le partite distinte."""
    sums: AggregateTotals = {f: (0.0 if f in FLOAT_COUNTERS else 0) for f in COUNTER_FIELDS}
    match_ids: set[Any] = set()
    for row in rows:
        match_ids.add(row.get("match_id"))
        for f in COUNTER_FIELDS:
            sums[f] += _num(row.get(f), f in FLOAT_COUNTERS)
    sums["matches"] = len(match_ids)
    return sums


def derive_metrics(sums: AggregateTotals) -> AggregateTotals:
    """
    Aggiunge ai contatori sommati i volumi derivati e i rapporti.
    Restituisce un nuovo dict, l'input non viene modificato.
    """
    t = dict(sums)
    t.setdefault("matches", 0)
    for f in COUNTER_FIELDS:
        t.setdefault(f, 0)

    t["shots"] = t["shots_on"] + t["shots_off"]
    t["goal_contrib"] = t["goals"] + t["assists"]
    t["xg_delta"] = t["goals"] - t["xg"]
    t["def_actions"] = t["interceptions"] + t["tackles_won"] + t["completed_tackles"] + t["blocks"]
    t["beaten"] = t["outplayed"] + t["penalised_fails"]
    t["off_duels_total"] = t["off_duels_won"] + t["off_duels_lost"]

    t["shots_on_target_pct"] = ratio(t["shots_on"], t["shots"])
    t["shots_per_goal"] = ratio(t["shots"], t["goals"])
    t["pass_acc"] = ratio(t["passes_completed"], t["passes_total"])
    t["pxa"] = ratio(0.5 * t["passes_total"], t["xa"])
    t["dribble_pct"] = ratio(t["dribbles_completed"], t["dribbles_total"])
    t["beaten_rate"] = ratio(t["beaten"], t["def_actions"])
    t["aerial_pct"] = ratio(t["aerial_duels_won"], t["aerial_duels"])
    t["off_duels_win_pct"] = ratio(t["off_duels_won"], t["off_duels_total"])
    t["cross_acc"] = ratio(t["crosses_completed"], t["crosses_total"])
    t["tackle_success"] = ratio(t["tackles_won"], t["tackles_total"])
    t["save_pct"] = ratio(t["saves"], t["saves"] + t["goals_conceded"])
    return t


def aggregate(
    rows: Iterable[dict[str, Any]],
    role_codes: Iterable[str] | None = None,
) -> AggregateTotals:
    """
    Totali + metriche derivate per un'entita'.
    role_codes opzionale: considera solo le righe con role_code nell'insieme.
    """
    if role_codes is not None:
        allowed = frozenset(role_codes)
        rows = [r for r in rows if (r.get("role_code") or "").strip() in allowed]
    return derive_metrics(sum_counters(rows))


def empty_totals() -> AggregateTotals:
    return derive_metrics(sum_counters([]))


def per_match(totals: AggregateTotals) -> dict[str, Any]:
    """
    Vista per-partita: i volumi divisi per matches (None se matches == 0),
    i rapporti restano invariati.
    """
    matches = int(totals.get("matches") or 0)
    out: dict[str, Any] = {"matches": matches}
    for f in PER_MATCH_FIELDS:
        out[f] = per_match_value(totals.get(f), matches)
    for f in RATIO_FIELDS:
        out[f] = totals.get(f)
    return out


def public_totals(totals: AggregateTotals) -> dict[str, Any]:
    """Totali da esporre: contatori, volumi derivati e rapporti (senza opp_xg)."""
    keys = ("matches",) + PER_MATCH_FIELDS + RATIO_FIELDS
    return {k: totals.get(k) for k in keys}
