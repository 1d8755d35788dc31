"""
Radar per cluster: lista ORDINATA e fissa di assi (key, label, value, percentile).

Ogni cluster ha il proprio insieme di 6-8 assi. Ogni asse ha una formula sui
totali aggregati; la stessa formula, applicata ad ogni riga del pool, da' la
distribuzione di confronto. Tutte le formule sono rapporti di somme con la
stessa politica dell'aggregatore (denominatore <= 0 -> None).
"""

from typing import Any, Callable

from app.analytics.aggregation import COUNTER_FIELDS, AggregateTotals, derive_metrics, per_match_value, ratio
from app.analytics.percentile import clean_pool, rank_sorted
from app.analytics.roles import Cluster

Formula = Callable[[AggregateTotals], float | None]
RadarAxis = dict[str, Any]


def _m(t: AggregateTotals) -> int:
    return int(t.get("matches") or 0)


def _complete(t: AggregateTotals) -> AggregateTotals:
    """Totali parziali (es. costruiti a mano) completati con i contatori mancanti a 0."""
    if all(f in t for f in COUNTER_FIELDS):
        return t
    return derive_metrics(t)


def _pm(field: str) -> Formula:
    """Formula per-partita su un campo sommato."""
    return lambda t: per_match_value(t.get(field), _m(t))


def _safety_coef(t: AggregateTotals) -> float | None:
    parts = (
        (0.5, ratio(t.get("passes_completed"), t.get("passes_total"))),
        (0.3, ratio(t.get("dribbles_completed"), t.get("dribbles_total"))),
        (0.15, ratio(t.get("aerial_duels_won"), t.get("aerial_duels"))),
        (0.05, ratio(t.get("tackles_won"), t.get("tackles_total"))),
    )
    if any(v is None for _, v in parts):
        return None
    return sum(w * v for w, v in parts)


# ---------------------------------------------------------------------------
# Formule assi giocatore
# ---------------------------------------------------------------------------

PLAYER_FORMULAS: dict[str, Formula] = {
    "goal_contrib": lambda t: per_match_value(t["goals"] + t["assists"], _m(t)),
    "xg_delta": lambda t: per_match_value(t["goals"] - t["xg"], _m(t)),
    "shots_on_target_pct": lambda t: ratio(t["shots_on"], t["shots_on"] + t["shots_off"]),
    "creation": lambda t: per_match_value(t["pre_assists"] + t["key_passes"] + 2 * t["xa"], _m(t)),
    "dribble_pct": lambda t: ratio(t["dribbles_completed"], t["dribbles_total"]),
    "pressing": lambda t: per_match_value(t["interceptions"] + t["tackles_won"], _m(t)),
    "xa": _pm("xa"),
    "pxa": lambda t: ratio(0.5 * t["passes_total"], t["xa"]),
    "passes": _pm("passes_total"),
    "pass_acc": lambda t: ratio(t["passes_completed"], t["passes_total"]),
    "def_actions": lambda t: per_match_value(
        t["interceptions"] + t["tackles_won"] + t["completed_tackles"] + t["blocks"], _m(t),
    ),
    "beaten_rate": lambda t: ratio(
        t["outplayed"] + t["penalised_fails"],
        t["interceptions"] + t["tackles_won"] + t["completed_tackles"] + t["blocks"],
    ),
    "aerial_pct": lambda t: ratio(t["aerial_duels_won"], t["aerial_duels"]),
    "crosses": _pm("crosses_completed"),
    "safety_coef": _safety_coef,
    "tackle_success": lambda t: ratio(t["tackles_won"], t["tackles_total"]),
    "clearances": _pm("clearances"),
    "attack_participation": lambda t: per_match_value(
        t["key_passes"] + t["pre_assists"] + 2 * (t["goals"] + t["assists"]), _m(t),
    ),
    # --- Portiere ---
    "save_pct": lambda t: ratio(t["saves"], t["saves"] + t["goals_conceded"]),
    "saves_avg": _pm("saves"),
    "intercepts": _pm("interceptions"),
    "clean_sheets_pct": _pm("clean_sheet"),
    "prevented_xg": lambda t: per_match_value(t.get("opp_xg", 0) - t["goals_conceded"], _m(t)),
}

PLAYER_LABELS: dict[str, str] = {
    "goal_contrib": "Goals+assists",
    "xg_delta": "xG conversion",
    "shots_on_target_pct": "Shots on target %",
    "creation": "Chance creation",
    "dribble_pct": "Dribbling %",
    "pressing": "Pressing",
    "xa": "xA",
    "pxa": "Passes per 0.5 xA",
    "pass_acc": "Pass accuracy %",
    "passes": "Passes/match",
    "def_actions": "Defensive actions",
    "beaten_rate": "Beaten rate",
    "aerial_pct": "Aerial duels %",
    "crosses": "Crosses/match",
    "safety_coef": "Safety coefficient",
    "tackle_success": "Successful tackles %",
    "clearances": "Clearances/match",
    "attack_participation": "Attack participation",
    "save_pct": "Saves %",
    "saves_avg": "Saves/match",
    "intercepts": "Interceptions/match",
    "clean_sheets_pct": "Clean sheets %",
    "prevented_xg": "Prevented xG",
}

# Metriche inverse: valore basso = buono
INVERTED_AXES = frozenset({"pxa", "beaten_rate", "passes_per_shot"})

_MIDFIELD_AXES = ("creation", "passes", "pass_acc", "def_actions", "beaten_rate", "aerial_pct")

RADAR_BY_CLUSTER: dict[Cluster, tuple[str, ...]] = {
    Cluster.FORWARD: (
        "goal_contrib", "xg_delta", "shots_on_target_pct", "creation", "dribble_pct", "pressing",
    ),
    Cluster.ATTACKING_MIDFIELD: (
        "xa", "pxa", "goal_contrib", "pass_acc", "dribble_pct", "pressing",
    ),
    Cluster.CENTRAL_MIDFIELD: _MIDFIELD_AXES,
    Cluster.FLANK_MIDFIELD: _MIDFIELD_AXES + ("crosses", "goal_contrib"),
    Cluster.CENTER_BACK: (
        "safety_coef", "def_actions", "tackle_success", "clearances",
        "pass_acc", "attack_participation", "aerial_pct", "beaten_rate",
    ),
    Cluster.GOALKEEPER: (
        "save_pct", "saves_avg", "intercepts", "passes", "clean_sheets_pct", "prevented_xg",
    ),
}

# ---------------------------------------------------------------------------
# Assi squadra (confronto con le squadre della stessa lega)
# ---------------------------------------------------------------------------

TEAM_FORMULAS: dict[str, Formula] = {
    "goals": _pm("goals"),
    "shots": lambda t: per_match_value(t["shots_on"] + t["shots_off"], _m(t)),
    "passes": _pm("passes_total"),
    "passes_per_shot": lambda t: ratio(t["passes_total"], t["shots_on"] + t["shots_off"]),
    "def_actions": PLAYER_FORMULAS["def_actions"],
    "pass_acc": PLAYER_FORMULAS["pass_acc"],
    "crosses": _pm("crosses_completed"),
    "aerial_pct": PLAYER_FORMULAS["aerial_pct"],
}

TEAM_LABELS: dict[str, str] = {
    "goals": "Goals",
    "shots": "Shots",
    "passes": "Passes",
    "passes_per_shot": "Passes per shot",
    "def_actions": "Defensive actions",
    "pass_acc": "Pass accuracy %",
    "crosses": "Crosses",
    "aerial_pct": "Aerial duels won %",
}

TEAM_RADAR_AXES: tuple[str, ...] = tuple(TEAM_FORMULAS)


# ---------------------------------------------------------------------------
# Costruzione radar
# ---------------------------------------------------------------------------

def _build(
    axis_keys: tuple[str, ...],
    formulas: dict[str, Formula],
    labels: dict[str, str],
    totals: AggregateTotals,
    pool: list[dict[str, Any]],
) -> list[RadarAxis]:
    if _m(totals) == 0:
        return []

    totals = _complete(totals)
    pool = [_complete(row) for row in pool]

    radar: list[RadarAxis] = []
    for key in axis_keys:
        formula = formulas[key]
        inverted = key in INVERTED_AXES
        value = formula(totals)
        distribution = clean_pool(formula(row) for row in pool)
        percentile = rank_sorted(distribution, value, inverted) if value is not None else 0
        radar.append({
            "key": key,
            "label": labels.get(key, key),
            "value": value,
            "percentile": percentile,
            "inverted": inverted,
        })
    return radar


def build_radar(
    cluster: Cluster,
    totals: AggregateTotals,
    pool: list[dict[str, Any]],
) -> list[RadarAxis]:
    """Radar del cluster; [] se il soggetto non ha partite nello scope."""
    return _build(RADAR_BY_CLUSTER[cluster], PLAYER_FORMULAS, PLAYER_LABELS, totals, pool)


def build_team_radar(totals: AggregateTotals, pool: list[dict[str, Any]]) -> list[RadarAxis]:
    return _build(TEAM_RADAR_AXES, TEAM_FORMULAS, TEAM_LABELS, totals, pool)
