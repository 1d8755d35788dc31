"""
Ruoli e cluster tattici.

Il ruolo attuale di un giocatore e' la moda dei codici ruolo nelle ultime N
partite (ordinate dalla piu' recente). Il ruolo vincente deve avere un
conteggio STRETTAMENTE maggiore; a parita' vince il ruolo incontrato per
primo nell'iterazione, cioe' quello giocato piu' di recente.

Il ruolo si mappa su un cluster con una tabella statica; codici fuori tabella
non sono classificabili (cluster None) e non e' un errore.
"""

from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel


class Cluster(str, Enum):
    FORWARD = "FW"
    ATTACKING_MIDFIELD = "AM"
    FLANK_MIDFIELD = "FM"
    CENTRAL_MIDFIELD = "CM"
    CENTER_BACK = "CB"
    GOALKEEPER = "GK"


# Codici come salvati in field_positions.code
CLUSTER_ROLES: dict[Cluster, tuple[str, ...]] = {
    Cluster.FORWARD: ("ФРВ", "ЦФД", "ЛФД", "ПФД", "ЛФА", "ПФА"),
    Cluster.ATTACKING_MIDFIELD: ("ЦАП", "ЛАП", "ПАП"),
    Cluster.CENTRAL_MIDFIELD: ("ЦП", "ЛЦП", "ПЦП", "ЛОП", "ПОП", "ЦОП"),
    Cluster.FLANK_MIDFIELD: ("ЛП", "ПП"),
    Cluster.CENTER_BACK: ("ЦЗ", "ЛЦЗ", "ПЦЗ", "ЛЗ", "ПЗ"),
    Cluster.GOALKEEPER: ("ВР", "ВРТ"),
}

ROLE_TO_CLUSTER: dict[str, Cluster] = {
    code: cluster for cluster, codes in CLUSTER_ROLES.items() for code in codes
}

CLUSTER_LABELS: dict[Cluster, str] = {
    Cluster.FORWARD: "Forward",
    Cluster.ATTACKING_MIDFIELD: "Attacking midfielder",
    Cluster.FLANK_MIDFIELD: "Flank midfielder",
    Cluster.CENTRAL_MIDFIELD: "Central midfielder",
    Cluster.CENTER_BACK: "Centre-back",
    Cluster.GOALKEEPER: "Goalkeeper",
}


class RoleResolution(BaseModel):
    role: str | None = None
    cluster: Cluster | None = None


def _clean(code: Any) -> str:
    return str(code if code is not None else "").strip()


def cluster_for_role(role: str | None) -> Cluster | None:
    if not role:
        return None
    return ROLE_TO_CLUSTER.get(_clean(role))


def role_codes_for(cluster: Cluster) -> frozenset[str]:
    return frozenset(CLUSTER_ROLES[cluster])


def resolve_current_role(role_codes: Iterable[str | None]) -> RoleResolution:
    """
    Moda dei codici ruolo (ordinati per recenza decrescente).
    Codici vuoti/None ignorati. Nessun codice -> RoleResolution() vuota.
    """
    counts: dict[str, int] = {}
    for raw in role_codes:
        code = _clean(raw)
        if not code:
            continue
        counts[code] = counts.get(code, 0) + 1

    best: str | None = None
    best_count = -1
    # dict preserva l'ordine di inserimento: a parita' resta il primo incontrato
    for code, count in counts.items():
        if count > best_count:
            best, best_count = code, count

    return RoleResolution(role=best, cluster=cluster_for_role(best))


def role_distribution(role_codes: Iterable[str | None]) -> list[dict[str, Any]]:
    """Conteggio e quota (pct con 2 decimali) per codice ruolo, decrescente."""
    counts: dict[str, int] = {}
    total = 0
    for raw in role_codes:
        code = _clean(raw)
        if not code:
            continue
        counts[code] = counts.get(code, 0) + 1
        total += 1

    if total == 0:
        return []

    rows = [
        {"role": code, "count": n, "pct": round(100 * n / total, 2)}
        for code, n in counts.items()
    ]
    rows.sort(key=lambda r: r["count"], reverse=True)
    return rows


def cluster_distribution(role_rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Somma le quote per cluster a partire da role_distribution(); ruoli ignoti esclusi."""
    acc: dict[Cluster, float] = {}
    for r in role_rows:
        cluster = cluster_for_role(r.get("role"))
        if cluster is None:
            continue
        acc[cluster] = acc.get(cluster, 0.0) + float(r.get("pct") or 0)

    result = [
        {"cluster": c.value, "label": CLUSTER_LABELS[c], "pct": round(min(100.0, pct), 2)}
        for c, pct in acc.items()
    ]
    result.sort(key=lambda r: r["pct"], reverse=True)
    return result
