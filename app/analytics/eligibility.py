"""
Filtro di eleggibilita': quali tornei contano come "ufficiali".

Il numero di stagione si estrae dal nome del torneo SOLO se ancorato alla
parola chiave (season / сезон). Altri numeri nel nome (anni, coppe) non
vengono mai interpretati come stagione.

  "Season 24 Cup"       -> 24
  "ПЛ (24 сезон)"       -> 24
  "2024 Friendly"       -> None  (nessuna parola chiave: escluso)
  "2024 Season Opener"  -> None  (anno, non stagione)

Politica allow-list: senza stagione riconosciuta il torneo e' escluso.
"""

import logging
import re
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Costanti
# ---------------------------------------------------------------------------

SCOPE_RECENT = "recent"
SCOPE_ALL = "all"
VALID_SCOPES = frozenset({SCOPE_RECENT, SCOPE_ALL})

_SEASON_KEYWORD = r"(?:season|сезон)"

# "Season 24", "Season #24", "Сезон: 24": solo separatori tra parola e numero
_SEASON_AFTER_RE = re.compile(_SEASON_KEYWORD + r"[\s#№:.\-]*(\d+)", re.IGNORECASE)
# Numero prima della parola solo tra parentesi: "ПЛ (24 сезон)", "(24-й сезон)".
# Fuori dalle parentesi il numero e' quasi sempre un anno ("2024 Season Opener").
_SEASON_BEFORE_RE = re.compile(
    r"\(\s*(\d+)\s*(?:-?(?:st|nd|rd|th|й|ый|ий))?\s*" + _SEASON_KEYWORD + r"\s*\)",
    re.IGNORECASE,
)

# Etichette di lega (dati come nel DB delle competizioni)
LEAGUE_PL = "ПЛ"
LEAGUE_FNL = "ФНЛ"
LEAGUE_PFL = "ПФЛ"
LEAGUE_LFL = "ЛФЛ"
LEAGUE_OTHER = "Прочие"
LEAGUE_LABELS = (LEAGUE_PL, LEAGUE_FNL, LEAGUE_PFL, LEAGUE_LFL)

# Ordine di valutazione significativo: la prima regola che matcha vince
_LEAGUE_PATTERNS: list[tuple[str, re.Pattern]] = [
    (LEAGUE_PL, re.compile(r"ПРЕМЬЕР|PREMIER|\bПЛ\b", re.IGNORECASE)),
    (LEAGUE_FNL, re.compile(r"\bФНЛ\b", re.IGNORECASE)),
    (LEAGUE_PFL, re.compile(r"\bПФЛ\b", re.IGNORECASE)),
    (LEAGUE_LFL, re.compile(r"\bЛФЛ\b", re.IGNORECASE)),
]


# ---------------------------------------------------------------------------
# Scope di partite
# ---------------------------------------------------------------------------

class MatchScope(BaseModel):
    """
    Insieme di tornei (ed eventualmente codici ruolo) su cui aggregare.
    Lo stesso oggetto va passato sia all'aggregazione del soggetto sia al
    pool di confronto: e' cosi' che i percentili restano coerenti.
    """

    model_config = ConfigDict(frozen=True)

    tournament_ids: frozenset[int]
    role_codes: frozenset[str] | None = None

    @classmethod
    def from_ids(cls, tournament_ids: Iterable[int]) -> "MatchScope":
        """Scope da allow-list esplicita: nessun parsing dei nomi."""
        return cls(tournament_ids=frozenset(int(t) for t in tournament_ids))

    def with_roles(self, role_codes: Iterable[str]) -> "MatchScope":
        return MatchScope(tournament_ids=self.tournament_ids, role_codes=frozenset(role_codes))

    @property
    def is_empty(self) -> bool:
        return not self.tournament_ids


# ---------------------------------------------------------------------------
# Parsing nomi
# ---------------------------------------------------------------------------

def extract_season(name: str | None) -> int | None:
    """Numero di stagione ancorato alla parola chiave, None se assente."""
    if not name:
        return None
    m = _SEASON_AFTER_RE.search(name)
    if m:
        return int(m.group(1))
    m = _SEASON_BEFORE_RE.search(name)
    if m:
        return int(m.group(1))
    return None


def is_official(name: str | None, min_season: int) -> bool:
    season = extract_season(name)
    return season is not None and season >= min_season


def league_label(name: str | None) -> str:
    """Etichetta di lega dal nome del torneo; LEAGUE_OTHER se non riconosciuta."""
    if not name:
        return LEAGUE_OTHER
    for label, pattern in _LEAGUE_PATTERNS:
        if pattern.search(name):
            return label
    return LEAGUE_OTHER


# ---------------------------------------------------------------------------
# Risoluzione scope
# ---------------------------------------------------------------------------

def is_eligible(name: str | None, min_season: int, scope: str = SCOPE_RECENT) -> bool:
    """
    scope="recent": stagione >= min_season.
    scope="all": qualsiasi torneo con numero di stagione riconoscibile.
    """
    if scope == SCOPE_ALL:
        return extract_season(name) is not None
    return is_official(name, min_season)


def resolve_official(
    tournaments: Iterable[dict[str, Any]],
    min_season: int,
    scope: str = SCOPE_RECENT,
) -> tuple[MatchScope, list[dict[str, Any]]]:
    """
    Filtra i tornei (dict con id, name, opzionale matches) e costruisce lo scope.
    Restituisce (scope, tornei usati) con i tornei nell'ordine ricevuto.
    """
    used = [t for t in tournaments if is_eligible(t.get("name"), min_season, scope)]
    match_scope = MatchScope.from_ids(t["id"] for t in used)
    logger.debug(
        "Tornei eleggibili: %d (min_season=%s, scope=%s)", len(used), min_season, scope,
    )
    return match_scope, used


def league_distribution(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Quota di partite per lega (pct intero 0-100) da righe {name, matches}.
    Le leghe con pct 0 e "Прочие" non compaiono.
    """
    counts: dict[str, int] = {label: 0 for label in LEAGUE_LABELS}
    total = 0
    for r in rows:
        n = int(r.get("matches") or 0)
        total += n
        label = league_label(r.get("name"))
        if label in counts:
            counts[label] += n

    total = max(1, total)
    result = [
        {"label": label, "pct": int(counts[label] * 100 / total + 0.5)}
        for label in LEAGUE_LABELS
    ]
    return [x for x in result if x["pct"] > 0]
