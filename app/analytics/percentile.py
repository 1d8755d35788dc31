"""
Percentile "less-or-equal" rispetto al pool di confronto.

  rank = round(100 * #{x in pool : x <= value} / |pool|)

Il migliore del pool (confrontato anche con se stesso) ottiene 100, valori
duplicati ricevono lo stesso rank. Per metriche inverse (meno e' meglio) si
riporta 100 - rank. Pool vuoto -> 0: ogni asse del radar deve avere un valore.
"""

import bisect
import math
from typing import Iterable


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def clean_pool(values: Iterable[float | int | None]) -> list[float]:
    """Scarta None e valori non finiti; ordina per il lookup O(log n)."""
    out: list[float] = []
    for v in values:
        if v is None:
            continue
        f = float(v)
        if math.isfinite(f):
            out.append(f)
    out.sort()
    return out


def rank_sorted(sorted_pool: list[float], value: float, invert: bool = False) -> int:
    """rank() su un pool gia' pulito e ordinato."""
    n = len(sorted_pool)
    if n == 0:
        return 0
    at_or_below = bisect.bisect_right(sorted_pool, value)
    pct = _round_half_up(100 * at_or_below / n)
    pct = max(0, min(100, pct))
    return 100 - pct if invert else pct


def rank(pool: Iterable[float | int | None], value: float, invert: bool = False) -> int:
    """Percentile 0-100 di value nel pool."""
    return rank_sorted(clean_pool(pool), float(value), invert)
