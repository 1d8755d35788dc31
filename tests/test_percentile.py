import math

import pytest

from app.analytics.percentile import clean_pool, rank


POOL = [3.0, 1.0, 4.0, 1.5, 5.0, 9.0, 2.0]


def test_rank_is_monotonic():
    values = [x / 4 for x in range(0, 44)]
    ranks = [rank(POOL, v) for v in values]
    assert ranks == sorted(ranks)


def test_max_is_100_and_min_is_one_share():
    assert rank(POOL, max(POOL)) == 100
    # 100 / 7 = 14.28...
    assert rank(POOL, min(POOL)) == round(100 / len(POOL))


def test_half_share_rounds_up():
    pool = [1, 2, 3, 4, 5, 6, 7, 8]
    assert rank(pool, 1) == 13


@pytest.mark.parametrize("value", [0.0, 1.0, 2.5, 9.0, 12.0])
def test_invert_is_complement(value):
    assert rank(POOL, value, invert=True) == 100 - rank(POOL, value)


def test_empty_pool_ranks_zero():
    assert rank([], 3.0) == 0
    assert rank([None, float("nan")], 3.0) == 0


def test_duplicates_share_rank():
    pool = [1, 2, 2, 2, 3]
    assert rank(pool, 2) == 80
    assert rank(pool, 2.0) == rank(pool, 2)


def test_clean_pool_drops_missing_and_non_finite():
    assert clean_pool([3, None, math.inf, 1, float("nan"), 2]) == [1.0, 2.0, 3.0]
