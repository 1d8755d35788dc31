import pytest

from app.analytics.aggregation import (
    PER_MATCH_FIELDS,
    aggregate,
    empty_totals,
    per_match,
    public_totals,
    ratio,
)


def test_ratio_guards_denominator():
    assert ratio(1, 0) is None
    assert ratio(1, -2) is None
    assert ratio(None, 3) is None
    assert ratio(3, None) is None
    assert ratio(1, 4) == 0.25


def test_pass_acc_is_none_without_attempts():
    totals = aggregate([{"match_id": 1, "passes_total": 0, "passes_completed": 0}])
    assert totals["pass_acc"] is None


@pytest.mark.parametrize(
    "rows",
    [
        [{"match_id": 1, "passes_total": 10, "passes_completed": 10}],
        [{"match_id": 1, "passes_total": 7, "passes_completed": 0}],
        [
            {"match_id": 1, "passes_total": 30, "passes_completed": 21},
            {"match_id": 2, "passes_total": 45, "passes_completed": 40},
        ],
    ],
)
def test_pass_acc_in_unit_interval(rows):
    assert 0 <= aggregate(rows)["pass_acc"] <= 1


def test_ratios_are_ratios_of_sums():
    rows = [
        {"match_id": 1, "passes_total": 10, "passes_completed": 10},
        {"match_id": 2, "passes_total": 100, "passes_completed": 90},
    ]
    totals = aggregate(rows)
    # media dei rapporti sarebbe 0.95
    assert totals["pass_acc"] == pytest.approx(100 / 110)
    assert totals["matches"] == 2


def test_matches_counts_distinct_match_ids():
    rows = [
        {"match_id": 5, "goals": 1},
        {"match_id": 5, "goals": 2},
        {"match_id": 6, "goals": 0},
    ]
    totals = aggregate(rows)
    assert totals["matches"] == 2
    assert totals["goals"] == 3


def test_missing_or_null_counters_count_as_zero():
    totals = aggregate([{"match_id": 1, "goals": None, "xg": None, "assists": 2}])
    assert totals["goals"] == 0
    assert totals["xg"] == 0.0
    assert totals["goal_contrib"] == 2


def test_role_filter():
    rows = [
        {"match_id": 1, "role_code": "ЦЗ", "tackles_won": 3},
        {"match_id": 2, "role_code": "ЦП", "tackles_won": 5},
        {"match_id": 3, "role_code": None, "tackles_won": 7},
    ]
    totals = aggregate(rows, {"ЦЗ"})
    assert totals["matches"] == 1
    assert totals["tackles_won"] == 3


def test_derived_volumes():
    totals = aggregate([{
        "match_id": 1, "shots_on": 2, "shots_off": 3, "goals": 2, "xg": 1.5,
        "interceptions": 1, "tackles_won": 2, "completed_tackles": 1, "blocks": 1,
        "outplayed": 2, "penalised_fails": 1, "saves": 3, "goals_conceded": 1,
    }])
    assert totals["shots"] == 5
    assert totals["xg_delta"] == pytest.approx(0.5)
    assert totals["def_actions"] == 5
    assert totals["beaten_rate"] == pytest.approx(3 / 5)
    assert totals["save_pct"] == pytest.approx(0.75)
    assert totals["shots_on_target_pct"] == pytest.approx(0.4)


def test_per_match_without_matches_is_none():
    view = per_match(empty_totals())
    assert view["matches"] == 0
    assert all(view[f] is None for f in PER_MATCH_FIELDS)


def test_per_match_divides_volumes_only():
    totals = aggregate([
        {"match_id": 1, "goals": 1, "passes_total": 10, "passes_completed": 5},
        {"match_id": 2, "goals": 2, "passes_total": 10, "passes_completed": 10},
    ])
    view = per_match(totals)
    assert view["goals"] == 1.5
    assert view["pass_acc"] == 0.75


def test_public_totals_hide_opponent_xg():
    out = public_totals(aggregate([{"match_id": 1, "opp_xg": 2.0}]))
    assert "opp_xg" not in out
    assert out["matches"] == 1
