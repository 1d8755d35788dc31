import pytest

from app.analytics.eligibility import MatchScope
from app.services.data_source import DataUnavailableError, MatchDataSource, attach_opponent_xg


def test_recent_roles_are_ordered_by_recency(db, seed):
    t = seed.tournament("ПЛ Season 20")
    team = seed.team("Dinamo")
    p = seed.player("neo")
    seed.play(p, team, t, "ЦЗ", 2)
    seed.play(p, team, t, "ЦП", 1)
    seed.commit()

    assert MatchDataSource(db).fetch_recent_roles(p, 10) == ["ЦП", "ЦЗ", "ЦЗ"]
    assert MatchDataSource(db).fetch_recent_roles(p, 1) == ["ЦП"]


def test_tournaments_with_match_counts(db, seed):
    t1 = seed.tournament("ПЛ Season 20")
    t2 = seed.tournament("Friendly")
    team = seed.team("Dinamo")
    p = seed.player("neo")
    other = seed.player("trinity")
    seed.play(p, team, t1, "ЦЗ", 3)
    seed.play(p, team, t2, "ЦЗ", 1)
    seed.play(other, team, t2, "ЦЗ", 5)
    seed.commit()

    source = MatchDataSource(db)
    assert source.fetch_tournaments(player_id=p) == [
        {"id": t1, "name": "ПЛ Season 20", "matches": 3},
        {"id": t2, "name": "Friendly", "matches": 1},
    ]
    assert [t["matches"] for t in source.fetch_tournaments()] == [6, 3]


def test_appearances_respect_scope_and_roles(db, seed):
    t1 = seed.tournament("ПЛ Season 20")
    t2 = seed.tournament("Friendly")
    team = seed.team("Dinamo")
    p = seed.player("neo")
    seed.play(p, team, t1, "ЦЗ", 2, goals=1)
    seed.play(p, team, t1, "ЦП", 1, goals=2)
    seed.play(p, team, t2, "ЦЗ", 4)
    seed.commit()

    source = MatchDataSource(db)
    rows = source.fetch_appearances(p, MatchScope.from_ids([t1]))
    assert len(rows) == 3
    assert {r["tournament_id"] for r in rows} == {t1}
    assert sum(r["goals"] for r in rows) == 4

    cb_rows = source.fetch_pool_appearances(MatchScope.from_ids([t1]).with_roles({"ЦЗ"}))
    assert [r["role_code"] for r in cb_rows] == ["ЦЗ", "ЦЗ"]

    assert source.fetch_appearances(p, MatchScope.from_ids([])) == []


def test_opponent_xg_per_team(db, seed):
    t = seed.tournament("ПЛ Season 20")
    home = seed.team("Home")
    away = seed.team("Away")
    keeper = seed.player("keeper")
    striker = seed.player("striker")
    winger = seed.player("winger")
    m = seed.match(t)
    seed.appearance(keeper, home, m, "ВР", xg=0.0)
    seed.appearance(seed.player("home9"), home, m, "ФРВ", xg=0.5)
    seed.appearance(striker, away, m, "ФРВ", xg=1.2)
    seed.appearance(winger, away, m, "ЛП", xg=0.3)
    seed.commit()

    opp = MatchDataSource(db).fetch_opponent_xg(MatchScope.from_ids([t]))
    assert opp[(m, home)] == pytest.approx(1.5)
    assert opp[(m, away)] == pytest.approx(0.5)

    rows = attach_opponent_xg([{"match_id": m, "team_id": home}, {"match_id": 999, "team_id": home}], opp)
    assert rows[0]["opp_xg"] == pytest.approx(1.5)
    assert rows[1]["opp_xg"] == 0.0


def test_names_and_last_team(db, seed):
    t = seed.tournament("ПЛ Season 20")
    old_team = seed.team("Old")
    new_team = seed.team("New")
    p = seed.player(gamertag=None, username="morpheus")
    q = seed.player(gamertag="neo")
    seed.play(p, old_team, t, "ЦЗ", 1)
    seed.play(p, new_team, t, "ЦЗ", 1)
    seed.commit()

    source = MatchDataSource(db)
    assert source.fetch_last_team_name(p) == "New"
    assert source.fetch_player_names([p, q]) == {p: "morpheus", q: "neo"}
    assert source.fetch_player_names([]) == {}


def test_query_failure_becomes_data_unavailable(broken_db):
    with pytest.raises(DataUnavailableError):
        MatchDataSource(broken_db).fetch_recent_roles(1, 10)
