import pytest

from app.analytics.radar import TEAM_RADAR_AXES
from app.services import team_service
from app.services.team_service import get_team_stats


def _game(seed, tournament_id, home, away, home_goals, away_goals):
    m = seed.match(tournament_id)
    seed.appearance(seed.player(), home, m, "ФРВ", goals=home_goals, shots_on=home_goals + 1, passes_total=100, passes_completed=80)
    seed.appearance(seed.player(), away, m, "ФРВ", goals=away_goals, shots_on=away_goals + 1, passes_total=90, passes_completed=60)


@pytest.fixture
def leagues(db, seed):
    pl = seed.tournament("ПЛ Season 20")
    fnl = seed.tournament("ФНЛ Season 20")
    friendly = seed.tournament("Friendly")
    ids = {name: seed.team(name) for name in ("Alfa", "Beta", "Gamma", "Delta", "Idle")}
    for _ in range(3):
        _game(seed, pl, ids["Alfa"], ids["Beta"], 2, 1)
    _game(seed, fnl, ids["Gamma"], ids["Delta"], 5, 0)
    _game(seed, friendly, ids["Alfa"], ids["Gamma"], 9, 9)
    seed.commit()
    return ids


def test_team_stats_with_league_radar(db, leagues):
    result = get_team_stats(leagues["Alfa"], db, min_season=18, min_matches=1)

    assert result.ok is True
    assert result.team_name == "Alfa"
    assert result.matches == 3
    assert result.totals["goals"] == 6
    assert result.per_match["goals"] == 2.0
    assert result.league_label == "ПЛ"
    # Gamma/Delta giocano in ФНЛ, l'amichevole non conta
    assert result.teams_in_league == 2
    assert [a.key for a in result.radar] == list(TEAM_RADAR_AXES)
    goals = next(a for a in result.radar if a.key == "goals")
    assert goals.value == 2.0
    assert goals.percentile == 100


def test_weaker_team_ranks_lower(db, leagues):
    result = get_team_stats(leagues["Beta"], db, min_season=18, min_matches=1)
    goals = next(a for a in result.radar if a.key == "goals")
    assert goals.percentile == 50


def test_scope_all_includes_every_numbered_season_only(db, leagues):
    result = get_team_stats(leagues["Alfa"], db, scope="all", min_season=18, min_matches=1)
    # "Friendly" non ha numero di stagione
    assert result.matches == 3


def test_team_without_matches(db, leagues):
    result = get_team_stats(leagues["Idle"], db, min_season=18, min_matches=1)
    assert result.ok is True
    assert result.matches == 0
    assert result.league_label is None
    assert result.radar == []
    assert result.per_match["goals"] is None


def test_invalid_team_id(db):
    result = get_team_stats("x1", db)
    assert result.ok is False
    assert result.error == "invalid id"


def test_team_stats_data_unavailable(broken_db):
    result = get_team_stats(3, broken_db, min_season=18)
    assert result.ok is False
    assert result.error
    assert result.matches == 0
    assert result.totals["goals"] == 0


def test_unexpected_radar_error_keeps_totals(db, leagues, monkeypatch):
    def _fail(*args, **kwargs):
        raise ZeroDivisionError("division by zero")

    monkeypatch.setattr(team_service, "build_team_radar", _fail)
    result = get_team_stats(leagues["Alfa"], db, min_season=18, min_matches=1)

    assert result.ok is False
    assert result.error == "ZeroDivisionError: division by zero"
    assert result.matches == 3
    assert result.totals["goals"] == 6
    assert result.radar == []


def test_unexpected_totals_error_degrades_to_empty(db, leagues, monkeypatch):
    def _fail(*args, **kwargs):
        raise KeyError("goals")

    monkeypatch.setattr(team_service, "aggregate", _fail)
    result = get_team_stats(leagues["Alfa"], db, min_season=18, min_matches=1)

    assert result.ok is False
    assert result.error == "KeyError: 'goals'"
    assert result.matches == 0
    assert result.totals["goals"] == 0
