"""Pydantic schemas per API Teams."""

from pydantic import BaseModel, Field

from app.schemas.players import RadarAxisOut


class TeamStatsResponse(BaseModel):
    """
    Statistiche squadra sui tornei ufficiali + radar percentile contro le
    squadre della stessa lega (lega dell'ultima partita nello scope).
    """
    ok: bool = True
    team_id: int | None = None
    team_name: str | None = None
    scope: str = "recent"
    matches: int = 0
    totals: dict[str, float | int | None] = Field(default_factory=dict)
    per_match: dict[str, float | int | None] = Field(default_factory=dict)
    league_label: str | None = None
    teams_in_league: int = 0
    radar: list[RadarAxisOut] = Field(default_factory=list)
    error: str | None = None
