"""Pydantic schemas per le classifiche della home."""

from pydantic import BaseModel, Field


class LeaderboardRow(BaseModel):
    player_id: int
    nickname: str = ""
    matches: int = 0
    value: float


class LeaderboardBlock(BaseModel):
    """Una classifica. ok=False se la sua query e' fallita: le altre restano valide."""
    key: str
    label: str
    ok: bool = True
    rows: list[LeaderboardRow] = Field(default_factory=list)
    error: str | None = None


class LeaderboardsResponse(BaseModel):
    min_season: int
    tournaments_used: int = 0
    boards: list[LeaderboardBlock] = Field(default_factory=list)
