"""Pydantic schemas per API Players (radar, statistiche, profilo)."""

from typing import Any

from pydantic import BaseModel, Field


class RadarAxisOut(BaseModel):
    key: str
    label: str
    value: float | None = None
    percentile: int = 0  # 0-100, gia' invertito per le metriche "meno e' meglio"
    inverted: bool = False


class PlayerRadarResponse(BaseModel):
    """
    Radar percentile del giocatore nel suo cluster.
    ready=False con reason quando un gate non e' superato; ok=False solo per
    input non valido o dati non disponibili.
    """
    ok: bool = True
    ready: bool = False
    player_id: int | None = None
    current_role: str | None = None
    cluster: str | None = None
    matches_in_scope: int = 0
    tournaments_used: list[str] = Field(default_factory=list)
    radar: list[RadarAxisOut] = Field(default_factory=list)
    reason: str | None = None
    error: str | None = None
    debug: dict[str, Any] = Field(default_factory=dict)


class PlayerStatsResponse(BaseModel):
    """Totali e vista per-partita sui tornei ufficiali (scope recent) o tutti (scope all)."""
    ok: bool = True
    player_id: int | None = None
    scope: str = "recent"
    matches: int = 0
    totals: dict[str, float | int | None] = Field(default_factory=dict)
    per_match: dict[str, float | int | None] = Field(default_factory=dict)
    error: str | None = None


class RoleShare(BaseModel):
    role: str
    count: int
    pct: float


class ClusterShare(BaseModel):
    cluster: str
    label: str
    pct: float


class LeagueShare(BaseModel):
    label: str
    pct: int


class PlayerProfileResponse(BaseModel):
    ok: bool = True
    player_id: int | None = None
    nickname: str = ""
    team: str | None = None
    current_role: str | None = None
    cluster: str | None = None
    roles: list[RoleShare] = Field(default_factory=list)
    clusters: list[ClusterShare] = Field(default_factory=list)
    leagues: list[LeagueShare] = Field(default_factory=list)
    error: str | None = None
    debug: dict[str, Any] = Field(default_factory=dict)
