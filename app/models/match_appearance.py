"""
Contatori evento di un giocatore in una partita: una riga per (player, match).
Creata dall'ingestion esterna, immutabile. Tutti i contatori sono interi >= 0,
xg/xa reali >= 0, clean_sheet 0/1.
"""

from sqlalchemy import Column, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from app.core.database import Base


class MatchAppearance(Base):
    __tablename__ = "match_appearances"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    position_id = Column(Integer, ForeignKey("field_positions.id"), nullable=True)

    # --- ATTACCO ---
    goals = Column(Integer, nullable=False, default=0)
    assists = Column(Integer, nullable=False, default=0)
    xg = Column(Float, nullable=False, default=0.0)
    xa = Column(Float, nullable=False, default=0.0)
    shots_on = Column(Integer, nullable=False, default=0)
    shots_off = Column(Integer, nullable=False, default=0)

    # --- PASSAGGI / CREAZIONE ---
    passes_total = Column(Integer, nullable=False, default=0)
    passes_completed = Column(Integer, nullable=False, default=0)
    key_passes = Column(Integer, nullable=False, default=0)
    pre_assists = Column(Integer, nullable=False, default=0)
    crosses_total = Column(Integer, nullable=False, default=0)
    crosses_completed = Column(Integer, nullable=False, default=0)

    # --- DRIBBLING / DUELLI ---
    dribbles_total = Column(Integer, nullable=False, default=0)
    dribbles_completed = Column(Integer, nullable=False, default=0)
    aerial_duels = Column(Integer, nullable=False, default=0)
    aerial_duels_won = Column(Integer, nullable=False, default=0)
    off_duels_won = Column(Integer, nullable=False, default=0)
    off_duels_lost = Column(Integer, nullable=False, default=0)

    # --- DIFESA ---
    interceptions = Column(Integer, nullable=False, default=0)
    tackles_total = Column(Integer, nullable=False, default=0)
    tackles_won = Column(Integer, nullable=False, default=0)
    completed_tackles = Column(Integer, nullable=False, default=0)
    blocks = Column(Integer, nullable=False, default=0)
    clearances = Column(Integer, nullable=False, default=0)
    outplayed = Column(Integer, nullable=False, default=0)
    penalised_fails = Column(Integer, nullable=False, default=0)

    # --- PORTIERE ---
    saves = Column(Integer, nullable=False, default=0)
    goals_conceded = Column(Integer, nullable=False, default=0)
    clean_sheet = Column(Integer, nullable=False, default=0)

    # --- Relazioni ---
    match = relationship("Match", backref="appearances")
    position = relationship("FieldPosition")

    __table_args__ = (
        Index("ix_match_appearances_player_match", "player_id", "match_id"),
        Index("ix_match_appearances_team_match", "team_id", "match_id"),
    )
