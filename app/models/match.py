"""Match ORM model. Una partita di un torneo; timestamp usato per l'ordine di recenza."""

from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import relationship

from app.core.database import Base


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    timestamp = Column(Integer, nullable=False, index=True)

    tournament = relationship("Tournament", backref="matches")
