"""Player ORM model. Anagrafica utente della lega virtuale."""

from sqlalchemy import Column, Integer, String

from app.core.database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    gamertag = Column(String(255), nullable=True)
    username = Column(String(255), nullable=True)
