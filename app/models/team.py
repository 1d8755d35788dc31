"""
Team ORM model. Club della lega virtuale: il nome e' l'unico dato anagrafico,
la lega si ricava dai tornei delle sue partite.
"""

from sqlalchemy import Column, Integer, String

from app.core.database import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
