"""
Tournament ORM model.
Numero di stagione ed etichetta di lega si ricavano dal nome (vedi app.analytics.eligibility).
"""

from sqlalchemy import Column, Integer, String

from app.core.database import Base


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
