"""Codici ruolo in campo (RoleCode). Unica mappatura tra righe partita e ruolo."""

from sqlalchemy import Column, Integer, String

from app.core.database import Base


class FieldPosition(Base):
    __tablename__ = "field_positions"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(16), nullable=False, unique=True)
