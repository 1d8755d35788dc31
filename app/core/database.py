"""SQLAlchemy engine, session e dependency FastAPI."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import get_database_url

logger = logging.getLogger(__name__)

engine = create_engine(
    get_database_url(),
    pool_pre_ping=True,
    echo=False,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency that yields a DB session. Caller must close."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """
    Dependency che restituisce la factory di sessioni.
    Usata dagli endpoint che lanciano query indipendenti in parallelo:
    ogni task apre e chiude la propria sessione.
    """
    return SessionLocal


def init_db() -> None:
    """
    Crea le tabelle mancanti. Lo schema e' di sola lettura per il motore
    statistiche: l'ingestion delle partite avviene altrove.
    I modelli devono essere importati prima per registrare i metadata.
    """
    from app.models import (  # noqa: F401
        field_position,
        match,
        match_appearance,
        player,
        team,
        tournament,
    )

    Base.metadata.create_all(bind=engine)
    logger.info("create_all completato")
