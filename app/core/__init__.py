from app.core.config import get_database_url
from app.core.database import Base, SessionLocal, engine, get_db, get_session_factory, init_db

__all__ = [
    "get_database_url",
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
    "get_session_factory",
    "init_db",
]
