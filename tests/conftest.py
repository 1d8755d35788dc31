"""
Fixture condivise: SQLite in-memory (StaticPool) per i test sincroni,
SQLite su file per le classifiche (una connessione per thread).
"""

import os

# app.core.database crea l'engine all'import
os.environ["DATABASE_URL"] = "sqlite://"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.database import Base  # noqa: E402
from app.models import FieldPosition, Match, MatchAppearance, Player, Team, Tournament  # noqa: E402


class Seeder:
    """Inserisce tornei, partite e righe partita con contatori di default a 0."""

    def __init__(self, db: Session):
        self.db = db
        self._positions: dict[str, int] = {}
        self._ts = 1_700_000_000

    def _add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj.id

    def tournament(self, name: str) -> int:
        return self._add(Tournament(name=name))

    def player(self, gamertag: str | None = None, username: str | None = None) -> int:
        return self._add(Player(gamertag=gamertag, username=username))

    def team(self, name: str) -> int:
        return self._add(Team(name=name))

    def position(self, code: str) -> int:
        if code not in self._positions:
            self._positions[code] = self._add(FieldPosition(code=code))
        return self._positions[code]

    def match(self, tournament_id: int) -> int:
        self._ts += 3600
        return self._add(Match(tournament_id=tournament_id, timestamp=self._ts))

    def appearance(self, player_id: int, team_id: int, match_id: int, role: str | None, **counters) -> int:
        position_id = self.position(role) if role else None
        return self._add(MatchAppearance(
            player_id=player_id,
            team_id=team_id,
            match_id=match_id,
            position_id=position_id,
            **counters,
        ))

    def play(self, player_id: int, team_id: int, tournament_id: int, role: str | None, n: int, **counters) -> list[int]:
        """n partite del giocatore (una riga ciascuna) con gli stessi contatori."""
        match_ids = []
        for _ in range(n):
            mid = self.match(tournament_id)
            self.appearance(player_id, team_id, mid, role, **counters)
            match_ids.append(mid)
        return match_ids

    def commit(self) -> None:
        self.db.commit()


def _create_schema(engine) -> None:
    Base.metadata.create_all(bind=engine)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(db) -> Seeder:
    return Seeder(db)


@pytest.fixture
def broken_db():
    """Sessione su un DB senza tabelle: ogni query fallisce con OperationalError."""
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    session = sessionmaker(bind=eng)()
    try:
        yield session
    finally:
        session.close()
        eng.dispose()


@pytest.fixture
def file_session_factory(tmp_path):
    eng = create_engine(
        f"sqlite:///{tmp_path / 'stats.db'}",
        connect_args={"check_same_thread": False},
    )
    _create_schema(eng)
    yield sessionmaker(autocommit=False, autoflush=False, bind=eng)
    eng.dispose()


@pytest.fixture
def file_seed(file_session_factory):
    session = file_session_factory()
    try:
        yield Seeder(session)
    finally:
        session.close()
