import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.api.dependencies import get_db, get_rng
from app.main import app
from app.services.tournament_repository import TournamentRepository
from app import models  # noqa: F401  (registers every table on Base)

# In-memory SQLite shared by every session through StaticPool,
# check_same_thread=False because TestClient runs the app in another thread.
test_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def repository(db):
    return TournamentRepository(db)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rng] = lambda: random.Random(42)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_tournament(repository):
    """Create a tournament with ``n`` participants joined in order user-1, user-2, ..."""
    def _make(n_participants=0, name="Club Championship"):
        tournament = repository.create_tournament(name=name, time_game=10, started_at=None)
        participants = [
            repository.create_participant(tournament.id, f"user-{i}")
            for i in range(1, n_participants + 1)
        ]
        return tournament, participants
    return _make
