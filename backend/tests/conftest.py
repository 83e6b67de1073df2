import os

# Keep the app's own engine off disk; every test session uses test_engine below.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from tourney_admin.database import get_session  # noqa: E402
from tourney_admin.main import app  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models MUST be imported before create_all() (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Tables are dropped and recreated per test so ids start at 1
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a freshly created schema"""
    from tourney_admin.models.bracket_snapshot import BracketSnapshot  # noqa: F401
    from tourney_admin.models.participant import Participant  # noqa: F401
    from tourney_admin.models.tournament import Tournament  # noqa: F401

    SQLModel.metadata.drop_all(test_engine)
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the
    entire duration so the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


def tournament_payload(**overrides):
    payload = {
        "title": "Winter Chess Open",
        "description": "Sixteen-player single elimination event",
        "gameType": "chess",
        "maxPlayers": 16,
        "entryFee": 10,
        "startDate": "2026-01-15",
        "endDate": "2026-01-17",
        "bracketType": "SINGLE_ELIMINATION",
        "prizeBreakdown": {"first": 50, "second": 30, "third": 20},
    }
    payload.update(overrides)
    return payload


@pytest.fixture(name="tournament")
def tournament_fixture(client: TestClient):
    """A created tournament (maxPlayers=16) as returned by the API"""
    response = client.post("/api/tournaments", json=tournament_payload())
    assert response.status_code == 201
    return response.json()
