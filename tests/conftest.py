"""Pytest configuration and fixtures for testing."""

import os

# Settings are validated when the app module is imported
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")
os.environ.setdefault("OMDB_API_KEY", "test-omdb-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.adapters.omdb import OmdbError
from backend.app.config import TokenSettings
from backend.app.db.base import Base
from backend.app.security.jwt import TokenAuthority
from tests.omdb_fakes import (
    ANIME_DETAIL,
    MOVIE_DETAIL,
    SERIES_DETAIL,
    FakeOmdbClient,
    search_hit,
)

API = "/api/v1"


@pytest.fixture
def fake_omdb():
    """OMDb fake preloaded with a movie, a series and an anime title."""
    return FakeOmdbClient(
        search_pages={
            ("inception", 1): {
                "Search": [search_hit(MOVIE_DETAIL), search_hit(SERIES_DETAIL)],
                "totalResults": "3",
                "Response": "True",
            },
            ("broken", 1): {"Response": "False", "Error": "Invalid API key!"},
        },
        details={
            MOVIE_DETAIL["imdbID"]: MOVIE_DETAIL,
            SERIES_DETAIL["imdbID"]: SERIES_DETAIL,
            ANIME_DETAIL["imdbID"]: ANIME_DETAIL,
            "tt-upstream-down": OmdbError("OMDb request timed out"),
        },
    )


@pytest.fixture
def token_settings():
    return TokenSettings(
        access_secret="unit-access-secret",
        refresh_secret="unit-refresh-secret",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture
def token_authority(token_settings):
    return TokenAuthority(token_settings)


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a test database engine with in-memory SQLite.

    StaticPool keeps a single connection so the TestClient's worker threads
    see the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    # Create all tables
    Base.metadata.create_all(engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    SessionFactory = sessionmaker(bind=test_db_engine, expire_on_commit=False)
    session = SessionFactory()

    yield session

    session.close()


@pytest.fixture
def client(test_session, fake_omdb):
    """Create a test client with database session and OMDb overrides."""
    from backend.app.api.deps import get_omdb_client
    from backend.app.db.session import get_session
    from backend.app.main import app

    def override_get_session():
        yield test_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_omdb_client] = lambda: fake_omdb
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """Register a user through the API; returns the response body."""
    response = client.post(
        f"{API}/auth/register",
        json={
            "email": "viewer@example.com",
            "password": "correct-horse-battery",
            "username": "viewer",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['accessToken']}"}
