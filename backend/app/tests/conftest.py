"""
Shared test fixtures: in-memory database, API client and user factory.
"""
import itertools
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.cache import response_cache
from app.db.base import Base
from app.db.session import get_db
from app.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_counter = itertools.count(1)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    response_cache.clear()
    yield
    Base.metadata.drop_all(bind=engine)
    response_cache.clear()


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register a user through the API; returns id, username and auth headers."""
    def _make(username=None, is_private=False, password="secret123", **fields):
        n = next(_counter)
        username = username or f"traveler{n}"
        payload = {
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
            "first_name": fields.pop("first_name", "Test"),
            "last_name": fields.pop("last_name", f"User{n}"),
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        headers = {"Authorization": f"Bearer {body['access_token']}"}
        if is_private:
            client.put("/api/users/profile/privacy", json={"is_private": True}, headers=headers)
        return {
            "id": body["user"]["id"],
            "username": username,
            "headers": headers,
            "refresh_token": body["refresh_token"],
        }
    return _make


@pytest.fixture
def auth_headers(make_user):
    return make_user()["headers"]


@pytest.fixture
def trip_payload():
    def _payload(**overrides):
        payload = {
            "title": "Alps Hiking Week",
            "description": "Hut to hut across the Bernese Oberland",
            "destination": {"country": "Switzerland", "city": "Interlaken"},
            "start_date": "2030-07-01",
            "end_date": "2030-07-07",
            "max_participants": 4,
            "tags": ["Hiking", "mountains", "hiking"],
            "category": "adventure",
            "difficulty": "challenging",
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def create_trip(client, trip_payload):
    """Create a trip as the given user; returns the response body."""
    def _create(headers, **overrides):
        response = client.post("/api/trips", json=trip_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
