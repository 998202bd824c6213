"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from patient_api.core.config import AppConfig
from patient_api.main import create_app
from patient_api.services.db import Database


@pytest.fixture
def settings():
    """Settings pointing at an in-memory database."""
    return AppConfig(APP_ENV="test", DATABASE_URL="sqlite://", LOG_LEVEL="WARNING")


@pytest.fixture
def database():
    """In-memory SQLite store; StaticPool keeps one connection so every session sees the same data."""
    db = Database("sqlite://", poolclass=StaticPool)
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as session:
        yield session


@pytest.fixture
def client(settings, database):
    app = create_app(settings=settings, database=database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def alice_payload():
    return {"name": "Alice", "age": 40, "doctor": "Dr. Smith"}


@pytest.fixture
def alice(client, alice_payload):
    """A patient created through the API."""
    response = client.post("/patients", json=alice_payload)
    assert response.status_code == 201
    return response.json()
