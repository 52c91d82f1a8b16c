"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- SQLite in-memory database for testing
- TestClient setup against the application factory
- Incident factory for arranging listings
- Dependency override for the database session
"""

import os
import uuid
from datetime import datetime, timedelta, UTC
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Set testing environment before importing app modules
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from app.core.config import Settings
from app.db.base import Base
from app.db.session import get_db
from app.main import create_app
from app.models.incident import Incident


# =====================================
# Database Configuration
# =====================================

# StaticPool keeps the same in-memory connection across sessions
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


# =====================================
# Database Fixtures
# =====================================

@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before each test and drops them after.
    This ensures complete test isolation.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="testing",
        DATABASE_URL=SQLALCHEMY_DATABASE_URL,
        LOG_LEVEL="WARNING",
        API_PREFIX="/api",
    )


@pytest.fixture(scope="function")
def app(test_settings: Settings):
    return create_app(test_settings, engine=engine)


@pytest.fixture(scope="function")
def client(app, db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a TestClient with database dependency override.

    Yields:
        TestClient instance
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =====================================
# Incident Fixtures
# =====================================

@pytest.fixture
def make_incident(db_session: Session) -> Callable[..., Incident]:
    """
    Factory inserting an incident directly into the store.

    Timestamps default to BASE_TIME plus one minute per incident created,
    so creation order is deterministic.
    """
    counter = {"n": 0}

    def _make(**overrides) -> Incident:
        counter["n"] += 1
        created = overrides.pop("created_at", BASE_TIME + timedelta(minutes=counter["n"]))
        fields = {
            "id": uuid.uuid4(),
            "title": f"Incident {counter['n']}",
            "service": "api",
            "severity": "SEV3",
            "status": "OPEN",
            "owner": None,
            "summary": None,
            "created_at": created,
            "updated_at": overrides.pop("updated_at", created),
        }
        fields.update(overrides)
        incident = Incident(**fields)
        db_session.add(incident)
        db_session.commit()
        return incident

    return _make


@pytest.fixture
def incident_payload() -> dict:
    """A valid create body."""
    return {
        "title": "High latency detected in api-gateway",
        "service": "api-gateway",
        "severity": "SEV2",
        "owner": "priya.nair",
        "summary": "p99 latency above 5s since the last deploy.",
    }
