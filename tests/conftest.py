"""Pytest fixtures — throwaway SQLite database for fast, isolated tests."""
import os

SQLITE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = SQLITE_URL

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from devevents.database import Base, ConnectionCache, get_connection_cache  # noqa: E402
from devevents.main import app  # noqa: E402

# Import all models so they register with Base.metadata
from devevents.models.event import Event  # noqa: E402, F401
from devevents.models.booking import Booking  # noqa: E402, F401


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite schema for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def cache(db_engine):
    """A connection cache whose connector hands back the test engine."""
    return ConnectionCache(SQLITE_URL, connector=lambda url: db_engine)


@pytest.fixture(scope="function")
def client(cache):
    """FastAPI TestClient with the connection cache overridden to use SQLite."""
    app.dependency_overrides[get_connection_cache] = lambda: cache
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def event_payload(**overrides) -> dict:
    """A complete, valid event body; keyword arguments replace fields."""
    payload = {
        "title": "Test Conference 2025",
        "description": "A great conference about testing",
        "overview": "Learn about testing best practices",
        "image": "/images/test-event.png",
        "venue": "Convention Center",
        "location": "San Francisco, CA",
        "date": "2025-12-01",
        "time": "09:00",
        "mode": "In-person",
        "audience": "Developers",
        "agenda": ["Opening keynote", "Technical sessions", "Networking"],
        "organizer": "Test Org",
        "tags": ["testing", "conference", "tech"],
    }
    payload.update(overrides)
    return payload


def create_test_event(client: TestClient, **overrides) -> dict:
    """Helper — POST /api/events and return the event data."""
    resp = client.post("/api/events/", json=event_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def create_test_booking(client: TestClient, event_id: str, email: str = "attendee@example.com") -> dict:
    """Helper — POST /api/bookings and return the booking data."""
    resp = client.post("/api/bookings/", json={"event_id": event_id, "email": email})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
