"""
Pytest configuration and shared fixtures for testing.

Provides reusable test fixtures:
- test_db: In-memory SQLite database for isolated testing
- test_client: FastAPI TestClient for API integration tests
- state: PlannerState on an in-memory backend for unit tests
- fixed_today: Pins the "today" dependency of the routes
"""

import datetime
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Keep the app's own engine off the on-disk database during tests
os.environ.setdefault("SHIFT_PLANNER_DATABASE_URL", "sqlite:///:memory:")

# ruff: noqa: E402
from app.core.overlays import PlannerState
from app.core.schedule import clear_schedule_cache
from app.core.storage import MemoryBackend
from app.database.database import Base, get_db
from app.main import app
from app.routes.shared import current_date


@pytest.fixture(autouse=True)
def _reset_schedule_cache():
    """Resolution memo is process-wide; start every test from a clean one."""
    clear_schedule_cache()
    yield
    clear_schedule_cache()


@pytest.fixture(scope="function")
def test_db():
    """
    Create an in-memory SQLite database for testing.

    A StaticPool keeps the single in-memory connection shared between the
    test thread and the TestClient's worker thread.

    Yields:
        SQLAlchemy Session: Database session for test use
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def test_client(test_db):
    """
    Create FastAPI TestClient with test database dependency override.

    Args:
        test_db: Test database session fixture

    Yields:
        TestClient: FastAPI test client for API testing
    """

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()


@pytest.fixture
def fixed_today(test_client):
    """
    Pin "today" for routes that depend on it.

    Returns a setter; the default is 2025-07-02, an Off day (O1) for crew A.
    """

    def set_today(day: datetime.date = datetime.date(2025, 7, 2)) -> datetime.date:
        app.dependency_overrides[current_date] = lambda: day
        return day

    set_today()
    return set_today


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def state(backend):
    """PlannerState on a fresh in-memory backend."""
    return PlannerState(backend)
