"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app_state import get_controller
from controller import AppController
from database import Base
from kv_store import KeyValueStore
from main import app
from storage import Storage
from typedefs import Exercise, Routine


class FakeClock:
    """Controllable replacement for the wall clock."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def test_engine():
    """Create an in-memory SQLite engine shared by all sessions of a test."""
    # Imported for its side effect of registering tables on Base
    import models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def kv_store(test_engine) -> KeyValueStore:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    return KeyValueStore(TestingSessionLocal)


@pytest.fixture
def storage(kv_store) -> Storage:
    return Storage(kv_store)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 12, 1, 9, 0, 0, tzinfo=UTC))


@pytest.fixture
def controller(storage, clock) -> AppController:
    return AppController(storage, clock=clock)


@pytest.fixture
def client(controller):
    """Create test client with the controller override."""
    app.dependency_overrides[get_controller] = lambda: controller

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def leg_day() -> Routine:
    return Routine(
        name="Leg Day",
        exercises=[Exercise(name="Squat", sets="3", reps="5")],
    )


@pytest.fixture
def upper_body() -> Routine:
    return Routine(
        name="Upper Body",
        description="Pressing and pulling",
        exercises=[
            Exercise(name="Bench Press", sets="4", reps="6-8"),
            Exercise(name="Barbell Rows", sets="4", reps="8-10"),
            Exercise(name="Face Pulls", sets="", reps="15"),
        ],
    )


@pytest.fixture
def saved_routine(controller, upper_body) -> Routine:
    """Add a routine to the controller's store and persist it."""
    controller.routines.add(upper_body)
    controller.storage.save_routines(controller.routines.list())
    return upper_body
