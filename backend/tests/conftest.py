"""Pytest fixtures: file-backed SQLite database recreated for every test."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from minyan.config import Settings
from minyan.database import Base, get_db
from minyan.main import app
from minyan.services.notification_service import NotificationService, get_notification_service
from minyan.services.realtime import AttendanceHub, ScheduleHub, get_hub, get_schedule_hub

# Import all models so they register with Base.metadata
from minyan.models.user import User                          # noqa: F401
from minyan.models.building import Building, BuildingMember  # noqa: F401
from minyan.models.recurrence import RecurrencePattern       # noqa: F401
from minyan.models.minyan_event import MinyanEvent           # noqa: F401
from minyan.models.attendance import Attendance              # noqa: F401
from minyan.models.announcement import Announcement          # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def hub():
    """A private attendance hub so subscriptions never leak between tests."""
    return AttendanceHub()


@pytest.fixture(scope="function")
def schedule_hub():
    """A private schedule hub for live day listings."""
    return ScheduleHub()


class GatewayRecorder:
    """Collects outbound gateway requests and answers them from a queue of responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={"name": "projects/test/messages/1", "sid": "SM123"})


@pytest.fixture(scope="function")
def gateway():
    return GatewayRecorder()


@pytest.fixture(scope="function")
def notifier(gateway):
    """NotificationService with credentials configured and HTTP served by ``gateway``."""
    config = Settings(
        DATABASE_URL="sqlite://",
        FCM_PROJECT_ID="minyan-test",
        FCM_ACCESS_TOKEN="fcm-token",
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="secret",
        TWILIO_WHATSAPP_FROM="whatsapp:+14155238886",
    )
    return NotificationService(config, client=httpx.Client(transport=httpx.MockTransport(gateway)))


@pytest.fixture(scope="function")
def client(db_engine, hub, schedule_hub, notifier):
    """FastAPI TestClient with database, live hubs, and messaging dependencies overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_hub] = lambda: hub
    app.dependency_overrides[get_schedule_hub] = lambda: schedule_hub
    app.dependency_overrides[get_notification_service] = lambda: notifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: create records via the API, return the JSON response dict
# ---------------------------------------------------------------------------
def create_test_user(client: TestClient, name: str = "Test User", email: str = None, **extra) -> dict:
    """POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={
        "name": name,
        "email": email or f"{name.lower().replace(' ', '.')}@example.com",
        **extra,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_building(client: TestClient, creator_id: str, name: str = "Test Building", **extra) -> dict:
    """POST /api/buildings and return response JSON."""
    resp = client.post("/api/buildings/", json={
        "name": name,
        "address": "1 Main St",
        "created_by": creator_id,
        **extra,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_minyan(client: TestClient, building_id: str, admin_id: str, date: str = "2024-01-01",
                       time: str = "13:30", prayer_type: str = "Mincha") -> dict:
    """POST /api/minyanim and return response JSON."""
    resp = client.post("/api/minyanim/", json={
        "building_id": building_id,
        "date": date,
        "time": time,
        "prayer_type": prayer_type,
        "location": "Lobby",
        "created_by": admin_id,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
