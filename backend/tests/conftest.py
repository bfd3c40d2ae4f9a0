"""Pytest fixtures — SQLite database per test, identity via proxy headers."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ["RESEND_API_KEY"] = ""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from meatup.config import settings
from meatup.database import Base, get_db
from meatup.main import app
from meatup.models.user import User, MemberStatus

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
    """Yield a database session for seeding and direct assertions."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    return create_test_user(db, "admin@meatup.club", name="Admin", is_admin=True)


@pytest.fixture
def member(db):
    return create_test_user(db, "member@meatup.club", name="Member")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def create_test_user(
    db,
    email: str,
    name: str = None,
    is_admin: bool = False,
    status: MemberStatus = MemberStatus.active,
) -> User:
    """Provision a member row directly; there is no self-service signup."""
    user = User(email=email, name=name, is_admin=is_admin, status=status)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(email: str, name: str = None, picture: str = None) -> dict:
    """Headers the authenticating proxy would forward for a verified identity."""
    headers = {settings.IDENTITY_EMAIL_HEADER: email}
    if name:
        headers[settings.IDENTITY_NAME_HEADER] = name
    if picture:
        headers[settings.IDENTITY_PICTURE_HEADER] = picture
    return headers


def create_test_event(client: TestClient, admin_email: str, name: str = "Bern's Steak House",
                      event_date: str = "2099-03-15") -> dict:
    """Helper — POST /api/events as an admin and return response JSON."""
    resp = client.post("/api/events/", headers=auth_headers(admin_email), json={
        "restaurant_name": name,
        "event_date": event_date,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
