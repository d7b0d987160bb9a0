"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Every test gets its own user id, so rows from other tests never count.
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base import Base, get_db
from app.main import app
from app.services import calendar
from app.services.context import PlannerContext

SQLITE_URL = "sqlite:///./test_planner.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def user() -> str:
    return f"user-{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def ctx(user) -> PlannerContext:
    return PlannerContext(user_id=user)


@pytest.fixture()
def headers(user) -> dict[str, str]:
    return {"X-User-Id": user}


@pytest.fixture()
def set_today(monkeypatch):
    """Pin calendar.today() to a fixed date for the rest of the test."""
    def _set(day):
        monkeypatch.setattr(calendar, "today", lambda tz_name=None: day)
        return day
    return _set
