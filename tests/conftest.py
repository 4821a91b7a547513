"""Root conftest for all tests.

Provides an isolated in-memory SQLite database per test, wired into
athletix.db.session so that get_session() and the API use it too.
"""

import os

os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import athletix.db.session as session_module
from athletix.core.auth_jwt import create_access_token
from athletix.core.password import hash_password
from athletix.db.models import Base, User


# Enable foreign key constraints for SQLite
@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints in SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TEST_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def test_engine(monkeypatch):
    """In-memory SQLite engine patched in as the application engine."""
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    monkeypatch.setattr(session_module, "_engine", engine)
    monkeypatch.setattr(session_module, "_SessionLocal", session_local)

    yield engine

    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    """A session on the test database.

    Usage:
        def test_something(db_session):
            db_session.add(User(...))
            db_session.commit()
    """
    session = session_module._get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_user(test_engine):
    """Factory that inserts a user through get_session() and returns its id."""

    def _make_user(**overrides) -> str:
        user_id = overrides.pop("user_id", None) or str(uuid.uuid4())
        password = overrides.pop("password", TEST_PASSWORD)
        fields = {
            "email": f"{user_id[:8]}@example.com",
            "password_hash": hash_password(password),
            "fullname": "Juan Dela Cruz",
            "sport_name": "Basketball",
            "birthdate": date(1990, 6, 15),
            "gender": "male",
            "bio": "Point guard",
            "location": "NCR",
            "role": "athlete",
            "verification_status": "unverified",
            "registration_date": datetime.now(timezone.utc),
        }
        fields.update(overrides)
        with session_module.get_session() as session:
            session.add(User(user_id=user_id, **fields))
        return user_id

    return _make_user


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a token for user_id."""

    def _auth_headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _auth_headers


@pytest.fixture
def client(test_engine):
    """FastAPI TestClient running the app lifespan against the test database."""
    from fastapi.testclient import TestClient

    from athletix.main import app

    with TestClient(app) as test_client:
        yield test_client
