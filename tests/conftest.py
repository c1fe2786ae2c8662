# conftest.py
"""
Pytest fixtures for the test environment.

Provides an in-memory SQLite database, a FastAPI test client with the
database and Redis dependencies overridden, and helpers for creating
authenticated users.
"""

import os

os.environ["TESTING"] = "True"
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from friends_crm import crud, models, schemas
from friends_crm.auth import create_access_token, get_redis_client
from friends_crm.database import Base
from friends_crm.deps import get_db
from friends_crm.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Fresh database session for each test.

    Tables are created before the test and dropped afterwards.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def redis_mock():
    """Redis stand-in that always misses the cache."""
    mock_redis_instance = MagicMock()
    mock_redis_instance.get = AsyncMock(return_value=None)
    mock_redis_instance.setex = AsyncMock(return_value=True)
    mock_redis_instance.delete = AsyncMock(return_value=1)
    return mock_redis_instance


@pytest.fixture(scope="function")
def client(db_session: Session, redis_mock):
    """
    FastAPI test client with the database and Redis dependencies overridden.
    """
    def override_get_db():
        yield db_session

    async def override_get_redis_client():
        return redis_mock

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = override_get_redis_client

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


def make_user(db_session: Session, email: str, password: str = "TestPass123") -> models.User:
    return crud.create_user(db_session, schemas.UserCreate(email=email, password=password))


def auth_headers(user: models.User) -> dict:
    """Authorization header with a freshly issued token for ``user``."""
    token = create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db_session: Session) -> models.User:
    return make_user(db_session, "owner@example.com")


@pytest.fixture
def other_user(db_session: Session) -> models.User:
    return make_user(db_session, "stranger@example.com")
