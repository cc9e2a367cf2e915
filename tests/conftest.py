# tests/conftest.py

from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401  registers the table models
from app.config import Settings, get_settings
from app.db.config import get_session
from app.main import app as fastapi_app
from app.models.user import User
from app.services.auth_service import create_access_token
from app.services.task_service import TaskService

from .fakes import FakeClock, InMemoryTaskStore, InMemoryUserStore

ALICE = "alice-oid"
BOB = "bob-oid"


@pytest.fixture()
def settings() -> Settings:
    """Settings isolated from the environment so tokens are deterministic."""
    return Settings(
        jwt_secret_key="unit-test-secret-key-0123456789",
        jwt_issuer="test-issuer",
        jwt_audience="test-audience",
        azure_ad_client_id="client-id",
        azure_ad_client_secret="client-secret",
        azure_ad_tenant_id="tenant-id",
        azure_ad_redirect_uri="http://testserver/api/auth/callback",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 10, 12, 0, 0))


@pytest.fixture()
def users() -> InMemoryUserStore:
    return InMemoryUserStore(
        [
            User(id=ALICE, name="Alice", email="alice@example.com"),
            User(id=BOB, name="Bob", email="bob@example.com"),
        ]
    )


@pytest.fixture()
def service(users: InMemoryUserStore, clock: FakeClock) -> TaskService:
    """TaskService over in-memory stores and a fixed clock."""
    return TaskService(InMemoryTaskStore(), users, clock=clock)


@pytest.fixture()
def engine():
    db_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(db_engine)
    yield db_engine
    SQLModel.metadata.drop_all(db_engine)


@pytest.fixture()
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture()
def seeded_session(session: Session) -> Session:
    session.add(User(id=ALICE, name="Alice", email="alice@example.com"))
    session.add(User(id=BOB, name="Bob", email="bob@example.com"))
    session.commit()
    return session


@pytest.fixture()
def client(seeded_session: Session, settings: Settings):
    """TestClient wired to the in-memory database and test settings."""

    def override_session():
        yield seeded_session

    fastapi_app.dependency_overrides[get_session] = override_session
    fastapi_app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


def _user(user_id: str) -> User:
    return User(id=user_id, name=user_id, email=f"{user_id}@example.com", role="User")


@pytest.fixture()
def auth_headers(settings: Settings):
    """Factory producing Authorization headers for a user id."""

    def make(user_id: str = ALICE) -> dict:
        return {"Authorization": f"Bearer {create_access_token(_user(user_id), settings)}"}

    return make
