"""
Pytest configuration and fixtures.
"""
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import sessionmaker

from fiscaliza.config import settings
from fiscaliza.database import make_engine
from fiscaliza.deps import (
    get_inspection_service, get_observation_sync, get_storage, get_summarizer, get_user_service,
)
from fiscaliza.main import app
from fiscaliza.models import Base
from fiscaliza.repository import InMemoryInspectionRepository, InMemoryUserRepository
from fiscaliza.schemas import InspectionRecord
from fiscaliza.seed import demo_users
from fiscaliza.services.inspection_service import InspectionService
from fiscaliza.services.summarizer import Summarizer
from fiscaliza.services.user_service import UserService

T0 = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


class Ticker:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


def _make_record(**overrides) -> InspectionRecord:
    fields = dict(
        id="rec-1",
        protocol="2024-001",
        address="Rua das Flores, 123",
        created_at=T0,
        updated_at=T0,
    )
    fields.update(overrides)
    return InspectionRecord(**fields)


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def clock() -> Ticker:
    return Ticker()


@pytest.fixture
def service(clock) -> InspectionService:
    return InspectionService(InMemoryInspectionRepository(), clock=clock)


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite database per test."""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def user_service() -> UserService:
    return UserService(InMemoryUserRepository(demo_users()))


@pytest.fixture
async def client(service, user_service, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client backed by the in-memory store, no latency, no integrations.
    Requests without a token act as the development system user.
    """
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    app.dependency_overrides[get_inspection_service] = lambda: service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_summarizer] = lambda: Summarizer(api_key="")
    app.dependency_overrides[get_observation_sync] = lambda: None
    app.dependency_overrides[get_storage] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
