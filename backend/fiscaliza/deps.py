"""
Service singletons handed to the routers through FastAPI dependencies.
Built lazily on first use so tests can override them before anything is created.
"""
from __future__ import annotations
import logging
from functools import lru_cache
from typing import Optional

from .config import settings
from .database import SessionLocal, engine
from .models import Base
from .repository import (
    InMemoryInspectionRepository, InMemoryUserRepository,
    SqlInspectionRepository, SqlUserRepository,
)
from .seed import demo_inspections, demo_users, seed_database
from .services.inspection_service import InspectionService
from .services.observation_sync import ObservationSync
from .services.summarizer import Summarizer
from .services.user_service import UserService
from .storage import StorageService

logger = logging.getLogger(__name__)


def _use_sql() -> bool:
    return settings.STORE_BACKEND.lower() == "sql"


@lru_cache
def _prepare_database() -> None:
    Base.metadata.create_all(bind=engine)
    if settings.SEED_DEMO_DATA:
        seed_database(SessionLocal)


@lru_cache
def get_inspection_service() -> InspectionService:
    if _use_sql():
        _prepare_database()
        logger.info("Record store: SQL (%s)", engine.url.render_as_string(hide_password=True))
        return InspectionService(SqlInspectionRepository(SessionLocal))
    records = demo_inspections() if settings.SEED_DEMO_DATA else []
    logger.info("Record store: in-memory simulation, %d ms latency", settings.STORE_LATENCY_MS)
    return InspectionService(InMemoryInspectionRepository(records, latency=settings.STORE_LATENCY_MS / 1000))


@lru_cache
def get_user_service() -> UserService:
    if _use_sql():
        _prepare_database()
        return UserService(SqlUserRepository(SessionLocal))
    users = demo_users() if settings.SEED_DEMO_DATA else []
    return UserService(InMemoryUserRepository(users, latency=settings.STORE_LATENCY_MS / 1000))


@lru_cache
def get_summarizer() -> Summarizer:
    return Summarizer(settings.OPENAI_API_KEY, model=settings.SUMMARY_MODEL)


@lru_cache
def get_storage() -> Optional[StorageService]:
    if not settings.storage_configured:
        return None
    return StorageService(
        settings.S3_ACCESS_KEY,
        settings.S3_SECRET_KEY,
        settings.S3_BUCKET_NAME,
        endpoint_url=settings.S3_ENDPOINT_URL,
        public_base_url=settings.S3_PUBLIC_BASE_URL,
    )


@lru_cache
def get_observation_sync() -> Optional[ObservationSync]:
    if not settings.SYNC_OBSERVATIONS:
        return None
    _prepare_database()
    return ObservationSync(SessionLocal, storage=get_storage())
