# Settings loader
from __future__ import annotations
import secrets
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Database (use SQLite for dev; swap to Postgres URL in prod)
    DATABASE_URL: str = "sqlite:///./fiscaliza.db"

    # Record store: "memory" keeps the simulated backend, "sql" uses DATABASE_URL
    STORE_BACKEND: str = "memory"
    STORE_LATENCY_MS: int = 500
    SEED_DEMO_DATA: bool = True

    # S3 / R2 / B2 (photo and attachment uploads)
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_BUCKET_NAME: str = "fiscaliza-fotos"
    S3_ENDPOINT_URL: str | None = None  # keep None for AWS S3
    S3_PUBLIC_BASE_URL: str | None = None

    # Push new records to the external field_observations table
    SYNC_OBSERVATIONS: bool = False

    # Auth - Generate secure secret if not provided
    # In production, set this via environment variable
    JWT_SECRET_KEY: str = secrets.token_urlsafe(32)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Report summarization
    OPENAI_API_KEY: str = ""
    SUMMARY_MODEL: str = "gpt-4o-mini"

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def storage_configured(self) -> bool:
        return bool(self.S3_ACCESS_KEY and self.S3_SECRET_KEY)

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
