# SQLAlchemy models
from __future__ import annotations
from sqlalchemy import (
    Column, String, DateTime, Date, Float, Integer, Text, JSON
)
from sqlalchemy.orm import declarative_base
import uuid

from .lib.dates import utcnow

# Portable Base (works with SQLite or Postgres)
Base = declarative_base()

def _uuid() -> str:
    """Store IDs as strings so it works on SQLite and Postgres without extra types."""
    return str(uuid.uuid4())

# ---------- Tables ----------

class Inspection(Base):
    __tablename__ = "inspections"

    id = Column(String, primary_key=True, default=_uuid)
    protocol = Column(String, unique=True, nullable=False, index=True)
    address = Column(Text, nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)
    source = Column(String, nullable=False)
    type = Column(String, nullable=False)
    description = Column(Text, default="")
    status = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    inspector = Column(String)
    report = Column(Text)
    report_summary = Column(Text)
    complainant_name = Column(String)
    complainant_address = Column(Text)
    respondent_name = Column(String)
    contact_phone = Column(String)
    reference_point = Column(Text)
    complaint_date = Column(Date)

    # Collections travel as JSON (insertion-ordered lists / mappings)
    photos = Column(JSON, default=list)
    follow_ups = Column(JSON, default=list)
    actions = Column(JSON, default=list)
    verified_infractions = Column(JSON, default=dict)
    attachments = Column(JSON, default=list)
    history = Column(JSON, default=list)


class ProtocolCounter(Base):
    """Monotonic per-year sequence behind human-readable protocol numbers."""
    __tablename__ = "protocol_counters"

    year = Column(Integer, primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)


class UserAccount(Base):
    __tablename__ = "user_accounts"

    id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False, index=True)
    role = Column(String, nullable=False)
    password_hash = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=utcnow)


class FieldObservation(Base):
    """Minimal row pushed to the external field-inspection database."""
    __tablename__ = "field_observations"

    id = Column(String, primary_key=True, default=_uuid)
    inspection_id = Column(String, index=True)
    observation = Column(Text)
    photo_url = Column(String)
    address = Column(Text)
    complainant_name = Column(String)
    respondent_name = Column(String)
    created_at = Column(DateTime, default=utcnow)
