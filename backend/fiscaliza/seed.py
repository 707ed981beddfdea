"""
Demo accounts and inspections so a fresh install has something to show.
Run directly (`python -m fiscaliza.seed`) to fill the SQL database.
"""
from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import List

from sqlalchemy.orm import sessionmaker

from . import history, models
from .lib.dates import utcnow
from .repository import StoredUser, _row_values
from .schemas import (
    FollowUp, HistoryEntry, InspectionAction, InspectionRecord, InspectionSource,
    InspectionStatus, InspectionType, UserRole,
)
from .services.user_service import hash_password

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = [
    ("1", "Admin Geral", "admin", "admin123", UserRole.ADMIN),
    ("2", "João Silva", "fiscal", "fiscal123", UserRole.INSPECTOR),
    ("3", "Maria Oliveira", "maria.o", "senha456", UserRole.INSPECTOR),
]


def demo_users() -> List[StoredUser]:
    return [
        StoredUser(id=i, name=name, username=username, role=role, password_hash=hash_password(pw))
        for i, name, username, pw, role in DEMO_ACCOUNTS
    ]


def demo_inspections(now: datetime | None = None) -> List[InspectionRecord]:
    now = now or utcnow()
    year = now.year

    def at(days: int) -> datetime:
        return now - timedelta(days=days)

    return [
        InspectionRecord(
            id="demo-1",
            protocol=f"{year}-001",
            address="Rua das Flores, 123, Centro",
            reference_point="Em frente à padaria",
            source=InspectionSource.CITIZEN_WHATSAPP,
            type=InspectionType.CONSTRUCTION_PERMIT,
            description="Obra em andamento sem placa de alvará visível.",
            status=InspectionStatus.OPEN,
            created_at=at(6),
            updated_at=at(6),
            complainant_name="Carlos Pereira",
            respondent_name="Construtora Alfa Ltda.",
            contact_phone="(11) 98765-4321",
            complaint_date=(now - timedelta(days=7)).date(),
            history=[HistoryEntry(timestamp=at(6), user="Admin Geral", change=history.created(None))],
        ),
        InspectionRecord(
            id="demo-2",
            protocol=f"{year}-002",
            address="Av. Brasil, 1500, Jardim América",
            source=InspectionSource.OMBUDSMAN,
            type=InspectionType.SIDEWALK_ACCESSIBILITY,
            description="Calçada obstruída por entulho da reforma.",
            status=InspectionStatus.IN_PROGRESS,
            created_at=at(4),
            updated_at=at(2),
            inspector="João Silva",
            report="Constatado entulho ocupando toda a largura da calçada.",
            actions=[InspectionAction.NOTIFICATION],
            verified_infractions={InspectionType.MATERIALS_ON_STREET: True},
            history=[
                HistoryEntry(timestamp=at(2), user="João Silva",
                             change=history.status_changed(InspectionStatus.UNDER_REVIEW, InspectionStatus.IN_PROGRESS)),
                HistoryEntry(timestamp=at(4), user="Admin Geral",
                             change=history.created("João Silva")),
            ],
        ),
        InspectionRecord(
            id="demo-3",
            protocol=f"{year}-003",
            address="Rua Sete de Setembro, 45",
            source=InspectionSource.CIVIL_DEFENSE,
            type=InspectionType.MARQUEES_AND_ROOFS,
            description="Marquise com rachaduras aparentes sobre o passeio.",
            status=InspectionStatus.PENDING_FOLLOW_UP,
            created_at=at(2),
            updated_at=at(1),
            inspector="Maria Oliveira",
            actions=[InspectionAction.ORIENTED, InspectionAction.INTERDICTION],
            follow_ups=[
                FollowUp(id="demo-3-f1", date=(now + timedelta(days=10)).date(),
                         notes="Verificar laudo estrutural."),
            ],
            history=[
                HistoryEntry(timestamp=at(1), user="Maria Oliveira",
                             change=history.status_forced(InspectionStatus.PENDING_FOLLOW_UP)),
                HistoryEntry(timestamp=at(1), user="Maria Oliveira",
                             change=history.follow_up_scheduled((now + timedelta(days=10)).date())),
                HistoryEntry(timestamp=at(2), user="Admin Geral",
                             change=history.created("Maria Oliveira")),
            ],
        ),
    ]


def seed_database(session_factory: sessionmaker) -> None:
    """Insert demo users and inspections into empty tables."""
    with session_factory() as db:
        if db.query(models.UserAccount).first() is None:
            for u in demo_users():
                db.add(models.UserAccount(
                    id=u.id, name=u.name, username=u.username,
                    role=u.role.value, password_hash=u.password_hash,
                ))
            logger.info("Seeded %d demo accounts", len(DEMO_ACCOUNTS))
        if db.query(models.Inspection).first() is None:
            now = utcnow()
            records = demo_inspections(now)
            for r in records:
                db.add(models.Inspection(**_row_values(r)))
            db.merge(models.ProtocolCounter(year=now.year, last_value=len(records)))
            logger.info("Seeded %d demo inspections", len(records))
        db.commit()


if __name__ == "__main__":
    from .database import SessionLocal, engine

    logging.basicConfig(level=logging.INFO)
    models.Base.metadata.create_all(bind=engine)
    seed_database(SessionLocal)
