"""
Storage behind the record store and the user directory.

The domain services only see the abstract repositories below, so the
in-memory simulation and the SQL database are interchangeable.
"""
from __future__ import annotations
import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from . import models
from .schemas import InspectionRecord, UserAccount


class StoredUser(UserAccount):
    password_hash: str = ""


# ---------- Inspections ----------

class InspectionRepository(ABC):

    @abstractmethod
    async def all(self) -> List[InspectionRecord]: ...

    @abstractmethod
    async def get(self, ident: str) -> Optional[InspectionRecord]: ...

    @abstractmethod
    async def add(self, record: InspectionRecord) -> None: ...

    @abstractmethod
    async def save(self, record: InspectionRecord) -> None: ...

    @abstractmethod
    async def next_sequence(self, year: int) -> int:
        """Return the next protocol sequence for `year`; never reuses a value."""


class InMemoryInspectionRepository(InspectionRepository):
    """
    Simulated backend: every call completes after a fixed delay and hands out
    deep copies so callers never alias stored state.
    """

    def __init__(self, records: Optional[List[InspectionRecord]] = None, latency: float = 0.0):
        self.latency = latency
        self._records: Dict[str, InspectionRecord] = {}
        self._counters: Dict[int, int] = {}
        for r in records or []:
            self._records[r.id] = r.model_copy(deep=True)
            year, _, seq = r.protocol.partition("-")
            if year.isdigit() and seq.isdigit():
                self._counters[int(year)] = max(self._counters.get(int(year), 0), int(seq))

    async def _delay(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)

    async def all(self) -> List[InspectionRecord]:
        await self._delay()
        return [r.model_copy(deep=True) for r in self._records.values()]

    async def get(self, ident: str) -> Optional[InspectionRecord]:
        await self._delay()
        r = self._records.get(ident)
        return r.model_copy(deep=True) if r else None

    async def add(self, record: InspectionRecord) -> None:
        await self._delay()
        self._records[record.id] = record.model_copy(deep=True)

    async def save(self, record: InspectionRecord) -> None:
        await self._delay()
        self._records[record.id] = record.model_copy(deep=True)

    async def next_sequence(self, year: int) -> int:
        self._counters[year] = self._counters.get(year, 0) + 1
        return self._counters[year]


_JSON_COLUMNS = ("photos", "follow_ups", "actions", "verified_infractions", "attachments", "history")


def _row_values(record: InspectionRecord) -> dict:
    py = record.model_dump()
    js = record.model_dump(mode="json")
    values = {}
    for key, value in py.items():
        if key in _JSON_COLUMNS:
            values[key] = js[key]
        elif isinstance(value, Enum):
            values[key] = value.value
        else:
            values[key] = value
    return values


class SqlInspectionRepository(InspectionRepository):
    """SQLAlchemy-backed store; blocking session work runs in Starlette's threadpool."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _all(self) -> List[InspectionRecord]:
        with self.session_factory() as db:
            rows = db.query(models.Inspection).all()
            return [InspectionRecord.model_validate(r) for r in rows]

    def _get(self, ident: str) -> Optional[InspectionRecord]:
        with self.session_factory() as db:
            row = db.get(models.Inspection, ident)
            return InspectionRecord.model_validate(row) if row else None

    def _add(self, record: InspectionRecord) -> None:
        with self.session_factory() as db:
            db.add(models.Inspection(**_row_values(record)))
            db.commit()

    def _save(self, record: InspectionRecord) -> None:
        with self.session_factory() as db:
            row = db.get(models.Inspection, record.id)
            if row is None:
                db.add(models.Inspection(**_row_values(record)))
            else:
                for key, value in _row_values(record).items():
                    setattr(row, key, value)
            db.commit()

    def _next_sequence(self, year: int) -> int:
        with self.session_factory() as db:
            counter = db.get(models.ProtocolCounter, year, with_for_update=True)
            if counter is None:
                counter = models.ProtocolCounter(year=year, last_value=0)
                db.add(counter)
            counter.last_value += 1
            value = counter.last_value
            db.commit()
            return value

    async def all(self) -> List[InspectionRecord]:
        return await run_in_threadpool(self._all)

    async def get(self, ident: str) -> Optional[InspectionRecord]:
        return await run_in_threadpool(self._get, ident)

    async def add(self, record: InspectionRecord) -> None:
        await run_in_threadpool(self._add, record)

    async def save(self, record: InspectionRecord) -> None:
        await run_in_threadpool(self._save, record)

    async def next_sequence(self, year: int) -> int:
        return await run_in_threadpool(self._next_sequence, year)


# ---------- Users ----------

class UserRepository(ABC):

    @abstractmethod
    async def all(self) -> List[StoredUser]: ...

    @abstractmethod
    async def get(self, ident: str) -> Optional[StoredUser]: ...

    @abstractmethod
    async def by_username(self, username: str) -> Optional[StoredUser]: ...

    @abstractmethod
    async def save(self, user: StoredUser) -> None: ...

    @abstractmethod
    async def delete(self, ident: str) -> bool: ...


class InMemoryUserRepository(UserRepository):

    def __init__(self, users: Optional[List[StoredUser]] = None, latency: float = 0.0):
        self.latency = latency
        self._users: Dict[str, StoredUser] = {u.id: u.model_copy() for u in users or []}

    async def _delay(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)

    async def all(self) -> List[StoredUser]:
        await self._delay()
        return [u.model_copy() for u in self._users.values()]

    async def get(self, ident: str) -> Optional[StoredUser]:
        await self._delay()
        u = self._users.get(ident)
        return u.model_copy() if u else None

    async def by_username(self, username: str) -> Optional[StoredUser]:
        await self._delay()
        for u in self._users.values():
            if u.username == username:
                return u.model_copy()
        return None

    async def save(self, user: StoredUser) -> None:
        await self._delay()
        self._users[user.id] = user.model_copy()

    async def delete(self, ident: str) -> bool:
        await self._delay()
        return self._users.pop(ident, None) is not None


class SqlUserRepository(UserRepository):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @staticmethod
    def _out(row: models.UserAccount) -> StoredUser:
        return StoredUser.model_validate(row)

    def _query(self, db: Session):
        return db.query(models.UserAccount)

    def _all(self) -> List[StoredUser]:
        with self.session_factory() as db:
            return [self._out(r) for r in self._query(db).order_by(models.UserAccount.name).all()]

    def _get(self, ident: str) -> Optional[StoredUser]:
        with self.session_factory() as db:
            row = db.get(models.UserAccount, ident)
            return self._out(row) if row else None

    def _by_username(self, username: str) -> Optional[StoredUser]:
        with self.session_factory() as db:
            row = self._query(db).filter(models.UserAccount.username == username).first()
            return self._out(row) if row else None

    def _save(self, user: StoredUser) -> None:
        with self.session_factory() as db:
            row = db.get(models.UserAccount, user.id)
            if row is None:
                row = models.UserAccount(id=user.id)
                db.add(row)
            row.name = user.name
            row.username = user.username
            row.role = user.role.value
            row.password_hash = user.password_hash
            db.commit()

    def _delete(self, ident: str) -> bool:
        with self.session_factory() as db:
            row = db.get(models.UserAccount, ident)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    async def all(self) -> List[StoredUser]:
        return await run_in_threadpool(self._all)

    async def get(self, ident: str) -> Optional[StoredUser]:
        return await run_in_threadpool(self._get, ident)

    async def by_username(self, username: str) -> Optional[StoredUser]:
        return await run_in_threadpool(self._by_username, username)

    async def save(self, user: StoredUser) -> None:
        await run_in_threadpool(self._save, user)

    async def delete(self, ident: str) -> bool:
        return await run_in_threadpool(self._delete, ident)
