# Record store service
from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, List
from uuid import uuid4

from .. import lifecycle
from ..errors import NotFoundError
from ..lib.dates import as_utc, utcnow
from ..repository import InspectionRepository
from ..schemas import (
    FollowUp, FollowUpIn, InspectionCreate, InspectionRecord, InspectionUpdate, Photo, PhotoIn,
)

logger = logging.getLogger(__name__)


class InspectionService:
    """
    Create/read/update for inspection records plus the nested mutations
    (photos, follow-ups). Every mutation that touches a tracked field leaves
    history entries attributed to the acting user. There is no push channel:
    callers observe changes by listing again.

    Mutations are not serialized per record; two overlapping updates to the
    same record resolve last-write-wins.
    """

    def __init__(self, repo: InspectionRepository, clock: Callable[[], datetime] = utcnow):
        self.repo = repo
        self.clock = clock

    # ---------- Reads ----------

    async def list(self) -> List[InspectionRecord]:
        records = await self.repo.all()
        return sorted(records, key=lambda r: as_utc(r.created_at), reverse=True)

    async def get_by_id(self, ident: str) -> InspectionRecord:
        record = await self.repo.get(ident)
        if record is None:
            raise NotFoundError("inspection", ident)
        return record

    # ---------- Mutations ----------

    async def create(self, data: InspectionCreate, acting_user: str) -> InspectionRecord:
        now = self.clock()
        sequence = await self.repo.next_sequence(now.year)
        record = lifecycle.new_record(
            data,
            ident=str(uuid4()),
            protocol=lifecycle.format_protocol(now.year, sequence),
            user=acting_user,
            now=now,
        )
        await self.repo.add(record)
        logger.info("Created inspection %s (%s) by %s", record.protocol, record.status.value, acting_user)
        return record

    async def update(self, ident: str, data: InspectionUpdate, acting_user: str) -> InspectionRecord:
        original = await self.get_by_id(ident)
        plan = lifecycle.plan_update(original, data.changes(), acting_user, self.clock())
        record = lifecycle.apply(original, plan)
        await self.repo.save(record)
        logger.info("Updated inspection %s: %d history entries", record.protocol, len(plan[1]))
        return record

    async def add_photo(self, ident: str, data: PhotoIn, acting_user: str) -> Photo:
        original = await self.get_by_id(ident)
        now = self.clock()
        photo = Photo(id=str(uuid4()), url=data.url, name=data.name, uploaded_at=now)
        record = lifecycle.apply(original, lifecycle.plan_photo(original, photo, acting_user, now))
        await self.repo.save(record)
        logger.info("Photo %s added to inspection %s", photo.name, record.protocol)
        return photo

    async def add_follow_up(self, ident: str, data: FollowUpIn, acting_user: str) -> FollowUp:
        original = await self.get_by_id(ident)
        now = self.clock()
        follow_up = FollowUp(id=str(uuid4()), date=data.date, notes=data.notes, completed=False)
        record = lifecycle.apply(original, lifecycle.plan_follow_up(original, follow_up, acting_user, now))
        await self.repo.save(record)
        logger.info("Follow-up on %s scheduled for inspection %s", follow_up.date, record.protocol)
        return follow_up

    async def set_summary(self, ident: str, summary: str, acting_user: str) -> InspectionRecord:
        return await self.update(ident, InspectionUpdate(report_summary=summary), acting_user)

