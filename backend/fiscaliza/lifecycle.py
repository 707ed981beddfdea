"""
Status rules for inspection records.

Any status can be selected from any other by a user; the enum order is display
convention only. The system changes status on its own in exactly two places:
an inspector assigned at intake opens the record as UNDER_REVIEW, and
scheduling a follow-up forces PENDING_FOLLOW_UP.
"""
from __future__ import annotations
from datetime import datetime
from typing import List, Optional, Tuple

from . import history
from .errors import InvalidDataError
from .schemas import (
    FollowUp, HistoryEntry, InspectionCreate, InspectionRecord, InspectionStatus, Photo,
)

# Fields that cannot be cleared through an update
_REQUIRED_ON_UPDATE = {"status", "actions", "verified_infractions", "address", "source", "type"}

Plan = Tuple[dict, List[HistoryEntry]]


def initial_status(inspector: Optional[str]) -> InspectionStatus:
    return InspectionStatus.UNDER_REVIEW if inspector and inspector.strip() else InspectionStatus.OPEN


def format_protocol(year: int, sequence: int) -> str:
    return f"{year}-{sequence:03d}"


def new_record(data: InspectionCreate, ident: str, protocol: str, user: str, now: datetime) -> InspectionRecord:
    if not data.address or not data.address.strip():
        raise InvalidDataError("address is required")
    fields = data.model_dump()
    fields["inspector"] = fields["inspector"].strip() if fields["inspector"] and fields["inspector"].strip() else None
    return InspectionRecord(
        **fields,
        id=ident,
        protocol=protocol,
        status=initial_status(fields["inspector"]),
        created_at=now,
        updated_at=now,
        history=[history.entry(user, history.created(fields["inspector"]), now)],
    )


def plan_update(old: InspectionRecord, changes: dict, user: str, now: datetime) -> Plan:
    """
    Turn a requested partial update into the changes to store plus the history
    entries describing them. Protocol, id, created_at and history never change here.
    """
    final = {k: v for k, v in changes.items() if not (k in _REQUIRED_ON_UPDATE and v is None)}
    for frozen in ("id", "protocol", "created_at", "history", "photos", "follow_ups", "attachments"):
        final.pop(frozen, None)
    if "address" in final and not str(final["address"]).strip():
        raise InvalidDataError("address is required")
    if "inspector" in final:
        final["inspector"] = (final["inspector"] or "").strip() or None

    entries = history.diff(old, final, user, now)
    final["updated_at"] = now
    return final, entries


def plan_follow_up(old: InspectionRecord, follow_up: FollowUp, user: str, now: datetime) -> Plan:
    entries: List[HistoryEntry] = []
    final: dict = {"follow_ups": [*old.follow_ups, follow_up], "updated_at": now}
    if old.status != InspectionStatus.PENDING_FOLLOW_UP:
        final["status"] = InspectionStatus.PENDING_FOLLOW_UP
        entries.append(history.entry(user, history.status_forced(InspectionStatus.PENDING_FOLLOW_UP), now))
    entries.append(history.entry(user, history.follow_up_scheduled(follow_up.date), now))
    return final, entries


def plan_photo(old: InspectionRecord, photo: Photo, user: str, now: datetime) -> Plan:
    final = {"photos": [*old.photos, photo], "updated_at": now}
    return final, [history.entry(user, history.photo_added(photo.name), now)]


def apply(old: InspectionRecord, plan: Plan) -> InspectionRecord:
    final, entries = plan
    merged = old.model_copy(update=final, deep=True)
    merged.history = history.merge(old.history, entries)
    # re-validate so enum/date coercion holds for values merged from raw dicts
    return InspectionRecord.model_validate(merged.model_dump())
