from __future__ import annotations
from typing import Sequence

from ..lib.dates import as_utc
from ..schemas import DashboardOut, InspectionLite, InspectionRecord, InspectionStatus

RECENT_LIMIT = 5
PRIORITY_LIMIT = 5

# Statuses that still need field work
HIGH_PRIORITY = (
    InspectionStatus.PENDING_FOLLOW_UP,
    InspectionStatus.IN_PROGRESS,
    InspectionStatus.UNDER_REVIEW,
)


def dashboard_summary(records: Sequence[InspectionRecord]) -> DashboardOut:
    counts = {s: 0 for s in InspectionStatus}
    for r in records:
        counts[r.status] += 1

    newest_first = sorted(records, key=lambda r: as_utc(r.created_at), reverse=True)
    priority = [r for r in newest_first if r.status in HIGH_PRIORITY]
    return DashboardOut(
        counts=counts,
        total=len(records),
        recent=[InspectionLite.model_validate(r) for r in newest_first[:RECENT_LIMIT]],
        high_priority=[InspectionLite.model_validate(r) for r in priority[:PRIORITY_LIMIT]],
    )
