from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional

from ..lib.dates import as_utc, day_bounds
from ..schemas import InspectionRecord, InspectionStatus


def filter_records(
    records: Iterable[InspectionRecord],
    text: Optional[str] = None,
    status: Optional[InspectionStatus] = None,
) -> List[InspectionRecord]:
    """Same matching as the list view: substring on protocol, address or type, plus exact status."""
    needle = (text or "").strip().lower()
    out = []
    for r in records:
        if needle and not (
            needle in r.protocol.lower()
            or needle in (r.address or "").lower()
            or needle in r.type.value.lower()
        ):
            continue
        if status is not None and r.status != status:
            continue
        out.append(r)
    return out


def select_by_created_range(records: Iterable[InspectionRecord], start: date, end: date) -> List[InspectionRecord]:
    """Records created within [start, end], where end covers its whole day."""
    lo, hi = day_bounds(start, end)
    return [r for r in records if lo <= as_utc(r.created_at) <= hi]
