from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

# Dates shown to staff follow the Brazilian convention
DATE_FORMAT = "%d/%m/%Y"
DATETIME_FORMAT = "%d/%m/%Y %H:%M:%S"

# End of an inclusive day range: +24h - 1ms
END_OF_DAY = timedelta(days=1) - timedelta(milliseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Inclusive [start 00:00, end 23:59:59.999] window in UTC."""
    lo = datetime.combine(start, time.min, tzinfo=timezone.utc)
    hi = datetime.combine(end, time.min, tzinfo=timezone.utc) + END_OF_DAY
    return lo, hi


def format_date(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(DATE_FORMAT)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return as_utc(value).strftime(DATETIME_FORMAT)
