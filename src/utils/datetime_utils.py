from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def to_local_tz(dt_utc: datetime, tz: str = "UTC") -> datetime:
    """Convert a UTC datetime to the given timezone (zoneinfo key)."""
    if dt_utc.tzinfo is None:
        dt_utc = dt_utc.replace(tzinfo=timezone.utc)
    try:
        return dt_utc.astimezone(ZoneInfo(tz))
    except ZoneInfoNotFoundError:
        return dt_utc


def today_iso(tz: str = "UTC", now: Optional[datetime] = None) -> str:
    """Calendar date (YYYY-MM-DD) of ``now`` in ``tz``; the default observation date."""
    current = now or datetime.now(timezone.utc)
    return to_local_tz(current, tz).date().isoformat()


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    parsed = date.fromisoformat(value)
    if parsed.isoformat() != value:
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    return parsed
