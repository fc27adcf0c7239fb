from __future__ import annotations

from datetime import datetime
from typing import Optional


def add_years(value: datetime, years: int) -> datetime:
    """Shift by whole calendar years; Feb 29 lands on Feb 28 in non-leap years."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def is_aware(value: Optional[datetime]) -> bool:
    return value is None or (value.tzinfo is not None and value.utcoffset() is not None)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    if value is None:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
