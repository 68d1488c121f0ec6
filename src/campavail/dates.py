"""Calendar-day helpers.

Every date that enters the availability engine is reduced to a plain
``datetime.date`` here. Aware datetimes are first converted to the business
timezone; naive datetimes keep their own wall-clock date.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable
from zoneinfo import ZoneInfo

from campavail.config import section

Clock = Callable[[], date]


def business_timezone() -> ZoneInfo:
    return ZoneInfo(section("availability").get("timezone", "UTC"))


def to_calendar_day(value: Any, tz: ZoneInfo | None = None) -> date:
    """Normalize a date, datetime, ISO string or epoch timestamp mapping to a date."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz or business_timezone())
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")
        # "2026-05-01", "2026-05-01 08:00", "2026-05-01T08:00:00Z"
        if len(text) == 10:
            return date.fromisoformat(text)
        return to_calendar_day(datetime.fromisoformat(text.replace("Z", "+00:00")), tz)
    if isinstance(value, dict) and "seconds" in value:
        instant = datetime.fromtimestamp(value["seconds"], tz=timezone.utc)
        return to_calendar_day(instant, tz)
    raise TypeError(f"Cannot interpret {value!r} as a calendar date")


def today(tz: ZoneInfo | None = None) -> date:
    """Today's calendar day in the business timezone."""
    return datetime.now(tz or business_timezone()).date()


def is_past(day: date, current: date) -> bool:
    """Strictly before today. Today itself is never past."""
    return day < current


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in the closed interval [start, end]."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def in_range(day: date, start: date, end: date) -> bool:
    return start <= day <= end
