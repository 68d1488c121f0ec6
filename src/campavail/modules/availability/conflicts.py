"""Range conflict detection, run before a host blocks dates."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from campavail.dates import in_range, to_calendar_day
from campavail.errors import InvalidDateRangeError
from campavail.models.blocked_date import BlockedDateRange
from campavail.models.booking import Booking
from campavail.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class ConflictResult:
    conflicting_bookings: list[Booking] = field(default_factory=list)
    conflicting_blocks: list[BlockedDateRange] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicting_bookings or self.conflicting_blocks)

    def to_dict(self) -> dict:
        return {
            "has_conflict": self.has_conflict,
            "conflicting_bookings": [
                {"id": b.id, "date": b.check_in_date.isoformat(), "status": b.status}
                for b in self.conflicting_bookings
            ],
            "conflicting_blocks": [
                {"id": b.id, "start": b.start_date.isoformat(), "end": b.end_date.isoformat()}
                for b in self.conflicting_blocks
            ],
        }


def bookings_in_range(bookings: list[Booking], start: date, end: date) -> list[Booking]:
    return [
        b for b in bookings
        if b.status != "cancelled" and in_range(b.check_in_date, start, end)
    ]


def blocks_overlapping(blocks: list[BlockedDateRange], start: date, end: date) -> list[BlockedDateRange]:
    return [b for b in blocks if b.overlaps(start, end)]


class ConflictDetector:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def detect_conflicts(self, camp_id: str, start_date: date, end_date: date) -> ConflictResult:
        """Bookings and blocks that collide with the inclusive range [start, end]."""
        start = to_calendar_day(start_date)
        end = to_calendar_day(end_date)
        if end < start:
            raise InvalidDateRangeError("End date must be on or after start date")

        result = ConflictResult(
            conflicting_bookings=bookings_in_range(self._store.list_bookings(camp_id), start, end),
            conflicting_blocks=blocks_overlapping(self._store.list_blocked_ranges(camp_id), start, end),
        )
        logger.info(
            "Conflict check for camp %s %s..%s: %d booking(s), %d block(s)",
            camp_id, start, end,
            len(result.conflicting_bookings), len(result.conflicting_blocks),
        )
        return result

    def find_double_bookings(self, camp_id: str) -> dict[date, list[Booking]]:
        """Days held by more than one non-cancelled booking.

        Check-then-write is not atomic, so two guests can both win the same
        day. This is the report hosts and admins reconcile from.
        """
        by_day: dict[date, list[Booking]] = defaultdict(list)
        for booking in self._store.list_bookings(camp_id):
            if booking.status != "cancelled":
                by_day[booking.check_in_date].append(booking)
        return {day: found for day, found in sorted(by_day.items()) if len(found) > 1}
