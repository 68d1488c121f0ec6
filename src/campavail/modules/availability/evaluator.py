"""Single-day availability decisions for a camp.

A booking occupies exactly one calendar day, its check-in date. The
check-out date is an early-morning departure on the following day and never
blocks anything. Blocked ranges are inclusive at both ends.
"""

from __future__ import annotations

import calendar
import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable

from campavail.config import section
from campavail.dates import Clock, is_past, iter_days, to_calendar_day
from campavail.dates import today as business_today
from campavail.models.blocked_date import BlockedDateRange
from campavail.models.booking import Booking
from campavail.modules.availability.retry import with_retry
from campavail.store import RecordStore

logger = logging.getLogger(__name__)

PAST_DATE = "past_date"
BOOKED = "booked"
BLOCKED = "blocked"

MESSAGES = {
    None: "Date is available for booking",
    PAST_DATE: "Cannot book past dates",
    BOOKED: "This date is already booked",
    BLOCKED: "This date has been blocked by the host",
}


@dataclass(frozen=True)
class AvailabilityCheckResult:
    available: bool
    message: str
    reason: str | None = None
    conflicting_booking_id: str | None = None
    conflicting_block_id: str | None = None

    @property
    def conflicting_id(self) -> str | None:
        return self.conflicting_booking_id or self.conflicting_block_id

    def to_dict(self) -> dict:
        return {
            "available": self.available,
            "reason": self.reason,
            "conflicting_id": self.conflicting_id,
            "message": self.message,
        }


@dataclass(frozen=True)
class DayStatus:
    date: date
    status: str  # available, booked, blocked, past_date
    conflicting_id: str | None = None


def _result(reason: str | None, **ids: str) -> AvailabilityCheckResult:
    return AvailabilityCheckResult(
        available=reason is None, message=MESSAGES[reason], reason=reason, **ids
    )


def find_booking_on(day: date, bookings: list[Booking]) -> Booking | None:
    """First non-cancelled booking whose check-in falls on ``day``."""
    for booking in bookings:
        if booking.status == "cancelled":
            continue
        if booking.check_in_date == day:
            return booking
    return None


def find_block_on(day: date, blocks: list[BlockedDateRange]) -> BlockedDateRange | None:
    for block in blocks:
        if block.contains(day):
            return block
    return None


def is_date_blocked(day: date, blocks: list[BlockedDateRange]) -> bool:
    return find_block_on(day, blocks) is not None


def evaluate_day(
    day: date,
    current: date,
    load_bookings: Callable[[], list[Booking]],
    load_blocks: Callable[[], list[BlockedDateRange]],
) -> AvailabilityCheckResult:
    """Apply the past, booked, blocked checks in that order.

    Loaders are only called once the earlier checks have passed, so a past
    date never touches the store and a booked date never reads the blocks.
    """
    if is_past(day, current):
        return _result(PAST_DATE)

    booking = find_booking_on(day, load_bookings())
    if booking is not None:
        return _result(BOOKED, conflicting_booking_id=booking.id)

    block = find_block_on(day, load_blocks())
    if block is not None:
        return _result(BLOCKED, conflicting_block_id=block.id)

    return _result(None)


class AvailabilityEvaluator:
    """Answers "is this camp free on this day" against live store data."""

    def __init__(self, store: RecordStore, clock: Clock = business_today) -> None:
        self._store = store
        self._clock = clock
        self._config = section("availability")

    def check_availability(self, camp_id: str, day: date) -> AvailabilityCheckResult:
        """Decide whether ``day`` can be booked at ``camp_id``. Store errors propagate."""
        target = to_calendar_day(day)
        result = evaluate_day(
            target,
            self._clock(),
            lambda: self._store.list_bookings(camp_id),
            lambda: self._store.list_blocked_ranges(camp_id),
        )
        if result.available:
            logger.debug("Camp %s is available on %s", camp_id, target)
        else:
            logger.info(
                "Camp %s unavailable on %s: %s %s",
                camp_id, target, result.reason, result.conflicting_id or "",
            )
        return result

    def check_availability_with_retry(
        self,
        camp_id: str,
        day: date,
        max_retries: int | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> AvailabilityCheckResult:
        return with_retry(
            lambda: self.check_availability(camp_id, day),
            self._config.get("max_retries", 3) if max_retries is None else max_retries,
            base_delay=self._config.get("backoff_base_seconds", 1.0),
            sleep=sleep,
        )

    def get_booked_dates(self, camp_id: str) -> list[date]:
        """Check-in dates of every non-cancelled booking, for calendar rendering."""
        return sorted(
            b.check_in_date for b in self._store.list_bookings(camp_id) if b.status != "cancelled"
        )

    def get_blocked_dates(self, camp_id: str) -> list[date]:
        """Every individual day covered by the camp's blocked ranges."""
        days: set[date] = set()
        for block in self._store.list_blocked_ranges(camp_id):
            days.update(iter_days(block.start_date, block.end_date))
        return sorted(days)

    def get_calendar(self, camp_id: str, year: int, month: int) -> list[DayStatus]:
        """Status of every day in a month from one read of bookings and blocks."""
        bookings = self._store.list_bookings(camp_id)
        blocks = self._store.list_blocked_ranges(camp_id)
        current = self._clock()
        last = calendar.monthrange(year, month)[1]

        statuses = []
        for day in iter_days(date(year, month, 1), date(year, month, last)):
            result = evaluate_day(day, current, lambda: bookings, lambda: blocks)
            statuses.append(DayStatus(
                date=day,
                status=result.reason or "available",
                conflicting_id=result.conflicting_id,
            ))
        return statuses
