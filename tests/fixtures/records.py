"""Unsaved record builders and a fixed clock for tests."""

from datetime import date, timedelta

from campavail.models.blocked_date import BlockedDateRange
from campavail.models.booking import Booking

TODAY = date(2026, 5, 10)


def fixed_clock() -> date:
    return TODAY


def make_block(start: date, end: date, block_id: str = "block-1") -> BlockedDateRange:
    return BlockedDateRange(
        id=block_id, camp_id="camp-1", host_id="host-1",
        start_date=start, end_date=end, created_by="host-1",
    )


def make_booking(day: date, status: str = "confirmed", booking_id: str = "booking-1") -> Booking:
    return Booking(
        id=booking_id, camp_id="camp-1",
        check_in_date=day, check_out_date=day + timedelta(days=1), status=status,
    )
