"""Booking creation, cancellation and post-stay completion."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable

from campavail.dates import Clock, to_calendar_day
from campavail.dates import today as business_today
from campavail.errors import (
    BookingValidationError,
    CampNotBookableError,
    DateUnavailableError,
    DuplicateUserBookingError,
    RecordNotFoundError,
)
from campavail.events import Event, EventBus, EventType
from campavail.models.booking import Booking
from campavail.modules.availability.evaluator import AvailabilityEvaluator
from campavail.modules.availability.validation import validate_booking_dates
from campavail.store import SQLRecordStore

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("card", "apple_pay", "google_pay", "cash_on_arrival")


@dataclass
class BookingRequest:
    camp_id: str
    user_id: str
    day: date
    guests: int = 1
    total_price: float = 0.0
    payment_method: str = "card"
    guest_email: str | None = None


class BookingService:
    """Writes bookings after re-checking the day as late as possible.

    There is no atomic check-and-reserve. Two requests for the same day can
    both pass the final check and both write; ``find_double_bookings`` is
    how those are found afterwards.
    """

    def __init__(
        self,
        store: SQLRecordStore,
        event_bus: EventBus,
        *,
        clock: Clock = business_today,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._event_bus = event_bus
        self._clock = clock
        self._sleep = sleep
        self._evaluator = AvailabilityEvaluator(store, clock=clock)

    def create_booking(self, request: BookingRequest) -> Booking:
        day = to_calendar_day(request.day)
        if request.payment_method not in PAYMENT_METHODS:
            raise ValueError(f"Unknown payment method {request.payment_method!r}")
        if request.guests < 1:
            raise ValueError("A booking needs at least one guest")

        camp = self._store.get_camp(request.camp_id)
        if camp is None:
            raise RecordNotFoundError(f"Camp {request.camp_id!r} not found")
        if not camp.is_bookable:
            raise CampNotBookableError(f"Camp {camp.id!r} is {camp.status} and cannot be booked")

        check_out = day + timedelta(days=1)
        validation = validate_booking_dates(day, check_out, today=self._clock())
        if not validation.valid:
            raise BookingValidationError(validation.errors)

        if self._store.has_user_booking_on_date(request.user_id, day):
            raise DuplicateUserBookingError(
                f"User {request.user_id!r} already has a reservation on {day}"
            )

        # Final check, immediately before the write
        availability = self._evaluator.check_availability_with_retry(
            camp.id, day, sleep=self._sleep
        )
        if not availability.available:
            raise DateUnavailableError(availability)

        booking = Booking(
            camp_id=camp.id,
            user_id=request.user_id,
            guest_email=request.guest_email,
            host_id=camp.host_id,
            check_in_date=day,
            check_out_date=check_out,
            status="confirmed" if request.payment_method == "cash_on_arrival" else "pending",
            guests=request.guests,
            total_price=request.total_price,
            payment_method=request.payment_method,
        )
        self._store.create_booking(booking)
        logger.info("Booking %s created for camp %s on %s (%s)", booking.id, camp.id, day, booking.status)

        self._event_bus.publish(Event(
            event_type=EventType.BOOKING_CREATED,
            data={"booking_id": booking.id, "camp_id": camp.id, "date": day.isoformat()},
        ))
        return booking

    def cancel_booking(self, booking_id: str, cancelled_by: str | None = None) -> Booking:
        """Cancel a booking. Cancellation is final and releases the day."""
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise RecordNotFoundError(f"Booking {booking_id!r} not found")
        if booking.status == "cancelled":
            return booking
        if booking.status == "completed":
            raise ValueError(f"Booking {booking_id!r} is completed and cannot be cancelled")

        booking = self._store.update_booking_status(booking_id, "cancelled", cancelled_by=cancelled_by)
        logger.info("Booking %s cancelled by %s", booking_id, cancelled_by or "unknown")
        self._event_bus.publish(Event(
            event_type=EventType.BOOKING_CANCELLED,
            data={
                "booking_id": booking.id,
                "camp_id": booking.camp_id,
                "date": booking.check_in_date.isoformat(),
                "cancelled_by": cancelled_by,
            },
        ))
        return booking

    def complete_past_stays(self, today: date | None = None) -> int:
        """Mark confirmed bookings whose day has passed as completed."""
        current = today or self._clock()
        completed = 0
        for booking in self._store.list_bookings_with_status("confirmed"):
            if booking.check_in_date >= current:
                continue
            self._store.update_booking_status(booking.id, "completed")
            completed += 1
            self._event_bus.publish(Event(
                event_type=EventType.BOOKING_COMPLETED,
                data={"booking_id": booking.id, "camp_id": booking.camp_id},
            ))
        if completed:
            logger.info("Marked %d past stay(s) completed", completed)
        return completed
