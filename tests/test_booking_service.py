"""Tests for booking creation, cancellation and completion."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from campavail.errors import (
    BookingValidationError,
    CampNotBookableError,
    DateUnavailableError,
    DuplicateUserBookingError,
    RecordNotFoundError,
    StoreUnavailableError,
)
from campavail.events import EventType
from campavail.models.camp import Camp
from campavail.modules.availability import ConflictDetector
from campavail.modules.booking import BookingRequest, BookingService
from tests.fixtures.records import TODAY, fixed_clock

D = TODAY + timedelta(days=7)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def service(store, event_bus, sleeps):
    return BookingService(store, event_bus, clock=fixed_clock, sleep=sleeps.append)


def _request(**overrides) -> BookingRequest:
    fields = {"camp_id": "camp-1", "user_id": "guest-1", "day": D, "guests": 4, "total_price": 85.0}
    fields.update(overrides)
    return BookingRequest(**fields)


def test_card_booking_starts_pending(service, store, sample_camp):
    booking = service.create_booking(_request())

    stored = store.get_booking(booking.id)
    assert stored.status == "pending"
    assert stored.check_in_date == D
    assert stored.check_out_date == D + timedelta(days=1)
    assert stored.host_id == sample_camp.host_id
    assert stored.guests == 4


def test_cash_on_arrival_is_confirmed(service, sample_camp):
    booking = service.create_booking(_request(payment_method="cash_on_arrival"))
    assert booking.status == "confirmed"


def test_created_booking_blocks_the_day(service, evaluator, sample_camp):
    booking = service.create_booking(_request())
    result = evaluator.check_availability(sample_camp.id, D)
    assert result.reason == "booked"
    assert result.conflicting_booking_id == booking.id


def test_booked_day_is_refused(service, sample_camp, add_booking):
    existing = add_booking(D)
    with pytest.raises(DateUnavailableError) as exc_info:
        service.create_booking(_request())
    assert exc_info.value.result.reason == "booked"
    assert exc_info.value.result.conflicting_id == existing.id


def test_blocked_day_is_refused(service, sample_camp, add_block):
    add_block(D - timedelta(days=1), D)
    with pytest.raises(DateUnavailableError) as exc_info:
        service.create_booking(_request())
    assert exc_info.value.result.reason == "blocked"


def test_next_day_after_booking_can_be_booked(service, sample_camp, add_booking):
    add_booking(D - timedelta(days=1))
    assert service.create_booking(_request()).check_in_date == D


def test_past_day_is_a_validation_error(service, sample_camp):
    with pytest.raises(BookingValidationError) as exc_info:
        service.create_booking(_request(day=TODAY - timedelta(days=1)))
    assert "Check-in date cannot be in the past" in exc_info.value.errors


def test_today_can_be_booked(service, sample_camp):
    assert service.create_booking(_request(day=TODAY)).check_in_date == TODAY


@pytest.mark.parametrize("status", ["pending", "inactive"])
def test_non_active_camp_is_refused(service, store, status):
    store.save_camp(Camp(id="camp-x", host_id="host-1", title="Closed", status=status))
    with pytest.raises(CampNotBookableError):
        service.create_booking(_request(camp_id="camp-x"))


def test_missing_camp(service):
    with pytest.raises(RecordNotFoundError):
        service.create_booking(_request(camp_id="nope"))


def test_same_guest_same_day_elsewhere_is_refused(service, store, sample_camp):
    store.save_camp(Camp(id="camp-2", host_id="host-2", title="Other"))
    service.create_booking(_request(camp_id="camp-2"))

    with pytest.raises(DuplicateUserBookingError):
        service.create_booking(_request())


def test_unknown_payment_method(service, sample_camp):
    with pytest.raises(ValueError):
        service.create_booking(_request(payment_method="barter"))


def test_final_check_failure_is_not_a_booking(service, store, sleeps, sample_camp, monkeypatch):
    monkeypatch.setattr(store, "list_bookings", MagicMock(side_effect=StoreUnavailableError("offline")))

    with pytest.raises(StoreUnavailableError):
        service.create_booking(_request())

    assert sleeps == [1.0, 2.0]
    monkeypatch.undo()
    assert store.list_bookings(sample_camp.id) == []


def test_create_publishes_event(service, event_bus, sample_camp):
    received = []
    event_bus.subscribe(EventType.BOOKING_CREATED, received.append)
    booking = service.create_booking(_request())
    assert received[0].data == {"booking_id": booking.id, "camp_id": "camp-1", "date": D.isoformat()}


def test_cancel_releases_the_day(service, evaluator, event_bus, sample_camp):
    received = []
    event_bus.subscribe(EventType.BOOKING_CANCELLED, received.append)
    booking = service.create_booking(_request())

    cancelled = service.cancel_booking(booking.id, cancelled_by="guest-1")

    assert cancelled.status == "cancelled"
    assert cancelled.cancelled_by == "guest-1"
    assert evaluator.check_availability(sample_camp.id, D).available is True
    assert received[0].data["booking_id"] == booking.id


def test_cancel_twice_is_a_no_op(service, event_bus, sample_camp):
    received = []
    event_bus.subscribe(EventType.BOOKING_CANCELLED, received.append)
    booking = service.create_booking(_request())

    service.cancel_booking(booking.id)
    service.cancel_booking(booking.id)

    assert len(received) == 1


def test_completed_booking_cannot_be_cancelled(service, sample_camp, add_booking):
    booking = add_booking(D, status="completed")
    with pytest.raises(ValueError):
        service.cancel_booking(booking.id)


def test_cancel_unknown_booking(service):
    with pytest.raises(RecordNotFoundError):
        service.cancel_booking("missing")


def test_complete_past_stays(service, store, sample_camp, add_booking):
    past = add_booking(TODAY - timedelta(days=2))
    today = add_booking(TODAY)
    pending = add_booking(TODAY - timedelta(days=3), status="pending")

    assert service.complete_past_stays() == 1

    assert store.get_booking(past.id).status == "completed"
    assert store.get_booking(today.id).status == "confirmed"
    assert store.get_booking(pending.id).status == "pending"


def test_concurrent_writers_can_both_win(store, event_bus, sample_camp, monkeypatch):
    """Check-then-write is optimistic: both writers pass the check."""
    first = BookingService(store, event_bus, clock=fixed_clock, sleep=lambda s: None)
    second = BookingService(store, event_bus, clock=fixed_clock, sleep=lambda s: None)

    # Both requests observe the day as free before either writes
    snapshot = store.list_bookings(sample_camp.id)
    monkeypatch.setattr(store, "list_bookings", MagicMock(return_value=snapshot))
    a = first.create_booking(_request(user_id="guest-a"))
    b = second.create_booking(_request(user_id="guest-b"))
    monkeypatch.undo()

    doubles = ConflictDetector(store).find_double_bookings(sample_camp.id)
    assert {x.id for x in doubles[D]} == {a.id, b.id}
