"""Tests for database models."""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campavail.models.blocked_date import BlockedDateRange
from campavail.models.booking import Booking
from campavail.models.camp import Camp
from tests.fixtures.records import make_block, make_booking


def test_booking_occupies_only_check_in(db_session: Session, sample_camp: Camp):
    booking = Booking(
        camp_id=sample_camp.id,
        check_in_date=date(2026, 6, 1),
        check_out_date=date(2026, 6, 2),
        status="confirmed",
    )
    db_session.add(booking)
    db_session.commit()

    loaded = db_session.query(Booking).first()
    assert loaded.occupied_date == date(2026, 6, 1)
    assert len(loaded.id) == 32
    assert loaded.camp.title == "Sakhir Desert Kashta"


def test_booking_is_active():
    assert make_booking(date(2026, 6, 1)).is_active is True
    assert make_booking(date(2026, 6, 1), status="completed").is_active is True
    assert make_booking(date(2026, 6, 1), status="cancelled").is_active is False


def test_block_contains_is_inclusive():
    block = make_block(date(2026, 6, 1), date(2026, 6, 3))
    assert block.contains(date(2026, 6, 1))
    assert block.contains(date(2026, 6, 3))
    assert not block.contains(date(2026, 5, 31))
    assert not block.contains(date(2026, 6, 4))
    assert block.days == 3


def test_block_overlaps():
    block = make_block(date(2026, 6, 10), date(2026, 6, 20))
    assert block.overlaps(date(2026, 6, 5), date(2026, 6, 10))
    assert block.overlaps(date(2026, 6, 20), date(2026, 6, 25))
    assert block.overlaps(date(2026, 6, 12), date(2026, 6, 14))
    assert block.overlaps(date(2026, 6, 1), date(2026, 6, 30))
    assert not block.overlaps(date(2026, 6, 1), date(2026, 6, 9))
    assert not block.overlaps(date(2026, 6, 21), date(2026, 6, 30))


def test_block_range_order_enforced(db_session: Session, sample_camp: Camp):
    db_session.add(BlockedDateRange(
        camp_id=sample_camp.id, host_id="host-1", created_by="host-1",
        start_date=date(2026, 6, 5), end_date=date(2026, 6, 1),
    ))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_camp_is_bookable():
    assert Camp(id="a", host_id="h", title="A", status="active").is_bookable is True
    assert Camp(id="b", host_id="h", title="B", status="pending").is_bookable is False
