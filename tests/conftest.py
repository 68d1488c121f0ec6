"""Shared test fixtures."""

from __future__ import annotations

import os
from datetime import date, timedelta

import pytest

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"  # In-memory DB for tests

from campavail.database import create_engine_from_url, init_db, make_session_factory
from campavail.events import EventBus
from campavail.models.booking import Booking
from campavail.models.camp import Camp
from campavail.modules.availability import AvailabilityEvaluator
from campavail.store import SQLRecordStore
from tests.fixtures.records import fixed_clock


@pytest.fixture
def engine():
    """Create a fresh in-memory database for each test."""
    engine = create_engine_from_url("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = make_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def store(engine) -> SQLRecordStore:
    return SQLRecordStore(make_session_factory(engine))


@pytest.fixture
def sample_camp(store: SQLRecordStore) -> Camp:
    """Create an active camp."""
    camp = Camp(
        id="camp-1",
        host_id="host-1",
        title="Sakhir Desert Kashta",
        host_email="host@example.com",
        status="active",
    )
    store.save_camp(camp)
    return camp


@pytest.fixture
def add_booking(store: SQLRecordStore, sample_camp: Camp):
    """Factory that stores a booking occupying ``day``."""

    def _add(day: date, status: str = "confirmed", camp_id: str | None = None, **fields) -> Booking:
        booking = Booking(
            camp_id=camp_id or sample_camp.id,
            check_in_date=day,
            check_out_date=day + timedelta(days=1),
            status=status,
            **fields,
        )
        store.create_booking(booking)
        return booking

    return _add


@pytest.fixture
def add_block(store: SQLRecordStore, sample_camp: Camp):
    """Factory that stores a blocked range, bypassing the conflict check."""

    def _add(start: date, end: date, camp_id: str | None = None) -> str:
        return store.create_blocked_range(
            camp_id or sample_camp.id, sample_camp.host_id, start, end, "Maintenance", "maintenance"
        )

    return _add


@pytest.fixture
def evaluator(store: SQLRecordStore) -> AvailabilityEvaluator:
    return AvailabilityEvaluator(store, clock=fixed_clock)


@pytest.fixture
def event_bus():
    """Create a fresh event bus for each test."""
    return EventBus()
