"""Record store adapter: the persistence contract the engine depends on.

Every read goes to the database. Nothing is cached between calls, and no
method spans a transaction across a read and a later write.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from campavail.errors import InvalidDateRangeError, RecordNotFoundError, StoreUnavailableError
from campavail.models.blocked_date import BLOCK_CATEGORIES, BlockedDateRange
from campavail.models.booking import BOOKING_STATUSES, Booking
from campavail.models.camp import Camp

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def list_bookings(self, camp_id: str) -> list[Booking]: ...

    def list_blocked_ranges(self, camp_id: str) -> list[BlockedDateRange]: ...

    def create_blocked_range(
        self,
        camp_id: str,
        host_id: str,
        start_date: date,
        end_date: date,
        reason: str,
        category: str,
        notes: str | None = None,
    ) -> str: ...

    def delete_blocked_range(self, block_id: str) -> None: ...


class SQLRecordStore:
    """SQLAlchemy-backed implementation of :class:`RecordStore`."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Record store operation failed")
            raise StoreUnavailableError(str(exc)) from exc
        finally:
            session.close()

    # --- Bookings ---

    def list_bookings(self, camp_id: str) -> list[Booking]:
        """All bookings for a camp, whatever their status."""
        with self._session() as session:
            return list(
                session.scalars(
                    select(Booking)
                    .where(Booking.camp_id == camp_id)
                    .order_by(Booking.created_at.desc())
                )
            )

    def list_bookings_with_status(self, status: str) -> list[Booking]:
        with self._session() as session:
            return list(session.scalars(select(Booking).where(Booking.status == status)))

    def get_booking(self, booking_id: str) -> Booking | None:
        with self._session() as session:
            return session.get(Booking, booking_id)

    def has_user_booking_on_date(self, user_id: str, day: date) -> bool:
        with self._session() as session:
            found = session.scalars(
                select(Booking.id).where(
                    Booking.user_id == user_id,
                    Booking.check_in_date == day,
                    Booking.status != "cancelled",
                )
            ).first()
            return found is not None

    def create_booking(self, booking: Booking) -> str:
        if booking.status not in BOOKING_STATUSES:
            raise ValueError(f"Unknown booking status {booking.status!r}")
        with self._session() as session:
            session.add(booking)
            session.commit()
            logger.info("Stored booking %s for camp %s on %s", booking.id, booking.camp_id, booking.check_in_date)
            return booking.id

    def update_booking_status(self, booking_id: str, status: str, **fields: object) -> Booking:
        if status not in BOOKING_STATUSES:
            raise ValueError(f"Unknown booking status {status!r}")
        with self._session() as session:
            booking = session.get(Booking, booking_id)
            if booking is None:
                raise RecordNotFoundError(f"Booking {booking_id!r} not found")
            booking.status = status
            for name, value in fields.items():
                setattr(booking, name, value)
            booking.updated_at = datetime.now(timezone.utc)
            session.commit()
            return booking

    # --- Blocked ranges ---

    def list_blocked_ranges(self, camp_id: str) -> list[BlockedDateRange]:
        with self._session() as session:
            return list(
                session.scalars(
                    select(BlockedDateRange)
                    .where(BlockedDateRange.camp_id == camp_id)
                    .order_by(BlockedDateRange.start_date)
                )
            )

    def list_blocked_ranges_by_host(self, host_id: str) -> list[BlockedDateRange]:
        with self._session() as session:
            return list(
                session.scalars(
                    select(BlockedDateRange)
                    .where(BlockedDateRange.host_id == host_id)
                    .order_by(BlockedDateRange.start_date)
                )
            )

    def create_blocked_range(
        self,
        camp_id: str,
        host_id: str,
        start_date: date,
        end_date: date,
        reason: str = "Not specified",
        category: str = "other",
        notes: str | None = None,
    ) -> str:
        if end_date < start_date:
            raise InvalidDateRangeError("End date must be on or after start date")
        if category not in BLOCK_CATEGORIES:
            raise ValueError(f"Unknown block category {category!r}")
        block = BlockedDateRange(
            camp_id=camp_id,
            host_id=host_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            category=category,
            created_by=host_id,
            notes=notes or None,
        )
        with self._session() as session:
            session.add(block)
            session.commit()
            return block.id

    def delete_blocked_range(self, block_id: str) -> None:
        with self._session() as session:
            block = session.get(BlockedDateRange, block_id)
            if block is None:
                raise RecordNotFoundError(f"Blocked range {block_id!r} not found")
            session.delete(block)
            session.commit()

    # --- Camps ---

    def get_camp(self, camp_id: str) -> Camp | None:
        with self._session() as session:
            return session.get(Camp, camp_id)

    def list_camps(self, status: str | None = None) -> list[Camp]:
        with self._session() as session:
            query = select(Camp).order_by(Camp.title)
            if status:
                query = query.where(Camp.status == status)
            return list(session.scalars(query))

    def save_camp(self, camp: Camp) -> str:
        """Insert or replace a camp record."""
        with self._session() as session:
            session.merge(camp)
            session.commit()
            return camp.id

    def add_records(self, records: list[object]) -> int:
        """Persist already-normalized records in one commit."""
        with self._session() as session:
            for record in records:
                session.merge(record)
            session.commit()
            return len(records)
