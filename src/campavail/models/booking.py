"""Booking model."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campavail.database import Base

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")


def _new_id() -> str:
    return uuid.uuid4().hex


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    camp_id: Mapped[str] = mapped_column(ForeignKey("camps.id"), nullable=False, index=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    guest_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    host_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Early-morning departure the following day. Informational only.
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, confirmed, cancelled, completed
    guests: Mapped[int] = mapped_column(Integer, default=1)
    total_price: Mapped[float] = mapped_column(Float, default=0.0)
    payment_method: Mapped[str | None] = mapped_column(String(30), nullable=True)
    cancelled_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    camp: Mapped["Camp"] = relationship(back_populates="bookings")  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<Booking id={self.id!r} camp_id={self.camp_id!r} "
            f"date={self.check_in_date} status={self.status!r}>"
        )

    @property
    def occupied_date(self) -> date:
        """The single calendar day this booking holds."""
        return self.check_in_date

    @property
    def is_active(self) -> bool:
        return self.status != "cancelled"
