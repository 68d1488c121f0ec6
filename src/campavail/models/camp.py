"""Camp model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campavail.database import Base

CAMP_STATUSES = ("active", "pending", "inactive")


class Camp(Base):
    __tablename__ = "camps"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    host_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    host_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")  # active, pending, inactive
    # Display only; never used in date arithmetic
    check_in_time: Mapped[str] = mapped_column(String(10), default="08:00")
    check_out_time: Mapped[str] = mapped_column(String(10), default="03:00")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))

    bookings: Mapped[list["Booking"]] = relationship(back_populates="camp")  # noqa: F821
    blocked_ranges: Mapped[list["BlockedDateRange"]] = relationship(back_populates="camp")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Camp id={self.id!r} title={self.title!r} status={self.status!r}>"

    @property
    def is_bookable(self) -> bool:
        return self.status == "active"
