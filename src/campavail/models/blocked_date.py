"""Host-declared blocked date range model."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campavail.database import Base

BLOCK_CATEGORIES = ("maintenance", "personal", "weather", "event", "seasonal", "other")


class BlockedDateRange(Base):
    __tablename__ = "blocked_date_ranges"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_blocked_range_order"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    camp_id: Mapped[str] = mapped_column(ForeignKey("camps.id"), nullable=False, index=True)
    host_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)  # inclusive
    reason: Mapped[str] = mapped_column(String(300), default="Not specified")
    category: Mapped[str] = mapped_column(String(20), default="other")
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))

    camp: Mapped["Camp"] = relationship(back_populates="blocked_ranges")  # noqa: F821

    def __repr__(self) -> str:
        return f"<BlockedDateRange id={self.id!r} camp_id={self.camp_id!r} {self.start_date}..{self.end_date}>"

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        """Starts inside, ends inside, or fully contains [start, end]."""
        return (
            start <= self.start_date <= end
            or start <= self.end_date <= end
            or (self.start_date <= start and self.end_date >= end)
        )

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1
