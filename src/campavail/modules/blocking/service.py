"""Host date blocking: conflict check first, then the write."""

from __future__ import annotations

import logging
from datetime import date

from campavail.dates import to_calendar_day
from campavail.errors import BlockConflictError, InvalidDateRangeError
from campavail.events import Event, EventBus, EventType
from campavail.models.blocked_date import BLOCK_CATEGORIES, BlockedDateRange
from campavail.modules.availability.conflicts import ConflictDetector
from campavail.store import SQLRecordStore

logger = logging.getLogger(__name__)


class DateBlockingService:
    """Creates and removes host-declared blocked date ranges.

    The conflict check and the write are two sequential calls with no lock
    between them. A guest booking written in that window is not prevented,
    so a block and a booking can end up on the same day; hosts resolve that
    by cancelling one of them.
    """

    def __init__(self, store: SQLRecordStore, event_bus: EventBus) -> None:
        self._store = store
        self._event_bus = event_bus
        self._detector = ConflictDetector(store)

    def block_dates(
        self,
        camp_id: str,
        host_id: str,
        start_date: date,
        end_date: date,
        reason: str = "Not specified",
        category: str = "other",
        notes: str | None = None,
    ) -> str:
        start = to_calendar_day(start_date)
        end = to_calendar_day(end_date)
        if end < start:
            raise InvalidDateRangeError("End date must be on or after start date")
        if category not in BLOCK_CATEGORIES:
            raise ValueError(f"Unknown block category {category!r}")

        conflicts = self._detector.detect_conflicts(camp_id, start, end)
        if conflicts.conflicting_bookings:
            logger.warning(
                "Refusing to block %s..%s for camp %s: %d booking(s) in range",
                start, end, camp_id, len(conflicts.conflicting_bookings),
            )
            raise BlockConflictError(conflicts.conflicting_bookings)
        if conflicts.conflicting_blocks:
            # Overlapping blocks are harmless; a day is blocked either way
            logger.info(
                "New block for camp %s overlaps %d existing block(s)",
                camp_id, len(conflicts.conflicting_blocks),
            )

        block_id = self._store.create_blocked_range(
            camp_id, host_id, start, end, reason, category, notes
        )
        logger.info("Blocked %s..%s for camp %s (%s)", start, end, camp_id, block_id)
        self._event_bus.publish(Event(
            event_type=EventType.DATES_BLOCKED,
            data={
                "block_id": block_id,
                "camp_id": camp_id,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
            },
        ))
        return block_id

    def unblock_dates(self, block_id: str) -> None:
        self._store.delete_blocked_range(block_id)
        logger.info("Unblocked range %s", block_id)
        self._event_bus.publish(Event(
            event_type=EventType.DATES_UNBLOCKED,
            data={"block_id": block_id},
        ))

    def list_blocks(self, camp_id: str) -> list[BlockedDateRange]:
        return self._store.list_blocked_ranges(camp_id)

    def list_blocks_by_host(self, host_id: str) -> list[BlockedDateRange]:
        return self._store.list_blocked_ranges_by_host(host_id)
