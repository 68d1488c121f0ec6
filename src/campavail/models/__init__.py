"""Database models."""

from campavail.models.blocked_date import BLOCK_CATEGORIES, BlockedDateRange
from campavail.models.booking import BOOKING_STATUSES, Booking
from campavail.models.camp import CAMP_STATUSES, Camp

__all__ = [
    "BLOCK_CATEGORIES",
    "BOOKING_STATUSES",
    "BlockedDateRange",
    "Booking",
    "CAMP_STATUSES",
    "Camp",
]
