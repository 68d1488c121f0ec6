"""Exception hierarchy.

Business-rule unavailability (past, booked, blocked) is never raised from the
evaluator; it comes back as a result. The types here cover store failures and
the write paths that must refuse to proceed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from campavail.models.booking import Booking
    from campavail.modules.availability.evaluator import AvailabilityCheckResult

PERMISSION_DENIED = "permission-denied"
UNAVAILABLE = "unavailable"


class CampAvailError(Exception):
    """Base class for all campavail errors."""


class StoreError(CampAvailError):
    """The record store could not answer."""

    code: str = "unknown"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class StorePermissionError(StoreError):
    """Authorization failure. Terminal: never retried."""

    code = PERMISSION_DENIED


class StoreUnavailableError(StoreError):
    """Transient failure (network, locked database, timeouts)."""

    code = UNAVAILABLE


class InvalidDateRangeError(CampAvailError, ValueError):
    pass


class BlockConflictError(CampAvailError):
    """A host tried to block dates that already carry guest bookings."""

    def __init__(self, bookings: list[Booking]) -> None:
        self.bookings = bookings
        super().__init__(
            f"Cannot block dates: {len(bookings)} active booking(s) exist in this range"
        )


class BookingValidationError(CampAvailError, ValueError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


class CampNotBookableError(CampAvailError):
    pass


class DuplicateUserBookingError(CampAvailError):
    pass


class DateUnavailableError(CampAvailError):
    """The final availability check before a booking write failed."""

    def __init__(self, result: AvailabilityCheckResult) -> None:
        self.result = result
        super().__init__(result.message)


class RecordNotFoundError(CampAvailError, LookupError):
    pass


def is_permission_denied(exc: BaseException) -> bool:
    """True when an error carries an authorization signal."""
    if isinstance(exc, StorePermissionError):
        return True
    return getattr(exc, "code", None) == PERMISSION_DENIED
