"""Availability evaluation, conflict detection, date validation and retry."""

from campavail.modules.availability.conflicts import ConflictDetector, ConflictResult
from campavail.modules.availability.evaluator import (
    AvailabilityCheckResult,
    AvailabilityEvaluator,
    DayStatus,
)
from campavail.modules.availability.retry import with_retry
from campavail.modules.availability.validation import ValidationResult, validate_booking_dates

__all__ = [
    "AvailabilityCheckResult",
    "AvailabilityEvaluator",
    "ConflictDetector",
    "ConflictResult",
    "DayStatus",
    "ValidationResult",
    "validate_booking_dates",
    "with_retry",
]
