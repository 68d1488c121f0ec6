"""Check-in/check-out pair validation. Pure, no I/O."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from campavail.dates import is_past, to_calendar_day
from campavail.dates import today as current_day

PAST_CHECK_IN = "Check-in date cannot be in the past"
CHECK_OUT_NOT_AFTER = "Check-out date must be after check-in date"
SAME_DAY = "Check-in and check-out cannot be on the same day"


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def validate_booking_dates(
    check_in: date | datetime,
    check_out: date | datetime,
    today: date | None = None,
) -> ValidationResult:
    """Collect every rule violation for a check-in/check-out pair."""
    errors: list[str] = []
    check_in_day = to_calendar_day(check_in)
    check_out_day = to_calendar_day(check_out)

    if is_past(check_in_day, today or current_day()):
        errors.append(PAST_CHECK_IN)

    # Timestamps compare as instants only when both are aware or both naive
    both_datetimes = isinstance(check_in, datetime) and isinstance(check_out, datetime)
    if both_datetimes and (check_in.tzinfo is None) == (check_out.tzinfo is None):
        not_after = check_out <= check_in
    else:
        not_after = check_out_day <= check_in_day
    if not_after:
        errors.append(CHECK_OUT_NOT_AFTER)

    # A zero-night stay; camping is sold by the full day
    if check_in_day == check_out_day:
        errors.append(SAME_DAY)

    return ValidationResult(valid=not errors, errors=errors)
