"""Tests for calendar-day normalization."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from campavail.dates import in_range, is_past, iter_days, to_calendar_day

BAHRAIN = ZoneInfo("Asia/Bahrain")


def test_plain_date_passes_through():
    assert to_calendar_day(date(2026, 3, 15)) == date(2026, 3, 15)


def test_naive_datetime_keeps_wall_date():
    assert to_calendar_day(datetime(2026, 3, 15, 23, 59)) == date(2026, 3, 15)


def test_aware_datetime_uses_business_timezone():
    # 22:30 UTC is already the next morning in Bahrain (UTC+3)
    instant = datetime(2026, 3, 15, 22, 30, tzinfo=timezone.utc)
    assert to_calendar_day(instant, BAHRAIN) == date(2026, 3, 16)
    assert to_calendar_day(instant, ZoneInfo("UTC")) == date(2026, 3, 15)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-03-15", date(2026, 3, 15)),
        ("2026-03-15 08:00", date(2026, 3, 15)),
        ("2026-03-15T03:00:00", date(2026, 3, 15)),
    ],
)
def test_strings(value, expected):
    assert to_calendar_day(value) == expected


def test_timestamp_mapping():
    seconds = int(datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc).timestamp())
    assert to_calendar_day({"seconds": seconds, "nanoseconds": 0}, BAHRAIN) == date(2026, 3, 15)


def test_rejects_unknown_values():
    with pytest.raises(TypeError):
        to_calendar_day(12345)
    with pytest.raises(ValueError):
        to_calendar_day("  ")


def test_is_past_is_strict():
    today = date(2026, 5, 10)
    assert is_past(date(2026, 5, 9), today) is True
    assert is_past(today, today) is False
    assert is_past(date(2026, 5, 11), today) is False


def test_iter_days_is_inclusive():
    days = list(iter_days(date(2026, 2, 27), date(2026, 3, 2)))
    assert days == [date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 2)]
    assert list(iter_days(date(2026, 3, 2), date(2026, 3, 1))) == []


def test_in_range_bounds():
    assert in_range(date(2026, 1, 1), date(2026, 1, 1), date(2026, 1, 3))
    assert in_range(date(2026, 1, 3), date(2026, 1, 1), date(2026, 1, 3))
    assert not in_range(date(2026, 1, 4), date(2026, 1, 1), date(2026, 1, 3))
