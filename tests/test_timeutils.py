"""Tests for calendar and duration helpers."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from journal.utils.constants import Weekday
from journal.utils.timeutils import (
    calendar_days_between,
    day_name,
    ensure_utc,
    format_duration,
    ordinal,
    parse_timestamp,
    same_calendar_day,
    time_of_day,
    weekday_bucket,
)

NY = ZoneInfo("America/New_York")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestParseTimestamp:
    def test_zulu_suffix(self):
        assert parse_timestamp("2025-01-06T14:30:00Z") == utc(2025, 1, 6, 14, 30)

    def test_offset_is_converted_to_utc(self):
        parsed = parse_timestamp("2025-01-06T09:30:00-05:00")
        assert parsed == utc(2025, 1, 6, 14, 30)
        assert parsed.tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "not a date", 12345])
    def test_unparseable_is_none(self, value):
        assert parse_timestamp(value) is None

    def test_naive_datetime_is_taken_as_utc(self):
        assert ensure_utc(datetime(2025, 1, 6, 14, 30)) == utc(2025, 1, 6, 14, 30)


class TestCalendarDays:
    def test_days_between_uses_local_dates(self):
        # 23:30 ET Monday -> 00:30 ET Tuesday is one calendar day, not one hour
        start = utc(2025, 1, 7, 4, 30)
        end = utc(2025, 1, 7, 5, 30)
        assert calendar_days_between(start, end, NY) == 1

    def test_negative_is_clamped(self):
        assert calendar_days_between(utc(2025, 1, 8, 15), utc(2025, 1, 6, 15), NY) == 0

    def test_missing_timestamp(self):
        assert calendar_days_between(None, utc(2025, 1, 6, 15), NY) is None

    def test_same_calendar_day_in_zone(self):
        evening = utc(2025, 1, 6, 23, 30)  # 18:30 ET Monday
        night = utc(2025, 1, 7, 3, 0)  # 22:00 ET Monday
        assert same_calendar_day(evening, night, NY)
        assert not same_calendar_day(evening, night, timezone.utc)

    def test_same_calendar_day_missing(self):
        assert not same_calendar_day(None, None, NY)


class TestWeekdays:
    def test_day_name(self):
        assert day_name(utc(2025, 1, 6, 14, 30), NY) == "Monday"

    def test_weekday_bucket(self):
        assert weekday_bucket(utc(2025, 1, 10, 15), NY) is Weekday.FRIDAY

    def test_weekend_has_no_bucket(self):
        assert weekday_bucket(utc(2025, 1, 11, 15), NY) is None
        assert weekday_bucket(utc(2025, 1, 12, 15), NY) is None

    def test_missing_has_no_bucket(self):
        assert weekday_bucket(None, NY) is None


def test_time_of_day_is_local_wall_clock():
    assert time_of_day(utc(2025, 1, 6, 14, 5), NY) == "09:05"


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0s"),
        (42, "42s"),
        (60, "1m 0s"),
        (3723, "1h 2m 3s"),
        (7200, "2h 0m 0s"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_duration_none():
    assert format_duration(None) is None


@pytest.mark.parametrize(
    "n, expected",
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (102, "102nd")],
)
def test_ordinal(n, expected):
    assert ordinal(n) == expected
