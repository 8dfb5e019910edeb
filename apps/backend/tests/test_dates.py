"""
달력 유틸리티 테스트
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from paycycle.exceptions import InvalidArgumentError
from paycycle.utils.dates import (
    add_months,
    clamp_day,
    coerce_instant,
    days_in_month,
    get_zone,
    isoformat_ms,
    local_midnight,
    parse_absolute_date,
    relative_day,
    shift,
    start_of_day,
    to_local_naive,
)


NOW = datetime(2025, 10, 15, 3, 0, tzinfo=timezone.utc)  # 서울 기준 2025-10-15 12:00


class TestDaysInMonth:
    def test_leap_february(self):
        assert days_in_month(2024, 1) == 29
        assert days_in_month(2025, 1) == 28
        assert days_in_month(2000, 1) == 29
        assert days_in_month(1900, 1) == 28

    def test_month_lengths(self):
        assert days_in_month(2025, 0) == 31
        assert days_in_month(2025, 3) == 30
        assert days_in_month(2025, 11) == 31


class TestMonthArithmetic:
    def test_add_months_wraps_year(self):
        assert add_months(2025, 1, -1) == (2024, 12)
        assert add_months(2025, 12, 1) == (2026, 1)
        assert add_months(2025, 3, -15) == (2023, 12)
        assert add_months(2025, 10, 0) == (2025, 10)

    def test_clamp_day(self):
        assert clamp_day(2025, 2, 31) == 28
        assert clamp_day(2024, 2, 31) == 29
        assert clamp_day(2025, 4, 31) == 30
        assert clamp_day(2025, 5, 31) == 31
        assert clamp_day(2025, 2, 15) == 15


class TestLocalMidnight:
    def test_seoul(self):
        assert local_midnight(2025, 10, 15).isoformat() == "2025-10-15T00:00:00+09:00"

    def test_dst_zone_uses_local_offset(self):
        summer = local_midnight(2025, 7, 1, "America/New_York")
        winter = local_midnight(2025, 1, 1, "America/New_York")
        assert summer.utcoffset() == timedelta(hours=-4)
        assert winter.utcoffset() == timedelta(hours=-5)

    def test_midnight_inside_dst_gap(self):
        # 칠레는 자정에 서머타임이 시작되어 00:00 이 존재하지 않음
        first = local_midnight(2024, 9, 8, "America/Santiago")
        assert first.hour == 1
        assert first.utcoffset() == timedelta(hours=-3)

    def test_unknown_timezone(self):
        with pytest.raises(InvalidArgumentError):
            get_zone("Mars/Olympus_Mons")


class TestShift:
    def test_elapsed_time_across_dst(self):
        start = local_midnight(2025, 3, 10, "America/New_York")
        before = shift(start, -timedelta(milliseconds=1))
        assert isoformat_ms(before) == "2025-03-09T23:59:59.999-04:00"

    def test_day_before_spring_forward(self):
        start = local_midnight(2025, 3, 9, "America/New_York")
        before = shift(start, -timedelta(milliseconds=1))
        assert isoformat_ms(before) == "2025-03-08T23:59:59.999-05:00"


class TestRelativeDays:
    def test_relative_day(self):
        assert relative_day(0, now=NOW) == local_midnight(2025, 10, 15)
        assert relative_day(-1, now=NOW) == local_midnight(2025, 10, 14)
        assert relative_day(2, now=NOW) == local_midnight(2025, 10, 17)

    def test_relative_day_uses_local_date(self):
        # UTC 16:00 = 서울 다음날 01:00
        late = datetime(2025, 10, 15, 16, 0, tzinfo=timezone.utc)
        assert relative_day(0, now=late) == local_midnight(2025, 10, 16)

    def test_start_of_day(self):
        instant = datetime(2025, 10, 15, 20, 30, tzinfo=timezone.utc)
        assert start_of_day(instant) == local_midnight(2025, 10, 16)

    def test_to_local_naive(self):
        instant = datetime(2025, 10, 15, 3, 0, tzinfo=timezone.utc)
        assert to_local_naive(instant) == datetime(2025, 10, 15, 12, 0)


class TestParseAbsoluteDate:
    def test_month_day_uses_current_year(self):
        assert parse_absolute_date("10/05", now=NOW) == local_midnight(2025, 10, 5)

    def test_iso_date(self):
        assert parse_absolute_date("2025-10-15").isoformat() == "2025-10-15T00:00:00+09:00"

    def test_iso_timestamp(self):
        parsed = parse_absolute_date("2025-10-15T12:00:00Z")
        assert parsed == datetime(2025, 10, 15, 12, 0, tzinfo=timezone.utc)

    def test_naive_timestamp_is_local(self):
        parsed = parse_absolute_date("2025-10-15T12:00:00")
        assert parsed.isoformat() == "2025-10-15T12:00:00+09:00"

    @pytest.mark.parametrize("text", ["99/99", "13/01", "02/30", "2025-02-29", "2025-13-01", "", None, "hello"])
    def test_rejects_invalid(self, text):
        assert parse_absolute_date(text, now=NOW) is None

    def test_leap_day(self):
        assert parse_absolute_date("2024-02-29") == local_midnight(2024, 2, 29)


class TestCoerceInstant:
    def test_accepts_date_and_datetime(self):
        assert coerce_instant(date(2025, 10, 15)) == local_midnight(2025, 10, 15)
        assert coerce_instant(datetime(2025, 10, 15, 0, 0)) == local_midnight(2025, 10, 15)
        aware = datetime(2025, 10, 15, tzinfo=timezone.utc)
        assert coerce_instant(aware) is aware

    def test_rejects_garbage(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            coerce_instant("not-a-date")
        assert exc_info.value.field == "anchorDate"
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("value", ["10/05", " 1/5 ", "99/99"])
    def test_rejects_month_day_without_year(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            coerce_instant(value)
        assert exc_info.value.field == "anchorDate"

    def test_accepts_iso_strings(self):
        assert coerce_instant("2025-10-05") == local_midnight(2025, 10, 5)
        assert coerce_instant("2025-10-05T00:00:00+09:00") == local_midnight(2025, 10, 5)
