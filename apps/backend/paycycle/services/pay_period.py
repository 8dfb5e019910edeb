"""
급여월(Pay Period) 계산

급여일(salary_day, 1~31)을 기준으로 "예산 월"의 시작/종료 순간을 계산합니다.

예: salary_day = 25, tz = Asia/Seoul
    2025-10-25 00:00:00.000 ~ 2025-11-24 23:59:59.999

- 29/30/31일 설정 시 해당 월의 마지막 날로 보정합니다 (2월, 30일 월).
- 종료 시각은 다음 급여월 시작 1ms 전이므로 연속된 급여월은 빈틈 없이 이어집니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from ..core.logging import get_logger
from ..exceptions import InvalidArgumentError
from ..utils.dates import (
    DEFAULT_TIMEZONE,
    add_months,
    clamp_day,
    coerce_instant,
    isoformat_ms,
    local_midnight,
    shift,
    to_zone,
)


logger = get_logger(__name__)

ONE_MILLISECOND = timedelta(milliseconds=1)

_EN_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

Anchor = datetime | date | str


@dataclass(frozen=True)
class PayPeriod:
    start: datetime
    end: datetime
    label: str

    @property
    def start_iso(self) -> str:
        return isoformat_ms(self.start)

    @property
    def end_iso(self) -> str:
        return isoformat_ms(self.end)

    def contains(self, instant: datetime) -> bool:
        moment = instant.astimezone(timezone.utc)
        return self.start.astimezone(timezone.utc) <= moment <= self.end.astimezone(timezone.utc)


def _validate_salary_day(salary_day: int) -> None:
    if isinstance(salary_day, bool) or not isinstance(salary_day, int) or not 1 <= salary_day <= 31:
        raise InvalidArgumentError("salaryDay must be between 1 and 31", field="salaryDay")


def _salary_day_start(year: int, month: int, salary_day: int, tz: str) -> datetime:
    return local_midnight(year, month, clamp_day(year, month, salary_day), tz)


def format_period_label(start: datetime, locale: str = "ko-KR") -> str:
    """급여월 라벨 (예: "2025년 10월", "October 2025")"""
    if locale.lower().startswith("ko"):
        return f"{start.year}년 {start.month}월"
    return f"{_EN_MONTHS[start.month - 1]} {start.year}"


def _period_starting(year: int, month: int, salary_day: int, tz: str, locale: str) -> PayPeriod:
    start = _salary_day_start(year, month, salary_day, tz)
    next_year, next_month = add_months(year, month, 1)
    next_start = _salary_day_start(next_year, next_month, salary_day, tz)
    return PayPeriod(
        start=start,
        end=shift(next_start, -ONE_MILLISECOND),
        label=format_period_label(start, locale),
    )


def _period_month(anchor: datetime, salary_day: int, tz: str) -> tuple[int, int]:
    """anchor 가 속한 급여월의 시작 (연, 월)"""
    local = to_zone(anchor, tz)
    candidate = _salary_day_start(local.year, local.month, salary_day, tz)
    if anchor.astimezone(timezone.utc) < candidate.astimezone(timezone.utc):
        return add_months(local.year, local.month, -1)
    return local.year, local.month


def get_pay_period(
    anchor: Anchor,
    salary_day: int,
    tz: str = DEFAULT_TIMEZONE,
    locale: str = "ko-KR",
) -> PayPeriod:
    """
    anchor 가 속한 급여월 계산

    Args:
        anchor: 기준 순간 (aware/naive datetime, date, ISO 8601 문자열)
        salary_day: 급여일 (1~31)
        tz: 타임존 (기본값: Asia/Seoul)
        locale: 라벨 로케일

    Raises:
        InvalidArgumentError: salary_day 가 1~31 범위를 벗어난 경우

    Example:
        >>> p = get_pay_period("2025-10-15T00:00:00Z", 25)
        >>> p.start_iso, p.end_iso, p.label
        ('2025-09-25T00:00:00.000+09:00', '2025-10-24T23:59:59.999+09:00', '2025년 9월')
    """
    _validate_salary_day(salary_day)
    instant = coerce_instant(anchor, tz)
    year, month = _period_month(instant, salary_day, tz)
    period = _period_starting(year, month, salary_day, tz, locale)
    logger.debug("pay period for %s (salary_day=%s, tz=%s): %s", instant, salary_day, tz, period)
    return period


def get_pay_period_range(
    anchor: Anchor,
    salary_day: int,
    before_count: int = 12,
    after_count: int = 12,
    tz: str = DEFAULT_TIMEZONE,
    locale: str = "ko-KR",
) -> list[PayPeriod]:
    """
    anchor 의 급여월을 중심으로 앞뒤 N개월 급여월 목록 (과거 → 미래)

    월 이동은 시작 월 기준으로 계산하고, 대상 월마다 급여일을 다시 보정합니다.
    (salary_day=31 에서 2월 28일 시작 다음은 3월 31일 시작)
    """
    _validate_salary_day(salary_day)
    if before_count < 0 or after_count < 0:
        raise InvalidArgumentError("before_count and after_count must be non-negative", field="count")

    instant = coerce_instant(anchor, tz)
    year, month = _period_month(instant, salary_day, tz)
    periods = []
    for offset in range(-before_count, after_count + 1):
        target_year, target_month = add_months(year, month, offset)
        periods.append(_period_starting(target_year, target_month, salary_day, tz, locale))
    return periods


def is_same_pay_period(a: Anchor, b: Anchor, salary_day: int, tz: str = DEFAULT_TIMEZONE) -> bool:
    """두 순간이 같은 급여월에 속하는지 (경계 허용 오차 없음)"""
    first = get_pay_period(a, salary_day, tz)
    second = get_pay_period(b, salary_day, tz)
    return first.start == second.start and first.end == second.end
