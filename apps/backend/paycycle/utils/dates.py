"""
달력 유틸리티

급여월 계산과 빠른 입력 파서가 공유하는 타임존 기준 날짜 함수입니다.

- 모든 순간(instant)은 tz-aware datetime 으로 다룹니다.
- naive datetime 은 주어진 타임존의 현지 시각으로 해석합니다.
- 경과 시간 연산(1ms 빼기 등)은 UTC 에서 수행해 DST 경계에서도 정확합니다.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import InvalidArgumentError


DEFAULT_TIMEZONE = "Asia/Seoul"

_MMDD_RE = re.compile(r"^(\d{1,2})/(\d{1,2})$", re.ASCII)
_YMD_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$", re.ASCII)


@lru_cache(maxsize=64)
def get_zone(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidArgumentError(f"Unknown timezone: {tz}", field="tz") from exc


def days_in_month(year: int, month_index: int) -> int:
    """
    해당 월의 일수 (윤년 반영)

    Args:
        year: 연도
        month_index: 0부터 시작하는 월 (0 = 1월, 11 = 12월)

    Example:
        >>> days_in_month(2024, 1)
        29
        >>> days_in_month(2025, 1)
        28
    """
    return calendar.monthrange(year, month_index + 1)[1]


def add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    total = year * 12 + (month - 1) + delta
    return total // 12, total % 12 + 1


def clamp_day(year: int, month: int, day: int) -> int:
    """day 를 해당 월의 마지막 날 이하로 보정 (month 는 1부터 시작)"""
    return min(day, days_in_month(year, month - 1))


def _normalize(value: datetime, zone: ZoneInfo) -> datetime:
    # DST gap 에 걸린 벽시계 시각을 실제 존재하는 순간으로 정규화
    return value.astimezone(timezone.utc).astimezone(zone)


def local_midnight(year: int, month: int, day: int, tz: str = DEFAULT_TIMEZONE) -> datetime:
    """현지 자정(00:00:00.000). 자정이 DST gap 에 있으면 그날의 첫 순간."""
    zone = get_zone(tz)
    return _normalize(datetime(year, month, day, tzinfo=zone), zone)


def to_zone(instant: datetime, tz: str = DEFAULT_TIMEZONE) -> datetime:
    zone = get_zone(tz)
    if instant.tzinfo is None:
        return _normalize(instant.replace(tzinfo=zone), zone)
    return instant.astimezone(zone)


def to_local_naive(instant: datetime, tz: str = DEFAULT_TIMEZONE) -> datetime:
    """DB 저장용 현지 naive datetime"""
    return to_zone(instant, tz).replace(tzinfo=None)


def start_of_day(instant: datetime, tz: str = DEFAULT_TIMEZONE) -> datetime:
    local = to_zone(instant, tz)
    return local_midnight(local.year, local.month, local.day, tz)


def relative_day(offset: int, tz: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> datetime:
    """오늘 기준 offset 일 뒤의 현지 자정 (offset=-1 이면 어제)"""
    current = to_zone(now or datetime.now(timezone.utc), tz)
    target = current.date() + timedelta(days=offset)
    return local_midnight(target.year, target.month, target.day, tz)


def shift(instant: datetime, delta: timedelta) -> datetime:
    """벽시계가 아닌 실제 경과 시간 기준 이동"""
    if instant.tzinfo is None:
        return instant + delta
    return (instant.astimezone(timezone.utc) + delta).astimezone(instant.tzinfo)


def isoformat_ms(instant: datetime) -> str:
    return instant.isoformat(timespec="milliseconds")


def _checked_midnight(year: int, month: int, day: int, tz: str) -> datetime | None:
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    if day > days_in_month(year, month - 1):
        return None
    return local_midnight(year, month, day, tz)


def parse_absolute_date(text: str | None, tz: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> datetime | None:
    """
    날짜 문자열 파싱

    - "MM/DD": 현재 연도(tz 기준) 현지 자정
    - "YYYY-MM-DD": 현지 자정
    - ISO 8601 타임스탬프: 그대로 반환 (naive 면 tz 현지 시각으로 해석)

    범위를 벗어난 값(예: "99/99")이나 존재하지 않는 날짜는 None 을 반환합니다.

    Example:
        >>> parse_absolute_date("2025-10-15").isoformat()
        '2025-10-15T00:00:00+09:00'
        >>> parse_absolute_date("99/99") is None
        True
    """
    if not text:
        return None
    value = text.strip()

    match = _MMDD_RE.match(value)
    if match:
        month, day = int(match.group(1)), int(match.group(2))
        year = to_zone(now or datetime.now(timezone.utc), tz).year
        return _checked_midnight(year, month, day, tz)

    match = _YMD_RE.match(value)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _checked_midnight(year, month, day, tz)

    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return to_zone(parsed, tz)
    return parsed


def coerce_instant(value: datetime | date | str, tz: str = DEFAULT_TIMEZONE) -> datetime:
    """datetime/date/ISO 문자열을 tz-aware 순간으로 변환 (MM/DD 및 실패 시 InvalidArgumentError)"""
    if isinstance(value, datetime):
        return to_zone(value, tz) if value.tzinfo is None else value
    if isinstance(value, date):
        return local_midnight(value.year, value.month, value.day, tz)
    # 연도 없는 MM/DD 는 기준 시각으로 받지 않음
    if isinstance(value, str) and _MMDD_RE.match(value.strip()):
        raise InvalidArgumentError(f"Invalid ISO 8601 date: {value!r}", field="anchorDate")
    parsed = parse_absolute_date(value, tz)
    if parsed is None:
        raise InvalidArgumentError(f"Invalid ISO 8601 date: {value!r}", field="anchorDate")
    return parsed
