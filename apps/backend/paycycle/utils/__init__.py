"""
Utils 패키지
"""

from .dates import (
    DEFAULT_TIMEZONE,
    coerce_instant,
    days_in_month,
    isoformat_ms,
    local_midnight,
    parse_absolute_date,
    start_of_day,
)
from .formatting import format_currency, format_number, parse_locale_number
from .normalization import collapse_whitespace, normalize_keyword, normalize_with_offsets

__all__ = [
    "DEFAULT_TIMEZONE",
    "coerce_instant",
    "days_in_month",
    "isoformat_ms",
    "local_midnight",
    "parse_absolute_date",
    "start_of_day",
    "format_currency",
    "format_number",
    "parse_locale_number",
    "collapse_whitespace",
    "normalize_with_offsets",
    "normalize_keyword",
]
