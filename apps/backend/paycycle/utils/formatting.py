"""
로케일 기반 숫자/통화 포맷팅

지원 로케일은 소수의 고정 집합입니다.
- ko, en, ja: 천 단위 구분자 ",", 소수점 "."
- de, es, fr: 천 단위 구분자 ".", 소수점 "," (통화 기호는 뒤에 표기)
"""

from __future__ import annotations

import re
from decimal import Decimal, ROUND_HALF_UP


_SEPARATORS: dict[str, tuple[str, str]] = {
    "ko": (",", "."),
    "en": (",", "."),
    "ja": (",", "."),
    "de": (".", ","),
    "es": (".", ","),
    "fr": (".", ","),
}
_SUFFIX_SYMBOL_LANGUAGES = frozenset({"de", "es", "fr"})

_CURRENCY_SYMBOLS: dict[str, str] = {
    "KRW": "₩",
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "GBP": "£",
}
# 로케일별로 기호가 달라지는 경우
_CURRENCY_SYMBOL_OVERRIDES: dict[tuple[str, str], str] = {
    ("ko", "USD"): "US$",
    ("ja", "JPY"): "￥",
}
_ZERO_DECIMAL_CURRENCIES = frozenset({"KRW", "JPY"})

_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


def _language(locale: str | None) -> str:
    return (locale or "ko").replace("_", "-").split("-")[0].lower()


def _separators(locale: str | None) -> tuple[str, str]:
    return _SEPARATORS.get(_language(locale), (",", "."))


def _has_nonzero_digit(text: str) -> bool:
    return any(ch in "123456789" for ch in text)


def format_number(value: float | int | Decimal, locale: str = "ko-KR", fraction_digits: int | None = None) -> str:
    """
    천 단위 구분자를 적용한 숫자 문자열

    fraction_digits 를 생략하면 소수점 이하 최대 3자리까지 표시하고 뒤의 0은 제거합니다.

    Example:
        >>> format_number(1000000)
        '1,000,000'
        >>> format_number(1234.56, "de-DE")
        '1.234,56'
    """
    group, decimal_sep = _separators(locale)
    digits = 3 if fraction_digits is None else fraction_digits
    quantum = Decimal(1).scaleb(-digits)
    rounded = abs(Decimal(str(value))).quantize(quantum, rounding=ROUND_HALF_UP)

    text = format(rounded, ",f")
    integer, _, fraction = text.partition(".")
    if fraction_digits is None:
        fraction = fraction.rstrip("0")

    out = integer.replace(",", group)
    if fraction:
        out = f"{out}{decimal_sep}{fraction}"
    if Decimal(str(value)) < 0 and _has_nonzero_digit(out):
        out = f"-{out}"
    return out


def format_currency(amount: float | int | Decimal, currency: str = "KRW", locale: str = "ko-KR") -> str:
    """
    통화 포맷팅 (KRW/JPY 는 소수점 없음, 그 외 2자리)

    Example:
        >>> format_currency(1000000, "KRW", "ko-KR")
        '₩1,000,000'
        >>> format_currency(1234.56, "USD", "en-US")
        '$1,234.56'
    """
    code = currency.upper()
    language = _language(locale)
    digits = 0 if code in _ZERO_DECIMAL_CURRENCIES else 2
    number = format_number(abs(Decimal(str(amount))), locale, fraction_digits=digits)
    symbol = _CURRENCY_SYMBOL_OVERRIDES.get((language, code)) or _CURRENCY_SYMBOLS.get(code)

    if language in _SUFFIX_SYMBOL_LANGUAGES:
        body = f"{number} {symbol or code}"
    elif symbol:
        body = f"{symbol}{number}"
    else:
        body = f"{code} {number}"

    if Decimal(str(amount)) < 0 and _has_nonzero_digit(number):
        return f"-{body}"
    return body


def parse_locale_number(text: str, locale: str = "ko-KR") -> float:
    """
    로케일 기반 숫자 파싱

    Raises:
        ValueError: 숫자로 해석할 수 없는 경우

    Example:
        >>> parse_locale_number("1,000")
        1000.0
        >>> parse_locale_number("1.234,56", "de-DE")
        1234.56
    """
    group, decimal_sep = _separators(locale)
    cleaned = re.sub(r"\s", "", text or "").replace(group, "")
    if decimal_sep != ".":
        cleaned = cleaned.replace(decimal_sep, ".")

    match = _LEADING_NUMBER_RE.match(cleaned)
    if not match:
        raise ValueError(f"Invalid number string: {text}")
    return float(match.group(0))
