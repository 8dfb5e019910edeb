"""
Quick Add 입력 파서

한 줄 자연어 입력(한국어/영어)에서 거래 필드를 추출합니다.

    parse_quick_input("10/05 점심 9,000원 #변동 #식비 카드", "ko")
    # date=10/05 00:00, amount=9000, type=expense, fixed=False,
    # category="식비", description="점심", tags=["변동", "식비"], payment_method="card"

파이프라인 (각 단계는 (추출값, 남은 문자열)을 반환하고 다음 단계는 남은 문자열만 봅니다):

1. 해시태그 추출
2. 타입/고정 여부 (해시태그 → fallback 순, 나중 태그 우선)
3. 날짜 (MM/DD → YYYY-MM-DD → 상대 날짜)
4. 금액 (음수는 인식하지 않음)
5. 결제수단
6. 카테고리 (해시태그에서만)
7. 남은 문자열 = 설명

파싱은 예외를 던지지 않습니다. 인식하지 못한 부분은 설명에 남습니다.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from ..core.logging import get_logger
from ..exceptions import InvalidArgumentError
from ..models import PaymentMethod, TxnType
from ..utils.dates import DEFAULT_TIMEZONE, parse_absolute_date, relative_day
from ..utils.formatting import parse_locale_number
from ..utils.normalization import collapse_whitespace, normalize_keyword, normalize_with_offsets


logger = get_logger(__name__)

ParserLocale = Literal["ko", "en"]

HASHTAG_RE = re.compile(r"#(\w+)")

_MMDD_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})\b", re.ASCII)
_YMD_RE = re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b", re.ASCII)
_RELATIVE_DAY_RE: dict[str, re.Pattern[str]] = {
    "ko": re.compile(r"(오늘|어제|내일|모레)"),
    "en": re.compile(r"\b(today|yesterday|tomorrow)\b", re.IGNORECASE | re.ASCII),
}
_RELATIVE_DAY_OFFSETS: dict[str, int] = {
    "오늘": 0,
    "어제": -1,
    "내일": 1,
    "모레": 2,
    "today": 0,
    "yesterday": -1,
    "tomorrow": 1,
}

_KO_UNIT_AMOUNT_RE = re.compile(r"([0-9][0-9,]*(?:\.[0-9]+)?)\s*(만|천)\s*원")
_KO_AMOUNT_RE = re.compile(r"([0-9][0-9,]*)\s*원")
_KO_UNIT_MULTIPLIERS = {"만": 10_000, "천": 1_000}
_EN_AMOUNT_RE = re.compile(
    r"(?:(?:\$|\bUSD|\busd)\s*|(?<![\w.,]))([0-9][0-9,]*(?:\.[0-9]{1,2})?)(?:\s*(?:USD|usd))?\b",
    re.ASCII,
)

TYPE_KEYWORDS: dict[str, dict[str, tuple[str, ...]]] = {
    "ko": {
        "income": ("수입", "입금", "월급", "income"),
        "expense": ("지출", "출금", "결제", "expense"),
        "fixed": ("고정", "fixed"),
        "variable": ("변동", "variable"),
    },
    "en": {
        "income": ("income", "revenue", "salary"),
        "expense": ("expense", "payment", "spending"),
        "fixed": ("fixed", "recurring"),
        "variable": ("variable", "oneoff"),
    },
}

# 순서 = 우선순위 (card → cash → transfer)
PAYMENT_KEYWORDS: dict[str, tuple[tuple[PaymentMethod, tuple[str, ...]], ...]] = {
    "ko": (
        (PaymentMethod.CARD, ("카드", "체크", "신용", "card")),
        (PaymentMethod.CASH, ("현금", "cash")),
        (PaymentMethod.TRANSFER, ("이체", "계좌", "transfer")),
    ),
    "en": (
        (PaymentMethod.CARD, ("card", "credit", "debit")),
        (PaymentMethod.CASH, ("cash",)),
        (PaymentMethod.TRANSFER, ("transfer", "bank")),
    ),
}

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "ko": ("식비", "교통", "주거", "통신", "의료", "문화", "쇼핑", "기타"),
    "en": ("food", "transport", "housing", "telecom", "medical", "culture", "shopping", "other"),
}

UNCATEGORIZED: dict[str, str] = {"ko": "미분류", "en": "Uncategorized"}

_HANGUL_RE = re.compile(r"[ㄱ-ㅎㅏ-ㅣ가-힣]")


def _keyword_pattern(term: str) -> re.Pattern[str]:
    # 한글에는 \b 가 의미 없으므로 부분 일치
    if _HANGUL_RE.search(term):
        return re.compile(re.escape(term))
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE | re.ASCII)


_PAYMENT_PATTERNS: dict[str, tuple[tuple[PaymentMethod, tuple[re.Pattern[str], ...]], ...]] = {
    loc: tuple((method, tuple(_keyword_pattern(t) for t in terms)) for method, terms in table)
    for loc, table in PAYMENT_KEYWORDS.items()
}


@dataclass(frozen=True)
class ParsedInput:
    date: datetime | None = None
    amount: float | None = None
    type: TxnType | None = None
    fixed: bool | None = None
    category: str | None = None
    subcategory: str | None = None
    description: str = ""
    tags: list[str] = field(default_factory=list)
    payment_method: str | None = None


def parser_locale(locale: str | None) -> ParserLocale:
    """"ko-KR" → "ko", 그 외 언어는 모두 "en" 규칙으로 파싱"""
    language = (locale or "ko").replace("_", "-").split("-")[0].lower()
    return "ko" if language == "ko" else "en"


def _coerce_type(value: TxnType | str | None) -> TxnType | None:
    if value is None or isinstance(value, TxnType):
        return value
    try:
        return TxnType(str(value).lower())
    except ValueError:
        return None


def _blank(match: re.Match[str]) -> str:
    return " " * len(match.group(0))


def _without(text: str, match: re.Match[str]) -> str:
    # 반환 길이 == 입력 길이
    return text[: match.start()] + _blank(match) + text[match.end():]


def _contains_any(value: str, keywords: tuple[str, ...]) -> bool:
    return any(k in value for k in keywords)


# ---- Stages ----------------------------------------------------------------


def extract_hashtags(text: str) -> tuple[list[str], str]:
    tags = [m.group(1) for m in HASHTAG_RE.finditer(text)]
    if not tags:
        return [], text
    return tags, HASHTAG_RE.sub(_blank, text)


def resolve_type_and_fixed(
    tags: list[str],
    locale: ParserLocale,
    fallback_type: TxnType | str | None = None,
    fallback_fixed: bool | None = None,
) -> tuple[TxnType | None, bool | None]:
    """
    해시태그에서 타입/고정 여부 결정

    - 여러 태그가 매칭되면 나중 태그가 이깁니다.
    - 해시태그가 없으면 fallback 값을 사용합니다.
    - 해시태그로 고정/변동만 정해지고 타입이 없으면 expense 로 간주합니다.
    """
    keywords = TYPE_KEYWORDS[locale]
    tag_type: TxnType | None = None
    tag_fixed: bool | None = None

    for tag in tags:
        key = normalize_keyword(tag)
        if _contains_any(key, keywords["income"]):
            tag_type = TxnType.INCOME
        elif _contains_any(key, keywords["expense"]):
            tag_type = TxnType.EXPENSE

        if _contains_any(key, keywords["fixed"]):
            tag_fixed = True
        elif _contains_any(key, keywords["variable"]):
            tag_fixed = False

    txn_type = tag_type if tag_type is not None else _coerce_type(fallback_type)
    fixed = tag_fixed if tag_fixed is not None else fallback_fixed
    if txn_type is None and tag_fixed is not None:
        txn_type = TxnType.EXPENSE
    return txn_type, fixed


def extract_date(
    text: str,
    locale: ParserLocale,
    tz: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> tuple[datetime | None, str]:
    match = _MMDD_RE.search(text)
    if match:
        parsed = parse_absolute_date(match.group(0), tz, now=now)
        if parsed is not None:
            return parsed, _without(text, match)

    match = _YMD_RE.search(text)
    if match:
        parsed = parse_absolute_date(match.group(0), tz, now=now)
        if parsed is not None:
            return parsed, _without(text, match)

    match = _RELATIVE_DAY_RE[locale].search(text)
    if match:
        offset = _RELATIVE_DAY_OFFSETS[match.group(1).lower()]
        return relative_day(offset, tz, now=now), _without(text, match)

    return None, text


def _is_negative(text: str, match: re.Match[str]) -> bool:
    return text[: match.start()].endswith("-")


def _usable_amount(value: float) -> bool:
    return math.isfinite(value) and value > 0


def extract_amount(text: str, locale: ParserLocale) -> tuple[float | None, str]:
    if locale == "ko":
        # 만원/천원 단위
        match = _KO_UNIT_AMOUNT_RE.search(text)
        if match and not _is_negative(text, match):
            try:
                amount = parse_locale_number(match.group(1), "ko-KR") * _KO_UNIT_MULTIPLIERS[match.group(2)]
            except ValueError:
                amount = None
            if amount is not None and _usable_amount(amount):
                return amount, _without(text, match)

        # 10,000원 / 5000원
        match = _KO_AMOUNT_RE.search(text)
        if match:
            if _is_negative(text, match):
                return None, text
            try:
                amount = parse_locale_number(match.group(1), "ko-KR")
            except ValueError:
                return None, text
            if _usable_amount(amount):
                return amount, _without(text, match)
        return None, text

    # $1,000 / 1000 / 1000 USD / USD 1000
    match = _EN_AMOUNT_RE.search(text)
    if match and not _is_negative(text, match):
        try:
            amount = parse_locale_number(match.group(1), "en-US")
        except ValueError:
            return None, text
        if _usable_amount(amount):
            return amount, _without(text, match)
    return None, text


def extract_payment_method(text: str, locale: ParserLocale) -> tuple[str | None, str]:
    for method, patterns in _PAYMENT_PATTERNS[locale]:
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                return method.value, _without(text, match)
    return None, text


def extract_category(tags: list[str], locale: ParserLocale) -> str | None:
    keywords = CATEGORY_KEYWORDS[locale]
    for tag in tags:
        key = normalize_keyword(tag)
        for keyword in keywords:
            if normalize_keyword(keyword) in key:
                return keyword
    return None


# ---- Entry points ----------------------------------------------------------


def _original_description(raw: str, normalized: str, rest: str, offsets: list[int]) -> str:
    """단계에서 소비되지 않은 원문 문자만 남겨 설명을 만듭니다 (㈜, ① 등 원문 그대로)."""
    consumed = [False] * len(raw)
    for position, index in enumerate(offsets):
        if rest[position] != normalized[position]:
            consumed[index] = True
    kept = "".join(" " if used else ch for ch, used in zip(raw, consumed))
    return collapse_whitespace(kept)


def parse_quick_input(
    raw: str | None,
    locale: str = "ko",
    fallback_type: TxnType | str | None = None,
    fallback_fixed: bool | None = None,
    *,
    tz: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> ParsedInput:
    """
    Quick Add 입력 파싱

    Args:
        raw: 원본 입력 문자열
        locale: "ko" / "en" (또는 "ko-KR" 같은 BCP 47 태그)
        fallback_type: 해시태그로 타입이 정해지지 않을 때 사용할 값 (토글)
        fallback_fixed: 해시태그로 고정 여부가 정해지지 않을 때 사용할 값 (토글)
        tz: 날짜 해석 타임존
        now: 상대 날짜/현재 연도 기준 시각 (테스트용)
    """
    loc = parser_locale(locale)
    normalized, offsets = normalize_with_offsets(raw)
    text = normalized

    tags, text = extract_hashtags(text)
    txn_type, fixed = resolve_type_and_fixed(tags, loc, fallback_type, fallback_fixed)
    date, text = extract_date(text, loc, tz=tz, now=now)
    amount, text = extract_amount(text, loc)
    payment_method, text = extract_payment_method(text, loc)
    category = extract_category(tags, loc)

    parsed = ParsedInput(
        date=date,
        amount=amount,
        type=txn_type,
        fixed=fixed,
        category=category,
        subcategory=None,
        description=_original_description(raw or "", normalized, text, offsets),
        tags=tags,
        payment_method=payment_method,
    )
    logger.debug("parsed quick input %r (%s): %s", raw, loc, parsed)
    return parsed


def build_transaction_draft(
    parsed: ParsedInput,
    locale: str = "ko",
    *,
    tz: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    파싱 결과를 거래 생성 payload 로 변환

    - 카테고리 없음 → "미분류" / "Uncategorized"
    - 날짜 없음 → 오늘 (tz 현지 자정)
    - 타입 없음 → expense, 고정 여부 없음 → False
    - 설명이 비어 있으면 카테고리명을 설명으로 사용

    Raises:
        InvalidArgumentError: 금액이 없거나 0 이하인 경우
    """
    if parsed.amount is None or not _usable_amount(parsed.amount):
        raise InvalidArgumentError("Amount is required", field="amount")

    category = parsed.category or UNCATEGORIZED[parser_locale(locale)]
    return {
        "occurred_at": parsed.date or relative_day(0, tz, now=now),
        "type": parsed.type or TxnType.EXPENSE,
        "fixed": parsed.fixed if parsed.fixed is not None else False,
        "category": category,
        "subcategory": parsed.subcategory,
        "description": (parsed.description or category)[:200],
        "amount": parsed.amount,
        "payment_method": parsed.payment_method,
        "tags": [t[:30] for t in parsed.tags],
    }
