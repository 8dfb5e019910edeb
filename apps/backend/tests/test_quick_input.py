"""
Quick Add 입력 파서 테스트
"""

from datetime import datetime, timezone

import pytest

from paycycle.exceptions import InvalidArgumentError
from paycycle.models import TxnType
from paycycle.services.quick_input import (
    ParsedInput,
    build_transaction_draft,
    extract_amount,
    extract_date,
    extract_hashtags,
    extract_payment_method,
    parse_quick_input,
    parser_locale,
    resolve_type_and_fixed,
)
from paycycle.utils.dates import local_midnight


NOW = datetime(2025, 10, 15, 3, 0, tzinfo=timezone.utc)  # 서울 기준 2025-10-15 12:00


def parse(raw, locale="ko", **kwargs):
    return parse_quick_input(raw, locale, now=NOW, **kwargs)


class TestKoreanInput:
    def test_canonical_input(self):
        result = parse("10/05 점심 9,000원 #변동 #식비 카드")
        assert result.date == local_midnight(2025, 10, 5)
        assert result.amount == 9000
        assert result.type == TxnType.EXPENSE
        assert result.fixed is False
        assert result.category == "식비"
        assert result.subcategory is None
        assert result.description == "점심"
        assert result.tags == ["변동", "식비"]
        assert result.payment_method == "card"

    def test_negative_amount_is_ignored(self):
        result = parse("환불 -10000원")
        assert result.amount is None
        assert "환불" in result.description

    def test_last_tag_wins(self):
        result = parse("점심 #식비 #고정 #변동")
        assert result.fixed is False
        assert result.type == TxnType.EXPENSE

        result = parse("용돈 #수입 #지출")
        assert result.type == TxnType.EXPENSE

    def test_malformed_date_is_kept_in_description(self):
        result = parse("99/99 점심 10000원")
        assert result.date is None
        assert "99/99" in result.description
        assert result.amount == 10000

    def test_nonexistent_date(self):
        result = parse("02/30 점심 10000원")
        assert result.date is None
        assert "02/30" in result.description

    def test_iso_date(self):
        result = parse("2025-09-30 월세 650,000원 #고정 이체")
        assert result.date == local_midnight(2025, 9, 30)
        assert result.amount == 650000
        assert result.fixed is True
        assert result.payment_method == "transfer"
        assert result.description == "월세"

    def test_relative_days(self):
        assert parse("어제 택시 12,000원 현금").date == local_midnight(2025, 10, 14)
        assert parse("오늘 커피 4500원").date == local_midnight(2025, 10, 15)
        assert parse("내일 회식 50000원").date == local_midnight(2025, 10, 16)
        assert parse("모레 영화 15000원").date == local_midnight(2025, 10, 17)

    def test_relative_day_removed_from_description(self):
        result = parse("어제 택시 12,000원 현금")
        assert result.description == "택시"
        assert result.payment_method == "cash"

    def test_unit_amounts(self):
        assert parse("커피 1.5만원").amount == 15000
        assert parse("간식 5천원").amount == 5000
        assert parse("월급 300만 원 #수입").amount == 3000000

    def test_income_tag(self):
        result = parse("10월 급여 3,000,000원 #월급 #고정")
        assert result.type == TxnType.INCOME
        assert result.fixed is True
        assert result.amount == 3000000

    def test_fullwidth_input(self):
        result = parse("점심　９,０００원　＃식비")
        assert result.amount == 9000
        assert result.category == "식비"
        assert result.description == "점심"

    def test_description_keeps_original_characters(self):
        result = parse("㈜한빛 납품 10,000원")
        assert result.amount == 10000
        assert result.description == "㈜한빛 납품"

        result = parse("①번 점심 5000원 카드")
        assert result.amount == 5000
        assert result.payment_method == "card"
        assert result.description == "①번 점심"

    def test_fullwidth_amount_removed_from_original_text(self):
        result = parse("ＡＢＣ마트 ３,０００원")
        assert result.amount == 3000
        assert result.description == "ＡＢＣ마트"

    def test_no_amount(self):
        result = parse("그냥 메모")
        assert result.amount is None
        assert result.description == "그냥 메모"

    def test_zero_amount_is_absent(self):
        assert parse("0원").amount is None


class TestEnglishInput:
    def test_dollar_amount(self):
        result = parse("Lunch $12.50 card #food", "en")
        assert result.amount == 12.5
        assert result.category == "food"
        assert result.payment_method == "card"
        assert result.description == "Lunch"
        assert result.type is None
        assert result.fixed is None

    def test_usd_suffix_and_relative_day(self):
        result = parse("yesterday coffee 4.5 USD cash", "en")
        assert result.date == local_midnight(2025, 10, 14)
        assert result.amount == 4.5
        assert result.payment_method == "cash"
        assert result.description == "coffee"

    def test_grouped_amount(self):
        result = parse("Salary 3,200 #income #fixed", "en")
        assert result.amount == 3200
        assert result.type == TxnType.INCOME
        assert result.fixed is True

    def test_negative_amount_is_ignored(self):
        result = parse("refund -20", "en")
        assert result.amount is None
        assert "refund" in result.description

    def test_keyword_needs_word_boundary(self):
        result = parse("cardboard box 10", "en")
        assert result.payment_method is None
        assert result.description == "cardboard box"

    def test_case_insensitive_keywords(self):
        result = parse("Taxi 15 CASH #Transport #Variable", "en")
        assert result.payment_method == "cash"
        assert result.category == "transport"
        assert result.fixed is False
        assert result.description == "Taxi"

    def test_bare_number_mid_sentence(self):
        result = parse("coffee 5 cash", "en")
        assert result.amount == 5
        assert result.payment_method == "cash"
        assert result.description == "coffee"

        result = parse("lunch 12 at cafe", "en")
        assert result.amount == 12
        assert result.payment_method is None
        assert result.description == "lunch at cafe"

    def test_usd_prefix_without_space(self):
        result = parse("USD1000 lunch", "en")
        assert result.amount == 1000
        assert result.description == "lunch"

        result = parse("lunch 1000USD card", "en")
        assert result.amount == 1000
        assert result.payment_method == "card"
        assert result.description == "lunch"

    def test_number_inside_word_is_not_amount(self):
        result = parse("room101 key", "en")
        assert result.amount is None
        assert result.description == "room101 key"
        assert result.type == TxnType.EXPENSE


class TestStageOrder:
    def test_date_is_removed_before_amount(self):
        result = parse("10/05 taxi 15000", "en")
        assert result.date == local_midnight(2025, 10, 5)
        assert result.amount == 15000
        assert result.description == "taxi"

    def test_iso_date_is_removed_before_amount(self):
        result = parse("2025-10-05 taxi 15000", "en")
        assert result.date == local_midnight(2025, 10, 5)
        assert result.amount == 15000

    def test_hashtags_are_removed_before_amount(self):
        result = parse("#2025 coffee 5", "en")
        assert result.tags == ["2025"]
        assert result.amount == 5

    def test_stage_functions(self):
        tags, rest = extract_hashtags("10/05 점심 9,000원 #변동 #식비 카드")
        assert tags == ["변동", "식비"]
        assert "#" not in rest
        assert rest.startswith("10/05 점심 9,000원")

        date, rest = extract_date(rest, "ko", now=NOW)
        assert date == local_midnight(2025, 10, 5)
        amount, rest = extract_amount(rest, "ko")
        assert amount == 9000
        method, rest = extract_payment_method(rest, "ko")
        assert method == "card"
        assert len(rest) == len("10/05 점심 9,000원 #변동 #식비 카드")
        assert rest.split() == ["점심"]


class TestFallbacks:
    def test_fallback_used_without_tags(self):
        result = parse("점심 5000원", fallback_type="income", fallback_fixed=True)
        assert result.type == TxnType.INCOME
        assert result.fixed is True

    def test_tag_overrides_fallback(self):
        result = parse("점심 5000원 #지출 #변동", fallback_type=TxnType.INCOME, fallback_fixed=True)
        assert result.type == TxnType.EXPENSE
        assert result.fixed is False

    def test_nothing_resolved(self):
        result = parse("점심 5000원")
        assert result.type is None
        assert result.fixed is None

    def test_resolve_type_and_fixed(self):
        assert resolve_type_and_fixed(["고정"], "ko") == (TxnType.EXPENSE, True)
        assert resolve_type_and_fixed([], "ko", "expense", False) == (TxnType.EXPENSE, False)
        assert resolve_type_and_fixed([], "ko", "bogus", None) == (None, None)


class TestNeverRaises:
    @pytest.mark.parametrize("raw", ["", None, "   ", "#", "-", "원", "$", "99/99/99", "####"])
    def test_garbage(self, raw):
        result = parse(raw)
        assert isinstance(result, ParsedInput)
        assert result.amount is None

    def test_parser_locale(self):
        assert parser_locale("ko-KR") == "ko"
        assert parser_locale("en-US") == "en"
        assert parser_locale("de-DE") == "en"
        assert parser_locale(None) == "ko"


class TestBuildTransactionDraft:
    def test_defaults(self):
        draft = build_transaction_draft(parse("9000원"), "ko", now=NOW)
        assert draft["category"] == "미분류"
        assert draft["description"] == "미분류"
        assert draft["occurred_at"] == local_midnight(2025, 10, 15)
        assert draft["type"] == TxnType.EXPENSE
        assert draft["fixed"] is False
        assert draft["amount"] == 9000

    def test_english_default_category(self):
        draft = build_transaction_draft(parse("coffee 5", "en"), "en", now=NOW)
        assert draft["category"] == "Uncategorized"
        assert draft["description"] == "coffee"

    def test_keeps_parsed_values(self):
        draft = build_transaction_draft(parse("10/05 점심 9,000원 #변동 #식비 카드"), "ko", now=NOW)
        assert draft["occurred_at"] == local_midnight(2025, 10, 5)
        assert draft["category"] == "식비"
        assert draft["payment_method"] == "card"
        assert draft["tags"] == ["변동", "식비"]

    def test_amount_required(self):
        with pytest.raises(InvalidArgumentError, match="Amount is required"):
            build_transaction_draft(parse("점심"), "ko", now=NOW)

    def test_non_positive_amount_rejected(self):
        with pytest.raises(InvalidArgumentError):
            build_transaction_draft(ParsedInput(amount=0), "ko", now=NOW)
        with pytest.raises(InvalidArgumentError):
            build_transaction_draft(ParsedInput(amount=-5), "ko", now=NOW)
