"""
Services 패키지

급여 주기 계산, 빠른 입력 파싱, 거래/통계/사용자 설정 서비스를 제공합니다.
"""

from .pay_period import PayPeriod, get_pay_period, get_pay_period_range, is_same_pay_period
from .quick_input import ParsedInput, build_transaction_draft, parse_quick_input
from .settings_service import UserSettingsService
from .stats_service import StatsService
from .transaction_service import TransactionService

__all__ = [
    "PayPeriod",
    "get_pay_period",
    "get_pay_period_range",
    "is_same_pay_period",
    "ParsedInput",
    "build_transaction_draft",
    "parse_quick_input",
    "UserSettingsService",
    "StatsService",
    "TransactionService",
]
