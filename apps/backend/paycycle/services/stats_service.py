from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from paycycle import models
from paycycle.core.logging import get_logger
from paycycle.services.pay_period import ONE_MILLISECOND, PayPeriod, get_pay_period
from paycycle.services.transaction_service import to_storage_datetime
from paycycle.utils.dates import shift


logger = get_logger(__name__)

# 지출 중 이 카테고리는 "저축"으로 따로 집계한다
SAVING_CATEGORY = "저축"

SUMMARY_FIELDS = ("income", "expense", "saving", "balance", "fixed_expense", "variable_expense")


def change_percent(current: float, previous: float) -> float | None:
    """전기 대비 증감률(%). 전기가 0이면 비교 불가(None), 둘 다 0이면 0."""
    if previous == 0:
        return 0.0 if current == 0 else None
    return round((current - previous) / abs(previous) * 100, 1)


class StatsService:
    """Aggregate income/expense totals over a closed date range."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def summarize(self, *, user_id: int, start: datetime, end: datetime) -> dict[str, float]:
        """Sum a user's transactions with ``start <= occurred_at <= end``.

        balance = income - expense - saving, where ``expense`` excludes the
        saving category and ``variable_expense = expense - fixed_expense``.
        """
        txn = models.Transaction
        is_expense = txn.type == models.TxnType.EXPENSE
        is_saving = and_(is_expense, txn.category == SAVING_CATEGORY)
        is_spending = and_(is_expense, txn.category != SAVING_CATEGORY)

        row = (
            self.db.query(
                func.sum(case((txn.type == models.TxnType.INCOME, txn.amount), else_=0)),
                func.sum(case((is_spending, txn.amount), else_=0)),
                func.sum(case((is_saving, txn.amount), else_=0)),
                func.sum(case((and_(is_spending, txn.fixed.is_(True)), txn.amount), else_=0)),
            )
            .filter(
                txn.user_id == user_id,
                txn.occurred_at >= to_storage_datetime(start),
                txn.occurred_at <= to_storage_datetime(end),
            )
            .one()
        )
        income, expense, saving, fixed_expense = (float(v or 0) for v in row)
        return {
            "income": income,
            "expense": expense,
            "saving": saving,
            "balance": income - expense - saving,
            "fixed_expense": fixed_expense,
            "variable_expense": expense - fixed_expense,
        }

    def summarize_period(self, *, user_id: int, period: PayPeriod) -> dict[str, float]:
        return self.summarize(user_id=user_id, start=period.start, end=period.end)

    def compare_with_previous(
        self,
        *,
        user_id: int,
        anchor: datetime | str,
        salary_day: int,
        tz: str,
        locale: str = "ko-KR",
    ) -> dict[str, Any]:
        """Summaries for the anchor's pay period and the one right before it."""
        current_period = get_pay_period(anchor, salary_day, tz, locale)
        previous_period = get_pay_period(shift(current_period.start, -ONE_MILLISECOND), salary_day, tz, locale)

        current = self.summarize_period(user_id=user_id, period=current_period)
        previous = self.summarize_period(user_id=user_id, period=previous_period)
        logger.debug("period comparison for user %s: %s vs %s", user_id, current_period.label, previous_period.label)
        return {
            "period": current_period,
            "previous_period": previous_period,
            "current": current,
            "previous": previous,
            "change_percent": {
                key: change_percent(current[key], previous[key]) for key in ("income", "expense", "saving", "balance")
            },
        }
