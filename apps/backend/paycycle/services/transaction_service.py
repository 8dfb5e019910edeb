from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from paycycle import models
from paycycle.core.config import settings
from paycycle.core.logging import get_logger
from paycycle.utils.dates import to_local_naive


logger = get_logger(__name__)

SORTABLE_FIELDS = {
    "occurred_at": models.Transaction.occurred_at,
    "amount": models.Transaction.amount,
    "category": models.Transaction.category,
    "created_at": models.Transaction.created_at,
}


def to_storage_datetime(value: datetime) -> datetime:
    """tz-aware 순간을 설정 타임존 기준 naive datetime 으로 변환 (naive 는 그대로)"""
    if value.tzinfo is None:
        return value
    return to_local_naive(value, settings.TIMEZONE)


class TransactionService:
    """CRUD and filtered listing for a single user's transactions."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _base_query(self, user_id: int):
        return self.db.query(models.Transaction).filter(models.Transaction.user_id == user_id)

    def get_by_id(self, user_id: int, transaction_id: int) -> models.Transaction | None:
        return self._base_query(user_id).filter(models.Transaction.id == transaction_id).first()

    def get_page(
        self,
        *,
        user_id: int,
        page: int = 1,
        page_size: int = 20,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        txn_type: Optional[models.TxnType] = None,
        category: Optional[str] = None,
        fixed: Optional[bool] = None,
        q: Optional[str] = None,
        sort: str = "occurred_at:desc",
    ) -> tuple[list[models.Transaction], dict[str, Any]]:
        """Return one page of rows plus pagination metadata.

        ``start``/``end`` are inclusive bounds on ``occurred_at``; both must be
        given for the range filter to apply.
        """
        query = self._base_query(user_id)
        if start is not None and end is not None:
            query = query.filter(
                models.Transaction.occurred_at >= to_storage_datetime(start),
                models.Transaction.occurred_at <= to_storage_datetime(end),
            )
        if txn_type is not None:
            query = query.filter(models.Transaction.type == txn_type)
        if category:
            query = query.filter(models.Transaction.category == category)
        if fixed is not None:
            query = query.filter(models.Transaction.fixed == bool(fixed))
        if q:
            pattern = f"%{q}%"
            query = query.filter(
                or_(
                    models.Transaction.description.ilike(pattern),
                    models.Transaction.category.ilike(pattern),
                )
            )

        field, _, direction = sort.partition(":")
        column = SORTABLE_FIELDS.get(field, models.Transaction.occurred_at)
        ordering = column.asc() if direction == "asc" else column.desc()

        total_count = query.count()
        rows = (
            query.order_by(ordering, models.Transaction.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        total_pages = math.ceil(total_count / page_size) if page_size else 0
        meta = {
            "page": page,
            "page_size": page_size,
            "total_count": total_count,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        }
        return rows, meta

    def create(self, payload: dict[str, Any], *, user_id: int) -> models.Transaction:
        data = dict(payload)
        data["occurred_at"] = to_storage_datetime(data["occurred_at"])
        data["tags"] = list(data.get("tags") or [])
        row = models.Transaction(user_id=user_id, **data)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("transaction %s created for user %s (%s %s)", row.id, user_id, row.type.value, row.amount)
        return row

    def update(self, row: models.Transaction, patch: dict[str, Any]) -> models.Transaction:
        if not patch:
            return row
        if patch.get("occurred_at") is not None:
            patch["occurred_at"] = to_storage_datetime(patch["occurred_at"])
        for key, value in patch.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, row: models.Transaction) -> None:
        row_id, user_id = row.id, row.user_id
        self.db.delete(row)
        self.db.commit()
        logger.info("transaction %s deleted for user %s", row_id, user_id)
