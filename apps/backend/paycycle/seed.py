from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from .core.config import settings
from .core.database import SessionLocal, init_db
from .core.logging import configure_logging, get_logger
from .models import Transaction, TxnType, User, UserProfile

logger = get_logger(__name__)

# (occurred_at, type, fixed, category, description, amount, payment_method)
_SAMPLE_TRANSACTIONS = (
    (datetime(2025, 10, 25, 9, 0), TxnType.INCOME, True, "급여", "10월 급여", 3_200_000, "transfer"),
    (datetime(2025, 10, 27, 12, 30), TxnType.EXPENSE, False, "식비", "점심", 12_000, "card"),
    (datetime(2025, 11, 1, 8, 0), TxnType.EXPENSE, True, "주거", "월세", 650_000, "transfer"),
    (datetime(2025, 11, 5, 10, 0), TxnType.EXPENSE, True, "저축", "적금", 500_000, "transfer"),
)


def seed(with_samples: bool = False) -> None:
    init_db()
    db: Session = SessionLocal()
    try:
        # 기본 사용자(데모)
        user = db.query(User).filter_by(email="demo@example.com").first()
        if not user:
            user = User(email="demo@example.com", is_active=True)
            db.add(user)
            db.flush()
            db.add(
                UserProfile(
                    user_id=user.id,
                    display_name="Demo",
                    base_currency=settings.DEFAULT_CURRENCY,
                    locale=settings.DEFAULT_LOCALE,
                    salary_day=settings.DEFAULT_SALARY_DAY,
                )
            )
            logger.info("demo user created (id=%s)", user.id)

        if with_samples and not db.query(Transaction).filter_by(user_id=user.id).first():
            for occurred_at, txn_type, fixed, category, description, amount, method in _SAMPLE_TRANSACTIONS:
                db.add(
                    Transaction(
                        user_id=user.id,
                        occurred_at=occurred_at,
                        type=txn_type,
                        fixed=fixed,
                        category=category,
                        description=description,
                        amount=amount,
                        payment_method=method,
                        tags=[],
                    )
                )
            logger.info("%d sample transactions added", len(_SAMPLE_TRANSACTIONS))

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    seed(with_samples=True)
