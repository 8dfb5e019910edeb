from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from . import models
from .core.config import settings
from .core.database import get_db
from .core.deps import get_current_user
from .core.logging import get_logger
from .exceptions import InvalidArgumentError
from .schemas import (
    ParsedInputOut,
    PayPeriodOut,
    PeriodComparisonOut,
    PeriodSummaryOut,
    QuickInputRequest,
    SamePayPeriodOut,
    TransactionCreate,
    TransactionOut,
    TransactionPageOut,
    TransactionUpdate,
    UserSettingsOut,
    UserSettingsUpdate,
)
from .services.pay_period import (
    ONE_MILLISECOND,
    PayPeriod,
    get_pay_period,
    get_pay_period_range,
    is_same_pay_period,
)
from .services.quick_input import build_transaction_draft, parse_quick_input
from .services.settings_service import UserSettingsService
from .services.stats_service import StatsService
from .services.transaction_service import TransactionService
from .utils.dates import coerce_instant, shift
from .utils.formatting import format_currency


logger = get_logger(__name__)

router = APIRouter()


def _bad_request(exc: InvalidArgumentError) -> HTTPException:
    logger.warning("rejected argument (%s): %s", exc.field, exc)
    return HTTPException(status_code=400, detail=str(exc))


def _anchor(value: str | None) -> datetime | str:
    return value or datetime.now(timezone.utc)


def _period_out(period: PayPeriod) -> PayPeriodOut:
    return PayPeriodOut(start_iso=period.start_iso, end_iso=period.end_iso, label=period.label)


def _day_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """[start_date 00:00, end_date 다음날 00:00 - 1ms] (설정 타임존 기준)"""
    start = coerce_instant(start_date, settings.TIMEZONE)
    end = shift(coerce_instant(end_date + timedelta(days=1), settings.TIMEZONE), -ONE_MILLISECOND)
    return start, end


# ---- Pay period -------------------------------------------------------------


@router.get("/period", response_model=PayPeriodOut, response_model_by_alias=True)
def read_pay_period(
    anchorDate: str | None = Query(None),
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    service = UserSettingsService(db)
    try:
        period = get_pay_period(
            _anchor(anchorDate),
            service.salary_day(user),
            settings.TIMEZONE,
            service.locale(user),
        )
    except InvalidArgumentError as exc:
        raise _bad_request(exc) from exc
    return _period_out(period)


@router.get("/period/range", response_model=list[PayPeriodOut], response_model_by_alias=True)
def read_pay_period_range(
    anchorDate: str | None = Query(None),
    before: int = Query(12, ge=0, le=120),
    after: int = Query(12, ge=0, le=120),
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    service = UserSettingsService(db)
    try:
        periods = get_pay_period_range(
            _anchor(anchorDate),
            service.salary_day(user),
            before_count=before,
            after_count=after,
            tz=settings.TIMEZONE,
            locale=service.locale(user),
        )
    except InvalidArgumentError as exc:
        raise _bad_request(exc) from exc
    return [_period_out(p) for p in periods]


@router.get("/period/same", response_model=SamePayPeriodOut)
def read_same_pay_period(
    a: str = Query(...),
    b: str = Query(...),
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    salary_day = UserSettingsService(db).salary_day(user)
    try:
        same = is_same_pay_period(a, b, salary_day, settings.TIMEZONE)
    except InvalidArgumentError as exc:
        raise _bad_request(exc) from exc
    return SamePayPeriodOut(same=same)


# ---- User settings ----------------------------------------------------------


@router.get("/user/settings", response_model=UserSettingsOut)
def read_user_settings(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    return UserSettingsService(db).to_dict(user)


@router.patch("/user/settings", response_model=UserSettingsOut)
def update_user_settings(
    payload: UserSettingsUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    patch = payload.model_dump(exclude_unset=True, exclude_none=True)
    return UserSettingsService(db).update(user, patch)


# ---- Quick input ------------------------------------------------------------


@router.post("/quick-input/parse", response_model=ParsedInputOut)
def parse_quick_input_preview(
    payload: QuickInputRequest,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    service = UserSettingsService(db)
    parsed = parse_quick_input(
        payload.raw,
        payload.locale,
        payload.fallback_type,
        payload.fallback_fixed,
        tz=settings.TIMEZONE,
    )
    out = ParsedInputOut.model_validate(parsed)
    if parsed.amount is not None:
        out.amount_display = format_currency(parsed.amount, service.currency(user), service.locale(user))
        out.can_submit = True
    return out


@router.post("/quick-input/transactions", response_model=TransactionOut, status_code=201)
def create_transaction_from_quick_input(
    payload: QuickInputRequest,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    parsed = parse_quick_input(
        payload.raw,
        payload.locale,
        payload.fallback_type,
        payload.fallback_fixed,
        tz=settings.TIMEZONE,
    )
    try:
        draft = build_transaction_draft(parsed, payload.locale, tz=settings.TIMEZONE)
    except InvalidArgumentError as exc:
        raise _bad_request(exc) from exc
    data = TransactionCreate.model_validate(draft).model_dump()
    return TransactionService(db).create(data, user_id=user.id)


# ---- Transactions -----------------------------------------------------------


@router.get("/transactions", response_model=TransactionPageOut)
def list_transactions(
    response: Response,
    start: date | None = Query(None),
    end: date | None = Query(None),
    period_anchor: str | None = Query(None),
    type: models.TxnType | None = Query(None),
    category: str | None = Query(None),
    fixed: bool | None = Query(None),
    q: str | None = Query(None, max_length=100),
    sort: str = Query("occurred_at:desc", pattern=r"^(occurred_at|amount|category|created_at):(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    range_start: datetime | None = None
    range_end: datetime | None = None
    if period_anchor:
        try:
            period = get_pay_period(
                period_anchor,
                UserSettingsService(db).salary_day(user),
                settings.TIMEZONE,
            )
        except InvalidArgumentError as exc:
            raise _bad_request(exc) from exc
        range_start, range_end = period.start, period.end
    elif start and end:
        if start > end:
            raise HTTPException(status_code=400, detail="start must be on or before end")
        range_start, range_end = _day_bounds(start, end)

    rows, meta = TransactionService(db).get_page(
        user_id=user.id,
        page=page,
        page_size=page_size,
        start=range_start,
        end=range_end,
        txn_type=type,
        category=category,
        fixed=fixed,
        q=q,
        sort=sort,
    )
    response.headers["X-Total-Count"] = str(meta["total_count"])
    return {"items": [TransactionOut.model_validate(r) for r in rows], "meta": meta}


@router.post("/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return TransactionService(db).create(payload.model_dump(), user_id=user.id)


@router.get("/transactions/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: int, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    row = TransactionService(db).get_by_id(user.id, txn_id)
    if not row:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return row


@router.patch("/transactions/{txn_id}", response_model=TransactionOut)
def update_transaction(
    txn_id: int,
    payload: TransactionUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    service = TransactionService(db)
    row = service.get_by_id(user.id, txn_id)
    if not row:
        raise HTTPException(status_code=404, detail="Transaction not found")
    patch = payload.model_dump(exclude_unset=True)
    for key in ("occurred_at", "type", "fixed", "category", "description", "amount", "tags"):
        if key in patch and patch[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be null")
    return service.update(row, patch)


@router.delete("/transactions/{txn_id}", status_code=204)
def delete_transaction(txn_id: int, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    service = TransactionService(db)
    row = service.get_by_id(user.id, txn_id)
    if not row:
        raise HTTPException(status_code=404, detail="Transaction not found")
    service.delete(row)
    return Response(status_code=204)


# ---- Stats ------------------------------------------------------------------


@router.get("/stats", response_model=PeriodSummaryOut)
def read_stats(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")
    start, end = _day_bounds(start_date, end_date)
    return StatsService(db).summarize(user_id=user.id, start=start, end=end)


@router.get("/stats/period", response_model=PeriodComparisonOut)
def read_period_stats(
    anchorDate: str | None = Query(None),
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    settings_service = UserSettingsService(db)
    try:
        result = StatsService(db).compare_with_previous(
            user_id=user.id,
            anchor=_anchor(anchorDate),
            salary_day=settings_service.salary_day(user),
            tz=settings.TIMEZONE,
            locale=settings_service.locale(user),
        )
    except InvalidArgumentError as exc:
        raise _bad_request(exc) from exc
    result["period"] = _period_out(result["period"])
    result["previous_period"] = _period_out(result["previous_period"])
    return result
