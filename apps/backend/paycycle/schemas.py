from __future__ import annotations

from datetime import datetime
from typing import Optional, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_serializer,
    field_validator,
)

from .core.config import settings
from .models import TxnType
from .utils.dates import isoformat_ms, to_zone


def _aware_iso(value: datetime) -> str:
    # DB 에는 로컬 naive 로 저장되므로 응답 시 타임존 오프셋을 붙인다
    return isoformat_ms(to_zone(value, settings.TIMEZONE))


# ---- Pay period -------------------------------------------------------------


class PayPeriodOut(BaseModel):
    start_iso: str = Field(alias="startISO")
    end_iso: str = Field(alias="endISO")
    label: str

    model_config = ConfigDict(populate_by_name=True)


class SamePayPeriodOut(BaseModel):
    same: bool


# ---- User settings ----------------------------------------------------------


class UserSettingsOut(BaseModel):
    email: EmailStr
    name: str | None = None
    salary_day: int
    currency: str
    locale: str
    timezone: str


class UserSettingsUpdate(BaseModel):
    salary_day: int | None = Field(default=None, ge=1, le=31)
    currency: str | None = Field(default=None, pattern=r"^[A-Z]{3}$")
    locale: str | None = Field(default=None, pattern=r"^[a-z]{2}-[A-Z]{2}$")
    name: str | None = Field(default=None, min_length=1, max_length=100)


# ---- Transactions -----------------------------------------------------------


class TransactionBase(BaseModel):
    occurred_at: datetime
    type: TxnType
    fixed: bool = False
    category: str = Field(min_length=1, max_length=50)
    subcategory: Optional[str] = Field(default=None, max_length=50)
    description: str = Field(min_length=1, max_length=200)
    amount: float = Field(gt=0, allow_inf_nan=False)
    payment_method: Optional[str] = Field(default=None, max_length=20)
    recurrence: Optional[str] = Field(default=None, max_length=200)
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str]) -> list[str]:
        for tag in value:
            if len(tag) > 30:
                raise ValueError("Tag must be 30 characters or less")
        return value


class TransactionCreate(TransactionBase):
    model_config = ConfigDict(extra="ignore")


class TransactionUpdate(BaseModel):
    occurred_at: Optional[datetime] = None
    type: Optional[TxnType] = None
    fixed: Optional[bool] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    subcategory: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    payment_method: Optional[str] = Field(default=None, max_length=20)
    recurrence: Optional[str] = Field(default=None, max_length=200)
    tags: Optional[list[str]] = None


class TransactionOut(TransactionBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("occurred_at", "created_at", "updated_at")
    def _serialize_local(self, value: datetime) -> str:
        return _aware_iso(value)


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool


class TransactionPageOut(BaseModel):
    items: list[TransactionOut]
    meta: PaginationMeta


# ---- Quick input ------------------------------------------------------------


class QuickInputRequest(BaseModel):
    raw: str = Field(min_length=1, max_length=500)
    locale: Literal["ko", "en"] = "ko"
    fallback_type: Optional[TxnType] = None
    fallback_fixed: Optional[bool] = None


class ParsedInputOut(BaseModel):
    date: Optional[datetime] = None
    amount: Optional[float] = None
    type: Optional[TxnType] = None
    fixed: Optional[bool] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    payment_method: Optional[str] = None
    amount_display: Optional[str] = None
    can_submit: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("date")
    def _serialize_date(self, value: datetime | None) -> str | None:
        return isoformat_ms(value) if value is not None else None


# ---- Stats ------------------------------------------------------------------


class PeriodSummaryOut(BaseModel):
    income: float
    expense: float
    saving: float
    balance: float
    fixed_expense: float
    variable_expense: float


class ChangePercentOut(BaseModel):
    income: float | None = None
    expense: float | None = None
    saving: float | None = None
    balance: float | None = None


class PeriodComparisonOut(BaseModel):
    period: PayPeriodOut
    previous_period: PayPeriodOut
    current: PeriodSummaryOut
    previous: PeriodSummaryOut
    change_percent: ChangePercentOut
