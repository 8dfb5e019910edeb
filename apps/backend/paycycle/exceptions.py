"""
예외 계층

paycycle 전용 예외는 모두 PayCycleError 를 상속하며, 기계 판독용 `code` 를 가집니다.
라우터는 이 예외를 HTTPException 으로 변환합니다.
"""

from __future__ import annotations


class PayCycleError(Exception):
    """Base exception for paycycle errors."""

    code: str = "PAYCYCLE_ERROR"


class InvalidArgumentError(PayCycleError, ValueError):
    """An argument is outside the range the operation accepts."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)
