"""
HTTP 오류 변환

Ledger 실패 코드 / 저장소 예외 → HTTPException
"""

from fastapi import HTTPException

from core.ledger.errors import LedgerError
from core.ledger.models import LedgerFailure
from core.ledger.types import LedgerErrorCode
from core.storage.errors import (
    DuplicateError,
    InUseError,
    InvalidOrderError,
    NotFoundError,
    StoreError,
)

LEDGER_STATUS_CODES: dict[LedgerErrorCode, int] = {
    LedgerErrorCode.INVALID_AMOUNT: 400,
    LedgerErrorCode.ACCOUNT_NOT_FOUND: 404,
    LedgerErrorCode.INSUFFICIENT_FUNDS: 409,
    LedgerErrorCode.PERSISTENCE: 500,
}


def failure_to_http(failure: LedgerFailure) -> HTTPException:
    """LedgerResult 실패 → HTTPException

    detail 형식: {"code", "message", "details"}
    """
    return HTTPException(
        status_code=LEDGER_STATUS_CODES.get(failure.code, 500),
        detail={
            "code": failure.code.value,
            "message": failure.message,
            "details": failure.details,
        },
    )


def ledger_error_to_http(error: LedgerError) -> HTTPException:
    return failure_to_http(LedgerFailure.from_error(error))


def store_error_to_http(error: StoreError) -> HTTPException:
    """저장소 예외 → HTTPException"""
    if isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, (DuplicateError, InUseError)):
        status_code = 409
    elif isinstance(error, InvalidOrderError):
        status_code = 400
    else:
        status_code = 500

    return HTTPException(
        status_code=status_code,
        detail={
            "code": type(error).__name__,
            "message": error.message,
            "details": error.details,
        },
    )


def bad_request(error: ValueError) -> HTTPException:
    """입력값 오류 → 400"""
    return HTTPException(
        status_code=400,
        detail={"code": "INVALID_INPUT", "message": str(error), "details": {}},
    )
