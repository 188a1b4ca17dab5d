"""
Ledger 예외 정의

엔진 내부에서는 예외로 전파하고, 공개 메서드 경계에서
LedgerResult로 변환한다.
"""

from decimal import Decimal
from typing import Any

from core.ledger.types import LedgerErrorCode


class LedgerError(Exception):
    """Ledger 예외 기본 클래스

    Args:
        message: 사람이 읽을 수 있는 메시지
        details: 구조화된 부가 정보 (API 응답에 그대로 노출)
    """

    code: LedgerErrorCode = LedgerErrorCode.PERSISTENCE

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidAmountError(LedgerError):
    """금액 오류 (0 이하, 상한 초과, 소수 자릿수 초과)"""

    code = LedgerErrorCode.INVALID_AMOUNT

    def __init__(self, amount: Decimal | str, reason: str | None = None):
        super().__init__(
            reason or f"금액은 0보다 커야 합니다: {amount}",
            {"amount": str(amount)},
        )


class AccountNotFoundError(LedgerError):
    """계정 없음"""

    code = LedgerErrorCode.ACCOUNT_NOT_FOUND

    def __init__(self, account_ref: int | str):
        super().__init__(
            f"계정을 찾을 수 없습니다: {account_ref}",
            {"account": str(account_ref)},
        )


class InsufficientFundsError(LedgerError):
    """잔액 부족"""

    code = LedgerErrorCode.INSUFFICIENT_FUNDS

    def __init__(self, account_id: int, available: Decimal, required: Decimal):
        super().__init__(
            f"잔액이 부족합니다: 사용 가능 {available}, 필요 {required}",
            {
                "account_id": account_id,
                "available": str(available),
                "required": str(required),
            },
        )
        self.available = available
        self.required = required


class PersistenceError(LedgerError):
    """저장소 오류 (I/O, 제약 위반, 재시도 소진)"""

    code = LedgerErrorCode.PERSISTENCE


class VersionConflictError(PersistenceError):
    """낙관적 락 충돌

    엔진이 재시도하는 유일한 오류. 재시도 소진 시 PersistenceError로 보고.
    """

    def __init__(self, account_id: int, expected_version: int):
        super().__init__(
            f"계정 버전 충돌: account_id={account_id}, expected_version={expected_version}",
            {"account_id": account_id, "expected_version": expected_version},
        )
