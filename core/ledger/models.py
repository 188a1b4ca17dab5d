"""
Ledger 데이터 모델

직원 계정, 거래 이력, 엔진 결과 타입 정의
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Any, Generic, TypeVar

from core.ledger.bonus import should_reset_monthly
from core.ledger.errors import LedgerError
from core.ledger.types import LedgerErrorCode, TransactionType
from core.utils.timezone import from_iso

T = TypeVar("T")


# SELECT 컬럼 순서 (from_row와 일치해야 함)
ACCOUNT_COLUMNS = (
    "id, employee_number, name, user_id, balance, monthly_deposit_total, "
    "last_deposit_month, version, created_at, updated_at"
)

RECORD_COLUMNS = (
    "id, account_id, amount, ts, transaction_type, monthly_deposit_total, "
    "description, order_id"
)


@dataclass
class EmployeeAccount:
    """직원 계정

    잔액과 월 누적 입금액을 보유.
    monthly_deposit_total은 last_deposit_month 기준 값이므로
    직접 읽지 말고 effective_monthly_total()을 사용.
    """

    id: int
    employee_number: str
    name: str
    user_id: str | None
    balance: Decimal
    monthly_deposit_total: Decimal
    last_deposit_month: str | None  # "YYYY-MM"
    version: int
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> EmployeeAccount:
        """DB 행에서 생성 (ACCOUNT_COLUMNS 순서)"""
        return cls(
            id=row[0],
            employee_number=row[1],
            name=row[2],
            user_id=row[3],
            balance=Decimal(row[4]),
            monthly_deposit_total=Decimal(row[5]),
            last_deposit_month=row[6],
            version=row[7],
            created_at=row[8],
            updated_at=row[9],
        )

    def effective_monthly_total(
        self,
        now: datetime,
        tz: tzinfo = timezone.utc,
    ) -> Decimal:
        """현재 월 기준 누적 입금액

        마지막 입금 월이 지났으면 0.
        """
        if should_reset_monthly(self.last_deposit_month, now, tz):
            return Decimal("0")
        return self.monthly_deposit_total

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "employee_number": self.employee_number,
            "name": self.name,
            "user_id": self.user_id,
            "balance": str(self.balance),
            "monthly_deposit_total": str(self.monthly_deposit_total),
            "last_deposit_month": self.last_deposit_month,
            "version": self.version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class TransactionRecord:
    """거래 이력 (append-only)

    amount 부호: DEPOSIT/BONUS 양수, CHARGE 음수.
    id는 저장 후 부여됨.
    """

    account_id: int
    amount: Decimal
    ts: datetime
    transaction_type: TransactionType
    monthly_deposit_total: Decimal | None = None
    description: str | None = None
    order_id: int | None = None
    id: int | None = None

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> TransactionRecord:
        """DB 행에서 생성 (RECORD_COLUMNS 순서)"""
        return cls(
            id=row[0],
            account_id=row[1],
            amount=Decimal(row[2]),
            ts=from_iso(row[3]),
            transaction_type=TransactionType(row[4]),
            monthly_deposit_total=Decimal(row[5]) if row[5] is not None else None,
            description=row[6],
            order_id=row[7],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "amount": str(self.amount),
            "ts": self.ts.isoformat(),
            "transaction_type": self.transaction_type.value,
            "monthly_deposit_total": (
                str(self.monthly_deposit_total)
                if self.monthly_deposit_total is not None
                else None
            ),
            "description": self.description,
            "order_id": self.order_id,
        }


@dataclass(frozen=True)
class DepositResult:
    """입금 결과"""

    account_id: int
    new_balance: Decimal
    monthly_total: Decimal
    applied_bonus: Decimal
    records: list[TransactionRecord] = field(default_factory=list)


@dataclass(frozen=True)
class ChargeResult:
    """차감 결과"""

    account_id: int
    new_balance: Decimal
    record: TransactionRecord


@dataclass(frozen=True)
class ReconciliationReport:
    """잔액 대사 결과

    balance == history_total 이어야 정상
    """

    account_id: int
    balance: Decimal
    history_total: Decimal
    record_count: int

    @property
    def is_balanced(self) -> bool:
        return self.balance == self.history_total

    @property
    def difference(self) -> Decimal:
        return self.balance - self.history_total


@dataclass(frozen=True)
class LedgerFailure:
    """구조화된 실패 정보"""

    code: LedgerErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: LedgerError) -> LedgerFailure:
        return cls(code=error.code, message=error.message, details=dict(error.details))


class LedgerOperationError(LedgerError):
    """unwrap()으로 다시 올린 실패"""

    def __init__(self, failure: LedgerFailure):
        super().__init__(failure.message, failure.details)
        self.code = failure.code
        self.failure = failure


@dataclass(frozen=True)
class LedgerResult(Generic[T]):
    """Ledger 엔진 공통 반환 타입

    성공 시 value, 실패 시 error 중 하나만 채워짐.

    사용 예시:
    ```python
    result = await engine.deposit(account_id, Decimal("100"))
    if result.ok:
        print(result.value.new_balance)
    else:
        print(result.error.code)
    ```
    """

    value: T | None = None
    error: LedgerFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> LedgerResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: LedgerError) -> LedgerResult[T]:
        return cls(error=LedgerFailure.from_error(error))

    def unwrap(self) -> T:
        """성공 값 반환, 실패면 LedgerOperationError 발생"""
        if self.error is not None:
            raise LedgerOperationError(self.error)
        assert self.value is not None
        return self.value
