"""
직원 Ledger 시스템

직원 잔액, 월간 입금 누적액, 보너스, append-only 거래 이력 관리.
잔액 == 이력 금액 합계가 항상 성립해야 한다.

사용 예시:
```python
from core.ledger import LedgerEngine

engine = LedgerEngine(db)

# 입금 (월 누적 250 단위마다 500 보너스)
result = await engine.deposit(account_id, Decimal("260"))

# 주문 결제
result = await engine.charge(account_id, Decimal("12.50"), reason="Order #7")
if not result.ok:
    print(result.error.code)  # INSUFFICIENT_FUNDS

# 대사
report = (await engine.reconcile(account_id)).unwrap()
assert report.is_balanced
```
"""

from core.ledger.bonus import (
    BonusCalculation,
    BonusPolicy,
    calculate_bonus,
    month_key,
    should_reset_monthly,
)
from core.ledger.engine import LedgerEngine
from core.ledger.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    LedgerError,
    PersistenceError,
    VersionConflictError,
)
from core.ledger.models import (
    ChargeResult,
    DepositResult,
    EmployeeAccount,
    LedgerFailure,
    LedgerOperationError,
    LedgerResult,
    ReconciliationReport,
    TransactionRecord,
)
from core.ledger.store import AccountInUseError, DuplicateAccountError, LedgerStore
from core.ledger.types import DEPOSIT_HISTORY_TYPES, LedgerErrorCode, TransactionType

__all__ = [
    # 핵심 클래스
    "LedgerEngine",
    "LedgerStore",
    # 보너스
    "BonusPolicy",
    "BonusCalculation",
    "calculate_bonus",
    "month_key",
    "should_reset_monthly",
    # 모델
    "EmployeeAccount",
    "TransactionRecord",
    "DepositResult",
    "ChargeResult",
    "ReconciliationReport",
    "LedgerResult",
    "LedgerFailure",
    # 예외
    "LedgerError",
    "LedgerOperationError",
    "InvalidAmountError",
    "AccountNotFoundError",
    "InsufficientFundsError",
    "PersistenceError",
    "VersionConflictError",
    "DuplicateAccountError",
    "AccountInUseError",
    # Enum / 상수
    "TransactionType",
    "LedgerErrorCode",
    "DEPOSIT_HISTORY_TYPES",
]
