"""
Ledger 타입 정의

TransactionType 등 Ledger 시스템에서 사용하는 Enum 정의
"""

from enum import Enum


class TransactionType(str, Enum):
    """거래 이력 유형

    str을 상속하여 JSON 직렬화 가능.
    금액 부호: DEPOSIT/BONUS는 양수, CHARGE는 음수
    """

    DEPOSIT = "Deposit"  # 직원 입금
    BONUS = "Bonus"  # 월간 입금 보너스
    CHARGE = "Charge"  # 주문 결제 차감


class LedgerErrorCode(str, Enum):
    """Ledger 엔진 오류 코드"""

    INVALID_AMOUNT = "INVALID_AMOUNT"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    PERSISTENCE = "PERSISTENCE"


# 입금 이력 화면에 노출되는 거래 유형
DEPOSIT_HISTORY_TYPES: tuple[TransactionType, ...] = (
    TransactionType.DEPOSIT,
    TransactionType.BONUS,
)
