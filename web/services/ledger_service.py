"""
Ledger 서비스

입금 이력 화면 등 엔진 결과를 조합한 조회
"""

from typing import Any

from core.ledger.engine import LedgerEngine
from core.ledger.errors import AccountNotFoundError
from core.ledger.types import DEPOSIT_HISTORY_TYPES


class LedgerService:
    """Ledger 조회 서비스

    Args:
        engine: Ledger 엔진
    """

    def __init__(self, engine: LedgerEngine):
        self.engine = engine

    async def get_deposit_history(self, account_id: int) -> dict[str, Any]:
        """입금 이력 (Deposit/Bonus, 최신순)

        monthly_deposit_total은 현재 월 기준 값
        (마지막 입금 월이 지났으면 0).

        Raises:
            AccountNotFoundError: 계정 없음
            LedgerOperationError: 이력 조회 실패
        """
        account = await self.engine.store.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        records = (
            await self.engine.get_history(
                account_id,
                newest_first=True,
                transaction_types=DEPOSIT_HISTORY_TYPES,
            )
        ).unwrap()

        monthly_total = account.effective_monthly_total(
            self.engine.clock(),
            self.engine.business_tz,
        )

        return {
            "account_id": account.id,
            "employee_number": account.employee_number,
            "current_balance": str(account.balance),
            "monthly_deposit_total": str(monthly_total),
            "deposits": [record.to_dict() for record in records],
        }
