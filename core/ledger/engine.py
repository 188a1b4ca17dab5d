"""
Ledger 엔진

잔액을 변경하는 유일한 진입점.
- deposit: 입금 + 월간 보너스
- charge: 주문 결제 차감
- get_history / reconcile: 이력 조회, 잔액 대사

모든 쓰기는 하나의 트랜잭션(작업 단위) 안에서 load → compute → persist.
계정 UPDATE는 version 조건부(낙관적 락)이며, 충돌 시 최신 상태로
전체 계산을 다시 수행한다 (max_conflict_retries 회까지).
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone, tzinfo
from decimal import Decimal, DecimalException, InvalidOperation
from typing import TYPE_CHECKING, Any, TypeVar

from core.constants import Defaults
from core.ledger.bonus import BonusPolicy, calculate_bonus, month_key, should_reset_monthly
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
    LedgerResult,
    ReconciliationReport,
    TransactionRecord,
)
from core.ledger.store import LedgerStore
from core.ledger.types import TransactionType
from core.utils.timezone import ensure_utc, now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.config.loader import LedgerConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_amount(
    value: Decimal | int | str,
    decimals: int = Defaults.AMOUNT_DECIMALS,
    max_amount: Decimal = Defaults.MAX_AMOUNT,
) -> Decimal:
    """금액 정규화 및 검증

    Args:
        value: 금액 (문자열 권장)
        decimals: 허용 소수 자릿수
        max_amount: 1회 금액 상한

    Raises:
        InvalidAmountError: 숫자가 아니거나 0 이하, 상한 초과, 소수 자릿수 초과
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidAmountError(str(value)) from e

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError(amount)

    if amount > max_amount:
        raise InvalidAmountError(amount, f"금액이 상한({max_amount})을 넘습니다: {amount}")

    # 상한 이하이므로 quantize가 정밀도를 넘지 않음
    if amount != amount.quantize(Decimal(1).scaleb(-decimals)):
        raise InvalidAmountError(
            amount,
            f"금액은 소수점 {decimals}자리까지 허용됩니다: {amount}",
        )
    return amount


class LedgerEngine:
    """Ledger 엔진

    Args:
        db: SQLite 어댑터 (연결된 상태)
        policy: 보너스 정책 (None이면 기본 250/500)
        business_tz: 월 경계 판단 시간대
        max_conflict_retries: 낙관적 락 충돌 재시도 횟수
        decimals: 금액 소수 자릿수
        clock: 현재 시각 함수 (테스트에서 교체)

    사용 예시:
    ```python
    engine = LedgerEngine(db)

    result = await engine.deposit(account_id, Decimal("260"))
    if result.ok:
        print(result.value.applied_bonus)  # 500

    result = await engine.charge(account_id, Decimal("12.50"), reason="Order #1")
    ```
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        policy: BonusPolicy | None = None,
        business_tz: tzinfo = timezone.utc,
        max_conflict_retries: int = Defaults.MAX_CONFLICT_RETRIES,
        decimals: int = Defaults.AMOUNT_DECIMALS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.db = db
        self.store = LedgerStore(db)
        self.policy = policy or BonusPolicy()
        self.business_tz = business_tz
        self.max_conflict_retries = max_conflict_retries
        self.decimals = decimals
        self.clock = clock

    @classmethod
    def from_config(cls, db: SQLiteAdapter, config: LedgerConfig) -> LedgerEngine:
        """settings.yaml의 ledger 설정으로 생성"""
        return cls(
            db,
            policy=config.bonus_policy,
            business_tz=config.business_tz,
            max_conflict_retries=config.max_conflict_retries,
            decimals=config.decimals,
        )

    # -------------------------------------------------------------------------
    # 작업 단위
    # -------------------------------------------------------------------------

    async def atomic(self, work: Callable[[], Awaitable[T]]) -> T:
        """트랜잭션 + 충돌 재시도 실행

        work는 재시도마다 처음부터 다시 호출되므로 DB 상태를 새로 읽어야 한다.
        work 안에서 engine.deposit/charge 등 공개 메서드를 호출하면 안 됨
        (apply_deposit / apply_charge 사용).

        Args:
            work: 트랜잭션 안에서 실행할 비동기 함수

        Returns:
            work의 반환값

        Raises:
            LedgerError: 도메인 오류 (재시도 없음)
            PersistenceError: 저장소 오류, 금액 계산 오류 또는 재시도 소진
        """
        attempts = self.max_conflict_retries + 1
        last_conflict: VersionConflictError | None = None

        for attempt in range(1, attempts + 1):
            try:
                async with self.db.transaction():
                    return await work()
            except VersionConflictError as e:
                last_conflict = e
                logger.warning(
                    f"계정 버전 충돌, 재시도 {attempt}/{attempts}",
                    extra=e.details,
                )
            except sqlite3.Error as e:
                logger.error(f"Ledger 저장 실패: {e}")
                raise PersistenceError(
                    f"저장소 오류: {e}",
                    {"driver_error": type(e).__name__},
                ) from e
            except (DecimalException, OverflowError) as e:
                logger.error(f"Ledger 금액 계산 실패: {e!r}")
                raise PersistenceError(
                    f"금액 계산 오류: {type(e).__name__}",
                    {"driver_error": type(e).__name__},
                ) from e

        raise PersistenceError(
            f"동시 수정 충돌로 {attempts}회 시도 후 실패했습니다",
            {"attempts": attempts, **(last_conflict.details if last_conflict else {})},
        ) from last_conflict

    async def _load_account(self, account_id: int) -> EmployeeAccount:
        account = await self.store.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    # -------------------------------------------------------------------------
    # 트랜잭션 내부 단계 (atomic 안에서만 호출)
    # -------------------------------------------------------------------------

    async def apply_deposit(
        self,
        account_id: int,
        amount: Decimal,
        occurred_at: datetime,
    ) -> DepositResult:
        """입금 1회 계산 및 저장 (커밋하지 않음)

        1. 계정 로드
        2. 월이 바뀌었으면 월 누적액 0으로 초기화
        3~4. 새로 넘은 구간 수만큼 보너스 계산
        5. 잔액/누적액 갱신 (version 조건부)
        6. Deposit 이력, 보너스가 있으면 Bonus 이력 (같은 시각)
        """
        account = await self._load_account(account_id)

        if should_reset_monthly(account.last_deposit_month, occurred_at, self.business_tz):
            account.monthly_deposit_total = Decimal("0")
            account.last_deposit_month = month_key(occurred_at, self.business_tz)

        calc = calculate_bonus(account.monthly_deposit_total, amount, self.policy)

        account.balance += amount + calc.bonus_amount
        account.monthly_deposit_total = calc.new_total

        await self.store.save_account_state(account)

        records = [
            await self.store.append_record(
                TransactionRecord(
                    account_id=account.id,
                    amount=amount,
                    ts=occurred_at,
                    transaction_type=TransactionType.DEPOSIT,
                    monthly_deposit_total=calc.new_total,
                )
            )
        ]

        if calc.bonus_amount > 0:
            records.append(
                await self.store.append_record(
                    TransactionRecord(
                        account_id=account.id,
                        amount=calc.bonus_amount,
                        ts=occurred_at,
                        transaction_type=TransactionType.BONUS,
                        monthly_deposit_total=calc.new_total,
                        description=f"월간 입금 보너스 x{calc.tiers_crossed}",
                    )
                )
            )

        return DepositResult(
            account_id=account.id,
            new_balance=account.balance,
            monthly_total=calc.new_total,
            applied_bonus=calc.bonus_amount,
            records=records,
        )

    async def apply_charge(
        self,
        account_id: int,
        amount: Decimal,
        reason: str = "",
        order_id: int | None = None,
        occurred_at: datetime | None = None,
    ) -> ChargeResult:
        """차감 1회 저장 (커밋하지 않음)

        Raises:
            InsufficientFundsError: 잔액 < amount
        """
        account = await self._load_account(account_id)

        if account.balance < amount:
            raise InsufficientFundsError(account.id, account.balance, amount)

        account.balance -= amount
        await self.store.save_account_state(account)

        record = await self.store.append_record(
            TransactionRecord(
                account_id=account.id,
                amount=-amount,
                ts=ensure_utc(occurred_at or self.clock()),
                transaction_type=TransactionType.CHARGE,
                description=reason or None,
                order_id=order_id,
            )
        )

        return ChargeResult(
            account_id=account.id,
            new_balance=account.balance,
            record=record,
        )

    # -------------------------------------------------------------------------
    # 공개 연산 (LedgerResult 반환)
    # -------------------------------------------------------------------------

    async def deposit(
        self,
        account_id: int,
        amount: Decimal | int | str,
        occurred_at: datetime | None = None,
    ) -> LedgerResult[DepositResult]:
        """입금

        Args:
            account_id: 계정 ID
            amount: 입금액 (양수)
            occurred_at: 입금 시각 (None이면 현재 시각)

        Returns:
            성공: DepositResult / 실패: INVALID_AMOUNT, ACCOUNT_NOT_FOUND, PERSISTENCE
        """
        try:
            value = to_amount(amount, self.decimals)
            ts = ensure_utc(occurred_at or self.clock())
            result = await self.atomic(lambda: self.apply_deposit(account_id, value, ts))
        except LedgerError as e:
            self._log_rejection("deposit", account_id, e)
            return LedgerResult.failure(e)

        logger.info(
            f"입금 완료: account_id={account_id}, amount={value}, "
            f"bonus={result.applied_bonus}, balance={result.new_balance}",
            extra={
                "account_id": account_id,
                "monthly_total": str(result.monthly_total),
            },
        )
        return LedgerResult.success(result)

    async def deposit_by_employee_number(
        self,
        employee_number: str,
        amount: Decimal | int | str,
        occurred_at: datetime | None = None,
    ) -> LedgerResult[DepositResult]:
        """사번으로 계정을 찾아 입금"""
        try:
            account = await self.store.get_account_by_employee_number(employee_number)
        except sqlite3.Error as e:
            return LedgerResult.failure(PersistenceError(f"저장소 오류: {e}"))

        if account is None:
            error = AccountNotFoundError(employee_number)
            self._log_rejection("deposit", employee_number, error)
            return LedgerResult.failure(error)

        return await self.deposit(account.id, amount, occurred_at)

    async def charge(
        self,
        account_id: int,
        amount: Decimal | int | str,
        reason: str = "",
        order_id: int | None = None,
    ) -> LedgerResult[ChargeResult]:
        """차감 (주문 결제)

        보너스 로직 없음.

        Returns:
            성공: ChargeResult / 실패: INVALID_AMOUNT, ACCOUNT_NOT_FOUND,
            INSUFFICIENT_FUNDS, PERSISTENCE
        """
        try:
            value = to_amount(amount, self.decimals)
            result = await self.atomic(
                lambda: self.apply_charge(account_id, value, reason, order_id)
            )
        except LedgerError as e:
            self._log_rejection("charge", account_id, e)
            return LedgerResult.failure(e)

        logger.info(
            f"차감 완료: account_id={account_id}, amount={value}, "
            f"balance={result.new_balance}",
            extra={"account_id": account_id, "order_id": order_id},
        )
        return LedgerResult.success(result)

    async def get_history(
        self,
        account_id: int,
        newest_first: bool = False,
        limit: int | None = None,
        offset: int = 0,
        transaction_types: tuple[TransactionType, ...] | None = None,
    ) -> LedgerResult[list[TransactionRecord]]:
        """거래 이력 조회 (기본: 오래된 순)"""
        try:
            await self._load_account(account_id)
            records = await self.store.get_records(
                account_id,
                newest_first=newest_first,
                limit=limit,
                offset=offset,
                transaction_types=transaction_types,
            )
        except LedgerError as e:
            return LedgerResult.failure(e)
        except sqlite3.Error as e:
            return LedgerResult.failure(PersistenceError(f"저장소 오류: {e}"))

        return LedgerResult.success(records)

    async def reconcile(self, account_id: int) -> LedgerResult[ReconciliationReport]:
        """잔액 대사

        balance와 이력 금액 합계를 비교. 같은 작업 단위 안에서 읽는다.
        """

        async def _read() -> ReconciliationReport:
            account = await self._load_account(account_id)
            return ReconciliationReport(
                account_id=account.id,
                balance=account.balance,
                history_total=await self.store.sum_records(account.id),
                record_count=await self.store.count_records(account.id),
            )

        try:
            report = await self.atomic(_read)
        except LedgerError as e:
            return LedgerResult.failure(e)

        if not report.is_balanced:
            logger.error(
                f"잔액 불일치: account_id={account_id}, difference={report.difference}",
                extra={
                    "balance": str(report.balance),
                    "history_total": str(report.history_total),
                },
            )
        return LedgerResult.success(report)

    @staticmethod
    def _log_rejection(operation: str, account_ref: Any, error: LedgerError) -> None:
        """거부된 연산 로그 (저장소 오류는 ERROR, 나머지는 WARNING)"""
        level = logging.ERROR if isinstance(error, PersistenceError) else logging.WARNING
        logger.log(
            level,
            f"{operation} 거부: account={account_ref}, code={error.code.value}, {error.message}",
            extra={"error_details": error.details},
        )
