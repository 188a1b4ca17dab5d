"""LedgerStore 통합 테스트"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.errors import AccountNotFoundError, VersionConflictError
from core.ledger.models import EmployeeAccount, TransactionRecord
from core.ledger.store import AccountInUseError, DuplicateAccountError, LedgerStore
from core.ledger.types import TransactionType

BASE_TS = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _record(account_id: int, amount: str, tx_type: TransactionType, minutes: int = 0) -> TransactionRecord:
    return TransactionRecord(
        account_id=account_id,
        amount=Decimal(amount),
        ts=BASE_TS + timedelta(minutes=minutes),
        transaction_type=tx_type,
    )


class TestAccountCrud:
    """계정 등록/조회/수정/삭제"""

    @pytest.mark.asyncio
    async def test_create_account(self, store: LedgerStore) -> None:
        """잔액 0, version 0으로 생성"""
        account = await store.create_account("E2001", name="김철수")

        assert account.id is not None
        assert account.employee_number == "E2001"
        assert account.name == "김철수"
        assert account.balance == Decimal("0")
        assert account.monthly_deposit_total == Decimal("0")
        assert account.last_deposit_month is None
        assert account.version == 0

    @pytest.mark.asyncio
    async def test_duplicate_employee_number(
        self, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        with pytest.raises(DuplicateAccountError):
            await store.create_account(account.employee_number)

    @pytest.mark.asyncio
    async def test_duplicate_user_id(self, store: LedgerStore, account: EmployeeAccount) -> None:
        with pytest.raises(DuplicateAccountError):
            await store.create_account("E9999", user_id=account.user_id)

    @pytest.mark.asyncio
    async def test_empty_employee_number(self, store: LedgerStore) -> None:
        with pytest.raises(ValueError):
            await store.create_account("")

    @pytest.mark.asyncio
    async def test_lookups(self, store: LedgerStore, account: EmployeeAccount) -> None:
        """ID / 사번 / user_id 조회"""
        assert (await store.get_account(account.id)).employee_number == "E1001"
        assert (await store.get_account_by_employee_number("E1001")).id == account.id
        assert (await store.get_account_by_user_id("user-1001")).id == account.id

        assert await store.get_account(9999) is None
        assert await store.get_account_by_employee_number("NOPE") is None

    @pytest.mark.asyncio
    async def test_list_accounts_ordered(self, store: LedgerStore) -> None:
        await store.create_account("E3")
        await store.create_account("E1")
        await store.create_account("E2")

        accounts = await store.list_accounts()
        assert [a.employee_number for a in accounts] == ["E1", "E2", "E3"]

        page = await store.list_accounts(limit=1, offset=1)
        assert [a.employee_number for a in page] == ["E2"]

    @pytest.mark.asyncio
    async def test_update_profile_keeps_money_fields(
        self, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        """프로필 수정은 잔액/버전을 건드리지 않음"""
        updated = await store.update_profile(account.id, name="새이름", employee_number="E1002")

        assert updated.name == "새이름"
        assert updated.employee_number == "E1002"
        assert updated.balance == account.balance
        assert updated.version == account.version

    @pytest.mark.asyncio
    async def test_update_profile_partial(
        self, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        updated = await store.update_profile(account.id, name="이름만")

        assert updated.employee_number == account.employee_number

    @pytest.mark.asyncio
    async def test_update_profile_not_found(self, store: LedgerStore) -> None:
        with pytest.raises(AccountNotFoundError):
            await store.update_profile(9999, name="x")

    @pytest.mark.asyncio
    async def test_update_profile_duplicate_number(
        self, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        other = await store.create_account("E5000")

        with pytest.raises(DuplicateAccountError):
            await store.update_profile(other.id, employee_number=account.employee_number)

    @pytest.mark.asyncio
    async def test_delete_account(self, store: LedgerStore, account: EmployeeAccount) -> None:
        await store.delete_account(account.id)

        assert await store.get_account(account.id) is None

    @pytest.mark.asyncio
    async def test_delete_account_not_found(self, store: LedgerStore) -> None:
        with pytest.raises(AccountNotFoundError):
            await store.delete_account(9999)

    @pytest.mark.asyncio
    async def test_delete_account_with_history(
        self, db: SQLiteAdapter, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        """이력이 있으면 삭제 거부"""
        async with db.transaction():
            await store.append_record(_record(account.id, "10", TransactionType.DEPOSIT))

        with pytest.raises(AccountInUseError):
            await store.delete_account(account.id)

        assert await store.get_account(account.id) is not None


class TestSaveAccountState:
    """낙관적 락 저장"""

    @pytest.mark.asyncio
    async def test_increments_version(
        self, db: SQLiteAdapter, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        account.balance = Decimal("100")
        account.monthly_deposit_total = Decimal("100")
        account.last_deposit_month = "2024-03"

        async with db.transaction():
            new_version = await store.save_account_state(account)

        assert new_version == 1

        saved = await store.get_account(account.id)
        assert saved.balance == Decimal("100")
        assert saved.last_deposit_month == "2024-03"
        assert saved.version == 1

    @pytest.mark.asyncio
    async def test_stale_version_conflicts(
        self, db: SQLiteAdapter, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        """다른 작업이 먼저 저장하면 VersionConflictError, 변경 없음"""
        stale = await store.get_account(account.id)

        account.balance = Decimal("50")
        async with db.transaction():
            await store.save_account_state(account)

        stale.balance = Decimal("999")
        with pytest.raises(VersionConflictError):
            async with db.transaction():
                await store.save_account_state(stale)

        saved = await store.get_account(account.id)
        assert saved.balance == Decimal("50")
        assert saved.version == 1


class TestRecords:
    """거래 이력 조회"""

    @pytest.mark.asyncio
    async def test_append_assigns_id(
        self, db: SQLiteAdapter, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        async with db.transaction():
            record = await store.append_record(_record(account.id, "10", TransactionType.DEPOSIT))

        assert record.id is not None

    @pytest.mark.asyncio
    async def test_ordering_filter_and_paging(
        self, db: SQLiteAdapter, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        async with db.transaction():
            await store.append_record(_record(account.id, "260", TransactionType.DEPOSIT, 0))
            await store.append_record(_record(account.id, "500", TransactionType.BONUS, 0))
            await store.append_record(_record(account.id, "-12.50", TransactionType.CHARGE, 5))

        oldest_first = await store.get_records(account.id)
        assert [r.amount for r in oldest_first] == [
            Decimal("260"),
            Decimal("500"),
            Decimal("-12.50"),
        ]

        newest_first = await store.get_records(account.id, newest_first=True)
        assert newest_first[0].transaction_type == TransactionType.CHARGE

        deposits = await store.get_records(
            account.id,
            transaction_types=(TransactionType.DEPOSIT, TransactionType.BONUS),
        )
        assert len(deposits) == 2

        page = await store.get_records(account.id, limit=1, offset=1)
        assert [r.transaction_type for r in page] == [TransactionType.BONUS]

        skipped = await store.get_records(account.id, offset=2)
        assert [r.transaction_type for r in skipped] == [TransactionType.CHARGE]

    @pytest.mark.asyncio
    async def test_count_and_sum(
        self, db: SQLiteAdapter, store: LedgerStore, account: EmployeeAccount
    ) -> None:
        """Decimal 합산 (부동소수점 오차 없음)"""
        async with db.transaction():
            for _ in range(10):
                await store.append_record(_record(account.id, "0.1", TransactionType.DEPOSIT))

        assert await store.count_records(account.id) == 10
        assert await store.sum_records(account.id) == Decimal("1.0")

    @pytest.mark.asyncio
    async def test_sum_empty(self, store: LedgerStore, account: EmployeeAccount) -> None:
        assert await store.sum_records(account.id) == Decimal("0")
        assert await store.count_records(account.id) == 0
