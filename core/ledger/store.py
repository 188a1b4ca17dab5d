"""
Ledger 저장소

직원 계정과 거래 이력(append-only) 저장 및 조회.
잔액 변경 로직은 LedgerEngine에만 있고, 이 클래스는 SQL만 담당.
"""

from __future__ import annotations

import logging
import sqlite3
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.errors import AccountNotFoundError, VersionConflictError
from core.ledger.models import (
    ACCOUNT_COLUMNS,
    RECORD_COLUMNS,
    EmployeeAccount,
    TransactionRecord,
)
from core.ledger.types import TransactionType
from core.storage.errors import DuplicateError, InUseError
from core.utils.timezone import to_iso

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class DuplicateAccountError(DuplicateError):
    """사번 또는 user_id 중복"""

    pass


class AccountInUseError(InUseError):
    """거래 이력 또는 주문이 있는 계정 삭제 시도"""

    pass


class LedgerStore:
    """Ledger 저장소

    employee_account / transaction_record 테이블을 읽고 쓰는 클래스.
    - 계정 관리(등록/수정/삭제): 메서드가 직접 트랜잭션을 연다
    - 잔액/이력 쓰기(save_account_state, append_record): 커밋하지 않음.
      LedgerEngine의 트랜잭션 안에서만 호출

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def create_account(
        self,
        employee_number: str,
        name: str = "",
        user_id: str | None = None,
    ) -> EmployeeAccount:
        """직원 계정 등록 (잔액 0)

        Args:
            employee_number: 사번 (고유)
            name: 이름
            user_id: 외부 사용자 ID (고유, 선택)

        Returns:
            생성된 계정

        Raises:
            DuplicateAccountError: 사번 또는 user_id 중복
        """
        if not employee_number:
            raise ValueError("employee_number는 비어 있을 수 없습니다")

        try:
            async with self.db.transaction():
                cursor = await self.db.execute(
                    """
                    INSERT INTO employee_account (employee_number, name, user_id)
                    VALUES (?, ?, ?)
                    """,
                    (employee_number, name, user_id),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateAccountError(
                f"이미 등록된 직원입니다: {employee_number}",
                {"employee_number": employee_number, "user_id": user_id},
            ) from e

        account_id = cursor.lastrowid
        logger.info(
            f"직원 계정 등록: {employee_number}",
            extra={"account_id": account_id},
        )

        account = await self.get_account(account_id)
        assert account is not None
        return account

    async def get_account(self, account_id: int) -> EmployeeAccount | None:
        """계정 조회 (ID)"""
        row = await self.db.fetchone(
            f"SELECT {ACCOUNT_COLUMNS} FROM employee_account WHERE id = ?",
            (account_id,),
        )
        return EmployeeAccount.from_row(row) if row else None

    async def get_account_by_employee_number(
        self,
        employee_number: str,
    ) -> EmployeeAccount | None:
        """계정 조회 (사번)"""
        row = await self.db.fetchone(
            f"SELECT {ACCOUNT_COLUMNS} FROM employee_account WHERE employee_number = ?",
            (employee_number,),
        )
        return EmployeeAccount.from_row(row) if row else None

    async def get_account_by_user_id(self, user_id: str) -> EmployeeAccount | None:
        """계정 조회 (외부 사용자 ID)"""
        row = await self.db.fetchone(
            f"SELECT {ACCOUNT_COLUMNS} FROM employee_account WHERE user_id = ?",
            (user_id,),
        )
        return EmployeeAccount.from_row(row) if row else None

    async def list_accounts(
        self,
        limit: int = 100,
        offset: int = 0,
    ) -> list[EmployeeAccount]:
        """계정 목록 조회 (사번 순)"""
        rows = await self.db.fetchall(
            f"""
            SELECT {ACCOUNT_COLUMNS} FROM employee_account
            ORDER BY employee_number
            LIMIT ? OFFSET ?
            """,
            (limit, offset),
        )
        return [EmployeeAccount.from_row(row) for row in rows]

    async def update_profile(
        self,
        account_id: int,
        name: str | None = None,
        employee_number: str | None = None,
    ) -> EmployeeAccount:
        """이름/사번 수정

        잔액, 월 누적액, 버전은 건드리지 않음.

        Raises:
            AccountNotFoundError: 계정 없음
            DuplicateAccountError: 사번 중복
        """
        account = await self.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        try:
            async with self.db.transaction():
                await self.db.execute(
                    """
                    UPDATE employee_account
                    SET name = ?, employee_number = ?, updated_at = datetime('now')
                    WHERE id = ?
                    """,
                    (
                        name if name is not None else account.name,
                        employee_number or account.employee_number,
                        account_id,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateAccountError(
                f"이미 사용 중인 사번입니다: {employee_number}",
                {"employee_number": employee_number},
            ) from e

        updated = await self.get_account(account_id)
        assert updated is not None
        return updated

    async def delete_account(self, account_id: int) -> None:
        """계정 삭제

        거래 이력이나 주문이 있으면 거부.

        Raises:
            AccountNotFoundError: 계정 없음
            AccountInUseError: 이력/주문 존재
        """
        async with self.db.transaction():
            if await self.get_account(account_id) is None:
                raise AccountNotFoundError(account_id)

            record_count = await self.count_records(account_id)
            order_row = await self.db.fetchone(
                "SELECT COUNT(*) FROM cafeteria_order WHERE account_id = ?",
                (account_id,),
            )
            order_count = order_row[0] if order_row else 0

            if record_count or order_count:
                raise AccountInUseError(
                    f"거래 이력 또는 주문이 있는 계정은 삭제할 수 없습니다: {account_id}",
                    {
                        "account_id": account_id,
                        "record_count": record_count,
                        "order_count": order_count,
                    },
                )

            await self.db.execute(
                "DELETE FROM employee_account WHERE id = ?",
                (account_id,),
            )

        logger.info("직원 계정 삭제", extra={"account_id": account_id})

    async def save_account_state(self, account: EmployeeAccount) -> int:
        """잔액/월 누적 상태 저장 (낙관적 락)

        account.version이 DB 값과 같을 때만 갱신하고 version을 1 올린다.
        커밋하지 않음 (트랜잭션 안에서 호출).

        Args:
            account: 로드 시점 version을 가진 계정

        Returns:
            새 version

        Raises:
            VersionConflictError: 다른 작업이 먼저 갱신한 경우
        """
        cursor = await self.db.execute(
            """
            UPDATE employee_account
            SET balance = ?,
                monthly_deposit_total = ?,
                last_deposit_month = ?,
                version = version + 1,
                updated_at = datetime('now')
            WHERE id = ? AND version = ?
            """,
            (
                str(account.balance),
                str(account.monthly_deposit_total),
                account.last_deposit_month,
                account.id,
                account.version,
            ),
        )

        if cursor.rowcount != 1:
            raise VersionConflictError(account.id, account.version)

        return account.version + 1

    # -------------------------------------------------------------------------
    # 거래 이력
    # -------------------------------------------------------------------------

    async def append_record(self, record: TransactionRecord) -> TransactionRecord:
        """거래 이력 추가 (append-only)

        커밋하지 않음 (트랜잭션 안에서 호출).

        Returns:
            id가 채워진 record
        """
        cursor = await self.db.execute(
            """
            INSERT INTO transaction_record (
                account_id, amount, ts, transaction_type,
                monthly_deposit_total, description, order_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.account_id,
                str(record.amount),
                to_iso(record.ts),
                record.transaction_type.value,
                (
                    str(record.monthly_deposit_total)
                    if record.monthly_deposit_total is not None
                    else None
                ),
                record.description,
                record.order_id,
            ),
        )
        record.id = cursor.lastrowid
        return record

    async def get_records(
        self,
        account_id: int,
        newest_first: bool = False,
        limit: int | None = None,
        offset: int = 0,
        transaction_types: tuple[TransactionType, ...] | None = None,
    ) -> list[TransactionRecord]:
        """계정별 거래 이력 조회

        Args:
            account_id: 계정 ID
            newest_first: True면 최신순, False면 오래된 순 (기본)
            limit: 조회 개수 제한 (None이면 전체)
            offset: 시작 위치
            transaction_types: 유형 필터 (None이면 전체)

        Returns:
            거래 이력 목록
        """
        sql = f"SELECT {RECORD_COLUMNS} FROM transaction_record WHERE account_id = ?"
        params: list[Any] = [account_id]

        if transaction_types:
            placeholders = ", ".join("?" for _ in transaction_types)
            sql += f" AND transaction_type IN ({placeholders})"
            params.extend(t.value for t in transaction_types)

        sql += " ORDER BY id DESC" if newest_first else " ORDER BY id ASC"

        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])
        elif offset:
            sql += " LIMIT -1 OFFSET ?"
            params.append(offset)

        rows = await self.db.fetchall(sql, tuple(params))
        return [TransactionRecord.from_row(row) for row in rows]

    async def count_records(self, account_id: int) -> int:
        """계정별 거래 이력 수"""
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM transaction_record WHERE account_id = ?",
            (account_id,),
        )
        return row[0] if row else 0

    async def sum_records(self, account_id: int) -> Decimal:
        """계정별 거래 금액 합계

        금액이 TEXT로 저장되므로 SQL SUM(부동소수점) 대신 Decimal로 합산.
        """
        rows = await self.db.fetchall(
            "SELECT amount FROM transaction_record WHERE account_id = ?",
            (account_id,),
        )
        return sum((Decimal(row[0]) for row in rows), Decimal("0"))
