"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
여러 Web 요청이 같은 DB 파일에 동시에 접근 가능하도록 설정.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

logger = logging.getLogger(__name__)


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    if readonly:
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        conn = await aiosqlite.connect(db_path_str)

    # WAL 모드 설정
    await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    # 외래 키 제약 활성화
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저가 작업 단위(Unit of Work) 역할.

    하나의 어댑터(연결)를 여러 코루틴이 공유할 수 있으므로
    transaction()은 어댑터 단위 asyncio.Lock으로 직렬화된다.
    락은 재진입 불가: transaction() 안에서 다시 transaction()을 열면 안 됨.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (조회 전용 요청용)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction():
        await adapter.execute("INSERT INTO ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._tx_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """transaction() 블록 실행 중 여부"""
        return self._tx_lock.locked()

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.
        블록 전체 동안 어댑터 락을 보유.

        사용 예시:
        ```python
        async with adapter.transaction():
            await adapter.execute("UPDATE ...")
            await adapter.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        async with self._tx_lock:
            try:
                yield self._conn
                await self._conn.commit()
            except BaseException:
                await self._conn.rollback()
                raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    CREATE IF NOT EXISTS 패턴으로 여러 번 호출해도 안전.

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # employee_account (직원 계정 + 잔액)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS employee_account (
            id                    INTEGER PRIMARY KEY AUTOINCREMENT,
            employee_number       TEXT NOT NULL UNIQUE,
            name                  TEXT NOT NULL DEFAULT '',
            user_id               TEXT UNIQUE,

            balance               TEXT NOT NULL DEFAULT '0',
            monthly_deposit_total TEXT NOT NULL DEFAULT '0',
            last_deposit_month    TEXT,
            version               INTEGER NOT NULL DEFAULT 0,

            created_at            TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at            TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # transaction_record (거래 이력, append-only)
    # order_id는 FK 없이 참조만 보관 (취소 주문 삭제 후에도 이력 유지)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS transaction_record (
            id                    INTEGER PRIMARY KEY AUTOINCREMENT,
            account_id            INTEGER NOT NULL,
            amount                TEXT NOT NULL,
            ts                    TEXT NOT NULL,
            transaction_type      TEXT NOT NULL
                CHECK (transaction_type IN ('Deposit', 'Bonus', 'Charge')),
            monthly_deposit_total TEXT,
            description           TEXT,
            order_id              INTEGER,

            created_at            TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (account_id) REFERENCES employee_account(id)
        )
    """)

    # restaurant
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS restaurant (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            name                 TEXT NOT NULL,
            location_description TEXT NOT NULL DEFAULT '',
            contact_number       TEXT NOT NULL DEFAULT '',
            created_at           TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # menu_item
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS menu_item (
            id             INTEGER PRIMARY KEY AUTOINCREMENT,
            restaurant_id  INTEGER NOT NULL,
            name           TEXT NOT NULL,
            description    TEXT NOT NULL DEFAULT '',
            price          TEXT NOT NULL,
            is_available   INTEGER NOT NULL DEFAULT 1,
            created_at     TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (restaurant_id) REFERENCES restaurant(id) ON DELETE CASCADE
        )
    """)

    # cafeteria_order (order는 SQL 예약어)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS cafeteria_order (
            id             INTEGER PRIMARY KEY AUTOINCREMENT,
            account_id     INTEGER NOT NULL,
            restaurant_id  INTEGER NOT NULL,
            order_date     TEXT NOT NULL,
            total_amount   TEXT NOT NULL,
            status         TEXT NOT NULL DEFAULT 'Pending',
            created_at     TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at     TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (account_id) REFERENCES employee_account(id),
            FOREIGN KEY (restaurant_id) REFERENCES restaurant(id)
        )
    """)

    # order_item
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS order_item (
            id             INTEGER PRIMARY KEY AUTOINCREMENT,
            order_id       INTEGER NOT NULL,
            menu_item_id   INTEGER NOT NULL,
            quantity       INTEGER NOT NULL CHECK (quantity > 0),
            unit_price     TEXT NOT NULL,
            FOREIGN KEY (order_id) REFERENCES cafeteria_order(id) ON DELETE CASCADE,
            FOREIGN KEY (menu_item_id) REFERENCES menu_item(id)
        )
    """)

    # 이력 불변 보장 트리거
    await adapter.execute("""
        CREATE TRIGGER IF NOT EXISTS trg_transaction_record_no_update
        BEFORE UPDATE ON transaction_record
        BEGIN
            SELECT RAISE(ABORT, 'transaction_record is append-only');
        END
    """)

    await adapter.execute("""
        CREATE TRIGGER IF NOT EXISTS trg_transaction_record_no_delete
        BEFORE DELETE ON transaction_record
        BEGIN
            SELECT RAISE(ABORT, 'transaction_record is append-only');
        END
    """)

    # 인덱스 생성
    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transaction_record_account
        ON transaction_record(account_id, id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_menu_item_restaurant
        ON menu_item(restaurant_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_cafeteria_order_account
        ON cafeteria_order(account_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_order_item_order
        ON order_item(order_id)
    """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")
