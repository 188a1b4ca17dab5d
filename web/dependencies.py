"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
테스트에서는 app.dependency_overrides로 DB/설정을 교체한다.
"""

from typing import AsyncGenerator

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import LedgerConfig, Settings, get_settings
from core.ledger.engine import LedgerEngine
from core.storage.order_store import OrderStore
from core.storage.restaurant_store import RestaurantStore


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


def get_ledger_config(settings: Settings = Depends(get_app_settings)) -> LedgerConfig:
    """Ledger 엔진 설정 반환"""
    return settings.ledger


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    조회 API에서 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    입금/차감, 주문, 관리자 CRUD 시 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


def get_engine(
    db: SQLiteAdapter = Depends(get_db_write),
    config: LedgerConfig = Depends(get_ledger_config),
) -> LedgerEngine:
    """Ledger 엔진 반환 (쓰기 가능 DB)"""
    return LedgerEngine.from_config(db, config)


def get_read_engine(
    db: SQLiteAdapter = Depends(get_db),
    config: LedgerConfig = Depends(get_ledger_config),
) -> LedgerEngine:
    """Ledger 엔진 반환 (읽기 전용 DB, 조회 전용)"""
    return LedgerEngine.from_config(db, config)


def get_restaurant_store(db: SQLiteAdapter = Depends(get_db_write)) -> RestaurantStore:
    """식당/메뉴 저장소 반환"""
    return RestaurantStore(db)


def get_order_store(db: SQLiteAdapter = Depends(get_db_write)) -> OrderStore:
    """주문 저장소 반환"""
    return OrderStore(db)
