"""
pytest 공통 fixture 정의

임시 DB(스키마 포함), Ledger 엔진, 설정 파일
"""

import tempfile
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import Settings
from core.ledger.engine import LedgerEngine
from core.ledger.models import EmployeeAccount
from core.ledger.store import LedgerStore

# 테스트 기준 시각 (월 중순, UTC)
FIXED_NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """테스트용 시계 (now 값을 직접 변경)"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = """# 테스트용 settings.yaml
environment: development

web:
  host: 127.0.0.1
  port: 8100

ledger:
  bonus_threshold: "250"
  bonus_amount: "500"
  utc_offset_hours: 9
  max_conflict_retries: 5
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """각 테스트 전후 Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "ledger_test.db"


@pytest_asyncio.fixture
async def db(db_path: Path) -> AsyncIterator[SQLiteAdapter]:
    """스키마가 생성된 임시 DB"""
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(db: SQLiteAdapter, clock: FakeClock) -> LedgerEngine:
    """기본 정책(250/500, UTC) Ledger 엔진"""
    return LedgerEngine(db, clock=clock)


@pytest.fixture
def store(db: SQLiteAdapter) -> LedgerStore:
    return LedgerStore(db)


@pytest_asyncio.fixture
async def account(store: LedgerStore) -> EmployeeAccount:
    """잔액 0인 직원 계정"""
    return await store.create_account("E1001", name="홍길동", user_id="user-1001")
