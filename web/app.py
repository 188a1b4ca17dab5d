"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config.loader import get_settings
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import employees, health, ledger, orders, restaurants  # noqa: E402
from web.routes.health import API_VERSION  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema

    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)
        schema_ready = await db.table_exists("transaction_record")

    if not schema_ready:
        logger.error(f"스키마 초기화 실패: transaction_record 없음 ({settings.db_path})")

    logger.info(
        f"Web 시작: environment={settings.environment.value}",
        extra={"db_path": str(settings.db_path), "schema_ready": schema_ready},
    )

    yield

    logger.info("Web 종료")


app = FastAPI(
    title="Cafeteria Ledger API",
    description="직원 식당 잔액/보너스 Ledger 및 주문 API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(employees.router)
app.include_router(ledger.router)
app.include_router(restaurants.router)
app.include_router(orders.router)
