"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 낙관적 락 충돌 시 재시도 횟수
    MAX_CONFLICT_RETRIES: int = 3

    # 이력 조회 기본 개수
    HISTORY_LIMIT: int = 100

    # 금액 소수 자릿수 / 1회 입금·차감·메뉴 가격 상한
    AMOUNT_DECIMALS: int = 2
    MAX_AMOUNT: Decimal = Decimal("1000000")

    # 주문 항목당 최대 수량
    MAX_ORDER_QUANTITY: int = 100


class BonusDefaults:
    """월간 입금 보너스 기본값

    월 누적 입금액이 THRESHOLD 배수를 넘을 때마다 BONUS_AMOUNT 지급
    """

    THRESHOLD: Decimal = Decimal("250")
    BONUS_AMOUNT: Decimal = Decimal("500")


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "cafeteria_prod.db"
    DEV_DB: Path = DATA_DIR / "cafeteria_dev.db"
