"""
설정 로더

settings.yaml 로드 및 Ledger 정책 생성
"""

from dataclasses import dataclass
from datetime import timedelta, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from core.constants import BonusDefaults, Defaults, Paths
from core.ledger.bonus import BonusPolicy
from core.types import AppEnvironment


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str
    port: int


@dataclass(frozen=True)
class LedgerConfig:
    """Ledger 엔진 설정

    월 경계 판단은 utc_offset_hours 기준 업무 시간대로 계산
    """

    bonus_policy: BonusPolicy
    utc_offset_hours: int
    max_conflict_retries: int
    decimals: int = Defaults.AMOUNT_DECIMALS

    @property
    def business_tz(self) -> tzinfo:
        """월 경계 판단용 타임존"""
        return timezone(timedelta(hours=self.utc_offset_hours))


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    environment: AppEnvironment
    web: WebConfig
    ledger: LedgerConfig


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _parse_decimal(section: dict[str, Any], key: str, default: Decimal) -> Decimal:
    raw = section.get(key)
    if raw is None:
        return default
    try:
        value = Decimal(str(raw))
    except InvalidOperation as e:
        raise SettingsLoadError(f"ledger.{key} 값이 숫자가 아닙니다: {raw!r}") from e
    if value <= 0:
        raise SettingsLoadError(f"ledger.{key}는 0보다 커야 합니다: {raw!r}")
    return value


def parse_ledger_config(data: dict[str, Any] | None) -> LedgerConfig:
    """ledger 섹션 파싱

    Args:
        data: settings.yaml의 ledger 섹션 (None이면 기본값)

    Returns:
        LedgerConfig 인스턴스

    Raises:
        SettingsLoadError: 값이 유효하지 않은 경우
    """
    section = data or {}

    policy = BonusPolicy(
        threshold=_parse_decimal(section, "bonus_threshold", BonusDefaults.THRESHOLD),
        bonus_amount=_parse_decimal(section, "bonus_amount", BonusDefaults.BONUS_AMOUNT),
    )

    offset = section.get("utc_offset_hours", 0)
    if not isinstance(offset, int) or not -12 <= offset <= 14:
        raise SettingsLoadError(
            f"ledger.utc_offset_hours는 -12 ~ 14 사이 정수여야 합니다: {offset!r}"
        )

    retries = section.get("max_conflict_retries", Defaults.MAX_CONFLICT_RETRIES)
    if not isinstance(retries, int) or retries < 0:
        raise SettingsLoadError(
            f"ledger.max_conflict_retries는 0 이상 정수여야 합니다: {retries!r}"
        )

    decimals = section.get("decimals", Defaults.AMOUNT_DECIMALS)
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= 6:
        raise SettingsLoadError(
            f"ledger.decimals는 0 ~ 6 사이 정수여야 합니다: {decimals!r}"
        )

    return LedgerConfig(
        bonus_policy=policy,
        utc_offset_hours=offset,
        max_conflict_retries=retries,
        decimals=decimals,
    )


def load_settings_file(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 environment인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")

    env_str = data.get("environment")
    if env_str is None:
        raise SettingsLoadError("settings.yaml에 'environment' 필드가 없습니다")

    try:
        environment = AppEnvironment(env_str)
    except ValueError as e:
        valid = [env.value for env in AppEnvironment]
        raise ValueError(
            f"유효하지 않은 environment입니다: '{env_str}'. "
            f"유효한 값: {valid}"
        ) from e

    web_section = data.get("web") or {}
    web = WebConfig(
        host=web_section.get("host", Defaults.WEB_HOST),
        port=int(web_section.get("port", Defaults.WEB_PORT)),
    )

    return AppConfig(
        environment=environment,
        web=web,
        ledger=parse_ledger_config(data.get("ledger")),
    )


def get_db_path(environment: AppEnvironment | str) -> Path:
    """환경에 따른 DB 경로 반환

    Args:
        environment: 실행 환경 (production/development)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if isinstance(environment, str):
        environment = AppEnvironment(environment.lower())

    if environment == AppEnvironment.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_settings_file(settings_path)

    @property
    def environment(self) -> AppEnvironment:
        """현재 실행 환경"""
        assert self._config is not None
        return self._config.environment

    @property
    def web(self) -> WebConfig:
        """Web 서버 설정"""
        assert self._config is not None
        return self._config.web

    @property
    def ledger(self) -> LedgerConfig:
        """Ledger 엔진 설정"""
        assert self._config is not None
        return self._config.ledger

    @property
    def db_path(self) -> Path:
        """현재 환경의 DB 경로"""
        assert self._config is not None
        return get_db_path(self._config.environment)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
