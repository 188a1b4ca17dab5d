"""
월간 입금 보너스 계산

순수 함수만 포함 (DB 접근 없음).
월 누적 입금액이 threshold 배수를 새로 넘을 때마다 bonus_amount 지급.

예시 (threshold=250, bonus=500):
    0 → 260     : 보너스 1회 (500)
    249.99 → 250.01 : 보너스 1회 (500)
    200 → 800   : 보너스 3회 (1500)
"""

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import Decimal

from core.constants import BonusDefaults
from core.utils.timezone import to_business_tz


@dataclass(frozen=True)
class BonusPolicy:
    """보너스 정책 (불변)"""

    threshold: Decimal = BonusDefaults.THRESHOLD
    bonus_amount: Decimal = BonusDefaults.BONUS_AMOUNT

    def __post_init__(self) -> None:
        if self.threshold <= 0:
            raise ValueError(f"threshold는 0보다 커야 합니다: {self.threshold}")
        if self.bonus_amount <= 0:
            raise ValueError(f"bonus_amount는 0보다 커야 합니다: {self.bonus_amount}")


@dataclass(frozen=True)
class BonusCalculation:
    """보너스 계산 결과"""

    previous_total: Decimal
    new_total: Decimal
    tiers_crossed: int
    bonus_amount: Decimal


def month_key(dt: datetime, tz: tzinfo = timezone.utc) -> str:
    """월 키 반환 ("YYYY-MM")

    Args:
        dt: 기준 시각 (naive면 UTC로 간주)
        tz: 월 경계 판단 시간대

    Returns:
        "YYYY-MM" 형식 문자열
    """
    local = to_business_tz(dt, tz)
    return f"{local.year:04d}-{local.month:02d}"


def should_reset_monthly(
    last_month: str | None,
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> bool:
    """월 누적액 초기화 여부

    마지막 입금 월과 현재 월(업무 시간대 기준)이 다르면 True.
    입금 이력이 없으면(last_month=None) 항상 True.

    Args:
        last_month: 마지막 입금 월 ("YYYY-MM" 또는 None)
        now: 현재 시각
        tz: 월 경계 판단 시간대

    Returns:
        초기화 필요 여부
    """
    if last_month is None:
        return True
    return last_month != month_key(now, tz)


def tier_count(total: Decimal, policy: BonusPolicy) -> int:
    """누적액이 넘은 threshold 배수 개수 (floor)"""
    if total <= 0:
        return 0
    return int(total // policy.threshold)


def calculate_bonus(
    previous_total: Decimal,
    amount: Decimal,
    policy: BonusPolicy | None = None,
) -> BonusCalculation:
    """이번 입금으로 새로 넘은 구간에 대한 보너스 계산

    입금 건수가 아니라 넘은 경계 수만큼 지급.

    Args:
        previous_total: 이번 입금 전 월 누적액
        amount: 입금액 (양수)
        policy: 보너스 정책 (None이면 기본값)

    Returns:
        BonusCalculation
    """
    if policy is None:
        policy = BonusPolicy()

    new_total = previous_total + amount
    crossed = tier_count(new_total, policy) - tier_count(previous_total, policy)

    return BonusCalculation(
        previous_total=previous_total,
        new_total=new_total,
        tiers_crossed=crossed,
        bonus_amount=policy.bonus_amount * crossed,
    )
