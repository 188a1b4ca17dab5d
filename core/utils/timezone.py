"""
타임존 유틸리티

내부 저장: UTC | 월 경계 판단: 업무 시간대 원칙 준수를 위한 헬퍼 함수
"""

from datetime import datetime, timezone, tzinfo


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        UTC 타임존의 datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_business_tz(dt: datetime, tz: tzinfo) -> datetime:
    """UTC datetime을 업무 시간대로 변환

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)
        tz: 업무 시간대

    Returns:
        업무 시간대의 datetime

    Example:
        >>> from datetime import timedelta
        >>> kst = timezone(timedelta(hours=9))
        >>> to_business_tz(datetime(2026, 1, 31, 16, 0), kst).month
        2
    """
    return ensure_utc(dt).astimezone(tz)


def to_iso(dt: datetime) -> str:
    """저장용 ISO 문자열 (UTC)"""
    return ensure_utc(dt).isoformat()


def from_iso(value: str) -> datetime:
    """저장된 ISO 문자열을 UTC datetime으로 변환"""
    return ensure_utc(datetime.fromisoformat(value))
