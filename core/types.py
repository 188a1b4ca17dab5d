"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class AppEnvironment(str, Enum):
    """실행 환경 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class OrderStatus(str, Enum):
    """주문 상태"""

    PENDING = "Pending"
    PREPARING = "Preparing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
