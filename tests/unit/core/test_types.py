"""
core/types.py 테스트

모든 Enum이 문자열 직렬화 가능한지 확인
"""

import pytest

from core.types import AppEnvironment, OrderStatus


class TestAppEnvironment:
    """AppEnvironment 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert AppEnvironment.PRODUCTION.value == "production"
        assert AppEnvironment.DEVELOPMENT.value == "development"

    def test_from_string(self) -> None:
        assert AppEnvironment("development") is AppEnvironment.DEVELOPMENT

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            AppEnvironment("staging")


class TestOrderStatus:
    """OrderStatus 테스트"""

    def test_values(self) -> None:
        assert [s.value for s in OrderStatus] == [
            "Pending",
            "Preparing",
            "Completed",
            "Cancelled",
        ]

    def test_str_comparison(self) -> None:
        """str 상속으로 문자열과 비교 가능"""
        assert OrderStatus.CANCELLED == "Cancelled"

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            OrderStatus("Refunded")
