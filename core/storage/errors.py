"""
저장소 예외 정의

관리자 CRUD(직원, 식당, 메뉴, 주문)에서 사용
"""

from typing import Any


class StoreError(Exception):
    """저장소 예외 기본 클래스"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(StoreError):
    """엔티티 없음"""

    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(
            f"{entity}을(를) 찾을 수 없습니다: {entity_id}",
            {"entity": entity, "id": str(entity_id)},
        )


class DuplicateError(StoreError):
    """고유 키 중복"""

    pass


class InUseError(StoreError):
    """참조 중인 엔티티 삭제 시도"""

    pass


class InvalidOrderError(StoreError):
    """주문 검증 실패 (빈 주문, 수량 오류, 판매 중지 메뉴 등)"""

    pass
