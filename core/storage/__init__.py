"""
스토리지 모듈

식당/메뉴, 주문 저장소 인터페이스 제공
(직원 계정과 거래 이력은 core.ledger.store)
"""

from core.storage.errors import (
    DuplicateError,
    InUseError,
    InvalidOrderError,
    NotFoundError,
    StoreError,
)
from core.storage.order_store import Order, OrderLine, OrderStore
from core.storage.restaurant_store import MenuItem, Restaurant, RestaurantStore

__all__ = [
    "RestaurantStore",
    "Restaurant",
    "MenuItem",
    "OrderStore",
    "Order",
    "OrderLine",
    "StoreError",
    "NotFoundError",
    "DuplicateError",
    "InUseError",
    "InvalidOrderError",
]
