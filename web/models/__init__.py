"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    ChargeRequest,
    DepositByEmployeeNumberRequest,
    DepositRequest,
    EmployeeCreateRequest,
    EmployeeUpdateRequest,
    MenuItemCreateRequest,
    MenuItemUpdateRequest,
    OrderCreateRequest,
    OrderItemRequest,
    OrderStatusUpdateRequest,
    RestaurantCreateRequest,
    RestaurantUpdateRequest,
)
from web.models.responses import (
    ChargeResponse,
    DepositHistoryResponse,
    DepositResponse,
    EmployeeListResponse,
    EmployeeResponse,
    HealthResponse,
    HistoryResponse,
    MenuItemResponse,
    OrderListResponse,
    OrderResponse,
    ReconciliationResponse,
    RestaurantResponse,
    TransactionRecordResponse,
)

__all__ = [
    # Requests
    "EmployeeCreateRequest",
    "EmployeeUpdateRequest",
    "DepositRequest",
    "DepositByEmployeeNumberRequest",
    "ChargeRequest",
    "RestaurantCreateRequest",
    "RestaurantUpdateRequest",
    "MenuItemCreateRequest",
    "MenuItemUpdateRequest",
    "OrderItemRequest",
    "OrderCreateRequest",
    "OrderStatusUpdateRequest",
    # Responses
    "HealthResponse",
    "EmployeeResponse",
    "EmployeeListResponse",
    "TransactionRecordResponse",
    "DepositResponse",
    "ChargeResponse",
    "HistoryResponse",
    "DepositHistoryResponse",
    "ReconciliationResponse",
    "MenuItemResponse",
    "RestaurantResponse",
    "OrderResponse",
    "OrderListResponse",
]
