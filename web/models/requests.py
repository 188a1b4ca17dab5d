"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 Decimal 정밀도 유지를 위해 문자열로 받는다.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class EmployeeCreateRequest(BaseModel):
    """직원 등록 요청"""

    employee_number: str = Field(..., min_length=1, description="사번 (고유)")
    name: str = Field(default="", description="이름")
    user_id: str | None = Field(default=None, description="외부 사용자 ID")


class EmployeeUpdateRequest(BaseModel):
    """직원 정보 수정 요청 (잔액은 수정 불가)"""

    name: str | None = Field(default=None, description="이름")
    employee_number: str | None = Field(default=None, description="사번")


class DepositRequest(BaseModel):
    """입금 요청"""

    amount: str = Field(..., description="입금 금액")
    occurred_at: datetime | None = Field(
        default=None,
        description="입금 시각 (None이면 서버 현재 시각)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [{"amount": "260.00"}]
        }
    }


class DepositByEmployeeNumberRequest(DepositRequest):
    """사번 기준 입금 요청"""

    employee_number: str = Field(..., min_length=1, description="사번")


class ChargeRequest(BaseModel):
    """차감 요청"""

    amount: str = Field(..., description="차감 금액")
    reason: str = Field(default="", description="차감 사유")


class RestaurantCreateRequest(BaseModel):
    """식당 등록 요청"""

    name: str = Field(..., min_length=1, description="식당 이름")
    location_description: str = Field(default="", description="위치 설명")
    contact_number: str = Field(default="", description="연락처")


class RestaurantUpdateRequest(BaseModel):
    """식당 수정 요청 (None이면 유지)"""

    name: str | None = None
    location_description: str | None = None
    contact_number: str | None = None


class MenuItemCreateRequest(BaseModel):
    """메뉴 추가 요청"""

    name: str = Field(..., min_length=1, description="메뉴 이름")
    price: str = Field(..., description="가격")
    description: str = Field(default="", description="설명")
    is_available: bool = Field(default=True, description="판매 여부")


class MenuItemUpdateRequest(BaseModel):
    """메뉴 수정 요청 (None이면 유지)"""

    name: str | None = None
    price: str | None = None
    description: str | None = None
    is_available: bool | None = None


class OrderItemRequest(BaseModel):
    """주문 항목"""

    menu_item_id: int = Field(..., description="메뉴 ID")
    quantity: int = Field(..., description="수량")


class OrderCreateRequest(BaseModel):
    """주문 요청

    가격은 서버의 메뉴 가격으로 계산 (클라이언트 가격 무시)
    """

    account_id: int = Field(..., description="직원 계정 ID")
    restaurant_id: int = Field(..., description="식당 ID")
    items: list[OrderItemRequest] = Field(default_factory=list, description="주문 항목")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "account_id": 1,
                    "restaurant_id": 1,
                    "items": [{"menu_item_id": 3, "quantity": 2}],
                }
            ]
        }
    }


class OrderStatusUpdateRequest(BaseModel):
    """주문 상태 변경 요청"""

    status: str = Field(..., description="Pending / Preparing / Completed / Cancelled")
