"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화 (금액은 문자열)
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    environment: str = Field(..., description="실행 환경 (production/development)")
    version: str = Field(..., description="API 버전")


class EmployeeResponse(BaseModel):
    """직원 계정 응답"""

    id: int
    employee_number: str
    name: str
    user_id: str | None = None
    balance: str = Field(..., description="사용 가능 잔액")
    monthly_deposit_total: str = Field(..., description="저장된 월 누적 입금액")
    last_deposit_month: str | None = Field(default=None, description="마지막 입금 월 (YYYY-MM)")
    version: int
    created_at: str | None = None
    updated_at: str | None = None


class EmployeeListResponse(BaseModel):
    employees: list[EmployeeResponse] = Field(default_factory=list)
    limit: int
    offset: int


class TransactionRecordResponse(BaseModel):
    """거래 이력 응답"""

    id: int | None
    account_id: int
    amount: str
    ts: str
    transaction_type: str
    monthly_deposit_total: str | None = None
    description: str | None = None
    order_id: int | None = None


class DepositResponse(BaseModel):
    """입금 결과 응답"""

    account_id: int
    new_balance: str
    monthly_total: str
    applied_bonus: str
    records: list[TransactionRecordResponse]


class ChargeResponse(BaseModel):
    """차감 결과 응답"""

    account_id: int
    new_balance: str
    record: TransactionRecordResponse


class HistoryResponse(BaseModel):
    """거래 이력 목록 응답"""

    account_id: int
    records: list[TransactionRecordResponse] = Field(default_factory=list)
    order: str = Field(..., description="asc (오래된 순) / desc (최신순)")
    limit: int | None = None
    offset: int = 0


class DepositHistoryResponse(BaseModel):
    """입금 이력 화면 응답"""

    account_id: int
    employee_number: str
    current_balance: str
    monthly_deposit_total: str = Field(..., description="이번 달 누적 입금액 (월 경계 반영)")
    deposits: list[TransactionRecordResponse] = Field(default_factory=list)


class ReconciliationResponse(BaseModel):
    """잔액 대사 응답"""

    account_id: int
    balance: str
    history_total: str
    record_count: int
    is_balanced: bool


class MenuItemResponse(BaseModel):
    id: int
    restaurant_id: int
    name: str
    description: str
    price: str
    is_available: bool


class RestaurantResponse(BaseModel):
    id: int
    name: str
    location_description: str
    contact_number: str
    menu_items: list[MenuItemResponse] = Field(default_factory=list)


class OrderLineResponse(BaseModel):
    id: int | None
    menu_item_id: int
    menu_item_name: str | None = None
    quantity: int
    unit_price: str
    line_total: str


class OrderResponse(BaseModel):
    """주문 응답"""

    id: int
    account_id: int
    employee_number: str | None = None
    restaurant_id: int
    order_date: str
    total_amount: str
    status: str
    items: list[OrderLineResponse] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
    limit: int
    offset: int
