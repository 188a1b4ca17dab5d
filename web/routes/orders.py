"""
Orders 라우트

주문 생성(결제 포함), 조회, 상태 변경
"""

from fastapi import APIRouter, Depends, Query

from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from core.storage.errors import NotFoundError, StoreError
from core.storage.order_store import Order, OrderStore
from web.dependencies import get_engine, get_order_store
from web.errors import bad_request, ledger_error_to_http, store_error_to_http
from web.models.requests import OrderCreateRequest, OrderStatusUpdateRequest
from web.models.responses import OrderListResponse, OrderResponse
from web.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["Orders"])


def _to_response(order: Order) -> OrderResponse:
    return OrderResponse(**order.to_dict())


@router.post("", response_model=OrderResponse, status_code=201)
async def place_order(
    request: OrderCreateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> OrderResponse:
    """주문 생성 및 잔액 차감

    잔액 부족이면 409, 주문은 저장되지 않음.
    """
    service = OrderService(engine)
    try:
        order = await service.place_order(
            request.account_id,
            request.restaurant_id,
            [(item.menu_item_id, item.quantity) for item in request.items],
        )
    except LedgerError as e:
        raise ledger_error_to_http(e)
    except StoreError as e:
        raise store_error_to_http(e)
    return _to_response(order)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    account_id: int | None = Query(default=None, description="직원 계정 필터"),
    limit: int = Query(default=100, ge=1, le=500, description="조회 제한"),
    offset: int = Query(default=0, ge=0, description="건너뛸 개수"),
    store: OrderStore = Depends(get_order_store),
) -> OrderListResponse:
    """주문 목록 (최신순)"""
    if account_id is not None:
        orders = await store.list_orders_by_account(account_id, limit=limit, offset=offset)
    else:
        orders = await store.list_orders(limit=limit, offset=offset)

    return OrderListResponse(
        orders=[_to_response(o) for o in orders],
        limit=limit,
        offset=offset,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    store: OrderStore = Depends(get_order_store),
) -> OrderResponse:
    """주문 상세"""
    order = await store.get_order(order_id)
    if order is None:
        raise store_error_to_http(NotFoundError("order", order_id))
    return _to_response(order)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    request: OrderStatusUpdateRequest,
    store: OrderStore = Depends(get_order_store),
) -> OrderResponse:
    """주문 상태 변경 (취소해도 환불 없음)"""
    try:
        order = await store.update_status(order_id, request.status)
    except StoreError as e:
        raise store_error_to_http(e)
    except ValueError as e:
        raise bad_request(e)
    return _to_response(order)


@router.delete("/{order_id}", status_code=204)
async def delete_order(
    order_id: int,
    store: OrderStore = Depends(get_order_store),
) -> None:
    """주문 삭제 (Cancelled 상태만)"""
    try:
        await store.delete_order(order_id)
    except StoreError as e:
        raise store_error_to_http(e)
