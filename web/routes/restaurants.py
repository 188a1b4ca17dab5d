"""
Restaurants 라우트

식당 / 메뉴 관리 API
"""

from fastapi import APIRouter, Depends, Query

from core.storage.errors import NotFoundError, StoreError
from core.storage.restaurant_store import RestaurantStore
from web.dependencies import get_restaurant_store
from web.errors import bad_request, store_error_to_http
from web.models.requests import (
    MenuItemCreateRequest,
    MenuItemUpdateRequest,
    RestaurantCreateRequest,
    RestaurantUpdateRequest,
)
from web.models.responses import MenuItemResponse, RestaurantResponse

router = APIRouter(prefix="/api/restaurants", tags=["Restaurants"])


@router.post("", response_model=RestaurantResponse, status_code=201)
async def create_restaurant(
    request: RestaurantCreateRequest,
    store: RestaurantStore = Depends(get_restaurant_store),
) -> RestaurantResponse:
    """식당 등록"""
    try:
        restaurant = await store.create_restaurant(
            name=request.name,
            location_description=request.location_description,
            contact_number=request.contact_number,
        )
    except ValueError as e:
        raise bad_request(e)
    return RestaurantResponse(**restaurant.to_dict())


@router.get("", response_model=list[RestaurantResponse])
async def list_restaurants(
    include_menu: bool = Query(default=False, description="메뉴 포함 여부"),
    store: RestaurantStore = Depends(get_restaurant_store),
) -> list[RestaurantResponse]:
    """식당 목록"""
    restaurants = await store.list_restaurants(include_menu=include_menu)
    return [RestaurantResponse(**r.to_dict()) for r in restaurants]


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(
    restaurant_id: int,
    store: RestaurantStore = Depends(get_restaurant_store),
) -> RestaurantResponse:
    """식당 상세 (메뉴 포함)"""
    restaurant = await store.get_restaurant(restaurant_id)
    if restaurant is None:
        raise store_error_to_http(NotFoundError("restaurant", restaurant_id))
    return RestaurantResponse(**restaurant.to_dict())


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
async def update_restaurant(
    restaurant_id: int,
    request: RestaurantUpdateRequest,
    store: RestaurantStore = Depends(get_restaurant_store),
) -> RestaurantResponse:
    """식당 수정"""
    try:
        restaurant = await store.update_restaurant(
            restaurant_id,
            name=request.name,
            location_description=request.location_description,
            contact_number=request.contact_number,
        )
    except StoreError as e:
        raise store_error_to_http(e)
    return RestaurantResponse(**restaurant.to_dict())


@router.delete("/{restaurant_id}", status_code=204)
async def delete_restaurant(
    restaurant_id: int,
    store: RestaurantStore = Depends(get_restaurant_store),
) -> None:
    """식당 삭제 (주문이 없는 경우만, 메뉴는 함께 삭제)"""
    try:
        await store.delete_restaurant(restaurant_id)
    except StoreError as e:
        raise store_error_to_http(e)


# =========================================================================
# 메뉴
# =========================================================================


@router.post("/{restaurant_id}/menu", response_model=MenuItemResponse, status_code=201)
async def add_menu_item(
    restaurant_id: int,
    request: MenuItemCreateRequest,
    store: RestaurantStore = Depends(get_restaurant_store),
) -> MenuItemResponse:
    """메뉴 추가"""
    try:
        item = await store.add_menu_item(
            restaurant_id,
            name=request.name,
            price=request.price,
            description=request.description,
            is_available=request.is_available,
        )
    except StoreError as e:
        raise store_error_to_http(e)
    except ValueError as e:
        raise bad_request(e)
    return MenuItemResponse(**item.to_dict())


@router.get("/{restaurant_id}/menu", response_model=list[MenuItemResponse])
async def list_menu_items(
    restaurant_id: int,
    available_only: bool = Query(default=False, description="판매 중인 메뉴만"),
    store: RestaurantStore = Depends(get_restaurant_store),
) -> list[MenuItemResponse]:
    """메뉴 목록"""
    if await store.get_restaurant(restaurant_id, include_menu=False) is None:
        raise store_error_to_http(NotFoundError("restaurant", restaurant_id))

    items = await store.list_menu_items(restaurant_id, available_only=available_only)
    return [MenuItemResponse(**item.to_dict()) for item in items]


async def _check_menu_item(store: RestaurantStore, restaurant_id: int, item_id: int) -> None:
    item = await store.get_menu_item(item_id)
    if item is None or item.restaurant_id != restaurant_id:
        raise store_error_to_http(NotFoundError("menu_item", item_id))


@router.put("/{restaurant_id}/menu/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    restaurant_id: int,
    item_id: int,
    request: MenuItemUpdateRequest,
    store: RestaurantStore = Depends(get_restaurant_store),
) -> MenuItemResponse:
    """메뉴 수정 (가격 변경은 이후 주문부터 적용)"""
    await _check_menu_item(store, restaurant_id, item_id)
    try:
        item = await store.update_menu_item(
            item_id,
            name=request.name,
            price=request.price,
            description=request.description,
            is_available=request.is_available,
        )
    except StoreError as e:
        raise store_error_to_http(e)
    except ValueError as e:
        raise bad_request(e)
    return MenuItemResponse(**item.to_dict())


@router.delete("/{restaurant_id}/menu/{item_id}", status_code=204)
async def delete_menu_item(
    restaurant_id: int,
    item_id: int,
    store: RestaurantStore = Depends(get_restaurant_store),
) -> None:
    """메뉴 삭제 (주문에 사용된 메뉴는 409, 판매 중지로 대체)"""
    await _check_menu_item(store, restaurant_id, item_id)
    try:
        await store.delete_menu_item(item_id)
    except StoreError as e:
        raise store_error_to_http(e)
