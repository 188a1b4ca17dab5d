"""
RestaurantStore - 식당/메뉴 저장소

restaurant, menu_item 테이블 관리자 CRUD.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from core.constants import Defaults
from core.storage.errors import InUseError, NotFoundError

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class MenuItem:
    """메뉴 항목"""

    id: int
    restaurant_id: int
    name: str
    description: str
    price: Decimal
    is_available: bool

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> MenuItem:
        return cls(
            id=row[0],
            restaurant_id=row[1],
            name=row[2],
            description=row[3],
            price=Decimal(row[4]),
            is_available=bool(row[5]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "restaurant_id": self.restaurant_id,
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "is_available": self.is_available,
        }


@dataclass
class Restaurant:
    """식당"""

    id: int
    name: str
    location_description: str
    contact_number: str
    menu_items: list[MenuItem] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> Restaurant:
        return cls(
            id=row[0],
            name=row[1],
            location_description=row[2],
            contact_number=row[3],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "location_description": self.location_description,
            "contact_number": self.contact_number,
            "menu_items": [item.to_dict() for item in self.menu_items],
        }


_MENU_COLUMNS = "id, restaurant_id, name, description, price, is_available"


def _to_price(value: Decimal | int | str) -> Decimal:
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"가격이 숫자가 아닙니다: {value!r}") from e
    if not price.is_finite() or price <= 0:
        raise ValueError(f"가격은 0보다 커야 합니다: {value}")
    if price > Defaults.MAX_AMOUNT:
        raise ValueError(f"가격이 상한({Defaults.MAX_AMOUNT})을 넘습니다: {value}")
    if price != price.quantize(Decimal(1).scaleb(-Defaults.AMOUNT_DECIMALS)):
        raise ValueError(f"가격은 소수점 {Defaults.AMOUNT_DECIMALS}자리까지 허용됩니다: {value}")
    return price


class RestaurantStore:
    """식당/메뉴 저장소

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    store = RestaurantStore(db)
    restaurant = await store.create_restaurant("본관 식당", "1층", "02-000-0000")
    item = await store.add_menu_item(restaurant.id, "비빔밥", Decimal("8.50"))
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 식당
    # -------------------------------------------------------------------------

    async def create_restaurant(
        self,
        name: str,
        location_description: str = "",
        contact_number: str = "",
    ) -> Restaurant:
        """식당 등록"""
        if not name:
            raise ValueError("식당 이름은 비어 있을 수 없습니다")

        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                INSERT INTO restaurant (name, location_description, contact_number)
                VALUES (?, ?, ?)
                """,
                (name, location_description, contact_number),
            )

        logger.info(f"식당 등록: {name}", extra={"restaurant_id": cursor.lastrowid})
        return Restaurant(
            id=cursor.lastrowid,
            name=name,
            location_description=location_description,
            contact_number=contact_number,
        )

    async def get_restaurant(
        self,
        restaurant_id: int,
        include_menu: bool = True,
    ) -> Restaurant | None:
        """식당 조회 (메뉴 포함)"""
        row = await self.db.fetchone(
            """
            SELECT id, name, location_description, contact_number
            FROM restaurant WHERE id = ?
            """,
            (restaurant_id,),
        )
        if row is None:
            return None

        restaurant = Restaurant.from_row(row)
        if include_menu:
            restaurant.menu_items = await self.list_menu_items(restaurant_id)
        return restaurant

    async def list_restaurants(self, include_menu: bool = False) -> list[Restaurant]:
        """식당 목록 (이름 순)"""
        rows = await self.db.fetchall(
            """
            SELECT id, name, location_description, contact_number
            FROM restaurant ORDER BY name, id
            """
        )
        restaurants = [Restaurant.from_row(row) for row in rows]

        if include_menu:
            for restaurant in restaurants:
                restaurant.menu_items = await self.list_menu_items(restaurant.id)

        return restaurants

    async def update_restaurant(
        self,
        restaurant_id: int,
        name: str | None = None,
        location_description: str | None = None,
        contact_number: str | None = None,
    ) -> Restaurant:
        """식당 정보 수정 (None인 필드는 유지)"""
        current = await self.get_restaurant(restaurant_id, include_menu=False)
        if current is None:
            raise NotFoundError("restaurant", restaurant_id)

        updated = Restaurant(
            id=restaurant_id,
            name=name or current.name,
            location_description=(
                location_description
                if location_description is not None
                else current.location_description
            ),
            contact_number=(
                contact_number if contact_number is not None else current.contact_number
            ),
        )

        async with self.db.transaction():
            await self.db.execute(
                """
                UPDATE restaurant
                SET name = ?, location_description = ?, contact_number = ?
                WHERE id = ?
                """,
                (
                    updated.name,
                    updated.location_description,
                    updated.contact_number,
                    restaurant_id,
                ),
            )

        updated.menu_items = await self.list_menu_items(restaurant_id)
        return updated

    async def delete_restaurant(self, restaurant_id: int) -> None:
        """식당 삭제 (메뉴 함께 삭제)

        주문 이력이 있으면 거부.
        """
        async with self.db.transaction():
            if await self.get_restaurant(restaurant_id, include_menu=False) is None:
                raise NotFoundError("restaurant", restaurant_id)

            row = await self.db.fetchone(
                "SELECT COUNT(*) FROM cafeteria_order WHERE restaurant_id = ?",
                (restaurant_id,),
            )
            if row and row[0]:
                raise InUseError(
                    f"주문 이력이 있는 식당은 삭제할 수 없습니다: {restaurant_id}",
                    {"restaurant_id": restaurant_id, "order_count": row[0]},
                )

            await self.db.execute("DELETE FROM restaurant WHERE id = ?", (restaurant_id,))

        logger.info("식당 삭제", extra={"restaurant_id": restaurant_id})

    # -------------------------------------------------------------------------
    # 메뉴
    # -------------------------------------------------------------------------

    async def add_menu_item(
        self,
        restaurant_id: int,
        name: str,
        price: Decimal | int | str,
        description: str = "",
        is_available: bool = True,
    ) -> MenuItem:
        """메뉴 추가

        Raises:
            NotFoundError: 식당 없음
            ValueError: 이름이 비었거나 가격이 0 이하
        """
        if not name:
            raise ValueError("메뉴 이름은 비어 있을 수 없습니다")
        value = _to_price(price)

        if await self.get_restaurant(restaurant_id, include_menu=False) is None:
            raise NotFoundError("restaurant", restaurant_id)

        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                INSERT INTO menu_item (restaurant_id, name, description, price, is_available)
                VALUES (?, ?, ?, ?, ?)
                """,
                (restaurant_id, name, description, str(value), int(is_available)),
            )

        return MenuItem(
            id=cursor.lastrowid,
            restaurant_id=restaurant_id,
            name=name,
            description=description,
            price=value,
            is_available=is_available,
        )

    async def get_menu_item(self, item_id: int) -> MenuItem | None:
        row = await self.db.fetchone(
            f"SELECT {_MENU_COLUMNS} FROM menu_item WHERE id = ?",
            (item_id,),
        )
        return MenuItem.from_row(row) if row else None

    async def get_menu_items(self, item_ids: list[int]) -> dict[int, MenuItem]:
        """여러 메뉴 조회 (id → MenuItem)"""
        if not item_ids:
            return {}

        placeholders = ", ".join("?" for _ in item_ids)
        rows = await self.db.fetchall(
            f"SELECT {_MENU_COLUMNS} FROM menu_item WHERE id IN ({placeholders})",
            tuple(item_ids),
        )
        return {row[0]: MenuItem.from_row(row) for row in rows}

    async def list_menu_items(
        self,
        restaurant_id: int,
        available_only: bool = False,
    ) -> list[MenuItem]:
        sql = f"SELECT {_MENU_COLUMNS} FROM menu_item WHERE restaurant_id = ?"
        if available_only:
            sql += " AND is_available = 1"
        sql += " ORDER BY name, id"

        rows = await self.db.fetchall(sql, (restaurant_id,))
        return [MenuItem.from_row(row) for row in rows]

    async def update_menu_item(
        self,
        item_id: int,
        name: str | None = None,
        price: Decimal | int | str | None = None,
        description: str | None = None,
        is_available: bool | None = None,
    ) -> MenuItem:
        """메뉴 수정

        가격 변경은 이후 주문에만 적용 (기존 주문은 order_item.unit_price 유지)
        """
        current = await self.get_menu_item(item_id)
        if current is None:
            raise NotFoundError("menu_item", item_id)

        updated = MenuItem(
            id=item_id,
            restaurant_id=current.restaurant_id,
            name=name or current.name,
            description=description if description is not None else current.description,
            price=_to_price(price) if price is not None else current.price,
            is_available=is_available if is_available is not None else current.is_available,
        )

        async with self.db.transaction():
            await self.db.execute(
                """
                UPDATE menu_item
                SET name = ?, description = ?, price = ?, is_available = ?
                WHERE id = ?
                """,
                (
                    updated.name,
                    updated.description,
                    str(updated.price),
                    int(updated.is_available),
                    item_id,
                ),
            )

        return updated

    async def delete_menu_item(self, item_id: int) -> None:
        """메뉴 삭제

        주문에 사용된 메뉴는 삭제 대신 is_available=False로 판매 중지해야 함.
        """
        if await self.get_menu_item(item_id) is None:
            raise NotFoundError("menu_item", item_id)

        try:
            async with self.db.transaction():
                await self.db.execute("DELETE FROM menu_item WHERE id = ?", (item_id,))
        except sqlite3.IntegrityError as e:
            raise InUseError(
                f"주문에 사용된 메뉴는 삭제할 수 없습니다: {item_id}",
                {"menu_item_id": item_id},
            ) from e
