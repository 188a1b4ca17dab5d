"""
OrderStore - 주문 저장소

cafeteria_order, order_item 테이블 관리.
주문 생성(insert_order)은 결제 차감과 같은 트랜잭션에서 실행되어야 하므로
커밋하지 않는다. 주문 생성 흐름은 OrderService 참고.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.storage.errors import InUseError, NotFoundError
from core.types import OrderStatus
from core.utils.timezone import from_iso, to_iso

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class OrderLine:
    """주문 항목"""

    menu_item_id: int
    quantity: int
    unit_price: Decimal
    menu_item_name: str | None = None
    id: int | None = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "menu_item_id": self.menu_item_id,
            "menu_item_name": self.menu_item_name,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "line_total": str(self.line_total),
        }


@dataclass
class Order:
    """주문"""

    id: int
    account_id: int
    restaurant_id: int
    order_date: datetime
    total_amount: Decimal
    status: OrderStatus
    items: list[OrderLine] = field(default_factory=list)
    employee_number: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "employee_number": self.employee_number,
            "restaurant_id": self.restaurant_id,
            "order_date": self.order_date.isoformat(),
            "total_amount": str(self.total_amount),
            "status": self.status.value,
            "items": [item.to_dict() for item in self.items],
        }


_ORDER_SELECT = """
    SELECT o.id, o.account_id, o.restaurant_id, o.order_date,
           o.total_amount, o.status, a.employee_number
    FROM cafeteria_order o
    LEFT JOIN employee_account a ON a.id = o.account_id
"""


def _order_from_row(row: tuple[Any, ...]) -> Order:
    return Order(
        id=row[0],
        account_id=row[1],
        restaurant_id=row[2],
        order_date=from_iso(row[3]),
        total_amount=Decimal(row[4]),
        status=OrderStatus(row[5]),
        employee_number=row[6],
    )


class OrderStore:
    """주문 저장소

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def insert_order(
        self,
        account_id: int,
        restaurant_id: int,
        items: list[OrderLine],
        order_date: datetime,
    ) -> Order:
        """주문 + 항목 저장 (커밋하지 않음, Pending 상태)

        Returns:
            id가 부여된 Order
        """
        total = sum((item.line_total for item in items), Decimal("0"))

        cursor = await self.db.execute(
            """
            INSERT INTO cafeteria_order (
                account_id, restaurant_id, order_date, total_amount, status
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (
                account_id,
                restaurant_id,
                to_iso(order_date),
                str(total),
                OrderStatus.PENDING.value,
            ),
        )
        order_id = cursor.lastrowid

        for item in items:
            item_cursor = await self.db.execute(
                """
                INSERT INTO order_item (order_id, menu_item_id, quantity, unit_price)
                VALUES (?, ?, ?, ?)
                """,
                (order_id, item.menu_item_id, item.quantity, str(item.unit_price)),
            )
            item.id = item_cursor.lastrowid

        return Order(
            id=order_id,
            account_id=account_id,
            restaurant_id=restaurant_id,
            order_date=order_date,
            total_amount=total,
            status=OrderStatus.PENDING,
            items=items,
        )

    async def _load_items(self, order_id: int) -> list[OrderLine]:
        rows = await self.db.fetchall(
            """
            SELECT oi.id, oi.menu_item_id, oi.quantity, oi.unit_price, m.name
            FROM order_item oi
            LEFT JOIN menu_item m ON m.id = oi.menu_item_id
            WHERE oi.order_id = ?
            ORDER BY oi.id
            """,
            (order_id,),
        )
        return [
            OrderLine(
                id=row[0],
                menu_item_id=row[1],
                quantity=row[2],
                unit_price=Decimal(row[3]),
                menu_item_name=row[4],
            )
            for row in rows
        ]

    async def get_order(self, order_id: int) -> Order | None:
        """주문 단건 조회 (항목 포함)"""
        row = await self.db.fetchone(f"{_ORDER_SELECT} WHERE o.id = ?", (order_id,))
        if row is None:
            return None

        order = _order_from_row(row)
        order.items = await self._load_items(order.id)
        return order

    async def list_orders(
        self,
        account_id: int | None = None,
        status: OrderStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        """주문 목록 (최신순)

        Args:
            account_id: 직원 필터 (None이면 전체 - 관리자용)
            status: 상태 필터
        """
        sql = _ORDER_SELECT + " WHERE 1 = 1"
        params: list[Any] = []

        if account_id is not None:
            sql += " AND o.account_id = ?"
            params.append(account_id)
        if status is not None:
            sql += " AND o.status = ?"
            params.append(status.value)

        sql += " ORDER BY o.id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        rows = await self.db.fetchall(sql, tuple(params))
        orders = [_order_from_row(row) for row in rows]
        for order in orders:
            order.items = await self._load_items(order.id)
        return orders

    async def list_orders_by_account(
        self,
        account_id: int,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        """직원 본인 주문 목록 (최신순)"""
        return await self.list_orders(account_id=account_id, limit=limit, offset=offset)

    async def update_status(self, order_id: int, status: OrderStatus | str) -> Order:
        """주문 상태 변경

        취소해도 결제 금액은 환불되지 않음 (거래 이력은 Deposit/Bonus/Charge만 존재).

        Raises:
            ValueError: 알 수 없는 상태
            NotFoundError: 주문 없음
        """
        new_status = OrderStatus(status)

        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                UPDATE cafeteria_order
                SET status = ?, updated_at = datetime('now')
                WHERE id = ?
                """,
                (new_status.value, order_id),
            )
            if cursor.rowcount != 1:
                raise NotFoundError("order", order_id)

        logger.info(
            f"주문 상태 변경: #{order_id} → {new_status.value}",
            extra={"order_id": order_id},
        )

        order = await self.get_order(order_id)
        assert order is not None
        return order

    async def delete_order(self, order_id: int) -> None:
        """주문 삭제 (Cancelled 상태만)

        거래 이력의 Charge 기록은 order_id 참조와 함께 그대로 남는다.
        """
        async with self.db.transaction():
            row = await self.db.fetchone(
                "SELECT status FROM cafeteria_order WHERE id = ?",
                (order_id,),
            )
            if row is None:
                raise NotFoundError("order", order_id)

            if row[0] != OrderStatus.CANCELLED.value:
                raise InUseError(
                    f"취소된 주문만 삭제할 수 있습니다: #{order_id} ({row[0]})",
                    {"order_id": order_id, "status": row[0]},
                )

            await self.db.execute("DELETE FROM cafeteria_order WHERE id = ?", (order_id,))

        logger.info("주문 삭제", extra={"order_id": order_id})
