"""
주문 서비스

주문 생성 = 주문 저장 + 잔액 차감을 하나의 작업 단위로 처리.
차감이 실패하면(잔액 부족 등) 주문도 남지 않는다.
"""

import logging

from core.constants import Defaults
from core.ledger.engine import LedgerEngine
from core.ledger.errors import AccountNotFoundError
from core.storage.errors import InvalidOrderError, NotFoundError
from core.storage.order_store import Order, OrderLine, OrderStore
from core.storage.restaurant_store import RestaurantStore

logger = logging.getLogger(__name__)


class OrderService:
    """주문 서비스

    Args:
        engine: Ledger 엔진 (쓰기 가능한 DB에 연결)
    """

    def __init__(self, engine: LedgerEngine):
        self.engine = engine
        self.restaurants = RestaurantStore(engine.db)
        self.orders = OrderStore(engine.db)

    async def place_order(
        self,
        account_id: int,
        restaurant_id: int,
        items: list[tuple[int, int]],
    ) -> Order:
        """주문 생성 및 결제

        단가는 서버의 메뉴 가격을 사용한다.
        결제 Charge 이력의 사유는 "Order #<id>".

        Args:
            account_id: 직원 계정 ID
            restaurant_id: 식당 ID
            items: (menu_item_id, quantity) 목록

        Returns:
            저장된 주문 (항목 포함)

        Raises:
            InvalidOrderError: 빈 주문, 수량 오류(1 ~ MAX_ORDER_QUANTITY), 다른 식당/판매 중지 메뉴
            NotFoundError: 식당 없음
            AccountNotFoundError: 계정 없음
            InsufficientFundsError: 잔액 부족
            PersistenceError: 저장소 오류
        """
        if not items:
            raise InvalidOrderError("주문 항목이 비어 있습니다", {"account_id": account_id})

        for menu_item_id, quantity in items:
            if not 1 <= quantity <= Defaults.MAX_ORDER_QUANTITY:
                raise InvalidOrderError(
                    f"수량은 1 ~ {Defaults.MAX_ORDER_QUANTITY} 사이여야 합니다: "
                    f"menu_item_id={menu_item_id}",
                    {"menu_item_id": menu_item_id, "quantity": quantity},
                )

        async def _work() -> Order:
            lines = await self._build_lines(restaurant_id, items)

            if await self.engine.store.get_account(account_id) is None:
                raise AccountNotFoundError(account_id)

            order = await self.orders.insert_order(
                account_id=account_id,
                restaurant_id=restaurant_id,
                items=lines,
                order_date=self.engine.clock(),
            )
            await self.engine.apply_charge(
                account_id,
                order.total_amount,
                reason=f"Order #{order.id}",
                order_id=order.id,
                occurred_at=order.order_date,
            )
            return order

        order = await self.engine.atomic(_work)

        logger.info(
            f"주문 완료: #{order.id}, account_id={account_id}, total={order.total_amount}",
            extra={"order_id": order.id, "restaurant_id": restaurant_id},
        )

        saved = await self.orders.get_order(order.id)
        return saved or order

    async def _build_lines(
        self,
        restaurant_id: int,
        items: list[tuple[int, int]],
    ) -> list[OrderLine]:
        """메뉴 검증 및 서버 가격으로 주문 항목 구성"""
        restaurant = await self.restaurants.get_restaurant(restaurant_id, include_menu=False)
        if restaurant is None:
            raise NotFoundError("restaurant", restaurant_id)

        menu = await self.restaurants.get_menu_items([item_id for item_id, _ in items])

        lines = []
        for menu_item_id, quantity in items:
            menu_item = menu.get(menu_item_id)
            if menu_item is None or menu_item.restaurant_id != restaurant_id:
                raise InvalidOrderError(
                    f"이 식당의 메뉴가 아닙니다: menu_item_id={menu_item_id}",
                    {"menu_item_id": menu_item_id, "restaurant_id": restaurant_id},
                )
            if not menu_item.is_available:
                raise InvalidOrderError(
                    f"판매 중지된 메뉴입니다: {menu_item.name}",
                    {"menu_item_id": menu_item_id},
                )

            lines.append(
                OrderLine(
                    menu_item_id=menu_item_id,
                    quantity=quantity,
                    unit_price=menu_item.price,
                    menu_item_name=menu_item.name,
                )
            )

        return lines
