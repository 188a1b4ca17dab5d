"""OrderStore / OrderService 통합 테스트

주문 생성은 주문 저장 + 차감이 하나의 작업 단위
"""

from decimal import Decimal

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.engine import LedgerEngine
from core.ledger.errors import AccountNotFoundError, InsufficientFundsError
from core.ledger.models import EmployeeAccount
from core.ledger.store import LedgerStore
from core.ledger.types import TransactionType
from core.storage.errors import InUseError, InvalidOrderError, NotFoundError
from core.storage.order_store import OrderStore
from core.storage.restaurant_store import MenuItem, Restaurant, RestaurantStore
from core.types import OrderStatus
from web.services.order_service import OrderService


@pytest_asyncio.fixture
async def restaurant(db: SQLiteAdapter) -> Restaurant:
    return await RestaurantStore(db).create_restaurant("본관 식당")


@pytest_asyncio.fixture
async def bibimbap(db: SQLiteAdapter, restaurant: Restaurant) -> MenuItem:
    return await RestaurantStore(db).add_menu_item(restaurant.id, "비빔밥", "8.50")


@pytest_asyncio.fixture
async def noodles(db: SQLiteAdapter, restaurant: Restaurant) -> MenuItem:
    return await RestaurantStore(db).add_menu_item(restaurant.id, "국수", "6.25")


@pytest_asyncio.fixture
async def funded_account(engine: LedgerEngine, account: EmployeeAccount) -> EmployeeAccount:
    """잔액 100"""
    (await engine.deposit(account.id, "100")).unwrap()
    return account


@pytest.fixture
def service(engine: LedgerEngine) -> OrderService:
    return OrderService(engine)


@pytest.fixture
def orders(db: SQLiteAdapter) -> OrderStore:
    return OrderStore(db)


class TestPlaceOrder:
    """OrderService.place_order"""

    @pytest.mark.asyncio
    async def test_place_order_charges_total(
        self,
        service: OrderService,
        store: LedgerStore,
        engine: LedgerEngine,
        funded_account: EmployeeAccount,
        restaurant: Restaurant,
        bibimbap: MenuItem,
        noodles: MenuItem,
    ) -> None:
        """총액 = Σ 수량 × 메뉴 가격, Charge 이력에 주문 ID"""
        order = await service.place_order(
            funded_account.id,
            restaurant.id,
            [(bibimbap.id, 2), (noodles.id, 1)],
        )

        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("23.25")
        assert order.employee_number == funded_account.employee_number
        assert [(i.menu_item_name, i.quantity) for i in order.items] == [
            ("비빔밥", 2),
            ("국수", 1),
        ]

        account = await store.get_account(funded_account.id)
        assert account.balance == Decimal("76.75")

        history = (await engine.get_history(funded_account.id, newest_first=True)).unwrap()
        charge = history[0]
        assert charge.transaction_type == TransactionType.CHARGE
        assert charge.amount == Decimal("-23.25")
        assert charge.description == f"Order #{order.id}"
        assert charge.order_id == order.id

        assert (await engine.reconcile(funded_account.id)).unwrap().is_balanced

    @pytest.mark.asyncio
    async def test_uses_server_price(
        self,
        db: SQLiteAdapter,
        service: OrderService,
        funded_account: EmployeeAccount,
        restaurant: Restaurant,
        bibimbap: MenuItem,
    ) -> None:
        """주문 시점의 메뉴 가격 저장, 이후 가격 변경은 기존 주문에 영향 없음"""
        order = await service.place_order(funded_account.id, restaurant.id, [(bibimbap.id, 1)])
        await RestaurantStore(db).update_menu_item(bibimbap.id, price="99")

        saved = await OrderStore(db).get_order(order.id)
        assert saved.items[0].unit_price == Decimal("8.50")
        assert saved.total_amount == Decimal("8.50")

    @pytest.mark.asyncio
    async def test_insufficient_funds_keeps_no_order(
        self,
        service: OrderService,
        orders: OrderStore,
        store: LedgerStore,
        funded_account: EmployeeAccount,
        restaurant: Restaurant,
        bibimbap: MenuItem,
    ) -> None:
        """잔액 부족 → 주문도 남지 않음"""
        with pytest.raises(InsufficientFundsError):
            await service.place_order(funded_account.id, restaurant.id, [(bibimbap.id, 20)])

        assert await orders.list_orders() == []
        account = await store.get_account(funded_account.id)
        assert account.balance == Decimal("100")
        assert await store.count_records(funded_account.id) == 1

    @pytest.mark.asyncio
    async def test_empty_order(
        self, service: OrderService, funded_account: EmployeeAccount, restaurant: Restaurant
    ) -> None:
        with pytest.raises(InvalidOrderError):
            await service.place_order(funded_account.id, restaurant.id, [])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1, 101, 10**20])
    async def test_invalid_quantity(
        self,
        service: OrderService,
        funded_account: EmployeeAccount,
        restaurant: Restaurant,
        bibimbap: MenuItem,
        quantity: int,
    ) -> None:
        with pytest.raises(InvalidOrderError):
            await service.place_order(funded_account.id, restaurant.id, [(bibimbap.id, quantity)])

    @pytest.mark.asyncio
    async def test_max_quantity_reaches_balance_check(
        self,
        service: OrderService,
        funded_account: EmployeeAccount,
        restaurant: Restaurant,
        bibimbap: MenuItem,
    ) -> None:
        """최대 수량은 수량 검증을 통과, 850 > 잔액 100"""
        with pytest.raises(InsufficientFundsError) as exc_info:
            await service.place_order(funded_account.id, restaurant.id, [(bibimbap.id, 100)])

        assert exc_info.value.required == Decimal("850.00")

    @pytest.mark.asyncio
    async def test_menu_from_other_restaurant(
        self,
        db: SQLiteAdapter,
        service: OrderService,
        funded_account: EmployeeAccount,
        bibimbap: MenuItem,
    ) -> None:
        other = await RestaurantStore(db).create_restaurant("별관 식당")

        with pytest.raises(InvalidOrderError):
            await service.place_order(funded_account.id, other.id, [(bibimbap.id, 1)])

    @pytest.mark.asyncio
    async def test_unknown_menu_item(
        self, service: OrderService, funded_account: EmployeeAccount, restaurant: Restaurant
    ) -> None:
        with pytest.raises(InvalidOrderError):
            await service.place_order(funded_account.id, restaurant.id, [(999, 1)])

    @pytest.mark.asyncio
    async def test_unavailable_menu_item(
        self,
        db: SQLiteAdapter,
        service: OrderService,
        funded_account: EmployeeAccount,
        restaurant: Restaurant,
        bibimbap: MenuItem,
    ) -> None:
        await RestaurantStore(db).update_menu_item(bibimbap.id, is_available=False)

        with pytest.raises(InvalidOrderError):
            await service.place_order(funded_account.id, restaurant.id, [(bibimbap.id, 1)])

    @pytest.mark.asyncio
    async def test_unknown_restaurant(
        self, service: OrderService, funded_account: EmployeeAccount, bibimbap: MenuItem
    ) -> None:
        with pytest.raises(NotFoundError):
            await service.place_order(funded_account.id, 999, [(bibimbap.id, 1)])

    @pytest.mark.asyncio
    async def test_unknown_account(
        self, service: OrderService, restaurant: Restaurant, bibimbap: MenuItem
    ) -> None:
        with pytest.raises(AccountNotFoundError):
            await service.place_order(999, restaurant.id, [(bibimbap.id, 1)])


class TestOrderStore:
    """주문 조회 / 상태 변경 / 삭제"""

    @pytest_asyncio.fixture
    async def order(
        self,
        service: OrderService,
        funded_account: EmployeeAccount,
        restaurant: Restaurant,
        bibimbap: MenuItem,
    ):
        return await service.place_order(funded_account.id, restaurant.id, [(bibimbap.id, 1)])

    @pytest.mark.asyncio
    async def test_get_order(self, orders: OrderStore, order) -> None:
        loaded = await orders.get_order(order.id)

        assert loaded.id == order.id
        assert loaded.items[0].line_total == Decimal("8.50")
        assert await orders.get_order(999) is None

    @pytest.mark.asyncio
    async def test_list_orders_by_account(
        self,
        orders: OrderStore,
        store: LedgerStore,
        order,
        funded_account: EmployeeAccount,
    ) -> None:
        other = await store.create_account("E7777")

        assert [o.id for o in await orders.list_orders_by_account(funded_account.id)] == [order.id]
        assert await orders.list_orders_by_account(other.id) == []
        assert len(await orders.list_orders()) == 1
        assert len(await orders.list_orders(status=OrderStatus.CANCELLED)) == 0

    @pytest.mark.asyncio
    async def test_update_status(self, orders: OrderStore, order) -> None:
        updated = await orders.update_status(order.id, "Preparing")

        assert updated.status == OrderStatus.PREPARING

    @pytest.mark.asyncio
    async def test_update_status_unknown_value(self, orders: OrderStore, order) -> None:
        with pytest.raises(ValueError):
            await orders.update_status(order.id, "Refunded")

    @pytest.mark.asyncio
    async def test_update_status_missing_order(self, orders: OrderStore) -> None:
        with pytest.raises(NotFoundError):
            await orders.update_status(999, OrderStatus.COMPLETED)

    @pytest.mark.asyncio
    async def test_cancel_does_not_refund(
        self,
        orders: OrderStore,
        store: LedgerStore,
        order,
        funded_account: EmployeeAccount,
    ) -> None:
        await orders.update_status(order.id, OrderStatus.CANCELLED)

        account = await store.get_account(funded_account.id)
        assert account.balance == Decimal("91.50")

    @pytest.mark.asyncio
    async def test_delete_requires_cancelled(self, orders: OrderStore, order) -> None:
        with pytest.raises(InUseError):
            await orders.delete_order(order.id)

    @pytest.mark.asyncio
    async def test_delete_cancelled_keeps_history(
        self,
        orders: OrderStore,
        store: LedgerStore,
        order,
        funded_account: EmployeeAccount,
    ) -> None:
        await orders.update_status(order.id, OrderStatus.CANCELLED)

        await orders.delete_order(order.id)

        assert await orders.get_order(order.id) is None
        records = await store.get_records(funded_account.id)
        assert records[-1].order_id == order.id
        assert await store.sum_records(funded_account.id) == Decimal("91.50")

    @pytest.mark.asyncio
    async def test_delete_missing(self, orders: OrderStore) -> None:
        with pytest.raises(NotFoundError):
            await orders.delete_order(999)
