"""Tests for order placement, cancellation and status changes."""

from decimal import Decimal
from uuid import uuid4

import pytest
from prometheus_client import REGISTRY
from sqlalchemy.exc import OperationalError

from ecommerce.domain.cache.value_objects import CacheKey
from ecommerce.domain.result import ResultStatus
from ecommerce.features.orders.commands import (
    CancelOrderCommand,
    OrderItemRequest,
    PlaceOrderCommand,
    UpdateOrderStatusCommand,
)
from ecommerce.features.orders.queries import GetAllOrdersQuery, GetOrdersByUserQuery
from ecommerce.features.products.queries import GetProductByIdQuery
from ecommerce.models import OrderStatus


def _orders_placed() -> float:
    return REGISTRY.get_sample_value("ecommerce_orders_placed_total") or 0.0


def _fail_next_commit(session, monkeypatch) -> dict:
    """Make the next commit raise a transient fault; later commits go through."""
    real_commit = session.commit
    calls = {"count": 0}

    async def flaky_commit():
        calls["count"] += 1
        if calls["count"] == 1:
            raise OperationalError("COMMIT", {}, Exception("connection reset"))
        await real_commit()

    monkeypatch.setattr(session, "commit", flaky_commit)
    return calls


@pytest.fixture
async def products(make_product):
    laptop = await make_product(name="Laptop", price="100.00", stock_quantity=5)
    mouse = await make_product(name="Mouse", price="20.00", stock_quantity=10)
    return laptop, mouse


@pytest.fixture
def place_order(pipeline, user_id):
    async def _place(*lines, user=None):
        return await pipeline.dispatch(
            PlaceOrderCommand(
                user_id=user or user_id,
                shipping_address="221B Baker Street",
                items=tuple(OrderItemRequest(product_id=p.id, quantity=q) for p, q in lines),
            )
        )

    return _place


class TestPlaceOrder:
    @pytest.mark.asyncio
    async def test_reserves_stock_and_records_lines(self, pipeline, products, place_order, user_id):
        laptop, mouse = products
        placed_before = _orders_placed()

        result = await place_order((laptop, 2), (mouse, 1), (laptop, 1))

        assert result.is_success
        assert laptop.stock_quantity == 2
        assert mouse.stock_quantity == 9
        assert _orders_placed() == placed_before + 1

        (order,) = (await pipeline.dispatch(GetOrdersByUserQuery(user_id=user_id))).value
        assert order.id == result.value
        assert order.status is OrderStatus.PENDING
        assert order.total_amount == Decimal("320.00")
        assert order.billing_address == "221B Baker Street"
        assert {(item.product_name, item.quantity) for item in order.items} == {("Laptop", 3), ("Mouse", 1)}

    @pytest.mark.asyncio
    async def test_insufficient_stock_changes_nothing(self, products, place_order):
        laptop, mouse = products

        result = await place_order((mouse, 1), (laptop, 6))

        assert result.status is ResultStatus.ERROR
        assert result.message == "Insufficient stock for product Laptop."
        assert laptop.stock_quantity == 5
        assert mouse.stock_quantity == 10

    @pytest.mark.asyncio
    async def test_inactive_product(self, make_product, place_order):
        retired = await make_product(name="Retired", is_active=False)

        result = await place_order((retired, 1))

        assert result.status is ResultStatus.ERROR
        assert result.message == "Product Retired is not active."

    @pytest.mark.asyncio
    async def test_unknown_product(self, pipeline, user_id):
        result = await pipeline.dispatch(
            PlaceOrderCommand(
                user_id=user_id,
                shipping_address="Somewhere 1",
                items=(OrderItemRequest(product_id=uuid4(), quantity=1),),
            )
        )

        assert result.status is ResultStatus.ERROR

    @pytest.mark.asyncio
    async def test_request_is_validated(self, pipeline, user_id, products):
        laptop, _ = products
        result = await pipeline.dispatch(
            PlaceOrderCommand(
                user_id=user_id,
                shipping_address=" ",
                items=(OrderItemRequest(product_id=laptop.id, quantity=0),),
            )
        )

        assert result.status is ResultStatus.INVALID
        assert {error.identifier for error in result.validation_errors} == {
            "items[0].quantity",
            "shipping_address",
        }

    @pytest.mark.asyncio
    async def test_empty_order(self, pipeline, user_id):
        result = await pipeline.dispatch(PlaceOrderCommand(user_id=user_id, shipping_address="Home", items=()))

        assert result.validation_errors[0].identifier == "items"

    @pytest.mark.asyncio
    async def test_anonymous_caller(self, pipeline, products):
        laptop, _ = products
        result = await pipeline.dispatch(
            PlaceOrderCommand(
                user_id=None,
                shipping_address="Home",
                items=(OrderItemRequest(product_id=laptop.id, quantity=1),),
            )
        )

        assert result.status is ResultStatus.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_invalidates_product_and_order_caches(self, pipeline, products, place_order, user_id, cache_store):
        laptop, _ = products
        await pipeline.dispatch(GetProductByIdQuery(id=laptop.id))
        await pipeline.dispatch(GetOrdersByUserQuery(user_id=user_id))

        await place_order((laptop, 1))

        keys = cache_store.keys()
        assert str(CacheKey.product(laptop.id)) not in keys
        assert str(CacheKey.orders(user_id)) not in keys
        product = (await pipeline.dispatch(GetProductByIdQuery(id=laptop.id))).value
        assert product.stock_quantity == 4

    @pytest.mark.asyncio
    async def test_transient_commit_failure_counts_order_once(
        self, products, place_order, session, monkeypatch
    ):
        laptop, _ = products
        placed_before = _orders_placed()
        calls = _fail_next_commit(session, monkeypatch)

        result = await place_order((laptop, 1))

        assert result.is_success
        assert calls["count"] == 2
        assert _orders_placed() == placed_before + 1
        await session.refresh(laptop)
        assert laptop.stock_quantity == 4


class TestCancelOrder:
    @pytest.mark.asyncio
    async def test_cancel_releases_stock(self, pipeline, products, place_order, user_id):
        laptop, mouse = products
        order_id = (await place_order((laptop, 2), (mouse, 3))).value

        result = await pipeline.dispatch(CancelOrderCommand(user_id=user_id, order_id=order_id))

        assert result.is_success
        assert laptop.stock_quantity == 5
        assert mouse.stock_quantity == 10
        (order,) = (await pipeline.dispatch(GetOrdersByUserQuery(user_id=user_id))).value
        assert order.status is OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_twice(self, pipeline, products, place_order, user_id):
        laptop, _ = products
        order_id = (await place_order((laptop, 1))).value
        await pipeline.dispatch(CancelOrderCommand(user_id=user_id, order_id=order_id))

        result = await pipeline.dispatch(CancelOrderCommand(user_id=user_id, order_id=order_id))

        assert result.status is ResultStatus.ERROR
        assert laptop.stock_quantity == 5

    @pytest.mark.asyncio
    async def test_shipped_order_cannot_be_cancelled(self, pipeline, products, place_order, user_id):
        laptop, _ = products
        order_id = (await place_order((laptop, 1))).value
        await pipeline.dispatch(UpdateOrderStatusCommand(order_id=order_id, status=OrderStatus.CONFIRMED))
        await pipeline.dispatch(UpdateOrderStatusCommand(order_id=order_id, status=OrderStatus.SHIPPED))

        result = await pipeline.dispatch(CancelOrderCommand(user_id=user_id, order_id=order_id))

        assert result.status is ResultStatus.ERROR
        assert result.message == "Order cannot be cancelled in status shipped."

    @pytest.mark.asyncio
    async def test_other_users_order_is_not_found(self, pipeline, products, place_order):
        laptop, _ = products
        order_id = (await place_order((laptop, 1))).value

        result = await pipeline.dispatch(CancelOrderCommand(user_id=uuid4(), order_id=order_id))

        assert result.status is ResultStatus.NOT_FOUND
        assert laptop.stock_quantity == 4


class TestOrderStatus:
    @pytest.mark.asyncio
    async def test_forward_transitions(self, pipeline, products, place_order, user_id):
        laptop, _ = products
        order_id = (await place_order((laptop, 1))).value

        for status in (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            result = await pipeline.dispatch(UpdateOrderStatusCommand(order_id=order_id, status=status))
            assert result.is_success

        (order,) = (await pipeline.dispatch(GetOrdersByUserQuery(user_id=user_id))).value
        assert order.status is OrderStatus.DELIVERED

    @pytest.mark.parametrize("target", [OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.PENDING])
    @pytest.mark.asyncio
    async def test_invalid_transitions_from_pending(self, pipeline, products, place_order, target):
        laptop, _ = products
        order_id = (await place_order((laptop, 1))).value

        result = await pipeline.dispatch(UpdateOrderStatusCommand(order_id=order_id, status=target))

        assert result.status is ResultStatus.ERROR
        assert result.message == f"Order status cannot change from pending to {target.value}."

    @pytest.mark.asyncio
    async def test_unknown_order(self, pipeline):
        result = await pipeline.dispatch(UpdateOrderStatusCommand(order_id=uuid4(), status=OrderStatus.CONFIRMED))

        assert result.status is ResultStatus.NOT_FOUND


class TestOrderHistory:
    @pytest.mark.asyncio
    async def test_history_is_per_user(self, pipeline, products, place_order, user_id):
        laptop, mouse = products
        await place_order((laptop, 1))
        await place_order((mouse, 1), user=uuid4())

        orders = (await pipeline.dispatch(GetOrdersByUserQuery(user_id=user_id))).value

        assert len(orders) == 1
        assert orders[0].items[0].product_name == "Laptop"

    @pytest.mark.asyncio
    async def test_anonymous_caller(self, pipeline):
        result = await pipeline.dispatch(GetOrdersByUserQuery(user_id=None))

        assert result.status is ResultStatus.UNAUTHORIZED


class TestPagedOrderHistory:
    @pytest.mark.asyncio
    async def test_pages_through_own_orders(self, pipeline, products, place_order, user_id):
        laptop, mouse = products
        for _ in range(3):
            await place_order((mouse, 1))
        await place_order((laptop, 1), user=uuid4())

        first = (await pipeline.dispatch(GetAllOrdersQuery(user_id=user_id, page=1, page_size=2))).value
        second = (await pipeline.dispatch(GetAllOrdersQuery(user_id=user_id, page=2, page_size=2))).value

        assert first.total_count == 3
        assert first.has_next
        assert len(first.items) == 2
        assert len(second.items) == 1
        assert not second.has_next
        assert {order.id for order in first.items}.isdisjoint({order.id for order in second.items})

    @pytest.mark.asyncio
    async def test_status_filter(self, pipeline, products, place_order, user_id):
        laptop, mouse = products
        cancelled_id = (await place_order((laptop, 1))).value
        await place_order((mouse, 1))
        await pipeline.dispatch(CancelOrderCommand(user_id=user_id, order_id=cancelled_id))

        result = await pipeline.dispatch(GetAllOrdersQuery(user_id=user_id, status=OrderStatus.CANCELLED))

        assert [order.id for order in result.value.items] == [cancelled_id]
        assert result.value.items[0].status is OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_paging_is_validated(self, pipeline, user_id):
        result = await pipeline.dispatch(GetAllOrdersQuery(user_id=user_id, page=0))

        assert result.status is ResultStatus.INVALID

    @pytest.mark.asyncio
    async def test_anonymous_caller(self, pipeline):
        result = await pipeline.dispatch(GetAllOrdersQuery(user_id=None))

        assert result.status is ResultStatus.UNAUTHORIZED
