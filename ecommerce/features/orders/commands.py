"""Order commands and their handlers."""

from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

import structlog

from ...constants import OrderConsts
from ...core import metrics
from ...domain.cache.value_objects import CacheKey
from ...domain.requests import Command, TransactionalRequest
from ...domain.result import Result
from ...models import Order, OrderItem, OrderStatus
from ...pipeline.mediator import RequestHandler

logger = structlog.get_logger()

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
}

NOT_CANCELLABLE = {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}


@dataclass(frozen=True)
class OrderItemRequest:
    product_id: UUID
    quantity: int


@dataclass(frozen=True)
class PlaceOrderCommand(Command, TransactionalRequest):
    user_id: Optional[UUID]
    shipping_address: str
    items: Tuple[OrderItemRequest, ...]
    billing_address: Optional[str] = None


@dataclass(frozen=True)
class CancelOrderCommand(Command, TransactionalRequest):
    user_id: Optional[UUID]
    order_id: UUID


@dataclass(frozen=True)
class UpdateOrderStatusCommand(Command, TransactionalRequest):
    order_id: UUID
    status: OrderStatus


async def invalidate_stock(ctx, product_ids) -> None:
    for product_id in product_ids:
        await ctx.cache.remove(CacheKey.product(product_id))
    await ctx.cache.remove_by_pattern(CacheKey.PRODUCTS_PATTERN)


class PlaceOrderCommandHandler(RequestHandler[PlaceOrderCommand]):
    """Check every line, then reserve stock and record the order."""

    async def handle(self, request: PlaceOrderCommand) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        quantities: "OrderedDict[UUID, int]" = OrderedDict()
        for item in request.items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

        products = await self.ctx.products.get_many(quantities)
        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if product is None:
                return Result.error(self.localizer.get(OrderConsts.PRODUCT_NOT_FOUND, product_id))
            if not product.is_active:
                return Result.error(self.localizer.get(OrderConsts.PRODUCT_NOT_ACTIVE, product.name))
            if product.stock_quantity < quantity:
                return Result.error(self.localizer.get(OrderConsts.INSUFFICIENT_STOCK, product.name))

        order = Order(
            user_id=request.user_id,
            status=OrderStatus.PENDING.value,
            shipping_address=request.shipping_address.strip(),
            billing_address=request.billing_address or request.shipping_address.strip(),
            total_amount=Decimal("0"),
        )
        total = Decimal("0")
        for product_id, quantity in quantities.items():
            product = products[product_id]
            product.stock_quantity -= quantity
            order.items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                )
            )
            total += product.price * quantity
        order.total_amount = total

        await self.ctx.orders.add(order)
        self.ctx.unit_of_work.after_commit(metrics.orders_placed_total.inc)

        await invalidate_stock(self.ctx, quantities.keys())
        await self.ctx.cache.remove(CacheKey.orders(request.user_id))

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(request.user_id),
            lines=len(order.items),
            total_amount=str(total),
        )
        return Result.success(order.id)


class CancelOrderCommandHandler(RequestHandler[CancelOrderCommand]):
    """Cancel a not yet shipped order and release its reserved stock."""

    async def handle(self, request: CancelOrderCommand) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        order = await self.ctx.orders.get_by_id(request.order_id)
        if order is None or order.user_id != request.user_id:
            return Result.not_found(self.localizer[OrderConsts.NOT_FOUND])

        if OrderStatus(order.status) in NOT_CANCELLABLE:
            return Result.error(self.localizer.get(OrderConsts.CANNOT_BE_CANCELLED, order.status))

        product_ids = [item.product_id for item in order.items if item.product_id is not None]
        products = await self.ctx.products.get_many(product_ids)
        for item in order.items:
            product = products.get(item.product_id)
            if product is not None:
                product.stock_quantity += item.quantity

        order.status = OrderStatus.CANCELLED.value
        await self.ctx.orders.update(order)
        self.ctx.unit_of_work.after_commit(metrics.orders_cancelled_total.inc)

        await invalidate_stock(self.ctx, products.keys())
        await self.ctx.cache.remove(CacheKey.orders(order.user_id))

        logger.info("Order cancelled", order_id=str(order.id), released_lines=len(products))
        return Result.success()


class UpdateOrderStatusCommandHandler(RequestHandler[UpdateOrderStatusCommand]):
    async def handle(self, request: UpdateOrderStatusCommand) -> Result:
        order = await self.ctx.orders.get_by_id(request.order_id)
        if order is None:
            return Result.not_found(self.localizer[OrderConsts.NOT_FOUND])

        current = OrderStatus(order.status)
        if request.status not in ALLOWED_TRANSITIONS.get(current, set()):
            return Result.error(
                self.localizer.get(OrderConsts.STATUS_TRANSITION_INVALID, current.value, request.status.value)
            )

        order.status = request.status.value
        await self.ctx.orders.update(order)

        await self.ctx.cache.remove(CacheKey.orders(order.user_id))
        return Result.success()
