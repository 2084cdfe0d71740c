"""Cart commands and their handlers.

Every business rule is evaluated against the projected cart before the
cart is touched, so a rejected command never leaves partial writes in
the transaction.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from ...constants import CartConsts
from ...domain.cache.value_objects import CacheKey
from ...domain.requests import Command, TransactionalRequest
from ...domain.result import Result
from ...models import Cart, CartItem, Product
from ...pipeline.mediator import RequestHandler
from .dtos import CartSummaryDto

logger = structlog.get_logger()


@dataclass(frozen=True)
class AddToCartCommand(Command, TransactionalRequest):
    user_id: Optional[UUID]
    product_id: UUID
    quantity: int


@dataclass(frozen=True)
class RemoveFromCartCommand(Command, TransactionalRequest):
    user_id: Optional[UUID]
    product_id: UUID


@dataclass(frozen=True)
class UpdateCartItemQuantityCommand(Command, TransactionalRequest):
    user_id: Optional[UUID]
    product_id: UUID
    quantity: int


@dataclass(frozen=True)
class ClearCartCommand(Command, TransactionalRequest):
    user_id: Optional[UUID]


def _summary(cart: Cart) -> CartSummaryDto:
    return CartSummaryDto(cart_id=cart.id, total_items=cart.total_items, total_amount=cart.total_amount)


class CartRulesMixin:
    """Limit checks shared by add and update."""

    def check_product(self, product: Product, quantity: int) -> Optional[Result]:
        if not product.is_active:
            return Result.error(self.localizer[CartConsts.PRODUCT_NOT_ACTIVE])
        if product.stock_quantity < quantity:
            return Result.error(self.localizer[CartConsts.INSUFFICIENT_STOCK])
        max_quantity = self.ctx.settings.CART_MAX_QUANTITY_PER_ITEM
        if quantity > max_quantity:
            return Result.error(self.localizer.get(CartConsts.MAX_QUANTITY_EXCEEDED, max_quantity))
        return None

    def check_total(self, projected_total: Decimal) -> Optional[Result]:
        max_total = self.ctx.settings.CART_MAX_TOTAL_AMOUNT
        if projected_total > max_total:
            return Result.error(self.localizer.get(CartConsts.MAX_TOTAL_AMOUNT_EXCEEDED, max_total))
        return None


class AddToCartCommandHandler(CartRulesMixin, RequestHandler[AddToCartCommand]):
    async def handle(self, request: AddToCartCommand) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        product = await self.ctx.products.get_by_id(request.product_id)
        if product is None:
            return Result.not_found(self.localizer[CartConsts.PRODUCT_NOT_FOUND])

        cart = await self.ctx.carts.get_by_user(request.user_id)
        existing = cart.get_item(product.id) if cart else None
        new_quantity = (existing.quantity if existing else 0) + request.quantity

        failure = self.check_product(product, new_quantity)
        if failure:
            return failure

        max_items = self.ctx.settings.CART_MAX_ITEMS
        if existing is None and cart is not None and len(cart.items) >= max_items:
            return Result.error(self.localizer.get(CartConsts.MAX_ITEMS_EXCEEDED, max_items))

        current_total = cart.total_amount if cart else Decimal("0")
        if existing is not None:
            current_total -= existing.line_total
        failure = self.check_total(current_total + product.price * new_quantity)
        if failure:
            return failure

        if cart is None:
            cart = await self.ctx.carts.add(Cart(user_id=request.user_id))

        if existing is not None:
            existing.quantity = new_quantity
            existing.unit_price = product.price
        else:
            cart.items.append(
                CartItem(
                    product=product,
                    product_id=product.id,
                    quantity=request.quantity,
                    unit_price=product.price,
                )
            )
        await self.ctx.session.flush()

        await self.ctx.cache.remove(CacheKey.cart(request.user_id))

        logger.info(
            "Product added to cart",
            cart_id=str(cart.id),
            product_id=str(product.id),
            quantity=new_quantity,
        )
        return Result.success(_summary(cart))


class RemoveFromCartCommandHandler(RequestHandler[RemoveFromCartCommand]):
    async def handle(self, request: RemoveFromCartCommand) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        cart = await self.ctx.carts.get_by_user(request.user_id)
        if cart is None:
            return Result.not_found(self.localizer[CartConsts.NOT_FOUND])

        item = cart.get_item(request.product_id)
        if item is None:
            return Result.not_found(self.localizer[CartConsts.ITEM_NOT_FOUND])

        cart.items.remove(item)
        await self.ctx.session.flush()

        await self.ctx.cache.remove(CacheKey.cart(request.user_id))
        return Result.success(_summary(cart))


class UpdateCartItemQuantityCommandHandler(CartRulesMixin, RequestHandler[UpdateCartItemQuantityCommand]):
    async def handle(self, request: UpdateCartItemQuantityCommand) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        cart = await self.ctx.carts.get_by_user(request.user_id)
        if cart is None:
            return Result.not_found(self.localizer[CartConsts.NOT_FOUND])

        item = cart.get_item(request.product_id)
        if item is None:
            return Result.not_found(self.localizer[CartConsts.ITEM_NOT_FOUND])

        failure = self.check_product(item.product, request.quantity)
        if failure:
            return failure

        projected_total = cart.total_amount - item.line_total + item.product.price * request.quantity
        failure = self.check_total(projected_total)
        if failure:
            return failure

        item.quantity = request.quantity
        item.unit_price = item.product.price
        await self.ctx.session.flush()

        await self.ctx.cache.remove(CacheKey.cart(request.user_id))
        return Result.success(_summary(cart))


class ClearCartCommandHandler(RequestHandler[ClearCartCommand]):
    async def handle(self, request: ClearCartCommand) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        cart = await self.ctx.carts.get_by_user(request.user_id)
        if cart is not None and cart.items:
            cart.items.clear()
            await self.ctx.session.flush()

        await self.ctx.cache.remove(CacheKey.cart(request.user_id))
        return Result.success()
