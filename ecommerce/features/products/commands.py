"""Product and stock commands and their handlers."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from ...constants import ProductConsts
from ...domain.cache.value_objects import CacheKey
from ...domain.requests import Command, TransactionalRequest
from ...domain.result import Result
from ...models import Product
from ...pipeline.mediator import RequestHandler

logger = structlog.get_logger()


@dataclass(frozen=True)
class CreateProductCommand(Command, TransactionalRequest):
    name: str
    price: Decimal
    category_id: UUID
    stock_quantity: int = 0
    description: Optional[str] = None


@dataclass(frozen=True)
class UpdateProductCommand(Command, TransactionalRequest):
    id: UUID
    name: str
    price: Decimal
    category_id: UUID
    description: Optional[str] = None


@dataclass(frozen=True)
class DeleteProductCommand(Command, TransactionalRequest):
    id: UUID


@dataclass(frozen=True)
class UpdateProductStockCommand(Command, TransactionalRequest):
    id: UUID
    quantity: int


@dataclass(frozen=True)
class SetProductActiveCommand(Command, TransactionalRequest):
    id: UUID
    is_active: bool


async def invalidate_product(ctx, product_id: UUID) -> None:
    await ctx.cache.remove(CacheKey.product(product_id))
    await ctx.cache.remove_by_pattern(CacheKey.PRODUCTS_PATTERN)


class CreateProductCommandHandler(RequestHandler[CreateProductCommand]):
    async def handle(self, request: CreateProductCommand) -> Result:
        product = Product(
            name=request.name.strip(),
            description=request.description,
            price=Decimal(request.price),
            category_id=request.category_id,
            stock_quantity=request.stock_quantity,
            is_active=True,
        )
        await self.ctx.products.add(product)

        await self.ctx.cache.remove_by_pattern(CacheKey.PRODUCTS_PATTERN)

        logger.info("Product created", product_id=str(product.id), category_id=str(product.category_id))
        return Result.success(product.id)


class UpdateProductCommandHandler(RequestHandler[UpdateProductCommand]):
    async def handle(self, request: UpdateProductCommand) -> Result:
        product = await self.ctx.products.get_by_id(request.id)
        if product is None:
            return Result.not_found(self.localizer[ProductConsts.NOT_FOUND])

        product.name = request.name.strip()
        product.description = request.description
        product.price = Decimal(request.price)
        product.category_id = request.category_id
        await self.ctx.products.update(product)

        await invalidate_product(self.ctx, product.id)
        return Result.success()


class DeleteProductCommandHandler(RequestHandler[DeleteProductCommand]):
    async def handle(self, request: DeleteProductCommand) -> Result:
        product = await self.ctx.products.get_by_id(request.id)
        if product is None:
            return Result.not_found(self.localizer[ProductConsts.NOT_FOUND])

        removed_lines = await self.ctx.products.remove_from_carts(product.id)
        await self.ctx.products.delete(product)

        await invalidate_product(self.ctx, request.id)
        if removed_lines:
            # Carts that held the product are stale
            await self.ctx.cache.remove_by_pattern(CacheKey.CARTS_PATTERN)

        logger.info("Product deleted", product_id=str(request.id), cart_lines_removed=removed_lines)
        return Result.success()


class UpdateProductStockCommandHandler(RequestHandler[UpdateProductStockCommand]):
    async def handle(self, request: UpdateProductStockCommand) -> Result:
        product = await self.ctx.products.get_by_id(request.id)
        if product is None:
            return Result.not_found(self.localizer[ProductConsts.NOT_FOUND])

        previous = product.stock_quantity
        product.stock_quantity = request.quantity
        await self.ctx.products.update(product)

        await invalidate_product(self.ctx, product.id)
        logger.info(
            "Product stock updated",
            product_id=str(product.id),
            previous_quantity=previous,
            quantity=request.quantity,
        )
        return Result.success()


class SetProductActiveCommandHandler(RequestHandler[SetProductActiveCommand]):
    async def handle(self, request: SetProductActiveCommand) -> Result:
        product = await self.ctx.products.get_by_id(request.id)
        if product is None:
            return Result.not_found(self.localizer[ProductConsts.NOT_FOUND])

        product.is_active = request.is_active
        await self.ctx.products.update(product)

        await invalidate_product(self.ctx, product.id)
        return Result.success()
