"""Category commands and their handlers."""

from dataclasses import dataclass
from uuid import UUID

import structlog

from ...constants import CategoryConsts
from ...domain.cache.value_objects import CacheKey
from ...domain.requests import Command, TransactionalRequest
from ...domain.result import Result
from ...models import Category
from ...pipeline.mediator import RequestHandler

logger = structlog.get_logger()


@dataclass(frozen=True)
class CreateCategoryCommand(Command, TransactionalRequest):
    name: str


@dataclass(frozen=True)
class UpdateCategoryCommand(Command, TransactionalRequest):
    id: UUID
    name: str


@dataclass(frozen=True)
class DeleteCategoryCommand(Command, TransactionalRequest):
    id: UUID


class CreateCategoryCommandHandler(RequestHandler[CreateCategoryCommand]):
    async def handle(self, request: CreateCategoryCommand) -> Result:
        category = Category(name=request.name.strip())
        await self.ctx.categories.add(category)

        await self.ctx.cache.remove_by_pattern(CacheKey.CATEGORIES_PATTERN)

        logger.info("Category created", category_id=str(category.id))
        return Result.success(category.id)


class UpdateCategoryCommandHandler(RequestHandler[UpdateCategoryCommand]):
    async def handle(self, request: UpdateCategoryCommand) -> Result:
        category = await self.ctx.categories.get_by_id(request.id)
        if category is None:
            return Result.not_found(self.localizer[CategoryConsts.NOT_FOUND])

        category.name = request.name.strip()
        await self.ctx.categories.update(category)

        await self.ctx.cache.remove(CacheKey.category(request.id))
        await self.ctx.cache.remove_by_pattern(CacheKey.CATEGORIES_PATTERN)
        await self.ctx.cache.remove_by_pattern(CacheKey.PRODUCTS_PATTERN)
        return Result.success()


class DeleteCategoryCommandHandler(RequestHandler[DeleteCategoryCommand]):
    async def handle(self, request: DeleteCategoryCommand) -> Result:
        category = await self.ctx.categories.get_by_id(request.id)
        if category is None:
            return Result.not_found(self.localizer[CategoryConsts.NOT_FOUND])

        if await self.ctx.categories.has_products(request.id):
            return Result.conflict(self.localizer[CategoryConsts.CANNOT_DELETE_WITH_PRODUCTS])

        await self.ctx.categories.delete(category)

        await self.ctx.cache.remove(CacheKey.category(request.id))
        await self.ctx.cache.remove_by_pattern(CacheKey.CATEGORIES_PATTERN)
        await self.ctx.cache.remove_by_pattern(CacheKey.PRODUCTS_PATTERN)

        logger.info("Category deleted", category_id=str(request.id))
        return Result.success()
