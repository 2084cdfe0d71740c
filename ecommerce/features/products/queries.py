"""Product queries and their handlers."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ...constants import ProductConsts
from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.requests import CacheableRequest, Query
from ...domain.result import Page, Result
from ...pipeline.mediator import RequestHandler
from .dtos import ProductDto


@dataclass(frozen=True)
class GetProductByIdQuery(Query, CacheableRequest):
    id: UUID

    cache_duration = TTL.hours(1)
    response_type = Result[ProductDto]

    @property
    def cache_key(self) -> CacheKey:
        return CacheKey.product(self.id)


@dataclass(frozen=True)
class GetAllProductsQuery(Query, CacheableRequest):
    page: int = 1
    page_size: int = 10
    category_id: Optional[UUID] = None
    include_category: bool = False
    order_by: Optional[str] = None

    cache_duration = TTL.minutes(10)
    response_type = Result[Page[ProductDto]]

    @property
    def cache_key(self) -> CacheKey:
        return CacheKey.products_list(
            self.page, self.page_size, self.include_category, self.order_by, self.category_id
        )


@dataclass(frozen=True)
class GetProductStockInfoQuery(Query):
    product_id: UUID


class GetProductByIdQueryHandler(RequestHandler[GetProductByIdQuery]):
    async def handle(self, request: GetProductByIdQuery) -> Result:
        product = await self.ctx.products.get_by_id(request.id)
        if product is None:
            return Result.not_found(self.localizer[ProductConsts.NOT_FOUND])
        return Result.success(ProductDto.from_entity(product))


class GetAllProductsQueryHandler(RequestHandler[GetAllProductsQuery]):
    async def handle(self, request: GetAllProductsQuery) -> Result:
        products, total = await self.ctx.products.search(
            request.page, request.page_size, request.category_id, request.order_by
        )
        page = Page[ProductDto](
            items=[ProductDto.from_entity(p, include_category=request.include_category) for p in products],
            page=request.page,
            page_size=request.page_size,
            total_count=total,
        )
        return Result.success(page)


class GetProductStockInfoQueryHandler(RequestHandler[GetProductStockInfoQuery]):
    async def handle(self, request: GetProductStockInfoQuery) -> Result:
        product = await self.ctx.products.get_by_id(request.product_id)
        if product is None:
            return Result.not_found(self.localizer[ProductConsts.NOT_FOUND])
        return Result.success(product.stock_quantity)
