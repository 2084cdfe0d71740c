"""Category queries and their handlers."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ...constants import CategoryConsts
from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.requests import CacheableRequest, Query
from ...domain.result import Page, Result
from ...pipeline.mediator import RequestHandler
from .dtos import CategoryDto


@dataclass(frozen=True)
class GetCategoryByIdQuery(Query, CacheableRequest):
    id: UUID

    cache_duration = TTL.hours(2)
    response_type = Result[CategoryDto]

    @property
    def cache_key(self) -> CacheKey:
        return CacheKey.category(self.id)


@dataclass(frozen=True)
class GetAllCategoriesQuery(Query, CacheableRequest):
    page: int = 1
    page_size: int = 10
    search: Optional[str] = None
    order_by: Optional[str] = None

    cache_duration = TTL.minutes(30)
    response_type = Result[Page[CategoryDto]]

    @property
    def cache_key(self) -> CacheKey:
        return CacheKey.categories_list(self.page, self.page_size, self.search, self.order_by)


class GetCategoryByIdQueryHandler(RequestHandler[GetCategoryByIdQuery]):
    async def handle(self, request: GetCategoryByIdQuery) -> Result:
        category = await self.ctx.categories.get_by_id(request.id)
        if category is None:
            return Result.not_found(self.localizer[CategoryConsts.NOT_FOUND])
        return Result.success(CategoryDto.model_validate(category))


class GetAllCategoriesQueryHandler(RequestHandler[GetAllCategoriesQuery]):
    async def handle(self, request: GetAllCategoriesQuery) -> Result:
        categories, total = await self.ctx.categories.search(
            request.page, request.page_size, request.search, request.order_by
        )
        page = Page[CategoryDto](
            items=[CategoryDto.model_validate(category) for category in categories],
            page=request.page,
            page_size=request.page_size,
            total_count=total,
        )
        return Result.success(page)
