"""Order queries and their handlers."""

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.requests import CacheableRequest, Query
from ...domain.result import Page, Result
from ...models import OrderStatus
from ...pipeline.mediator import RequestHandler
from .dtos import OrderDto


@dataclass(frozen=True)
class GetOrdersByUserQuery(Query, CacheableRequest):
    user_id: Optional[UUID]

    cache_duration = TTL.minutes(5)
    response_type = Result[List[OrderDto]]

    @property
    def cache_key(self) -> CacheKey:
        return CacheKey.orders(self.user_id if self.user_id is not None else "anonymous")


@dataclass(frozen=True)
class GetAllOrdersQuery(Query):
    """Paged order history of the caller, optionally narrowed to one status.

    Not cached: the per-user order key is the only one order writes invalidate.
    """

    user_id: Optional[UUID]
    page: int = 1
    page_size: int = 10
    status: Optional[OrderStatus] = None


class GetOrdersByUserQueryHandler(RequestHandler[GetOrdersByUserQuery]):
    async def handle(self, request: GetOrdersByUserQuery) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        orders = await self.ctx.orders.list_by_user(request.user_id)
        return Result.success([OrderDto.from_entity(order) for order in orders])


class GetAllOrdersQueryHandler(RequestHandler[GetAllOrdersQuery]):
    async def handle(self, request: GetAllOrdersQuery) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        orders, total = await self.ctx.orders.search_by_user(
            request.user_id,
            request.page,
            request.page_size,
            request.status.value if request.status is not None else None,
        )
        page = Page[OrderDto](
            items=[OrderDto.from_entity(order) for order in orders],
            page=request.page,
            page_size=request.page_size,
            total_count=total,
        )
        return Result.success(page)
