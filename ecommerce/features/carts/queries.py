"""Cart queries and their handlers."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.requests import CacheableRequest, Query
from ...domain.result import Result
from ...pipeline.mediator import RequestHandler
from .dtos import CartDto


@dataclass(frozen=True)
class GetCartQuery(Query, CacheableRequest):
    user_id: Optional[UUID]

    cache_duration = TTL.minutes(2)
    response_type = Result[CartDto]

    @property
    def cache_key(self) -> CacheKey:
        return CacheKey.cart(self.user_id if self.user_id is not None else "anonymous")


class GetCartQueryHandler(RequestHandler[GetCartQuery]):
    async def handle(self, request: GetCartQuery) -> Result:
        if request.user_id is None:
            return Result.unauthorized()

        cart = await self.ctx.carts.get_by_user(request.user_id)
        if cart is None:
            return Result.success(CartDto.empty(request.user_id))
        return Result.success(CartDto.from_entity(cart))
