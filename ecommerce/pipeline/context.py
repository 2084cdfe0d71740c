"""
Request Context

Explicit dependency bundle handed to handlers, validators and behaviors
for the lifetime of one request.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..core.localization import Localizer
from ..repositories import (
    CartRepository,
    CategoryRepository,
    OrderRepository,
    ProductRepository,
)
from ..services.cache.cache_manager import CacheManager
from ..services.unit_of_work import UnitOfWork


@dataclass
class RequestContext:
    session: AsyncSession
    cache: CacheManager
    settings: Settings
    localizer: Localizer = field(default_factory=Localizer)
    current_user_id: Optional[UUID] = None
    unit_of_work: Optional[UnitOfWork] = None

    def __post_init__(self) -> None:
        if self.unit_of_work is None:
            self.unit_of_work = UnitOfWork(
                self.session,
                max_attempts=self.settings.UOW_MAX_ATTEMPTS,
                min_wait=self.settings.UOW_RETRY_MIN_WAIT_SECONDS,
                max_wait=self.settings.UOW_RETRY_MAX_WAIT_SECONDS,
            )

    @cached_property
    def categories(self) -> CategoryRepository:
        return CategoryRepository(self.session)

    @cached_property
    def products(self) -> ProductRepository:
        return ProductRepository(self.session)

    @cached_property
    def carts(self) -> CartRepository:
        return CartRepository(self.session)

    @cached_property
    def orders(self) -> OrderRepository:
        return OrderRepository(self.session)
