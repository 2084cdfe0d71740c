"""Order data access."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select

from ..models import Order
from .base import BaseRepository


class OrderRepository(BaseRepository):
    model = Order

    async def list_by_user(self, user_id: UUID, limit: int = 100) -> list[Order]:
        """Orders of one user, newest first."""
        return await self.list(
            Order.user_id == user_id,
            limit=limit,
            order_by=(Order.created_at.desc(), Order.id),
        )

    async def search_by_user(
        self,
        user_id: UUID,
        page: int,
        page_size: int,
        status: Optional[str] = None,
    ) -> tuple[list[Order], int]:
        criteria = [Order.user_id == user_id]
        if status is not None:
            criteria.append(Order.status == status)

        total = await self.count(*criteria)
        stmt = (
            select(Order)
            .where(*criteria)
            .order_by(Order.created_at.desc(), Order.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
