"""Cart data access."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select

from ..models import Cart
from .base import BaseRepository


class CartRepository(BaseRepository):
    model = Cart

    async def get_by_user(self, user_id: UUID) -> Optional[Cart]:
        result = await self.session.execute(select(Cart).where(Cart.user_id == user_id))
        return result.scalar_one_or_none()
