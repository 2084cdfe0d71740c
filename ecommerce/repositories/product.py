"""Product data access."""

from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import delete, func, select

from ..models import CartItem, Product
from .base import BaseRepository

PRODUCT_ORDERINGS = {
    "name": Product.name.asc(),
    "name_desc": Product.name.desc(),
    "price": Product.price.asc(),
    "price_desc": Product.price.desc(),
    "created": Product.created_at.asc(),
    "created_desc": Product.created_at.desc(),
}


class ProductRepository(BaseRepository):
    model = Product

    async def name_exists(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        criteria = [func.lower(Product.name) == name.strip().lower()]
        if exclude_id is not None:
            criteria.append(Product.id != exclude_id)
        return await self.exists(*criteria)

    async def get_many(self, ids: Iterable[UUID]) -> dict[UUID, Product]:
        ids = list(set(ids))
        if not ids:
            return {}
        result = await self.session.execute(select(Product).where(Product.id.in_(ids)))
        return {product.id: product for product in result.scalars().all()}

    async def search(
        self,
        page: int,
        page_size: int,
        category_id: Optional[UUID] = None,
        order_by: Optional[str] = None,
    ) -> tuple[list[Product], int]:
        criteria = []
        if category_id is not None:
            criteria.append(Product.category_id == category_id)

        total = await self.count(*criteria)
        ordering = PRODUCT_ORDERINGS.get(order_by or "name", Product.name.asc())
        stmt = (
            select(Product)
            .where(*criteria)
            .order_by(ordering, Product.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def remove_from_carts(self, product_id: UUID) -> int:
        """Delete cart lines that reference a product."""
        result = await self.session.execute(
            delete(CartItem).where(CartItem.product_id == product_id)
        )
        return result.rowcount or 0
