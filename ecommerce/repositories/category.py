"""Category data access."""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select

from ..models import Category, Product
from .base import BaseRepository

CATEGORY_ORDERINGS = {
    "name": Category.name.asc(),
    "name_desc": Category.name.desc(),
    "created": Category.created_at.asc(),
    "created_desc": Category.created_at.desc(),
}


class CategoryRepository(BaseRepository):
    model = Category

    async def name_exists(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        """Case-insensitive name uniqueness check."""
        criteria = [func.lower(Category.name) == name.strip().lower()]
        if exclude_id is not None:
            criteria.append(Category.id != exclude_id)
        return await self.exists(*criteria)

    async def has_products(self, category_id: UUID) -> bool:
        return await self.exists(Product.category_id == category_id)

    async def search(
        self,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> tuple[list[Category], int]:
        criteria = []
        if search:
            criteria.append(Category.name.icontains(search, autoescape=True))

        total = await self.count(*criteria)
        ordering = CATEGORY_ORDERINGS.get(order_by or "name", Category.name.asc())
        stmt = (
            select(Category)
            .where(*criteria)
            .order_by(ordering, Category.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
