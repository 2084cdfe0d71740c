"""Product response models."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ...models import Product


class ProductDto(BaseModel):
    id: UUID = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(default=None, description="Product description")
    price: Decimal = Field(..., description="Unit price")
    stock_quantity: int = Field(..., description="Units available")
    is_active: bool = Field(..., description="Whether the product can be ordered")
    category_id: UUID = Field(..., description="Owning category")
    category_name: Optional[str] = Field(default=None, description="Owning category name")

    @classmethod
    def from_entity(cls, product: Product, include_category: bool = True) -> "ProductDto":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock_quantity=product.stock_quantity,
            is_active=product.is_active,
            category_id=product.category_id,
            category_name=product.category.name if include_category and product.category else None,
        )
