"""Cart response models."""

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ...models import Cart


class CartItemDto(BaseModel):
    product_id: UUID
    product_name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartDto(BaseModel):
    id: Optional[UUID] = Field(default=None, description="Cart identifier, empty when no cart exists yet")
    user_id: UUID
    items: List[CartItemDto] = Field(default_factory=list)
    total_items: int = 0
    total_amount: Decimal = Decimal("0")

    @classmethod
    def from_entity(cls, cart: Cart) -> "CartDto":
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            items=[
                CartItemDto(
                    product_id=item.product_id,
                    product_name=item.product.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=item.line_total,
                )
                for item in cart.items
            ],
            total_items=cart.total_items,
            total_amount=cart.total_amount,
        )

    @classmethod
    def empty(cls, user_id: UUID) -> "CartDto":
        return cls(user_id=user_id)


class CartSummaryDto(BaseModel):
    cart_id: UUID
    total_items: int
    total_amount: Decimal
