"""Order response models."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ...models import Order, OrderStatus


class OrderItemDto(BaseModel):
    product_id: Optional[UUID] = None
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderDto(BaseModel):
    id: UUID
    user_id: UUID
    status: OrderStatus
    shipping_address: str
    billing_address: Optional[str] = None
    total_amount: Decimal
    created_at: datetime
    items: List[OrderItemDto] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDto":
        return cls(
            id=order.id,
            user_id=order.user_id,
            status=OrderStatus(order.status),
            shipping_address=order.shipping_address,
            billing_address=order.billing_address,
            total_amount=order.total_amount,
            created_at=order.created_at,
            items=[
                OrderItemDto(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
        )
