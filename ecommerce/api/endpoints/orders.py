"""Order endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from ...features.orders.commands import (
    CancelOrderCommand,
    OrderItemRequest,
    PlaceOrderCommand,
    UpdateOrderStatusCommand,
)
from ...features.orders.queries import GetAllOrdersQuery, GetOrdersByUserQuery
from ...models import OrderStatus
from ...pipeline.mediator import RequestPipeline
from ..deps import get_current_user_id, get_pipeline
from ..responses import to_created_response, to_response

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


class OrderLine(BaseModel):
    product_id: UUID
    quantity: int


class OrderPlace(BaseModel):
    shipping_address: str = Field(..., description="Delivery address")
    billing_address: Optional[str] = Field(None, description="Defaults to the shipping address")
    items: List[OrderLine] = Field(default_factory=list)


class OrderStatusChange(BaseModel):
    status: OrderStatus


@router.post("", status_code=status.HTTP_201_CREATED)
async def place_order(
    body: OrderPlace,
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    command = PlaceOrderCommand(
        user_id=user_id,
        shipping_address=body.shipping_address,
        billing_address=body.billing_address,
        items=tuple(OrderItemRequest(product_id=line.product_id, quantity=line.quantity) for line in body.items),
    )
    return to_created_response(await pipeline.dispatch(command))


@router.get("")
async def list_my_orders(
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    return to_response(await pipeline.dispatch(GetOrdersByUserQuery(user_id=user_id)))


@router.get("/paged")
async def page_my_orders(
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(10, description="Items per page"),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Only orders in this status"),
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    query = GetAllOrdersQuery(user_id=user_id, page=page, page_size=page_size, status=order_status)
    return to_response(await pipeline.dispatch(query))


@router.post("/{order_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_order(
    order_id: UUID,
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    result = await pipeline.dispatch(CancelOrderCommand(user_id=user_id, order_id=order_id))
    return to_response(result, status.HTTP_204_NO_CONTENT)


@router.put("/{order_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def update_order_status(
    order_id: UUID,
    body: OrderStatusChange,
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    result = await pipeline.dispatch(UpdateOrderStatusCommand(order_id=order_id, status=body.status))
    return to_response(result, status.HTTP_204_NO_CONTENT)
