"""Cart endpoints for the calling user."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from ...features.carts.commands import (
    AddToCartCommand,
    ClearCartCommand,
    RemoveFromCartCommand,
    UpdateCartItemQuantityCommand,
)
from ...features.carts.queries import GetCartQuery
from ...pipeline.mediator import RequestPipeline
from ..deps import get_current_user_id, get_pipeline
from ..responses import to_response

router = APIRouter(prefix="/api/v1/cart", tags=["cart"])


class CartItemAdd(BaseModel):
    product_id: UUID
    quantity: int = Field(1, description="Units to add")


class CartItemQuantity(BaseModel):
    quantity: int


@router.get("")
async def get_cart(
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    return to_response(await pipeline.dispatch(GetCartQuery(user_id=user_id)))


@router.post("/items")
async def add_item(
    body: CartItemAdd,
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    command = AddToCartCommand(user_id=user_id, product_id=body.product_id, quantity=body.quantity)
    return to_response(await pipeline.dispatch(command))


@router.put("/items/{product_id}")
async def update_item(
    product_id: UUID,
    body: CartItemQuantity,
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    command = UpdateCartItemQuantityCommand(user_id=user_id, product_id=product_id, quantity=body.quantity)
    return to_response(await pipeline.dispatch(command))


@router.delete("/items/{product_id}")
async def remove_item(
    product_id: UUID,
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    command = RemoveFromCartCommand(user_id=user_id, product_id=product_id)
    return to_response(await pipeline.dispatch(command))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    user_id: Optional[UUID] = Depends(get_current_user_id),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    result = await pipeline.dispatch(ClearCartCommand(user_id=user_id))
    return to_response(result, status.HTTP_204_NO_CONTENT)
