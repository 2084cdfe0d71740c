"""Product and stock endpoints."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from ...features.products.commands import (
    CreateProductCommand,
    DeleteProductCommand,
    SetProductActiveCommand,
    UpdateProductCommand,
    UpdateProductStockCommand,
)
from ...features.products.queries import (
    GetAllProductsQuery,
    GetProductByIdQuery,
    GetProductStockInfoQuery,
)
from ...pipeline.mediator import RequestPipeline
from ..deps import get_pipeline
from ..responses import to_created_response, to_response

router = APIRouter(prefix="/api/v1/products", tags=["products"])


class ProductWrite(BaseModel):
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., description="Unit price")
    category_id: UUID = Field(..., description="Owning category")


class ProductCreate(ProductWrite):
    stock_quantity: int = Field(0, description="Initial stock")


class StockUpdate(BaseModel):
    quantity: int = Field(..., description="New stock quantity")


class ActiveUpdate(BaseModel):
    is_active: bool


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductCreate, pipeline: RequestPipeline = Depends(get_pipeline)):
    command = CreateProductCommand(
        name=body.name,
        description=body.description,
        price=body.price,
        category_id=body.category_id,
        stock_quantity=body.stock_quantity,
    )
    return to_created_response(await pipeline.dispatch(command))


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_product(
    product_id: UUID, body: ProductWrite, pipeline: RequestPipeline = Depends(get_pipeline)
):
    command = UpdateProductCommand(
        id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category_id=body.category_id,
    )
    return to_response(await pipeline.dispatch(command), status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: UUID, pipeline: RequestPipeline = Depends(get_pipeline)):
    result = await pipeline.dispatch(DeleteProductCommand(id=product_id))
    return to_response(result, status.HTTP_204_NO_CONTENT)


@router.put("/{product_id}/stock", status_code=status.HTTP_204_NO_CONTENT)
async def update_stock(
    product_id: UUID, body: StockUpdate, pipeline: RequestPipeline = Depends(get_pipeline)
):
    result = await pipeline.dispatch(UpdateProductStockCommand(id=product_id, quantity=body.quantity))
    return to_response(result, status.HTTP_204_NO_CONTENT)


@router.put("/{product_id}/active", status_code=status.HTTP_204_NO_CONTENT)
async def set_active(
    product_id: UUID, body: ActiveUpdate, pipeline: RequestPipeline = Depends(get_pipeline)
):
    result = await pipeline.dispatch(SetProductActiveCommand(id=product_id, is_active=body.is_active))
    return to_response(result, status.HTTP_204_NO_CONTENT)


@router.get("/{product_id}/stock")
async def get_stock_info(product_id: UUID, pipeline: RequestPipeline = Depends(get_pipeline)):
    result = await pipeline.dispatch(GetProductStockInfoQuery(product_id=product_id))
    return to_response(result)


@router.get("/{product_id}")
async def get_product(product_id: UUID, pipeline: RequestPipeline = Depends(get_pipeline)):
    return to_response(await pipeline.dispatch(GetProductByIdQuery(id=product_id)))


@router.get("")
async def list_products(
    page: int = Query(1),
    page_size: int = Query(10),
    category_id: Optional[UUID] = Query(None),
    include_category: bool = Query(False),
    order_by: Optional[str] = Query(None, description="name, price, created; append _desc to reverse"),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    query = GetAllProductsQuery(
        page=page,
        page_size=page_size,
        category_id=category_id,
        include_category=include_category,
        order_by=order_by,
    )
    return to_response(await pipeline.dispatch(query))
