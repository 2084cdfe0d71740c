"""Category endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from ...features.categories.commands import (
    CreateCategoryCommand,
    DeleteCategoryCommand,
    UpdateCategoryCommand,
)
from ...features.categories.queries import GetAllCategoriesQuery, GetCategoryByIdQuery
from ...pipeline.mediator import RequestPipeline
from ..deps import get_pipeline
from ..responses import to_created_response, to_response

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


class CategoryWrite(BaseModel):
    name: str = Field(..., description="Category name")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryWrite, pipeline: RequestPipeline = Depends(get_pipeline)):
    return to_created_response(await pipeline.dispatch(CreateCategoryCommand(name=body.name)))


@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_category(
    category_id: UUID, body: CategoryWrite, pipeline: RequestPipeline = Depends(get_pipeline)
):
    result = await pipeline.dispatch(UpdateCategoryCommand(id=category_id, name=body.name))
    return to_response(result, status.HTTP_204_NO_CONTENT)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: UUID, pipeline: RequestPipeline = Depends(get_pipeline)):
    result = await pipeline.dispatch(DeleteCategoryCommand(id=category_id))
    return to_response(result, status.HTTP_204_NO_CONTENT)


@router.get("/{category_id}")
async def get_category(category_id: UUID, pipeline: RequestPipeline = Depends(get_pipeline)):
    return to_response(await pipeline.dispatch(GetCategoryByIdQuery(id=category_id)))


@router.get("")
async def list_categories(
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(10, description="Items per page"),
    search: Optional[str] = Query(None, description="Name filter"),
    order_by: Optional[str] = Query(None, description="name, name_desc, created, created_desc"),
    pipeline: RequestPipeline = Depends(get_pipeline),
):
    query = GetAllCategoriesQuery(page=page, page_size=page_size, search=search, order_by=order_by)
    return to_response(await pipeline.dispatch(query))
