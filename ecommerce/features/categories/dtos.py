"""Category response models."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryDto(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Category identifier")
    name: str = Field(..., description="Category name")
