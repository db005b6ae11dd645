"""Category schemas for request and response validation."""

from typing import List, Optional

from pydantic import BaseModel, Field

from components.core.schemas import Money


class CategoryGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryGroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_hidden: Optional[bool] = None


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(BaseModel):
    """Rename, hide, or set the budgeted amount for a month (``YYYY-MM``)."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_hidden: Optional[bool] = None
    budgeted: Optional[Money] = None
    month: Optional[str] = None


class CategoryMove(BaseModel):
    category_id: int
    target_group_id: int


class Category(BaseModel):
    """Schema for category response."""
    id: int
    category_group_id: int
    name: str
    sort_order: int
    is_hidden: bool

    class Config:
        from_attributes = True


class CategoryGroup(BaseModel):
    """Schema for category group response."""
    id: int
    plan_id: int
    name: str
    sort_order: int
    is_hidden: bool

    class Config:
        from_attributes = True


class CategoryGroupWithCategories(CategoryGroup):
    categories: List[Category] = []
