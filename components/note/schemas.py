"""Note schemas for request and response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class NoteCreate(BaseModel):
    """A note targets exactly one category or one category group."""
    content: str = Field(..., min_length=1)
    category_id: Optional[int] = None
    category_group_id: Optional[int] = None

    @model_validator(mode="after")
    def single_target(self):
        if (self.category_id is None) == (self.category_group_id is None):
            raise ValueError("Exactly one of category_id or category_group_id is required")
        return self


class NoteUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class Note(BaseModel):
    """Schema for note response."""
    id: int
    plan_id: int
    category_id: Optional[int] = None
    category_group_id: Optional[int] = None
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
