"""Plan schemas for request and response validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from components.plan.models import Role


class PlanCreate(BaseModel):
    """Schema for creating a plan."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    currency: str = Field("USD", min_length=3, max_length=3)


class PlanUpdate(BaseModel):
    """Schema for editing plan settings."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class PlanRename(BaseModel):
    name: str = Field(..., max_length=50)


class Plan(BaseModel):
    """Schema for plan response."""
    id: int
    name: str
    description: Optional[str] = None
    currency: str
    created_at: datetime

    class Config:
        from_attributes = True


class PlanDetail(Plan):
    """Plan with the caller's role and headcount."""
    user_role: Role
    member_count: int


class Member(BaseModel):
    user_id: int
    name: Optional[str] = None
    email: str
    role: Role
    joined_at: datetime


class MemberList(BaseModel):
    members: List[Member]
    current_user_role: Role
