"""Budget schemas for request and response validation."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from components.account.schemas import Account
from components.core.schemas import Money
from components.plan.models import Role


class BudgetLineUpdate(BaseModel):
    """Assigned amount for a category in a month (``YYYY-MM``, default current)."""
    budgeted: Money
    month: Optional[str] = None


class BudgetLine(BaseModel):
    """Schema for a stored budget row."""
    plan_id: int
    category_id: int
    month: date
    budgeted: float
    activity: float
    available: float

    class Config:
        from_attributes = True


class CategorySummary(BaseModel):
    id: int
    name: str
    sort_order: int
    budgeted: float = 0
    activity: float = 0
    available: float = 0


class CategoryGroupSummary(BaseModel):
    id: int
    name: str
    sort_order: int
    budgeted: float = 0
    activity: float = 0
    available: float = 0
    categories: List[CategorySummary] = []


class PlanSummary(BaseModel):
    """Monthly budget overview of a plan."""
    plan_id: int
    plan_name: str
    currency: str
    month: date
    user_role: Role
    total_income: float
    total_budgeted: float
    total_activity: float
    total_available: float
    to_be_budgeted: float
    category_groups: List[CategoryGroupSummary]
    accounts: List[Account]
