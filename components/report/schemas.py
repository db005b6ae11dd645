"""Report schemas for response validation."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class CategorySpending(BaseModel):
    category_id: Optional[int] = None
    category_name: str
    category_group_id: Optional[int] = None
    category_group_name: str
    amount: float
    transaction_count: int
    percentage: float


class GroupSpending(BaseModel):
    category_group_id: Optional[int] = None
    category_group_name: str
    amount: float
    percentage: float


class SpendingReport(BaseModel):
    month: date
    total_spending: float
    transaction_count: int
    by_category: List[CategorySpending]
    by_group: List[GroupSpending]
