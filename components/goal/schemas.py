"""Goal schemas for request and response validation.

A goal's parameters depend on its type, so they travel as a tagged union
discriminated by ``type``.
"""

from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from components.core.schemas import Money
from components.goal.models import FundingPeriod


class TargetBalance(BaseModel):
    """Keep at least this much available."""
    type: Literal["TARGET_BALANCE"]
    target_amount: Money = Field(..., gt=0)


class TargetBalanceByDate(BaseModel):
    """Reach this available amount by a date."""
    type: Literal["TARGET_BALANCE_BY_DATE"]
    target_amount: Money = Field(..., gt=0)
    target_date: date


class PeriodicFunding(BaseModel):
    """Assign a fixed amount every week, month or year."""
    type: Literal["PERIODIC_FUNDING"]
    period: FundingPeriod
    amount: Money = Field(..., gt=0)
    weekly_day: Optional[int] = Field(None, ge=0, le=6)

    @model_validator(mode="after")
    def weekly_day_only_for_weekly(self):
        if self.weekly_day is not None and self.period != FundingPeriod.WEEKLY:
            raise ValueError("weekly_day only applies to weekly funding")
        return self


class PercentOfIncome(BaseModel):
    type: Literal["PERCENT_OF_INCOME"]
    percentage: float = Field(..., gt=0, le=100, allow_inf_nan=False)


class Custom(BaseModel):
    type: Literal["CUSTOM"]
    target_amount: Optional[Money] = Field(None, ge=0)


GoalTarget = Annotated[
    Union[TargetBalance, TargetBalanceByDate, PeriodicFunding, PercentOfIncome, Custom],
    Field(discriminator="type"),
]


class GoalCreate(BaseModel):
    """Create the same goal for several categories and category groups at once."""
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    target: GoalTarget
    category_ids: List[int] = []
    category_group_ids: List[int] = []


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    target: Optional[GoalTarget] = None
    current_amount: Optional[Money] = Field(None, ge=0)


class Goal(BaseModel):
    """Schema for goal response."""
    id: int
    plan_id: int
    category_id: Optional[int] = None
    category_group_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    target: GoalTarget
    current_amount: float
    created_at: datetime
    updated_at: datetime
