"""Account schemas for request and response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from components.account.models import AccountType
from components.core.schemas import Money


class AccountBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType
    is_on_budget: bool = True
    institution: Optional[str] = Field(None, max_length=100)
    account_number: Optional[str] = Field(None, max_length=50)


class AccountCreate(AccountBase):
    """Schema for creating an account."""
    balance: Money = 0


class AccountUpdate(BaseModel):
    """Schema for editing an account. Balance edits are explicit corrections."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[AccountType] = None
    balance: Optional[Money] = None
    is_on_budget: Optional[bool] = None
    is_closed: Optional[bool] = None
    institution: Optional[str] = Field(None, max_length=100)
    account_number: Optional[str] = Field(None, max_length=50)


class Account(AccountBase):
    """Schema for account response."""
    id: int
    plan_id: int
    balance: float
    is_closed: bool
    is_liability: bool
    created_at: datetime

    class Config:
        from_attributes = True
