"""Transaction schemas for request and response validation."""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from components.core.schemas import Money
from components.transaction.models import ClearedStatus


class TransactionBase(BaseModel):
    date: datetime.date
    amount: Money
    from_account_id: int
    to_account_id: Optional[int] = None
    category_id: Optional[int] = None
    payee: Optional[str] = Field(None, max_length=255)
    memo: Optional[str] = Field(None, max_length=500)
    cleared: ClearedStatus = ClearedStatus.UNCLEARED
    flag_color: Optional[str] = Field(None, max_length=20)


class TransactionCreate(TransactionBase):
    """Schema for recording a transaction. Negative amounts are outflows."""
    pass


class TransactionUpdate(BaseModel):
    """Schema for editing a transaction. Unset fields keep their value."""
    date: Optional[datetime.date] = None
    amount: Optional[Money] = None
    from_account_id: Optional[int] = None
    to_account_id: Optional[int] = None
    category_id: Optional[int] = None
    payee: Optional[str] = Field(None, max_length=255)
    memo: Optional[str] = Field(None, max_length=500)
    cleared: Optional[ClearedStatus] = None
    flag_color: Optional[str] = Field(None, max_length=20)


class Transaction(TransactionBase):
    """Schema for transaction response."""
    id: int
    plan_id: int
    is_transfer: bool
    created_at: datetime.datetime

    class Config:
        from_attributes = True
