"""Account model for the database."""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Numeric, Enum

from components.core.database import Base


class AccountType(str, enum.Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    LINE_OF_CREDIT = "LINE_OF_CREDIT"
    INVESTMENT = "INVESTMENT"
    MORTGAGE = "MORTGAGE"
    LOAN = "LOAN"
    OTHER_ASSET = "OTHER_ASSET"
    OTHER_LIABILITY = "OTHER_LIABILITY"


LIABILITY_TYPES = frozenset({
    AccountType.CREDIT_CARD,
    AccountType.LINE_OF_CREDIT,
    AccountType.MORTGAGE,
    AccountType.LOAN,
    AccountType.OTHER_LIABILITY,
})


class Account(Base):
    """Money account tracked inside a plan."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(Enum(AccountType), nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    is_on_budget = Column(Boolean, nullable=False, default=True)
    is_closed = Column(Boolean, nullable=False, default=False)
    institution = Column(String(100), nullable=True)
    account_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    @property
    def is_liability(self) -> bool:
        return self.type in LIABILITY_TYPES
