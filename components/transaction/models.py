"""Transaction model for the database."""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Enum

from components.core.database import Base


class ClearedStatus(str, enum.Enum):
    UNCLEARED = "UNCLEARED"
    CLEARED = "CLEARED"
    RECONCILED = "RECONCILED"


class Transaction(Base):
    """Money movement out of an account, into a category or another account."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payee = Column(String(255), nullable=True)
    memo = Column(String(500), nullable=True)
    from_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    to_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    cleared = Column(Enum(ClearedStatus), nullable=False, default=ClearedStatus.UNCLEARED)
    flag_color = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    @property
    def is_transfer(self) -> bool:
        return self.to_account_id is not None

    @property
    def posts_to_budget(self) -> bool:
        return self.category_id is not None and self.to_account_id is None
