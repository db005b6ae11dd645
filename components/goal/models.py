"""Goal model for the database."""

import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    Enum,
    CheckConstraint,
)

from components.core.database import Base


class GoalType(str, enum.Enum):
    TARGET_BALANCE = "TARGET_BALANCE"
    TARGET_BALANCE_BY_DATE = "TARGET_BALANCE_BY_DATE"
    PERIODIC_FUNDING = "PERIODIC_FUNDING"
    PERCENT_OF_INCOME = "PERCENT_OF_INCOME"
    CUSTOM = "CUSTOM"


class FundingPeriod(str, enum.Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Goal(Base):
    """Savings or spending goal attached to a category or a category group.

    The columns are a flat storage of the per-type parameters; callers go
    through ``components.goal.schemas`` which only admits valid combinations.
    """
    __tablename__ = "goals"
    __table_args__ = (
        CheckConstraint(
            "(category_id IS NULL) <> (category_group_id IS NULL)",
            name="ck_goal_single_target",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True, index=True)
    category_group_id = Column(
        Integer, ForeignKey("category_groups.id", ondelete="CASCADE"), nullable=True, index=True
    )
    type = Column(Enum(GoalType), nullable=False)
    name = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    target_amount = Column(Numeric(12, 2), nullable=True)
    target_date = Column(Date, nullable=True)
    period = Column(Enum(FundingPeriod), nullable=True)
    periodic_amount = Column(Numeric(12, 2), nullable=True)
    weekly_day = Column(Integer, nullable=True)  # 0 = Monday
    percentage = Column(Numeric(5, 2), nullable=True)
    current_amount = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
