"""Budget model for the database."""

from sqlalchemy import Column, Integer, Date, ForeignKey, Numeric, UniqueConstraint

from components.core.database import Base


class Budget(Base):
    """Monthly budget line of one category in one plan."""
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("plan_id", "category_id", "month", name="uq_budget_plan_category_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(Date, nullable=False)  # First day of the month
    budgeted = Column(Numeric(12, 2), nullable=False, default=0)
    activity = Column(Numeric(12, 2), nullable=False, default=0)
    available = Column(Numeric(12, 2), nullable=False, default=0)
