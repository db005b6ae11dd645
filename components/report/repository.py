"""Spending reports computed with pandas."""

from datetime import date
from typing import Optional

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.models import CategoryGroup, Category
from components.core.utils import first_of_month
from components.report import schemas
from components.transaction.models import Transaction

UNCATEGORIZED = "Uncategorized"


def next_month(month: date) -> date:
    return date(month.year + (month.month == 12), month.month % 12 + 1, 1)


class ReportRepository:
    """Repository for report queries."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def _spending_frame(
        self,
        plan_id: int,
        month: date,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> pd.DataFrame:
        """Expense transactions of the month, one row each, amounts as positive spend."""
        query = (
            select(
                Transaction.id,
                Transaction.amount,
                Category.id.label("category_id"),
                Category.name.label("category_name"),
                CategoryGroup.id.label("category_group_id"),
                CategoryGroup.name.label("category_group_name"),
            )
            .outerjoin(Category, Category.id == Transaction.category_id)
            .outerjoin(CategoryGroup, CategoryGroup.id == Category.category_group_id)
            .where(
                Transaction.plan_id == plan_id,
                Transaction.amount < 0,
                Transaction.to_account_id.is_(None),
                Transaction.date >= month,
                Transaction.date < next_month(month),
            )
        )
        if category_id is not None:
            query = query.where(Transaction.category_id == category_id)
        if account_id is not None:
            query = query.where(Transaction.from_account_id == account_id)

        result = await self.session.execute(query)
        df = pd.DataFrame(
            result.all(),
            columns=["id", "amount", "category_id", "category_name", "category_group_id", "category_group_name"],
        )
        df["amount"] = df["amount"].astype(float).abs()
        df["category_name"] = df["category_name"].fillna(UNCATEGORIZED)
        df["category_group_name"] = df["category_group_name"].fillna(UNCATEGORIZED)
        # Keep the uncategorized bucket through groupby
        df["category_id"] = df["category_id"].astype("Int64")
        df["category_group_id"] = df["category_group_id"].astype("Int64")
        return df

    async def spending(
        self,
        plan_id: int,
        month: date,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> schemas.SpendingReport:
        """Spending of a month by category and by category group, largest first."""
        month = first_of_month(month)
        df = await self._spending_frame(plan_id, month, category_id, account_id)
        total = float(df["amount"].sum()) if not df.empty else 0.0

        def share(amount: float) -> float:
            return round(amount / total * 100, 2) if total else 0.0

        def optional_id(value) -> Optional[int]:
            return None if pd.isna(value) else int(value)

        by_category = []
        by_group = []
        if not df.empty:
            categories = (
                df.groupby(
                    ["category_id", "category_name", "category_group_id", "category_group_name"],
                    dropna=False,
                )
                .agg(amount=("amount", "sum"), transaction_count=("id", "count"))
                .reset_index()
                .sort_values("amount", ascending=False)
            )
            by_category = [
                schemas.CategorySpending(
                    category_id=optional_id(row.category_id),
                    category_name=row.category_name,
                    category_group_id=optional_id(row.category_group_id),
                    category_group_name=row.category_group_name,
                    amount=round(float(row.amount), 2),
                    transaction_count=int(row.transaction_count),
                    percentage=share(float(row.amount)),
                )
                for row in categories.itertuples(index=False)
            ]

            groups = (
                df.groupby(["category_group_id", "category_group_name"], dropna=False)["amount"]
                .sum()
                .reset_index()
                .sort_values("amount", ascending=False)
            )
            by_group = [
                schemas.GroupSpending(
                    category_group_id=optional_id(row.category_group_id),
                    category_group_name=row.category_group_name,
                    amount=round(float(row.amount), 2),
                    percentage=share(float(row.amount)),
                )
                for row in groups.itertuples(index=False)
            ]

        return schemas.SpendingReport(
            month=month,
            total_spending=round(total, 2),
            transaction_count=int(len(df)),
            by_category=by_category,
            by_group=by_group,
        )
