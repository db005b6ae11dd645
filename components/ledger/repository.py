"""Ledger: account balances, category activity and the monthly budget summary.

Every write here is a single SQL statement evaluated by the database
(``balance = balance + x``, ``INSERT ... ON CONFLICT DO UPDATE``), so two
requests touching the same account or budget row never lose an update.
None of the write methods commit; callers group them into one transaction.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from components.account.models import Account
from components.account.repository import AccountRepository
from components.account.schemas import Account as AccountSchema
from components.budget import schemas
from components.budget.models import Budget
from components.category.models import CategoryGroup
from components.core.exceptions import NotFound
from components.core.utils import first_of_month, to_decimal
from components.plan.models import GroupMember, Plan
from components.plan.permissions import first_membership
from components.transaction.models import Transaction

logger = logging.getLogger(__name__)

BUDGET_KEY = ("plan_id", "category_id", "month")
ZERO = Decimal("0.00")


class LedgerRepository:
    """Repository for ledger operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def adjust_balance(self, account_id: int, delta: Decimal) -> None:
        await self.session.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + delta)
            .execution_options(synchronize_session=False)
        )

    async def _upsert_budget(
        self,
        values: Dict[str, object],
        on_conflict: Callable[[object], Dict[str, object]],
    ) -> None:
        """Insert a budget row or update the existing one in one statement.

        ``on_conflict`` receives the proposed row (``excluded``/``inserted``)
        and returns the column assignments for the existing row.
        """
        dialect = (await self.session.connection()).dialect.name
        if dialect == "mysql":
            stmt = mysql.insert(Budget).values(**values)
            stmt = stmt.on_duplicate_key_update(**on_conflict(stmt.inserted))
        elif dialect in ("postgresql", "sqlite"):
            module = postgresql if dialect == "postgresql" else sqlite
            stmt = module.insert(Budget).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=list(BUDGET_KEY),
                set_=on_conflict(stmt.excluded),
            )
        else:
            raise NotImplementedError(f"Budget upsert is not supported on {dialect}")
        await self.session.execute(stmt)

    async def add_activity(self, plan_id: int, category_id: int, month: date, amount: Decimal) -> None:
        """Add to a category's activity for the month and take it out of available."""
        await self._upsert_budget(
            {
                "plan_id": plan_id,
                "category_id": category_id,
                "month": first_of_month(month),
                "budgeted": ZERO,
                "activity": amount,
                "available": -amount,
            },
            lambda new: {
                "activity": Budget.activity + amount,
                "available": Budget.available - amount,
            },
        )

    async def post_transaction(self, txn: Transaction) -> None:
        """Apply a transaction's effect on balances and the month's budget."""
        await self._apply(txn, 1)
        logger.info(
            "Posted transaction %s: %s from account %s to %s, category %s",
            txn.id, txn.amount, txn.from_account_id, txn.to_account_id, txn.category_id,
        )

    async def reverse_transaction(self, txn: Transaction) -> None:
        """Undo what post_transaction did for the same row."""
        await self._apply(txn, -1)
        logger.info("Reversed transaction %s", txn.id)

    async def _apply(self, txn: Transaction, sign: int) -> None:
        amount = to_decimal(txn.amount)
        await self.adjust_balance(txn.from_account_id, -amount * sign)
        if txn.to_account_id is not None:
            # Transfers move money between accounts and never touch budgets
            await self.adjust_balance(txn.to_account_id, amount * sign)
        elif txn.category_id is not None:
            # Income and expenses both count as activity by magnitude
            await self.add_activity(txn.plan_id, txn.category_id, txn.date, abs(amount) * sign)

    async def update_budget_line(
        self,
        plan_id: int,
        category_id: int,
        month: date,
        budgeted: float,
    ) -> Budget:
        """Set the assigned amount; available becomes budgeted minus activity. Idempotent."""
        amount = to_decimal(budgeted)
        month = first_of_month(month)
        await self._upsert_budget(
            {
                "plan_id": plan_id,
                "category_id": category_id,
                "month": month,
                "budgeted": amount,
                "activity": ZERO,
                "available": amount,
            },
            lambda new: {
                "budgeted": new.budgeted,
                "available": new.budgeted - Budget.activity,
            },
        )
        budget = await self.get_budget(plan_id, category_id, month)
        logger.info("Budget for category %s in %s set to %s", category_id, month, amount)
        return budget

    async def get_budget(self, plan_id: int, category_id: int, month: date) -> Optional[Budget]:
        result = await self.session.execute(
            select(Budget)
            .where(
                Budget.plan_id == plan_id,
                Budget.category_id == category_id,
                Budget.month == first_of_month(month),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def total_income(self, user_id: int) -> Decimal:
        """
        Money available to budget for a user.

        Accounts are tracked once, in the user's first-joined plan, and shared
        by every plan the user belongs to. The income figure is therefore the
        sum of open account balances of that first plan, whichever plan is
        being viewed.
        """
        source = await first_membership(self.session, user_id)
        if source is None:
            return ZERO
        result = await self.session.execute(
            select(func.coalesce(func.sum(Account.balance), 0)).where(
                Account.plan_id == source.plan_id,
                Account.is_closed.is_(False),
            )
        )
        return to_decimal(result.scalar_one())

    async def income_accounts(self, user_id: int) -> List[Account]:
        source = await first_membership(self.session, user_id)
        if source is None:
            return []
        return await AccountRepository(self.session).list(source.plan_id)

    async def plan_summary(self, membership: GroupMember, month: date) -> schemas.PlanSummary:
        """Totals of visible categories for the month and the amount left to budget."""
        month = first_of_month(month)
        result = await self.session.execute(select(Plan).where(Plan.id == membership.plan_id))
        plan = result.scalar_one_or_none()
        if plan is None:
            raise NotFound("Plan not found")

        result = await self.session.execute(
            select(CategoryGroup)
            .where(CategoryGroup.plan_id == plan.id, CategoryGroup.is_hidden.is_(False))
            .order_by(CategoryGroup.sort_order, CategoryGroup.id)
            .options(selectinload(CategoryGroup.categories))
        )
        groups = result.scalars().all()

        result = await self.session.execute(
            select(Budget)
            .where(Budget.plan_id == plan.id, Budget.month == month)
            .execution_options(populate_existing=True)
        )
        budgets = {budget.category_id: budget for budget in result.scalars().all()}

        total_budgeted = total_activity = total_available = ZERO
        group_summaries = []
        for group in groups:
            category_summaries = []
            group_totals = [ZERO, ZERO, ZERO]
            visible = sorted(
                (category for category in group.categories if not category.is_hidden),
                key=lambda category: (category.sort_order, category.id),
            )
            for category in visible:
                budget = budgets.get(category.id)
                line = (
                    (to_decimal(budget.budgeted), to_decimal(budget.activity), to_decimal(budget.available))
                    if budget else (ZERO, ZERO, ZERO)
                )
                group_totals = [total + value for total, value in zip(group_totals, line)]
                category_summaries.append(schemas.CategorySummary(
                    id=category.id,
                    name=category.name,
                    sort_order=category.sort_order,
                    budgeted=float(line[0]),
                    activity=float(line[1]),
                    available=float(line[2]),
                ))
            total_budgeted += group_totals[0]
            total_activity += group_totals[1]
            total_available += group_totals[2]
            group_summaries.append(schemas.CategoryGroupSummary(
                id=group.id,
                name=group.name,
                sort_order=group.sort_order,
                budgeted=float(group_totals[0]),
                activity=float(group_totals[1]),
                available=float(group_totals[2]),
                categories=category_summaries,
            ))

        income = await self.total_income(membership.user_id)
        accounts = await self.income_accounts(membership.user_id)
        return schemas.PlanSummary(
            plan_id=plan.id,
            plan_name=plan.name,
            currency=plan.currency,
            month=month,
            user_role=membership.role,
            total_income=float(income),
            total_budgeted=float(total_budgeted),
            total_activity=float(total_activity),
            total_available=float(total_available),
            to_be_budgeted=float(income - total_budgeted),
            category_groups=group_summaries,
            accounts=[AccountSchema.model_validate(account) for account in accounts],
        )
