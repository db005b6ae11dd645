"""Repository for transaction operations."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.category.repository import CategoryRepository
from components.core.exceptions import InvalidInput, InvalidTransfer, NotFound
from components.core.utils import first_of_month, to_decimal
from components.ledger.repository import LedgerRepository
from components.plan.models import GroupMember
from components.plan.permissions import first_membership, require_editor
from components.transaction import schemas
from components.transaction.models import Transaction

logger = logging.getLogger(__name__)

POSTING_FIELDS = ("date", "amount", "from_account_id", "to_account_id", "category_id")


class TransactionRepository:
    """Repository for transaction operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.ledger = LedgerRepository(session)

    async def list(
        self,
        plan_id: int,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        month: Optional[date] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Transaction]:
        """Transactions of a plan, newest first, with optional filtering."""
        query = select(Transaction).where(Transaction.plan_id == plan_id)
        if account_id is not None:
            query = query.where(or_(
                Transaction.from_account_id == account_id,
                Transaction.to_account_id == account_id,
            ))
        if category_id is not None:
            query = query.where(Transaction.category_id == category_id)
        if month is not None:
            start = first_of_month(month)
            end = date(start.year + (start.month == 12), start.month % 12 + 1, 1)
            query = query.where(Transaction.date >= start, Transaction.date < end)

        query = query.order_by(Transaction.date.desc(), Transaction.id.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, plan_id: int, transaction_id: int) -> Transaction:
        result = await self.session.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.plan_id == plan_id,
            )
        )
        txn = result.scalar_one_or_none()
        if txn is None:
            raise NotFound("Transaction not found", transaction_id=transaction_id)
        return txn

    async def _validate(self, membership: GroupMember, values: dict) -> None:
        """Check a posting before anything is written."""
        if values.get("date") is None:
            raise InvalidInput("Transaction date is required")
        if values.get("amount") is None or to_decimal(values["amount"]) == 0:
            raise InvalidInput("Transaction amount must not be zero")
        if values.get("from_account_id") is None:
            raise InvalidInput("From account is required")

        from_id = values["from_account_id"]
        to_id = values.get("to_account_id")
        if to_id is not None and to_id == from_id:
            raise InvalidTransfer("Cannot transfer to the same account", account_id=from_id)

        # Accounts live in the transaction's plan or are shared from the first plan
        plan_ids = [membership.plan_id]
        source = await first_membership(self.session, membership.user_id)
        if source is not None and source.plan_id not in plan_ids:
            plan_ids.append(source.plan_id)
        accounts = AccountRepository(self.session)
        for account_id in (from_id, to_id):
            if account_id is not None and await accounts.find_in_plans(account_id, plan_ids) is None:
                raise NotFound("Account not found", account_id=account_id)

        if values.get("category_id") is not None:
            await CategoryRepository(self.session).get_category(membership.plan_id, values["category_id"])

    async def create(self, membership: GroupMember, data: schemas.TransactionCreate) -> Transaction:
        """Record a transaction and post it to balances and budgets atomically."""
        require_editor(membership, "transactions")
        values = data.model_dump()
        await self._validate(membership, values)
        values["amount"] = to_decimal(values["amount"])

        txn = Transaction(plan_id=membership.plan_id, **values)
        try:
            self.session.add(txn)
            await self.session.flush()
            await self.ledger.post_transaction(txn)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(txn)
        return txn

    async def update(
        self, membership: GroupMember, transaction_id: int, data: schemas.TransactionUpdate
    ) -> Transaction:
        """Edit a transaction: the old posting is reversed and the new one applied."""
        require_editor(membership, "transactions")
        txn = await self.get(membership.plan_id, transaction_id)

        changes = data.model_dump(exclude_unset=True)
        if "cleared" in changes and changes["cleared"] is None:
            del changes["cleared"]
        values = {field: getattr(txn, field) for field in POSTING_FIELDS}
        values.update({field: changes[field] for field in POSTING_FIELDS if field in changes})
        await self._validate(membership, values)
        if "amount" in changes:
            changes["amount"] = to_decimal(changes["amount"])

        try:
            await self.ledger.reverse_transaction(txn)
            for field, value in changes.items():
                setattr(txn, field, value)
            await self.session.flush()
            await self.ledger.post_transaction(txn)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(txn)
        logger.info("Transaction %s updated: %s", txn.id, sorted(changes))
        return txn

    async def delete(self, membership: GroupMember, transaction_id: int) -> None:
        """Delete a transaction and undo its effect on balances and budgets."""
        require_editor(membership, "transactions")
        txn = await self.get(membership.plan_id, transaction_id)
        try:
            await self.ledger.reverse_transaction(txn)
            await self.session.delete(txn)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Transaction %s deleted", transaction_id)
