"""Repository for account operations."""

import logging
from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from components.account import schemas
from components.account.models import Account
from components.core.exceptions import InvalidState, NotFound
from components.core.utils import to_decimal
from components.plan.models import GroupMember
from components.plan.permissions import require_editor
from components.transaction.models import Transaction

logger = logging.getLogger(__name__)

ACCOUNT_ORDER = (
    Account.is_on_budget.desc(),
    Account.is_closed.asc(),
    Account.type.asc(),
    Account.name.asc(),
)


class AccountRepository:
    """Repository for account operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def list(self, plan_id: int) -> List[Account]:
        """Accounts of a plan: on-budget first, open before closed, then type and name."""
        result = await self.session.execute(
            select(Account)
            .where(Account.plan_id == plan_id)
            .order_by(*ACCOUNT_ORDER)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get(self, plan_id: int, account_id: int) -> Account:
        result = await self.session.execute(
            select(Account)
            .where(Account.id == account_id, Account.plan_id == plan_id)
            .execution_options(populate_existing=True)
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise NotFound("Account not found", account_id=account_id)
        return account

    async def find_in_plans(self, account_id: int, plan_ids: List[int]) -> Optional[Account]:
        result = await self.session.execute(
            select(Account).where(Account.id == account_id, Account.plan_id.in_(plan_ids))
        )
        return result.scalar_one_or_none()

    async def create(self, membership: GroupMember, data: schemas.AccountCreate) -> Account:
        require_editor(membership, "accounts")
        account = Account(
            plan_id=membership.plan_id,
            name=data.name.strip(),
            type=data.type,
            balance=to_decimal(data.balance),
            is_on_budget=data.is_on_budget,
            institution=data.institution,
            account_number=data.account_number,
        )
        self.session.add(account)
        await self.session.commit()
        await self.session.refresh(account)
        logger.info("Account %s created in plan %s", account.id, account.plan_id)
        return account

    async def update(self, membership: GroupMember, account_id: int, data: schemas.AccountUpdate) -> Account:
        require_editor(membership, "accounts")
        account = await self.get(membership.plan_id, account_id)

        changes = data.model_dump(exclude_unset=True)
        if "balance" in changes and changes["balance"] is not None:
            changes["balance"] = to_decimal(changes["balance"])
        if changes.get("name") is not None:
            changes["name"] = changes["name"].strip()
        for field, value in changes.items():
            if value is None and field not in ("institution", "account_number"):
                continue
            setattr(account, field, value)

        await self.session.commit()
        await self.session.refresh(account)
        logger.info("Account %s updated: %s", account.id, sorted(changes))
        return account

    async def delete(self, membership: GroupMember, account_id: int) -> None:
        """Delete an account that no transaction refers to."""
        require_editor(membership, "accounts")
        account = await self.get(membership.plan_id, account_id)

        result = await self.session.execute(
            select(Transaction.id)
            .where(or_(
                Transaction.from_account_id == account.id,
                Transaction.to_account_id == account.id,
            ))
            .limit(1)
        )
        if result.scalar_one_or_none() is not None:
            raise InvalidState(
                "Cannot delete an account with transactions. Close it instead.",
                account_id=account.id,
            )

        await self.session.delete(account)
        await self.session.commit()
        logger.info("Account %s deleted from plan %s", account_id, membership.plan_id)
