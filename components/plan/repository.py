"""Repository for plan lifecycle and membership operations."""

import logging
from typing import List, Optional

from sqlalchemy import select, func, delete, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.budget.models import Budget
from components.category.models import CategoryGroup, Category
from components.core.config import get_settings
from components.core.exceptions import InvalidInput, InvalidState, NotFound
from components.goal.models import Goal
from components.invitation.models import Invitation
from components.ledger.repository import LedgerRepository
from components.message.models import Message
from components.note.models import Note
from components.plan import schemas
from components.plan.models import Plan, GroupMember, Role, ROLE_RANK
from components.plan.permissions import first_membership, get_membership, require_owner
from components.transaction.models import Transaction
from components.user.models import User

logger = logging.getLogger(__name__)
settings = get_settings()


class PlanRepository:
    """Repository for plan operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, plan_id: int) -> Optional[Plan]:
        result = await self.session.execute(select(Plan).where(Plan.id == plan_id))
        return result.scalar_one_or_none()

    async def member_count(self, plan_id: int) -> int:
        result = await self.session.execute(
            select(func.count(GroupMember.id)).where(GroupMember.plan_id == plan_id)
        )
        return result.scalar_one()

    async def membership_count(self, user_id: int) -> int:
        result = await self.session.execute(
            select(func.count(GroupMember.id)).where(GroupMember.user_id == user_id)
        )
        return result.scalar_one()

    async def get_detail(self, membership: GroupMember) -> schemas.PlanDetail:
        plan = await self.get_by_id(membership.plan_id)
        if plan is None:
            raise NotFound("Plan not found")
        return schemas.PlanDetail(
            **schemas.Plan.model_validate(plan).model_dump(),
            user_role=membership.role,
            member_count=await self.member_count(plan.id),
        )

    async def create(self, user_id: int, data: schemas.PlanCreate) -> Plan:
        """
        Create a plan owned by the user.

        The category structure of the user's first-joined plan is copied into
        the new plan. Budgets, goals and notes start blank.
        """
        source = await first_membership(self.session, user_id)
        try:
            plan = Plan(
                name=data.name.strip(),
                description=data.description,
                currency=data.currency.upper(),
            )
            self.session.add(plan)
            await self.session.flush()
            self.session.add(GroupMember(user_id=user_id, plan_id=plan.id, role=Role.OWNER))
            if source is not None:
                await self.copy_structure(source.plan_id, plan.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(plan)
        logger.info("User %s created plan %s", user_id, plan.id)
        return plan

    async def copy_structure(self, source_plan_id: int, target_plan_id: int) -> None:
        """Copy category groups and categories (names, order, visibility)."""
        result = await self.session.execute(
            select(CategoryGroup)
            .where(CategoryGroup.plan_id == source_plan_id)
            .order_by(CategoryGroup.sort_order, CategoryGroup.id)
        )
        groups = result.scalars().all()
        for group in groups:
            new_group = CategoryGroup(
                plan_id=target_plan_id,
                name=group.name,
                sort_order=group.sort_order,
                is_hidden=group.is_hidden,
            )
            self.session.add(new_group)
            await self.session.flush()

            result = await self.session.execute(
                select(Category)
                .where(Category.category_group_id == group.id)
                .order_by(Category.sort_order, Category.id)
            )
            for category in result.scalars().all():
                self.session.add(Category(
                    category_group_id=new_group.id,
                    name=category.name,
                    sort_order=category.sort_order,
                    is_hidden=category.is_hidden,
                ))
        await self.session.flush()

    async def update(self, membership: GroupMember, data: schemas.PlanUpdate) -> Plan:
        """Edit plan settings."""
        require_owner(membership, "edit plan settings")
        plan = await self.get_by_id(membership.plan_id)
        if plan is None:
            raise NotFound("Plan not found")

        if data.name is not None:
            plan.name = data.name.strip()
        if data.description is not None:
            plan.description = data.description
        if data.currency is not None:
            plan.currency = data.currency.upper()

        await self.session.commit()
        await self.session.refresh(plan)
        logger.info("Plan %s settings updated", plan.id)
        return plan

    async def delete(self, membership: GroupMember) -> None:
        """Delete a plan and everything in it. The caller must keep another plan."""
        require_owner(membership, "delete the plan")
        if await self.membership_count(membership.user_id) <= 1:
            raise InvalidState(
                "You must keep at least one budget plan",
                plan_id=membership.plan_id,
            )
        plan_id = membership.plan_id
        try:
            await self.purge(plan_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Plan %s deleted by user %s", plan_id, membership.user_id)

    async def purge(self, plan_id: int) -> None:
        """Delete a plan and all of its child rows, children first. Does not commit."""
        group_ids = select(CategoryGroup.id).where(CategoryGroup.plan_id == plan_id)
        category_ids = select(Category.id).where(Category.category_group_id.in_(group_ids))
        account_ids = select(Account.id).where(Account.plan_id == plan_id)
        booked = or_(
            Transaction.plan_id == plan_id,
            Transaction.from_account_id.in_(account_ids),
            Transaction.to_account_id.in_(account_ids),
        )

        # Postings cross plans through shared accounts; undo each one first so
        # surviving balances and budgets match the remaining transactions.
        ledger = LedgerRepository(self.session)
        result = await self.session.execute(select(Transaction).where(booked).order_by(Transaction.id))
        for txn in result.scalars().all():
            await ledger.reverse_transaction(txn)

        await self.session.execute(delete(Goal).where(Goal.plan_id == plan_id))
        await self.session.execute(delete(Note).where(Note.plan_id == plan_id))
        await self.session.execute(delete(Budget).where(Budget.plan_id == plan_id))
        await self.session.execute(delete(Transaction).where(booked))
        await self.session.execute(
            update(Transaction)
            .where(Transaction.category_id.in_(category_ids))
            .values(category_id=None)
        )
        await self.session.execute(delete(Category).where(Category.id.in_(category_ids)))
        await self.session.execute(delete(CategoryGroup).where(CategoryGroup.plan_id == plan_id))
        await self.session.execute(delete(Account).where(Account.plan_id == plan_id))
        await self.session.execute(
            update(Message).where(Message.plan_id == plan_id).values(reply_to_id=None)
        )
        await self.session.execute(delete(Message).where(Message.plan_id == plan_id))
        await self.session.execute(delete(Invitation).where(Invitation.plan_id == plan_id))
        await self.session.execute(delete(GroupMember).where(GroupMember.plan_id == plan_id))
        await self.session.execute(delete(Plan).where(Plan.id == plan_id))

    async def rename(self, membership: GroupMember, data: schemas.PlanRename) -> Plan:
        name = data.name.strip()
        if not name:
            raise InvalidInput("Group name is required")
        return await self.update(membership, schemas.PlanUpdate(name=name))

    async def list_members(self, membership: GroupMember) -> schemas.MemberList:
        """Members ordered by role (owners first) then by join date."""
        result = await self.session.execute(
            select(GroupMember, User)
            .join(User, User.id == GroupMember.user_id)
            .where(GroupMember.plan_id == membership.plan_id)
            .order_by(GroupMember.joined_at, GroupMember.id)
        )
        rows = sorted(result.all(), key=lambda row: ROLE_RANK[row[0].role])
        members: List[schemas.Member] = [
            schemas.Member(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=member.role,
                joined_at=member.joined_at,
            )
            for member, user in rows
        ]
        return schemas.MemberList(members=members, current_user_role=membership.role)

    async def remove_member(self, membership: GroupMember, target_user_id: int) -> None:
        """Remove another member. A plan never loses its last owner."""
        require_owner(membership, "remove members")
        if target_user_id == membership.user_id:
            raise InvalidState("You cannot remove yourself from the plan")

        plan_id = membership.plan_id
        try:
            target = await get_membership(self.session, target_user_id, plan_id)
            if target is None:
                raise NotFound("Member not found", user_id=target_user_id)

            if target.role == Role.OWNER:
                result = await self.session.execute(
                    select(GroupMember.id)
                    .where(GroupMember.plan_id == plan_id, GroupMember.role == Role.OWNER)
                    .with_for_update()
                )
                if len(result.all()) <= 1:
                    raise InvalidState("Cannot remove the last owner of the plan", plan_id=plan_id)

            await self.session.delete(target)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("User %s removed from plan %s by %s", target_user_id, plan_id, membership.user_id)
