"""Repository for category group and category operations."""

import logging
from typing import List

from sqlalchemy import select, func, delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from components.budget.models import Budget
from components.category import schemas
from components.category.models import CategoryGroup, Category
from components.core.exceptions import InvalidInput, NotFound
from components.core.utils import parse_month
from components.goal.models import Goal
from components.ledger.repository import LedgerRepository
from components.note.models import Note
from components.plan.models import GroupMember
from components.plan.permissions import require_editor
from components.transaction.models import Transaction

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Repository for category operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def list_groups(self, plan_id: int, include_hidden: bool = False) -> List[schemas.CategoryGroupWithCategories]:
        """Category groups with their categories, both in sort order."""
        query = (
            select(CategoryGroup)
            .where(CategoryGroup.plan_id == plan_id)
            .order_by(CategoryGroup.sort_order, CategoryGroup.id)
            .options(selectinload(CategoryGroup.categories))
        )
        if not include_hidden:
            query = query.where(CategoryGroup.is_hidden.is_(False))
        result = await self.session.execute(query)

        groups = []
        for group in result.scalars().all():
            categories = [
                schemas.Category.model_validate(category)
                for category in sorted(group.categories, key=lambda c: (c.sort_order, c.id))
                if include_hidden or not category.is_hidden
            ]
            groups.append(schemas.CategoryGroupWithCategories(
                **schemas.CategoryGroup.model_validate(group).model_dump(),
                categories=categories,
            ))
        return groups

    async def get_group(self, plan_id: int, group_id: int) -> CategoryGroup:
        result = await self.session.execute(
            select(CategoryGroup).where(
                CategoryGroup.id == group_id,
                CategoryGroup.plan_id == plan_id,
            )
        )
        group = result.scalar_one_or_none()
        if group is None:
            raise NotFound("Category group not found", category_group_id=group_id)
        return group

    async def get_category(self, plan_id: int, category_id: int) -> Category:
        """Category by id, as long as its group belongs to the plan."""
        result = await self.session.execute(
            select(Category)
            .join(CategoryGroup, CategoryGroup.id == Category.category_group_id)
            .where(Category.id == category_id, CategoryGroup.plan_id == plan_id)
        )
        category = result.scalar_one_or_none()
        if category is None:
            raise NotFound("Category not found", category_id=category_id)
        return category

    async def _next_group_order(self, plan_id: int) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.max(CategoryGroup.sort_order), 0))
            .where(CategoryGroup.plan_id == plan_id)
        )
        return result.scalar_one() + 1

    async def _next_category_order(self, group_id: int) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.max(Category.sort_order), 0))
            .where(Category.category_group_id == group_id)
        )
        return result.scalar_one() + 1

    async def create_group(self, membership: GroupMember, data: schemas.CategoryGroupCreate) -> CategoryGroup:
        """Append a category group at the end of the plan's list."""
        require_editor(membership, "categories")
        group = CategoryGroup(
            plan_id=membership.plan_id,
            name=data.name.strip(),
            sort_order=await self._next_group_order(membership.plan_id),
        )
        self.session.add(group)
        await self.session.commit()
        await self.session.refresh(group)
        logger.info("Category group %s created in plan %s", group.id, group.plan_id)
        return group

    async def update_group(
        self, membership: GroupMember, group_id: int, data: schemas.CategoryGroupUpdate
    ) -> CategoryGroup:
        require_editor(membership, "categories")
        group = await self.get_group(membership.plan_id, group_id)
        if data.name is not None:
            group.name = data.name.strip()
        if data.is_hidden is not None:
            group.is_hidden = data.is_hidden
        await self.session.commit()
        await self.session.refresh(group)
        return group

    async def _detach_categories(self, category_ids) -> None:
        """Drop budgets, goals and notes of categories and uncategorize their transactions."""
        await self.session.execute(delete(Budget).where(Budget.category_id.in_(category_ids)))
        await self.session.execute(delete(Goal).where(Goal.category_id.in_(category_ids)))
        await self.session.execute(delete(Note).where(Note.category_id.in_(category_ids)))
        await self.session.execute(
            update(Transaction)
            .where(Transaction.category_id.in_(category_ids))
            .values(category_id=None)
            .execution_options(synchronize_session=False)
        )

    async def delete_group(self, membership: GroupMember, group_id: int) -> None:
        """Delete a group together with its categories, in one transaction."""
        require_editor(membership, "categories")
        group = await self.get_group(membership.plan_id, group_id)
        result = await self.session.execute(
            select(Category.id).where(Category.category_group_id == group.id)
        )
        category_ids = [row[0] for row in result.all()]
        try:
            if category_ids:
                await self._detach_categories(category_ids)
                await self.session.execute(delete(Category).where(Category.id.in_(category_ids)))
            await self.session.execute(delete(Goal).where(Goal.category_group_id == group.id))
            await self.session.execute(delete(Note).where(Note.category_group_id == group.id))
            await self.session.execute(delete(CategoryGroup).where(CategoryGroup.id == group.id))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Category group %s deleted with %s categories", group_id, len(category_ids))

    async def create_category(
        self, membership: GroupMember, group_id: int, data: schemas.CategoryCreate
    ) -> Category:
        """Append a category at the end of its group."""
        require_editor(membership, "categories")
        group = await self.get_group(membership.plan_id, group_id)
        category = Category(
            category_group_id=group.id,
            name=data.name.strip(),
            sort_order=await self._next_category_order(group.id),
        )
        self.session.add(category)
        await self.session.commit()
        await self.session.refresh(category)
        logger.info("Category %s created in group %s", category.id, group.id)
        return category

    async def update_category(
        self,
        membership: GroupMember,
        group_id: int,
        category_id: int,
        data: schemas.CategoryUpdate,
    ) -> Category:
        """Rename or hide a category, optionally setting its budget for a month."""
        require_editor(membership, "categories")
        await self.get_group(membership.plan_id, group_id)
        category = await self.get_category(membership.plan_id, category_id)
        if category.category_group_id != group_id:
            raise NotFound("Category not found in this group", category_id=category_id)

        if data.name is not None:
            category.name = data.name.strip()
        if data.is_hidden is not None:
            category.is_hidden = data.is_hidden
        try:
            if data.budgeted is not None:
                month = parse_month(data.month)
                await LedgerRepository(self.session).update_budget_line(
                    membership.plan_id, category.id, month, data.budgeted
                )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(category)
        return category

    async def delete_category(self, membership: GroupMember, group_id: int, category_id: int) -> None:
        require_editor(membership, "categories")
        category = await self.get_category(membership.plan_id, category_id)
        if category.category_group_id != group_id:
            raise NotFound("Category not found in this group", category_id=category_id)
        try:
            await self._detach_categories([category.id])
            await self.session.execute(delete(Category).where(Category.id == category.id))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Category %s deleted", category_id)

    async def move_category(self, membership: GroupMember, data: schemas.CategoryMove) -> Category:
        """Re-parent a category. It lands last in the target group."""
        require_editor(membership, "categories")
        category = await self.get_category(membership.plan_id, data.category_id)
        target = await self.get_group(membership.plan_id, data.target_group_id)
        if category.category_group_id == target.id:
            raise InvalidInput("Category is already in this group")

        category.category_group_id = target.id
        category.sort_order = await self._next_category_order(target.id)
        await self.session.commit()
        await self.session.refresh(category)
        logger.info("Category %s moved to group %s", category.id, target.id)
        return category

