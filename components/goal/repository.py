"""Repository for goal operations."""

import logging
from typing import List

from pydantic import TypeAdapter
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.models import CategoryGroup, Category
from components.core.exceptions import InvalidInput, NotFound
from components.core.utils import to_decimal
from components.goal import schemas
from components.goal.models import Goal, GoalType
from components.plan.models import GroupMember
from components.plan.permissions import require_editor

logger = logging.getLogger(__name__)

target_adapter = TypeAdapter(schemas.GoalTarget)

# Columns that hold per-type parameters
PARAMETER_COLUMNS = (
    "target_amount",
    "target_date",
    "period",
    "periodic_amount",
    "weekly_day",
    "percentage",
)


def target_columns(target) -> dict:
    """Flatten a goal target into column values; unused columns are cleared."""
    values = dict.fromkeys(PARAMETER_COLUMNS)
    values["type"] = GoalType(target.type)
    if isinstance(target, (schemas.TargetBalance, schemas.TargetBalanceByDate, schemas.Custom)):
        values["target_amount"] = (
            to_decimal(target.target_amount) if target.target_amount is not None else None
        )
    if isinstance(target, schemas.TargetBalanceByDate):
        values["target_date"] = target.target_date
    if isinstance(target, schemas.PeriodicFunding):
        values["period"] = target.period
        values["periodic_amount"] = to_decimal(target.amount)
        values["weekly_day"] = target.weekly_day
    if isinstance(target, schemas.PercentOfIncome):
        values["percentage"] = to_decimal(target.percentage)
    return values


def as_float(value):
    return float(value) if value is not None else None


def goal_target(goal: Goal):
    """Rebuild the typed target from a stored row."""
    fields = {
        GoalType.TARGET_BALANCE: {"target_amount": as_float(goal.target_amount)},
        GoalType.TARGET_BALANCE_BY_DATE: {
            "target_amount": as_float(goal.target_amount),
            "target_date": goal.target_date,
        },
        GoalType.PERIODIC_FUNDING: {
            "period": goal.period,
            "amount": as_float(goal.periodic_amount),
            "weekly_day": goal.weekly_day,
        },
        GoalType.PERCENT_OF_INCOME: {"percentage": as_float(goal.percentage)},
        GoalType.CUSTOM: {"target_amount": as_float(goal.target_amount)},
    }[goal.type]
    return target_adapter.validate_python({"type": goal.type.value, **fields})


def to_schema(goal: Goal) -> schemas.Goal:
    return schemas.Goal(
        id=goal.id,
        plan_id=goal.plan_id,
        category_id=goal.category_id,
        category_group_id=goal.category_group_id,
        name=goal.name,
        description=goal.description,
        target=goal_target(goal),
        current_amount=float(goal.current_amount or 0),
        created_at=goal.created_at,
        updated_at=goal.updated_at,
    )


class GoalRepository:
    """Repository for goal operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def list(self, plan_id: int) -> List[Goal]:
        result = await self.session.execute(
            select(Goal).where(Goal.plan_id == plan_id).order_by(Goal.created_at.desc(), Goal.id.desc())
        )
        return list(result.scalars().all())

    async def get(self, plan_id: int, goal_id: int) -> Goal:
        result = await self.session.execute(
            select(Goal).where(Goal.id == goal_id, Goal.plan_id == plan_id)
        )
        goal = result.scalar_one_or_none()
        if goal is None:
            raise NotFound("Goal not found", goal_id=goal_id)
        return goal

    async def _check_targets(self, plan_id: int, data: schemas.GoalCreate) -> None:
        """Every selected category and group must belong to the plan."""
        category_ids = set(data.category_ids)
        group_ids = set(data.category_group_ids)
        if not category_ids and not group_ids:
            raise InvalidInput("At least one category or category group must be selected")

        if category_ids:
            result = await self.session.execute(
                select(func.count(Category.id))
                .join(CategoryGroup, CategoryGroup.id == Category.category_group_id)
                .where(Category.id.in_(category_ids), CategoryGroup.plan_id == plan_id)
            )
            if result.scalar_one() != len(category_ids):
                raise InvalidInput("Some categories do not belong to this plan")
        if group_ids:
            result = await self.session.execute(
                select(func.count(CategoryGroup.id))
                .where(CategoryGroup.id.in_(group_ids), CategoryGroup.plan_id == plan_id)
            )
            if result.scalar_one() != len(group_ids):
                raise InvalidInput("Some category groups do not belong to this plan")

    async def create(self, membership: GroupMember, data: schemas.GoalCreate) -> List[Goal]:
        """Create one goal per selected category and category group."""
        require_editor(membership, "goals")
        await self._check_targets(membership.plan_id, data)

        common = dict(
            plan_id=membership.plan_id,
            name=data.name,
            description=data.description,
            current_amount=to_decimal(0),
            **target_columns(data.target),
        )
        goals = [Goal(category_id=category_id, **common) for category_id in dict.fromkeys(data.category_ids)]
        goals += [Goal(category_group_id=group_id, **common) for group_id in dict.fromkeys(data.category_group_ids)]
        try:
            self.session.add_all(goals)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        for goal in goals:
            await self.session.refresh(goal)
        logger.info("Created %s %s goals in plan %s", len(goals), data.target.type, membership.plan_id)
        return goals

    async def update(self, membership: GroupMember, goal_id: int, data: schemas.GoalUpdate) -> Goal:
        require_editor(membership, "goals")
        goal = await self.get(membership.plan_id, goal_id)

        if data.name is not None:
            goal.name = data.name
        if data.description is not None:
            goal.description = data.description
        if data.current_amount is not None:
            goal.current_amount = to_decimal(data.current_amount)
        if data.target is not None:
            for column, value in target_columns(data.target).items():
                setattr(goal, column, value)

        await self.session.commit()
        await self.session.refresh(goal)
        return goal

    async def delete(self, membership: GroupMember, goal_id: int) -> None:
        require_editor(membership, "goals")
        goal = await self.get(membership.plan_id, goal_id)
        await self.session.delete(goal)
        await self.session.commit()
        logger.info("Goal %s deleted", goal_id)
