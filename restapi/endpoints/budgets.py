"""Budget summary, budget line and plan lifecycle endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget import schemas
from components.category.repository import CategoryRepository
from components.core.init_db import get_db
from components.core.schemas import Success
from components.core.utils import parse_month
from components.ledger.repository import LedgerRepository
from components.plan import schemas as plan_schemas
from components.plan.models import GroupMember
from components.plan.permissions import require_editor, resolve_membership
from components.plan.repository import PlanRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user, get_membership

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=schemas.PlanSummary)
async def read_budget(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """
    Monthly budget summary of a plan.

    Returns category groups and categories in sort order with their budgeted,
    activity and available amounts, the accounts, and
    to_be_budgeted = total_income - total_budgeted.
    """
    return await LedgerRepository(db).plan_summary(membership, parse_month(month))


@router.post("", response_model=plan_schemas.Plan, status_code=status.HTTP_201_CREATED)
async def create_plan(
    data: plan_schemas.PlanCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a plan; the category layout of the first plan is copied into it."""
    return await PlanRepository(db).create(current_user.id, data)


@router.put("/{category_id}", response_model=schemas.BudgetLine)
async def update_budget_line(
    category_id: int,
    data: schemas.BudgetLineUpdate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Set the budgeted amount of a category for a month."""
    require_editor(membership, "budgets")
    await CategoryRepository(db).get_category(membership.plan_id, category_id)
    ledger = LedgerRepository(db)
    try:
        budget = await ledger.update_budget_line(
            membership.plan_id, category_id, parse_month(data.month), data.budgeted
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return budget


@router.put("/{plan_id}/plan", response_model=plan_schemas.Plan)
async def update_plan(
    plan_id: int,
    data: plan_schemas.PlanUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit plan name, description and currency. Owners only."""
    membership = await resolve_membership(db, current_user.id, plan_id)
    return await PlanRepository(db).update(membership, data)


@router.delete("/{plan_id}/plan", response_model=Success)
async def delete_plan(
    plan_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a plan with all its data. Every user keeps at least one plan."""
    membership = await resolve_membership(db, current_user.id, plan_id)
    await PlanRepository(db).delete(membership)
    return Success()
