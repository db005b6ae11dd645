"""Goal endpoints for the API."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Success
from components.goal.repository import GoalRepository, to_schema
from components.goal import schemas
from components.plan.models import GroupMember
from restapi.endpoints.auth import get_membership

router = APIRouter(
    prefix="/goals",
    tags=["goals"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Goal])
async def list_goals(
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    goals = await GoalRepository(db).list(membership.plan_id)
    return [to_schema(goal) for goal in goals]


@router.post("", response_model=List[schemas.Goal], status_code=status.HTTP_201_CREATED)
async def create_goals(
    data: schemas.GoalCreate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Create one goal for each selected category and category group."""
    goals = await GoalRepository(db).create(membership, data)
    return [to_schema(goal) for goal in goals]


@router.get("/{goal_id}", response_model=schemas.Goal)
async def read_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return to_schema(await GoalRepository(db).get(membership.plan_id, goal_id))


@router.put("/{goal_id}", response_model=schemas.Goal)
async def update_goal(
    goal_id: int,
    data: schemas.GoalUpdate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return to_schema(await GoalRepository(db).update(membership, goal_id, data))


@router.delete("/{goal_id}", response_model=Success)
async def delete_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    await GoalRepository(db).delete(membership, goal_id)
    return Success()
