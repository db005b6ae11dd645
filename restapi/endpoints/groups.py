"""Plan (group) settings, membership and invitation listing endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Success
from components.invitation.repository import InvitationRepository, to_schema
from components.invitation import schemas as invitation_schemas
from components.plan.permissions import resolve_membership, require_owner
from components.plan.repository import PlanRepository
from components.plan import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
    responses={404: {"description": "Not found"}},
)


@router.get("/{plan_id}", response_model=schemas.PlanDetail)
async def read_group(
    plan_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    membership = await resolve_membership(db, current_user.id, plan_id)
    return await PlanRepository(db).get_detail(membership)


@router.patch("/{plan_id}", response_model=schemas.Plan)
async def rename_group(
    plan_id: int,
    data: schemas.PlanRename,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Rename the plan. Owners only."""
    membership = await resolve_membership(db, current_user.id, plan_id)
    return await PlanRepository(db).rename(membership, data)


@router.get("/{plan_id}/members", response_model=schemas.MemberList)
async def list_members(
    plan_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Members ordered owners, editors, viewers, then by join date."""
    membership = await resolve_membership(db, current_user.id, plan_id)
    return await PlanRepository(db).list_members(membership)


@router.delete("/{plan_id}/members/{user_id}", response_model=Success)
async def remove_member(
    plan_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove a member. The last owner of a plan cannot be removed."""
    membership = await resolve_membership(db, current_user.id, plan_id)
    await PlanRepository(db).remove_member(membership, user_id)
    return Success()


@router.get("/{plan_id}/invitations", response_model=List[invitation_schemas.Invitation])
async def list_invitations(
    plan_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pending invitations of the plan. Owners only."""
    membership = await resolve_membership(db, current_user.id, plan_id)
    require_owner(membership, "view invitations")
    invitations = await InvitationRepository(db).list_pending(membership)
    return [to_schema(invitation) for invitation in invitations]
