"""Authorization gate: resolve a caller's role within a plan and check it."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import AccessDenied, Forbidden, NotFound
from components.plan.models import GroupMember, Role


async def first_membership(session: AsyncSession, user_id: int) -> Optional[GroupMember]:
    """Membership of the plan the user joined first."""
    result = await session.execute(
        select(GroupMember)
        .where(GroupMember.user_id == user_id)
        .order_by(GroupMember.joined_at, GroupMember.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_membership(session: AsyncSession, user_id: int, plan_id: int) -> Optional[GroupMember]:
    result = await session.execute(
        select(GroupMember).where(
            GroupMember.user_id == user_id,
            GroupMember.plan_id == plan_id,
        )
    )
    return result.scalar_one_or_none()


async def resolve_membership(
    session: AsyncSession,
    user_id: int,
    plan_id: Optional[int] = None,
) -> GroupMember:
    """
    Resolve the caller's membership.

    With an explicit plan the caller must be a member of it; without one the
    first-joined plan is used.
    """
    if plan_id is None:
        membership = await first_membership(session, user_id)
        if membership is None:
            raise NotFound("No budget plan found for this user")
        return membership

    membership = await get_membership(session, user_id, plan_id)
    if membership is None:
        raise AccessDenied("You are not a member of this plan", plan_id=plan_id)
    return membership


def require_editor(membership: GroupMember, subject: str = "budget data") -> GroupMember:
    """Reject viewers from mutating plan data."""
    if membership.role == Role.VIEWER:
        raise Forbidden(
            f"Viewers cannot modify {subject}",
            user_role=membership.role.value,
            plan_id=membership.plan_id,
        )
    return membership


def require_owner(membership: GroupMember, action: str = "perform this action") -> GroupMember:
    if membership.role != Role.OWNER:
        raise Forbidden(
            f"Only plan owners can {action}",
            user_role=membership.role.value,
            plan_id=membership.plan_id,
        )
    return membership
