"""Repository for plan invitations."""

import logging
import secrets
from datetime import datetime, timedelta
from typing import List

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.core import mailer
from components.core.config import get_settings
from components.core.exceptions import Conflict, InvalidInput, InvalidOrExpired, InvalidState, NotFound
from components.invitation import schemas
from components.invitation.models import Invitation
from components.plan.models import Plan, GroupMember
from components.plan.permissions import get_membership, require_owner
from components.user.models import User
from components.user.utils import normalize_email

logger = logging.getLogger(__name__)
settings = get_settings()


def to_schema(invitation: Invitation, moment: datetime = None) -> schemas.Invitation:
    return schemas.Invitation(
        id=invitation.id,
        plan_id=invitation.plan_id,
        email=invitation.email,
        role=invitation.role,
        status=invitation.status_at(moment or datetime.utcnow()),
        expires_at=invitation.expires_at,
        accepted_at=invitation.accepted_at,
        created_at=invitation.created_at,
    )


class InvitationRepository:
    """Repository for invitation operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def _plan(self, plan_id: int) -> Plan:
        result = await self.session.execute(select(Plan).where(Plan.id == plan_id))
        plan = result.scalar_one_or_none()
        if plan is None:
            raise NotFound("Plan not found")
        return plan

    async def _member_count(self, plan_id: int) -> int:
        result = await self.session.execute(
            select(func.count(GroupMember.id)).where(GroupMember.plan_id == plan_id)
        )
        return result.scalar_one()

    async def _ensure_capacity(self, plan_id: int) -> None:
        if await self._member_count(plan_id) >= settings.MAX_PLAN_MEMBERS:
            raise InvalidState(
                f"This budget has reached the maximum of {settings.MAX_PLAN_MEMBERS} members",
                plan_id=plan_id,
            )

    async def list_pending(self, membership: GroupMember) -> List[Invitation]:
        """Live invitations of the plan, newest first."""
        result = await self.session.execute(
            select(Invitation)
            .where(
                Invitation.plan_id == membership.plan_id,
                Invitation.accepted_at.is_(None),
                Invitation.expires_at > datetime.utcnow(),
            )
            .order_by(Invitation.created_at.desc(), Invitation.id.desc())
        )
        return list(result.scalars().all())

    async def send(self, membership: GroupMember, inviter: User, data: schemas.InvitationSend) -> Invitation:
        """
        Invite an email address to the plan.

        A previous live invitation for the same address is expired first, so
        only the newest token can be accepted.
        """
        require_owner(membership, "invite members")
        email = normalize_email(data.email)
        plan = await self._plan(membership.plan_id)
        await self._ensure_capacity(plan.id)

        result = await self.session.execute(
            select(GroupMember.id)
            .join(User, User.id == GroupMember.user_id)
            .where(GroupMember.plan_id == plan.id, User.email == email)
        )
        if result.scalar_one_or_none() is not None:
            raise Conflict("This user is already a member of this budget", email=email)

        now = datetime.utcnow()
        try:
            await self.session.execute(
                update(Invitation)
                .where(
                    Invitation.plan_id == plan.id,
                    Invitation.email == email,
                    Invitation.accepted_at.is_(None),
                    Invitation.expires_at > now,
                )
                .values(expires_at=now)
                .execution_options(synchronize_session=False)
            )
            invitation = Invitation(
                plan_id=plan.id,
                email=email,
                role=data.role,
                token=secrets.token_urlsafe(32),
                expires_at=now + timedelta(days=settings.INVITATION_EXPIRE_DAYS),
                invited_by_id=inviter.id,
            )
            self.session.add(invitation)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(invitation)

        mailer.send_invitation_email(
            email,
            inviter.name or inviter.email,
            plan.name,
            invitation.role.value,
            invitation.token,
        )
        logger.info("Invitation %s sent to %s for plan %s", invitation.id, email, plan.id)
        return invitation

    async def _live(self, token: str) -> Invitation:
        if not token:
            raise InvalidInput("Invitation token is required")
        result = await self.session.execute(
            select(Invitation)
            .where(
                Invitation.token == token,
                Invitation.accepted_at.is_(None),
                Invitation.expires_at > datetime.utcnow(),
            )
            .execution_options(populate_existing=True)
        )
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise InvalidOrExpired("Invalid or expired invitation")
        return invitation

    async def details(self, token: str) -> schemas.InvitationDetails:
        """Look at an invitation without consuming it."""
        invitation = await self._live(token)
        plan = await self._plan(invitation.plan_id)
        inviter = None
        if invitation.invited_by_id is not None:
            result = await self.session.execute(select(User).where(User.id == invitation.invited_by_id))
            inviter = result.scalar_one_or_none()
        return schemas.InvitationDetails(
            plan_id=plan.id,
            plan_name=plan.name,
            email=invitation.email,
            role=invitation.role,
            invited_by=(inviter.name or inviter.email) if inviter else None,
            expires_at=invitation.expires_at,
        )

    async def accept(self, user: User, token: str) -> schemas.InvitationAccepted:
        """Join the plan. Claiming the invitation and adding the member commit together."""
        invitation = await self._live(token)
        if invitation.email != user.email.lower():
            raise InvalidInput("This invitation was sent to a different email address")
        if await get_membership(self.session, user.id, invitation.plan_id) is not None:
            raise Conflict("You are already a member of this budget", plan_id=invitation.plan_id)
        await self._ensure_capacity(invitation.plan_id)

        plan = await self._plan(invitation.plan_id)
        now = datetime.utcnow()
        try:
            result = await self.session.execute(
                update(Invitation)
                .where(
                    Invitation.id == invitation.id,
                    Invitation.accepted_at.is_(None),
                    Invitation.expires_at > now,
                )
                .values(accepted_at=now, accepted_by_id=user.id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise InvalidOrExpired("Invalid or expired invitation")
            self.session.add(GroupMember(user_id=user.id, plan_id=plan.id, role=invitation.role))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("User %s joined plan %s as %s", user.id, plan.id, invitation.role.value)
        return schemas.InvitationAccepted(plan_id=plan.id, plan_name=plan.name, role=invitation.role)
