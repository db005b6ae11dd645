"""Repository for plan chat messages and their retention."""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.exceptions import Forbidden, InvalidInput, NotFound
from components.message import schemas
from components.message.models import Message
from components.plan.models import Plan, GroupMember, Role
from components.plan.permissions import require_owner
from components.user.models import User

logger = logging.getLogger(__name__)
settings = get_settings()


def retention_policy(plan: Plan) -> schemas.RetentionPolicy:
    """Stored retention policy of a plan, with defaults for missing keys."""
    stored = plan.message_retention_policy or {}
    defaults = {"anonymized_retention_hours": settings.DEFAULT_RETENTION_HOURS}
    return schemas.RetentionPolicy(**{**defaults, **stored})


class MessageRepository:
    """Repository for message operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def _get_plan(self, plan_id: int) -> Plan:
        result = await self.session.execute(select(Plan).where(Plan.id == plan_id))
        plan = result.scalar_one_or_none()
        if plan is None:
            raise NotFound("Plan not found")
        return plan

    async def list(self, membership: GroupMember, limit: int = 50, offset: int = 0) -> List[Message]:
        """Newest messages first. Messages from other members become read."""
        result = await self.session.execute(
            select(Message)
            .where(Message.plan_id == membership.plan_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .offset(offset)
            .limit(limit)
        )
        messages = list(result.scalars().all())

        await self.session.execute(
            update(Message)
            .where(
                Message.plan_id == membership.plan_id,
                Message.is_read.is_(False),
                or_(Message.sender_id.is_(None), Message.sender_id != membership.user_id),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return messages

    async def create(self, membership: GroupMember, sender: User, data: schemas.MessageCreate) -> Message:
        content = data.content.strip()
        if not content:
            raise InvalidInput("Message content is required")

        if data.reply_to_id is not None:
            result = await self.session.execute(
                select(Message.id).where(
                    Message.id == data.reply_to_id,
                    Message.plan_id == membership.plan_id,
                )
            )
            if result.scalar_one_or_none() is None:
                raise NotFound("Message to reply to not found", reply_to_id=data.reply_to_id)

        message = Message(
            plan_id=membership.plan_id,
            sender_id=sender.id,
            sender_name=sender.name,
            sender_email=sender.email,
            content=content,
            reply_to_id=data.reply_to_id,
        )
        self.session.add(message)
        await self.session.commit()
        await self.session.refresh(message)
        return message

    async def export(self, membership: GroupMember) -> List[Message]:
        """All messages of the plan, oldest first, for download."""
        plan = await self._get_plan(membership.plan_id)
        policy = retention_policy(plan)
        if membership.role != Role.OWNER and not policy.allow_member_export:
            raise Forbidden(
                "Message export is restricted to plan owners",
                user_role=membership.role.value,
                plan_id=membership.plan_id,
            )
        result = await self.session.execute(
            select(Message)
            .where(Message.plan_id == membership.plan_id)
            .order_by(Message.created_at, Message.id)
        )
        return list(result.scalars().all())

    async def get_policy(self, membership: GroupMember) -> schemas.RetentionPolicy:
        return retention_policy(await self._get_plan(membership.plan_id))

    async def update_policy(
        self, membership: GroupMember, policy: schemas.RetentionPolicy
    ) -> schemas.RetentionPolicy:
        require_owner(membership, "change message retention")
        plan = await self._get_plan(membership.plan_id)
        plan.message_retention_policy = policy.model_dump()
        await self.session.commit()
        logger.info("Plan %s message retention set to %s", plan.id, plan.message_retention_policy)
        return policy

    async def anonymize_sender(self, user: User, moment: Optional[datetime] = None) -> int:
        """
        Detach a user's messages from the account before it is deleted.

        Each message keeps a snapshot of the sender and is scheduled for
        deletion after its plan's retention window. Does not commit.
        """
        moment = moment or datetime.utcnow()
        plan_ids = select(Message.plan_id).where(Message.sender_id == user.id).distinct()
        result = await self.session.execute(select(Plan).where(Plan.id.in_(plan_ids)))
        anonymized = 0
        for plan in result.scalars().all():
            hours = retention_policy(plan).anonymized_retention_hours
            result = await self.session.execute(
                update(Message)
                .where(Message.sender_id == user.id, Message.plan_id == plan.id)
                .values(
                    sender_id=None,
                    sender_name=user.name,
                    sender_email=user.email,
                    is_anonymized=True,
                    anonymized_at=moment,
                    scheduled_delete=moment + timedelta(hours=hours),
                )
                .execution_options(synchronize_session=False)
            )
            anonymized += result.rowcount
        logger.info("Anonymized %s messages of user %s", anonymized, user.id)
        return anonymized

    async def cleanup_status(self, moment: Optional[datetime] = None) -> schemas.CleanupStatus:
        moment = moment or datetime.utcnow()
        result = await self.session.execute(
            select(
                func.count(Message.id),
                func.min(Message.scheduled_delete),
            ).where(Message.is_anonymized.is_(True))
        )
        total, next_delete = result.one()
        result = await self.session.execute(
            select(func.count(Message.id)).where(
                Message.is_anonymized.is_(True),
                Message.scheduled_delete <= moment,
            )
        )
        return schemas.CleanupStatus(
            total_anonymized=total,
            due_for_deletion=result.scalar_one(),
            next_scheduled_delete=next_delete,
            timestamp=moment,
        )

    async def cleanup(self, moment: Optional[datetime] = None) -> schemas.CleanupResult:
        """Hard-delete anonymized messages whose retention window has passed."""
        moment = moment or datetime.utcnow()
        due = (
            Message.is_anonymized.is_(True),
            Message.scheduled_delete.is_not(None),
            Message.scheduled_delete <= moment,
        )
        result = await self.session.execute(select(Message.id, Message.plan_id).where(*due))
        rows = result.all()
        if not rows:
            return schemas.CleanupResult(
                message="No messages to clean up",
                deleted_count=0,
                groups_processed=0,
                timestamp=moment,
            )

        ids = [row.id for row in rows]
        try:
            await self.session.execute(
                update(Message).where(Message.reply_to_id.in_(ids)).values(reply_to_id=None)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(
                delete(Message).where(Message.id.in_(ids)).execution_options(synchronize_session=False)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        deleted = result.rowcount
        logger.info("Message cleanup deleted %s anonymized messages", deleted)
        return schemas.CleanupResult(
            message=f"Cleanup completed. Deleted {deleted} anonymized messages.",
            deleted_count=deleted,
            groups_processed=len({row.plan_id for row in rows}),
            timestamp=moment,
        )
