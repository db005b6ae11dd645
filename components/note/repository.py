"""Repository for note operations.

Notes are open to every member of a plan, viewers included.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.repository import CategoryRepository
from components.core.exceptions import InvalidInput, NotFound
from components.note import schemas
from components.note.models import Note
from components.plan.models import GroupMember

logger = logging.getLogger(__name__)


class NoteRepository:
    """Repository for note operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def list(
        self,
        plan_id: int,
        category_id: Optional[int] = None,
        category_group_id: Optional[int] = None,
    ) -> List[Note]:
        """Notes of a plan, most recently edited first."""
        query = select(Note).where(Note.plan_id == plan_id)
        if category_id is not None:
            query = query.where(Note.category_id == category_id)
        if category_group_id is not None:
            query = query.where(Note.category_group_id == category_group_id)
        result = await self.session.execute(query.order_by(Note.updated_at.desc(), Note.id.desc()))
        return list(result.scalars().all())

    async def get(self, plan_id: int, note_id: int) -> Note:
        result = await self.session.execute(
            select(Note).where(Note.id == note_id, Note.plan_id == plan_id)
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFound("Note not found", note_id=note_id)
        return note

    async def create(self, membership: GroupMember, data: schemas.NoteCreate) -> Note:
        content = data.content.strip()
        if not content:
            raise InvalidInput("Note content is required")

        categories = CategoryRepository(self.session)
        if data.category_id is not None:
            await categories.get_category(membership.plan_id, data.category_id)
        else:
            await categories.get_group(membership.plan_id, data.category_group_id)

        note = Note(
            plan_id=membership.plan_id,
            category_id=data.category_id,
            category_group_id=data.category_group_id,
            content=content,
        )
        self.session.add(note)
        await self.session.commit()
        await self.session.refresh(note)
        logger.info("Note %s added in plan %s", note.id, note.plan_id)
        return note

    async def update(self, membership: GroupMember, note_id: int, data: schemas.NoteUpdate) -> Note:
        note = await self.get(membership.plan_id, note_id)
        content = data.content.strip()
        if not content:
            raise InvalidInput("Note content is required")
        note.content = content
        await self.session.commit()
        await self.session.refresh(note)
        return note

    async def delete(self, membership: GroupMember, note_id: int) -> None:
        note = await self.get(membership.plan_id, note_id)
        await self.session.delete(note)
        await self.session.commit()
