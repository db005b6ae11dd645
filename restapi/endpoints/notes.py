"""Note endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Success
from components.note.repository import NoteRepository
from components.note import schemas
from components.plan.models import GroupMember
from restapi.endpoints.auth import get_membership

router = APIRouter(
    prefix="/notes",
    tags=["notes"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Note])
async def list_notes(
    category_id: Optional[int] = None,
    category_group_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await NoteRepository(db).list(membership.plan_id, category_id, category_group_id)


@router.post("", response_model=schemas.Note, status_code=status.HTTP_201_CREATED)
async def create_note(
    data: schemas.NoteCreate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await NoteRepository(db).create(membership, data)


@router.get("/{note_id}", response_model=schemas.Note)
async def read_note(
    note_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await NoteRepository(db).get(membership.plan_id, note_id)


@router.put("/{note_id}", response_model=schemas.Note)
async def update_note(
    note_id: int,
    data: schemas.NoteUpdate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await NoteRepository(db).update(membership, note_id, data)


@router.delete("/{note_id}", response_model=Success)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    await NoteRepository(db).delete(membership, note_id)
    return Success()
