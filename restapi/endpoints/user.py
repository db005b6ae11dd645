"""User profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Message
from components.user.models import User
from components.user.repository import UserRepository
from components.user import schemas
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/user",
    tags=["users"],
    responses={404: {"description": "Not found"}},
)


@router.get("/profile", response_model=schemas.User)
async def read_profile(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile."""
    return current_user


@router.put("/profile", response_model=schemas.User)
async def update_profile(
    data: schemas.UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update name and email."""
    return await UserRepository(db).update_profile(current_user, data)


@router.delete("/delete", response_model=Message)
async def delete_account(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Delete the signed-in account.

    Plans the user has to themselves go with it; messages in shared plans are
    anonymized and purged after the plan's retention window.
    """
    await UserRepository(db).delete(current_user)
    return Message(message="Account deleted successfully")
