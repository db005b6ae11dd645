"""Invitation endpoints for the API."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.invitation.repository import InvitationRepository, to_schema
from components.invitation import schemas
from components.plan.models import GroupMember
from components.user.models import User
from restapi.endpoints.auth import get_current_user, get_membership

router = APIRouter(
    prefix="/invitations",
    tags=["invitations"],
    responses={404: {"description": "Not found"}},
)


@router.post("/send", response_model=schemas.Invitation, status_code=status.HTTP_201_CREATED)
async def send_invitation(
    data: schemas.InvitationSend,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    membership: GroupMember = Depends(get_membership),
):
    """Invite an email address to the plan. Any earlier pending invitation for it expires."""
    invitation = await InvitationRepository(db).send(membership, current_user, data)
    return to_schema(invitation)


@router.get("/accept", response_model=schemas.InvitationDetails)
async def read_invitation(
    token: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Show an invitation without accepting it."""
    return await InvitationRepository(db).details(token)


@router.post("/accept", response_model=schemas.InvitationAccepted)
async def accept_invitation(
    data: schemas.InvitationAccept,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await InvitationRepository(db).accept(current_user, data.token)
