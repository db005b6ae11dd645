"""Invitation schemas for request and response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from components.invitation.models import InvitationStatus
from components.plan.models import Role


class InvitationSend(BaseModel):
    email: str
    role: Role = Role.VIEWER


class InvitationAccept(BaseModel):
    token: str


class Invitation(BaseModel):
    """Schema for invitation response."""
    id: int
    plan_id: int
    email: str
    role: Role
    status: InvitationStatus
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    created_at: datetime


class InvitationDetails(BaseModel):
    """What an invitee sees before accepting."""
    plan_id: int
    plan_name: str
    email: str
    role: Role
    invited_by: Optional[str] = None
    expires_at: datetime


class InvitationAccepted(BaseModel):
    success: bool = True
    plan_id: int
    plan_name: str
    role: Role
