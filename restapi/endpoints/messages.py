"""Plan chat endpoints, message export and the retention cleanup hook."""

import hmac
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.exceptions import Unauthorized
from components.core.init_db import get_db
from components.message.export import render_export
from components.message.repository import MessageRepository
from components.message import schemas
from components.plan.models import GroupMember
from components.user.models import User
from restapi.endpoints.auth import get_current_user, get_membership

settings = get_settings()
router = APIRouter(
    prefix="/messages",
    tags=["messages"],
    responses={404: {"description": "Not found"}},
)


def require_cleanup_token(authorization: Optional[str] = Header(None)) -> None:
    """Scheduler calls authenticate with a static bearer token instead of a user session."""
    expected = f"Bearer {settings.CLEANUP_TOKEN}"
    if authorization is None or not hmac.compare_digest(authorization, expected):
        raise Unauthorized("Unauthorized")


@router.get("", response_model=List[schemas.Message])
async def list_messages(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Newest messages first; messages from other members are marked read."""
    return await MessageRepository(db).list(membership, limit=limit, offset=offset)


@router.post("", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
async def post_message(
    data: schemas.MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    membership: GroupMember = Depends(get_membership),
):
    return await MessageRepository(db).create(membership, current_user, data)


@router.get("/export")
async def export_messages(
    format: str = Query("json", pattern="^(json|csv)$"),
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Download the plan's chat history as JSON or CSV."""
    messages = await MessageRepository(db).export(membership)
    body, media_type, filename = render_export(membership.plan_id, messages, format)
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/export", response_model=schemas.RetentionPolicy)
async def update_retention_policy(
    policy: schemas.RetentionPolicy,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Set how long anonymized messages are kept and whether members may export. Owners only."""
    return await MessageRepository(db).update_policy(membership, policy)


@router.get("/cleanup", response_model=schemas.CleanupStatus, dependencies=[Depends(require_cleanup_token)])
async def cleanup_status(db: AsyncSession = Depends(get_db)):
    return await MessageRepository(db).cleanup_status()


@router.post("/cleanup", response_model=schemas.CleanupResult, dependencies=[Depends(require_cleanup_token)])
async def cleanup_messages(db: AsyncSession = Depends(get_db)):
    """Delete anonymized messages whose retention window has passed."""
    return await MessageRepository(db).cleanup()
