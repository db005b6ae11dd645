"""Report endpoints for the API."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.utils import parse_month
from components.plan.models import GroupMember
from components.report.repository import ReportRepository
from components.report import schemas
from restapi.endpoints.auth import get_membership

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    responses={404: {"description": "Not found"}},
)


@router.get("/spending", response_model=schemas.SpendingReport)
async def spending_report(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Spending of a month broken down by category and by category group."""
    return await ReportRepository(db).spending(
        membership.plan_id,
        parse_month(month),
        category_id=category_id,
        account_id=account_id,
    )
