"""Transaction endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Success
from components.core.utils import parse_month
from components.plan.models import GroupMember
from components.transaction.repository import TransactionRepository
from components.transaction import schemas
from restapi.endpoints.auth import get_membership

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Transaction])
async def list_transactions(
    account_id: Optional[int] = None,
    category_id: Optional[int] = None,
    month: Optional[str] = Query(None, description="YYYY-MM"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """List transactions, newest first."""
    return await TransactionRepository(db).list(
        membership.plan_id,
        account_id=account_id,
        category_id=category_id,
        month=parse_month(month) if month else None,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=schemas.Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    data: schemas.TransactionCreate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """
    Record a transaction.

    The from account is debited by ``amount``. A transfer (``to_account_id``
    set) credits the other account and never touches budgets. Otherwise a
    categorized transaction adds ``abs(amount)`` to the category's activity
    for the month of ``date``.
    """
    return await TransactionRepository(db).create(membership, data)


@router.get("/{transaction_id}", response_model=schemas.Transaction)
async def read_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await TransactionRepository(db).get(membership.plan_id, transaction_id)


@router.put("/{transaction_id}", response_model=schemas.Transaction)
async def update_transaction(
    transaction_id: int,
    data: schemas.TransactionUpdate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await TransactionRepository(db).update(membership, transaction_id, data)


@router.delete("/{transaction_id}", response_model=Success)
async def delete_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    await TransactionRepository(db).delete(membership, transaction_id)
    return Success()
