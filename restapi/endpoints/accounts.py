"""Account endpoints for the API."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.account import schemas
from components.core.init_db import get_db
from components.core.schemas import Success
from components.plan.models import GroupMember
from restapi.endpoints.auth import get_membership

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Account])
async def list_accounts(
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """List the plan's accounts, on-budget and open ones first."""
    return await AccountRepository(db).list(membership.plan_id)


@router.post("", response_model=schemas.Account, status_code=status.HTTP_201_CREATED)
async def create_account(
    data: schemas.AccountCreate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await AccountRepository(db).create(membership, data)


@router.get("/{account_id}", response_model=schemas.Account)
async def read_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await AccountRepository(db).get(membership.plan_id, account_id)


@router.put("/{account_id}", response_model=schemas.Account)
async def update_account(
    account_id: int,
    data: schemas.AccountUpdate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await AccountRepository(db).update(membership, account_id, data)


@router.delete("/{account_id}", response_model=Success)
async def delete_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Delete an account. Accounts with transactions must be closed instead."""
    await AccountRepository(db).delete(membership, account_id)
    return Success()
