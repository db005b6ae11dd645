"""Category group and category endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.repository import CategoryRepository
from components.category import schemas
from components.core.init_db import get_db
from components.core.schemas import Success
from components.plan.models import GroupMember
from restapi.endpoints.auth import get_membership

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.CategoryGroupWithCategories])
async def list_categories(
    include_hidden: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Category groups with their categories, in sort order."""
    return await CategoryRepository(db).list_groups(membership.plan_id, include_hidden)


@router.post("", response_model=schemas.CategoryGroup, status_code=status.HTTP_201_CREATED)
async def create_group(
    data: schemas.CategoryGroupCreate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await CategoryRepository(db).create_group(membership, data)


@router.post("/move", response_model=schemas.Category)
async def move_category(
    data: schemas.CategoryMove,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Move a category to another group; it is placed last there."""
    return await CategoryRepository(db).move_category(membership, data)


@router.put("/{group_id}", response_model=schemas.CategoryGroup)
async def update_group(
    group_id: int,
    data: schemas.CategoryGroupUpdate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await CategoryRepository(db).update_group(membership, group_id, data)


@router.delete("/{group_id}", response_model=Success)
async def delete_group(
    group_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Delete a category group and all of its categories."""
    await CategoryRepository(db).delete_group(membership, group_id)
    return Success()


@router.post("/{group_id}/categories", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    group_id: int,
    data: schemas.CategoryCreate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    return await CategoryRepository(db).create_category(membership, group_id, data)


@router.put("/{group_id}/categories/{category_id}", response_model=schemas.Category)
async def update_category(
    group_id: int,
    category_id: int,
    data: schemas.CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    """Rename or hide a category, or set its budgeted amount for a month."""
    return await CategoryRepository(db).update_category(membership, group_id, category_id, data)


@router.delete("/{group_id}/categories/{category_id}", response_model=Success)
async def delete_category(
    group_id: int,
    category_id: int,
    db: AsyncSession = Depends(get_db),
    membership: GroupMember = Depends(get_membership),
):
    await CategoryRepository(db).delete_category(membership, group_id, category_id)
    return Success()
