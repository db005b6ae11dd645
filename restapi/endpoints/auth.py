"""Authentication endpoints and the caller-resolution dependencies."""

from datetime import timedelta
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.init_db import get_db
from components.core.schemas import Message
from components.core.security import create_access_token, verify_token
from components.plan.models import GroupMember
from components.plan.permissions import resolve_membership
from components.user.models import User
from components.user.repository import UserRepository
from components.user import schemas

settings = get_settings()
router = APIRouter(prefix="/auth", tags=["authentication"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(oauth2_scheme)
) -> User:
    """Get current user from JWT token."""
    payload = verify_token(token)
    if payload is None or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(
        select(User).where(User.id == int(payload["sub"]))
    )
    user = result.scalar_one_or_none()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_membership(
    plan_id: Optional[int] = Query(None, description="Plan to act on; defaults to the first joined plan"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> GroupMember:
    """Resolve the caller's membership in the requested plan."""
    return await resolve_membership(db, current_user.id, plan_id)


def _with_token(user: User) -> schemas.UserWithToken:
    access_token = create_access_token(
        data={"sub": str(user.id)},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return schemas.UserWithToken(
        **schemas.User.model_validate(user).model_dump(),
        access_token=access_token,
    )


@router.post("/register", response_model=schemas.UserWithToken, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: schemas.UserCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Create new user and return JWT token."""
    user = await UserRepository(db).create(user_in)
    return _with_token(user)


@router.post("/login", response_model=schemas.UserWithToken)
async def login(
    db: AsyncSession = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """Login user and return JWT token."""
    user = await UserRepository(db).authenticate(form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _with_token(user)


@router.post("/change-password", response_model=Message)
async def change_password(
    data: schemas.ChangePassword,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await UserRepository(db).change_password(current_user, data.current_password, data.new_password)
    return Message(message="Password changed successfully")


@router.post("/forgot-password")
async def forgot_password(data: schemas.ForgotPassword, db: AsyncSession = Depends(get_db)):
    """Mail a 6-digit reset code to the account's address."""
    token = await UserRepository(db).request_password_reset(data.email)
    return {
        "message": "Password reset code sent to your email",
        "email": token.email,
        "expires_in": settings.OTP_EXPIRE_MINUTES,
    }


@router.post("/verify-otp")
async def verify_otp(data: schemas.VerifyOtp, db: AsyncSession = Depends(get_db)):
    await UserRepository(db).verify_otp(data.email, data.otp)
    return {"message": "OTP verified successfully", "valid": True}


@router.post("/reset-password", response_model=Message)
async def reset_password(data: schemas.ResetPassword, db: AsyncSession = Depends(get_db)):
    await UserRepository(db).reset_password(data.email, data.otp, data.new_password)
    return Message(message="Password reset successfully")
