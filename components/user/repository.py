"""Repository for user operations."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.exceptions import Conflict, InvalidInput, InvalidOrExpired, InvalidState, NotFound
from components.core.security import get_password_hash, verify_password
from components.core import mailer
from components.message.repository import MessageRepository
from components.plan.models import GroupMember, Role
from components.plan.repository import PlanRepository
from components.user.models import User, PasswordResetToken
from components.user.schemas import UserCreate, UserUpdate
from components.user.utils import (
    normalize_email,
    validate_new_password,
    validate_otp_format,
    generate_otp,
)

logger = logging.getLogger(__name__)
settings = get_settings()


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user: UserCreate) -> User:
        """Create a new user."""
        email = normalize_email(user.email)
        validate_new_password(user.password)
        if await self.exists(email):
            raise Conflict("Email already registered")

        db_user = User(
            email=email,
            name=user.name,
            password=get_password_hash(user.password),
        )
        self.session.add(db_user)
        await self.session.commit()
        await self.session.refresh(db_user)
        logger.info("Registered user %s", db_user.id)
        return db_user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def exists(self, email: str) -> bool:
        """Check if user with given email exists."""
        result = await self.session.execute(
            select(User.id).where(User.email == email)
        )
        return result.scalar_one_or_none() is not None

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            return None
        return user

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """Update name and email. Emails stay unique."""
        if data.name is not None:
            name = data.name.strip()
            if not name:
                raise InvalidInput("Name is required")
            user.name = name

        if data.email is not None:
            email = normalize_email(data.email)
            if email != user.email:
                result = await self.session.execute(
                    select(User.id).where(User.email == email, User.id != user.id)
                )
                if result.scalar_one_or_none() is not None:
                    raise Conflict("Email is already taken by another account")
                user.email = email

        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password):
            raise InvalidInput("Current password is incorrect")
        validate_new_password(new_password)
        if current_password == new_password:
            raise InvalidInput("New password must be different from the current password")

        user.password = get_password_hash(new_password)
        await self.session.commit()
        logger.info("User %s changed password", user.id)

    async def request_password_reset(self, email: str) -> PasswordResetToken:
        """Issue a fresh reset code, replacing any earlier one, and mail it."""
        email = normalize_email(email)
        user = await self.get_by_email(email)
        if user is None:
            raise NotFound("No account found with this email address")

        try:
            await self.session.execute(
                delete(PasswordResetToken).where(PasswordResetToken.user_id == user.id)
            )
            token = PasswordResetToken(
                user_id=user.id,
                email=user.email,
                token=generate_otp(),
                expires_at=datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
            )
            self.session.add(token)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        mailer.send_otp_email(user.email, token.token, user.name)
        logger.info("Password reset code issued for user %s", user.id)
        return token

    async def _live_token(self, email: str, otp: str) -> PasswordResetToken:
        validate_otp_format(otp)
        result = await self.session.execute(
            select(PasswordResetToken).where(
                PasswordResetToken.email == email.strip().lower(),
                PasswordResetToken.token == otp,
                PasswordResetToken.expires_at > datetime.utcnow(),
            )
        )
        token = result.scalars().first()
        if token is None:
            raise InvalidOrExpired("Invalid or expired OTP. Please request a new code.")
        return token

    async def verify_otp(self, email: str, otp: str) -> bool:
        """Check a reset code without consuming it."""
        await self._live_token(email, otp)
        return True

    async def reset_password(self, email: str, otp: str, new_password: str) -> None:
        """Set the new password and drop every reset code of the user."""
        validate_otp_format(otp)
        validate_new_password(new_password)
        token = await self._live_token(email, otp)
        user = await self.get_by_id(token.user_id)
        if user is None:
            raise NotFound("User not found")

        try:
            user.password = get_password_hash(new_password)
            await self.session.execute(
                delete(PasswordResetToken).where(PasswordResetToken.user_id == user.id)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Password reset completed for user %s", user.id)

    async def delete(self, user: User) -> None:
        """
        Delete the account.

        Plans where the user is the only member are deleted with it. Deletion
        is refused while the user is the last owner of a plan that other
        people still use.
        """
        result = await self.session.execute(
            select(GroupMember).where(GroupMember.user_id == user.id)
        )
        memberships = list(result.scalars().all())

        solo_plans = []
        for membership in memberships:
            result = await self.session.execute(
                select(GroupMember.role, func.count(GroupMember.id))
                .where(GroupMember.plan_id == membership.plan_id, GroupMember.user_id != user.id)
                .group_by(GroupMember.role)
            )
            others = dict(result.all())
            if not others:
                solo_plans.append(membership.plan_id)
            elif membership.role == Role.OWNER and not others.get(Role.OWNER):
                raise InvalidState(
                    "Transfer ownership before deleting your account",
                    plan_id=membership.plan_id,
                )

        user_id = user.id
        plans = PlanRepository(self.session)
        try:
            await MessageRepository(self.session).anonymize_sender(user)
            for plan_id in solo_plans:
                await plans.purge(plan_id)
            await self.session.execute(delete(GroupMember).where(GroupMember.user_id == user_id))
            await self.session.execute(
                delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
            )
            await self.session.execute(delete(User).where(User.id == user_id))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Deleted user %s and %s solo plans", user_id, len(solo_plans))
