"""User schemas for request and response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    """Base schema for user data."""
    email: str = Field(..., min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=100)


class UserCreate(UserBase):
    """Schema for creating a new user."""
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    """Schema for updating the profile."""
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=255)


class User(UserBase):
    """Schema for user response."""
    id: int
    has_completed_onboarding: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserWithToken(User):
    """Schema for user response with JWT token."""
    access_token: str
    token_type: str = "bearer"


class ChangePassword(BaseModel):
    current_password: str
    new_password: str


class ForgotPassword(BaseModel):
    email: str


class VerifyOtp(BaseModel):
    email: str
    otp: str


class ResetPassword(BaseModel):
    email: str
    otp: str
    new_password: str
