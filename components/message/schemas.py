"""Message schemas for request and response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    reply_to_id: Optional[int] = None


class Message(BaseModel):
    """Schema for message response."""
    id: int
    plan_id: int
    sender_id: Optional[int] = None
    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    content: str
    reply_to_id: Optional[int] = None
    is_read: bool
    is_anonymized: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RetentionPolicy(BaseModel):
    """Per-plan message retention settings."""
    anonymized_retention_hours: int = Field(24, ge=1, le=24 * 365)
    allow_member_export: bool = False
    warn_on_user_deletion: bool = True


class CleanupStatus(BaseModel):
    total_anonymized: int
    due_for_deletion: int
    next_scheduled_delete: Optional[datetime] = None
    timestamp: datetime


class CleanupResult(BaseModel):
    success: bool = True
    message: str
    deleted_count: int
    groups_processed: int
    timestamp: datetime
