"""Core schemas for the application."""

from typing import Annotated

from pydantic import BaseModel, Field

# Largest magnitude a Numeric(12, 2) money column holds
MONEY_LIMIT = 9_999_999_999.99

Money = Annotated[float, Field(allow_inf_nan=False, ge=-MONEY_LIMIT, le=MONEY_LIMIT)]


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class Message(BaseModel):
    """Schema for plain acknowledgement responses."""
    message: str


class Success(BaseModel):
    """Schema for bare success responses."""
    success: bool = True
