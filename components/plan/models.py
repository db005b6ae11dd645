"""Plan (budget group) and membership models for the database."""

import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    JSON,
    Enum,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from components.core.database import Base


class Role(str, enum.Enum):
    """Role of a member within a plan."""
    OWNER = "OWNER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


# Display order for member listings
ROLE_RANK = {Role.OWNER: 0, Role.EDITOR: 1, Role.VIEWER: 2}


class Plan(Base):
    """A named budget container shared by its members."""
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    message_retention_policy = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    members = relationship("GroupMember", back_populates="plan")


class GroupMember(Base):
    """Membership of a user in a plan, carrying the user's role there."""
    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("user_id", "plan_id", name="uq_group_member_user_plan"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(Role), nullable=False, default=Role.VIEWER)
    joined_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="memberships")
    plan = relationship("Plan", back_populates="members")
