"""Chat message model for the database."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey

from components.core.database import Base


class Message(Base):
    """Chat message posted to a plan.

    When the sender deletes their account the message is anonymized first
    (sender snapshot kept, ``sender_id`` cleared) and removed for good once
    ``scheduled_delete`` has passed.
    """
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    sender_name = Column(String(100), nullable=True)
    sender_email = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    reply_to_id = Column(Integer, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    is_anonymized = Column(Boolean, nullable=False, default=False)
    anonymized_at = Column(DateTime, nullable=True)
    scheduled_delete = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
