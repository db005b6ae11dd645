"""Note model for the database."""

from datetime import datetime

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, CheckConstraint

from components.core.database import Base


class Note(Base):
    """Freeform note on a category or a category group."""
    __tablename__ = "notes"
    __table_args__ = (
        CheckConstraint(
            "(category_id IS NULL) <> (category_group_id IS NULL)",
            name="ck_note_single_target",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True, index=True)
    category_group_id = Column(
        Integer, ForeignKey("category_groups.id", ondelete="CASCADE"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
