"""Category group and category models for the database."""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from components.core.database import Base


class CategoryGroup(Base):
    """Ordered group of categories within a plan."""
    __tablename__ = "category_groups"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_hidden = Column(Boolean, nullable=False, default=False)

    categories = relationship(
        "Category",
        back_populates="category_group",
        order_by="Category.sort_order",
    )


class Category(Base):
    """Budget category (an envelope)."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    category_group_id = Column(
        Integer, ForeignKey("category_groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_hidden = Column(Boolean, nullable=False, default=False)

    category_group = relationship("CategoryGroup", back_populates="categories")
