from enum import Enum

from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Boolean, ForeignKey, Index
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base, SoftDeleteMixin


class CategoryType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


class Category(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "categories"

    name = Column(String(100), nullable=False)
    type = Column(
        SAEnum(CategoryType, name="category_type", native_enum=False,
               values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # NULL for the shared default categories
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    is_default = Column(Boolean, nullable=False, default=False, index=True)

    user = relationship("User", back_populates="categories")
    expenses = relationship("Expense", back_populates="category")

    __table_args__ = (
        Index("ix_categories_name", "name"),
    )

    def visible_to(self, user_id: str) -> bool:
        return self.is_default or self.user_id == user_id
