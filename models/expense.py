from sqlalchemy import Column, String, ForeignKey, Numeric, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Expense(BaseModel, Base):
    __tablename__ = "expenses"

    name = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # validated > 0 in schema
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # Categories are soft-deleted, so the FK never dangles
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)

    category = relationship("Category", back_populates="expenses", lazy="joined")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        Index("ix_expenses_user_created", "user_id", "created_at"),
    )
