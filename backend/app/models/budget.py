"""
Budget model for personal travel budget tracking.
"""
from sqlalchemy import Column, String, Text, Date, JSON, Numeric, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Budget(BaseModel):
    """Personal budget, optionally attached to a trip."""
    __tablename__ = "budgets"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    total_budget = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    spent_amount = Column(Numeric(12, 2), nullable=False, default=0)
    breakdown = Column(JSON, nullable=False, default=dict)  # category -> planned amount

    # Relationships
    user = relationship("User", back_populates="budgets")
    trip = relationship("Trip")
    expenses = relationship("BudgetExpense", back_populates="budget", cascade="all, delete-orphan")


class BudgetExpense(BaseModel):
    """Single spending line booked against a budget."""
    __tablename__ = "budget_expenses"

    budget_id = Column(Integer, ForeignKey("budgets.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String(50), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)

    budget = relationship("Budget", back_populates="expenses")
