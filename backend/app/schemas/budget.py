"""
Pydantic schemas for Budget entity.
"""
from pydantic import BaseModel, Field
from typing import Dict, Optional, List
from datetime import date as date_type, datetime
from decimal import Decimal


class BudgetBase(BaseModel):
    """Base budget schema."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    total_budget: Decimal = Field(..., gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    breakdown: Dict[str, Decimal] = {}  # category -> planned amount


class BudgetCreate(BudgetBase):
    """Schema for budget creation."""
    trip_id: Optional[int] = None


class BudgetUpdate(BaseModel):
    """Schema for budget update."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    total_budget: Optional[Decimal] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    breakdown: Optional[Dict[str, Decimal]] = None


class BudgetResponse(BudgetBase):
    """Schema for budget response."""
    id: int
    user_id: int
    trip_id: Optional[int] = None
    spent_amount: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseCreate(BaseModel):
    category: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None
    date: Optional[date_type] = None


class ExpenseResponse(BaseModel):
    id: int
    budget_id: int
    category: str
    amount: Decimal
    description: Optional[str] = None
    date: date_type
    created_at: datetime

    class Config:
        from_attributes = True


class BudgetCategoryItem(BaseModel):
    """Schema for category spending item in budget summary."""
    category: str
    spent: Decimal
    expense_count: int
    planned: Optional[Decimal] = None
    percentage_of_total: float  # share of all spending (0-100)
    percentage_of_budget: float  # share of the total budget (0-100)


class BudgetSummary(BaseModel):
    """Schema for budget summary with spending details."""
    budget_id: int
    currency: str
    total_budget: Decimal
    total_spent: Decimal
    remaining: Decimal
    fill_ratio: float  # percentage of budget used
    is_over_budget: bool
    expense_count: int
    categories: List[BudgetCategoryItem] = []
