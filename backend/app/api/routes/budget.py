"""
Budget management routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.budget import (
    BudgetCreate, BudgetUpdate, BudgetResponse, BudgetSummary, ExpenseCreate, ExpenseResponse
)
from app.services import budget_service
from app.api.dependencies import get_current_user

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("", response_model=List[BudgetResponse])
async def list_budgets(
    trip_id: Optional[int] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List your budgets."""
    return budget_service.list_budgets(current_user, trip_id, db)


@router.post("", response_model=BudgetResponse, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget_data: BudgetCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return budget_service.create_budget(current_user, budget_data, db)


@router.get("/{budget_id}", response_model=BudgetResponse)
async def get_budget(
    budget_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return budget_service.get_owned_budget(budget_id, current_user, db)


@router.put("/{budget_id}", response_model=BudgetResponse)
async def update_budget(
    budget_id: int,
    budget_data: BudgetUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return budget_service.update_budget(current_user, budget_id, budget_data, db)


@router.delete("/{budget_id}", response_model=MessageResponse)
async def delete_budget(
    budget_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    budget_service.delete_budget(current_user, budget_id, db)
    return {"message": "Budget deleted successfully"}


@router.get("/{budget_id}/expenses", response_model=List[ExpenseResponse])
async def list_expenses(
    budget_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return budget_service.list_expenses(current_user, budget_id, db)


@router.post("/{budget_id}/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def add_expense(
    budget_id: int,
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record an expense against a budget."""
    return budget_service.add_expense(current_user, budget_id, expense_data, db)


@router.delete("/{budget_id}/expenses/{expense_id}", response_model=MessageResponse)
async def delete_expense(
    budget_id: int,
    expense_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    budget_service.delete_expense(current_user, budget_id, expense_id, db)
    return {"message": "Expense deleted successfully"}


@router.get("/{budget_id}/summary", response_model=BudgetSummary)
async def get_budget_summary(
    budget_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get detailed budget summary with spending."""
    return budget_service.summary(current_user, budget_id, db)
