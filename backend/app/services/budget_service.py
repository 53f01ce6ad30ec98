"""
Budget service for personal budgets and their expenses.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, PermissionDeniedError, service_operation
from app.models.budget import Budget, BudgetExpense
from app.models.user import User
from app.schemas.budget import BudgetCreate, BudgetUpdate, ExpenseCreate
from app.services.trip_service import get_active_trip, is_accepted_participant

logger = logging.getLogger(__name__)


def _money(value) -> Decimal:
    return Decimal(str(value or 0))


def _breakdown_json(breakdown) -> dict:
    return {category: float(amount) for category, amount in (breakdown or {}).items()}


def _check_trip_link(trip_id: Optional[int], user: User, db: Session) -> None:
    """Budgets may only be attached to trips the user has joined."""
    if trip_id is None:
        return
    get_active_trip(trip_id, db)
    if not is_accepted_participant(trip_id, user.id, db):
        raise PermissionDeniedError("You must be a participant of the trip to budget for it")


def get_owned_budget(budget_id: int, user: User, db: Session) -> Budget:
    budget = db.query(Budget).filter(Budget.id == budget_id, Budget.user_id == user.id).first()
    if not budget:
        raise NotFoundError("Budget not found")
    return budget


@service_operation("fetch budgets")
def list_budgets(user: User, trip_id: Optional[int], db: Session) -> List[Budget]:
    query = db.query(Budget).filter(Budget.user_id == user.id)
    if trip_id is not None:
        query = query.filter(Budget.trip_id == trip_id)
    return query.order_by(Budget.created_at.desc(), Budget.id.desc()).all()


@service_operation("create budget")
def create_budget(user: User, data: BudgetCreate, db: Session) -> Budget:
    _check_trip_link(data.trip_id, user, db)
    budget = Budget(
        user_id=user.id,
        trip_id=data.trip_id,
        title=data.title,
        description=data.description,
        total_budget=data.total_budget,
        currency=data.currency.upper(),
        spent_amount=Decimal(0),
        breakdown=_breakdown_json(data.breakdown),
    )
    db.add(budget)
    db.commit()
    db.refresh(budget)
    return budget


@service_operation("update budget")
def update_budget(user: User, budget_id: int, data: BudgetUpdate, db: Session) -> Budget:
    budget = get_owned_budget(budget_id, user, db)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if field == "breakdown":
            value = _breakdown_json(value)
        elif field == "currency":
            value = value.upper()
        setattr(budget, field, value)
    db.commit()
    db.refresh(budget)
    return budget


@service_operation("delete budget")
def delete_budget(user: User, budget_id: int, db: Session) -> None:
    budget = get_owned_budget(budget_id, user, db)
    db.delete(budget)
    db.commit()


@service_operation("fetch budget expenses")
def list_expenses(user: User, budget_id: int, db: Session) -> List[BudgetExpense]:
    get_owned_budget(budget_id, user, db)
    return db.query(BudgetExpense).filter(
        BudgetExpense.budget_id == budget_id
    ).order_by(BudgetExpense.date.desc(), BudgetExpense.id.desc()).all()


@service_operation("add expense")
def add_expense(user: User, budget_id: int, data: ExpenseCreate, db: Session) -> BudgetExpense:
    """Record an expense and raise the budget's spent amount in one commit."""
    budget = get_owned_budget(budget_id, user, db)
    expense = BudgetExpense(
        budget_id=budget.id,
        category=data.category.strip().lower(),
        amount=data.amount,
        description=data.description,
        date=data.date or date.today(),
    )
    db.add(expense)
    budget.spent_amount = _money(budget.spent_amount) + _money(data.amount)
    db.commit()
    db.refresh(expense)
    return expense


@service_operation("delete expense")
def delete_expense(user: User, budget_id: int, expense_id: int, db: Session) -> None:
    budget = get_owned_budget(budget_id, user, db)
    expense = db.query(BudgetExpense).filter(
        BudgetExpense.id == expense_id, BudgetExpense.budget_id == budget.id
    ).first()
    if not expense:
        raise NotFoundError("Expense not found")
    budget.spent_amount = max(Decimal(0), _money(budget.spent_amount) - _money(expense.amount))
    db.delete(expense)
    db.commit()


def _percent(part: Decimal, whole: Decimal) -> float:
    return float(part / whole * 100) if whole > 0 else 0.0


@service_operation("build budget summary")
def summary(user: User, budget_id: int, db: Session) -> dict:
    budget = get_owned_budget(budget_id, user, db)
    expenses = db.query(BudgetExpense).filter(BudgetExpense.budget_id == budget.id).all()

    total_budget = _money(budget.total_budget)
    total_spent = sum((_money(e.amount) for e in expenses), Decimal(0))

    # Group by category
    category_spending = {}
    category_counts = {}
    for expense in expenses:
        category_spending[expense.category] = category_spending.get(expense.category, Decimal(0)) + _money(expense.amount)
        category_counts[expense.category] = category_counts.get(expense.category, 0) + 1

    planned = budget.breakdown or {}
    categories = [
        {
            "category": category,
            "spent": spent,
            "expense_count": category_counts[category],
            "planned": _money(planned[category]) if category in planned else None,
            "percentage_of_total": _percent(spent, total_spent),
            "percentage_of_budget": _percent(spent, total_budget),
        }
        for category, spent in category_spending.items()
    ]
    categories.sort(key=lambda item: item["spent"], reverse=True)

    return {
        "budget_id": budget.id,
        "currency": budget.currency,
        "total_budget": total_budget,
        "total_spent": total_spent,
        "remaining": total_budget - total_spent,
        "fill_ratio": _percent(total_spent, total_budget),
        "is_over_budget": total_spent > total_budget,
        "expense_count": len(expenses),
        "categories": categories,
    }
