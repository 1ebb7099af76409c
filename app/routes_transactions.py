# routes_transactions.py
"""
Routes for incomes and expenses: CRUD, filtered lists, and monthly summaries.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from models import (
    Expense,
    ExpenseCategory,
    Income,
    IncomeType,
    PaymentMethod,
    User,
)
from app.deps import found_or_404, get_current_user, get_db
from app.schemas import (
    ExpenseCreate,
    ExpenseRead,
    ExpenseUpdate,
    IncomeCreate,
    IncomeRead,
    IncomeUpdate,
    MessageResponse,
)
from app.services.aggregation import summarize_expenses, summarize_incomes
from app.services.date_ranges import get_month_range
from app.services.resource_store import expenses_store, incomes_store

incomes_router = APIRouter(prefix="/incomes", tags=["incomes"])
expenses_router = APIRouter(prefix="/expenses", tags=["expenses"])


def date_criteria(model, start_date: Optional[datetime], end_date: Optional[datetime]) -> list:
    # Both bounds inclusive
    criteria = []
    if start_date is not None:
        criteria.append(model.date >= start_date)
    if end_date is not None:
        criteria.append(model.date <= end_date)
    return criteria


def month_window(month: Optional[int], year: Optional[int]):
    """Human month (1-12) from the query string -> 0-indexed month range."""
    return get_month_range(month - 1 if month is not None else None, year)


# -------------------------------------------------------------------
# Incomes
# -------------------------------------------------------------------

@incomes_router.post("", response_model=IncomeRead, status_code=201)
def create_income(
    payload: IncomeCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return incomes_store.create(db, user.id, payload.model_dump())


@incomes_router.get("", response_model=List[IncomeRead])
def list_incomes(
    type: Optional[IncomeType] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    criteria = date_criteria(Income, start_date, end_date)
    if type is not None:
        criteria.append(Income.type == type)
    return incomes_store.find_all(db, user.id, *criteria)


@incomes_router.get("/summary")
def incomes_summary(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    start, end, target_month, target_year = month_window(month, year)
    incomes = incomes_store.find_all(db, user.id, Income.date >= start, Income.date <= end)
    return summarize_incomes(incomes, target_month, target_year)


@incomes_router.get("/{income_id}", response_model=IncomeRead)
def get_income(income_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return found_or_404(incomes_store.find_one(db, user.id, income_id), incomes_store.not_found_message)


@incomes_router.patch("/{income_id}", response_model=IncomeRead)
def update_income(
    income_id: str,
    payload: IncomeUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    income = incomes_store.update(db, user.id, income_id, payload.model_dump(exclude_unset=True))
    return found_or_404(income, incomes_store.not_found_message)


@incomes_router.delete("/{income_id}", response_model=MessageResponse)
def delete_income(income_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    found_or_404(incomes_store.remove(db, user.id, income_id), incomes_store.not_found_message)
    return {"message": incomes_store.deleted_message}


# -------------------------------------------------------------------
# Expenses
# -------------------------------------------------------------------

@expenses_router.post("", response_model=ExpenseRead, status_code=201)
def create_expense(
    payload: ExpenseCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return expenses_store.create(db, user.id, payload.model_dump())


@expenses_router.get("", response_model=List[ExpenseRead])
def list_expenses(
    category: Optional[ExpenseCategory] = Query(None),
    payment_method: Optional[PaymentMethod] = Query(None, alias="paymentMethod"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    criteria = date_criteria(Expense, start_date, end_date)
    if category is not None:
        criteria.append(Expense.category == category)
    if payment_method is not None:
        criteria.append(Expense.payment_method == payment_method)
    return expenses_store.find_all(db, user.id, *criteria)


@expenses_router.get("/summary")
def expenses_summary(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    start, end, target_month, target_year = month_window(month, year)
    expenses = expenses_store.find_all(db, user.id, Expense.date >= start, Expense.date <= end)
    return summarize_expenses(expenses, target_month, target_year)


@expenses_router.get("/{expense_id}", response_model=ExpenseRead)
def get_expense(expense_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return found_or_404(expenses_store.find_one(db, user.id, expense_id), expenses_store.not_found_message)


@expenses_router.patch("/{expense_id}", response_model=ExpenseRead)
def update_expense(
    expense_id: str,
    payload: ExpenseUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expense = expenses_store.update(db, user.id, expense_id, payload.model_dump(exclude_unset=True))
    return found_or_404(expense, expenses_store.not_found_message)


@expenses_router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(expense_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    found_or_404(expenses_store.remove(db, user.id, expense_id), expenses_store.not_found_message)
    return {"message": expenses_store.deleted_message}
