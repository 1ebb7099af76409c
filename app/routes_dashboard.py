# app/routes_dashboard.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from models import Expense, Income, Loan, LoanStatus, User
from app.deps import get_current_user, get_db
from app.services.aggregation import build_overview, merge_recent_transactions
from app.services.date_ranges import get_month_range
from app.services.resource_store import (
    etfs_store,
    eurobonds_store,
    expenses_store,
    incomes_store,
    loans_store,
    stocks_store,
)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/overview")
def dashboard_overview(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # Current calendar month: [1st 00:00, last day 23:59:59]
    month_start, month_end, _, _ = get_month_range()

    # Sequential, not concurrent: a Session must not be shared across threads.
    # Any failing fetch still fails the whole overview.
    stocks = stocks_store.find_all(db, user.id)
    etfs = etfs_store.find_all(db, user.id)
    eurobonds = eurobonds_store.find_all(db, user.id)
    monthly_incomes = incomes_store.find_all(
        db, user.id, Income.date >= month_start, Income.date <= month_end
    )
    monthly_expenses = expenses_store.find_all(
        db, user.id, Expense.date >= month_start, Expense.date <= month_end
    )
    active_loans = loans_store.find_all(db, user.id, Loan.status == LoanStatus.ACTIVE)

    return build_overview(
        stocks,
        etfs,
        eurobonds,
        monthly_incomes,
        monthly_expenses,
        active_loans,
    )


@router.get("/transactions")
def recent_transactions(
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Newest incomes and expenses merged into one feed.

    Each side is capped at `limit` before merging, which is enough to fill
    the merged top `limit`.
    """
    incomes = incomes_store.find_all(db, user.id, limit=limit)
    expenses = expenses_store.find_all(db, user.id, limit=limit)
    return merge_recent_transactions(incomes, expenses, limit=limit)
