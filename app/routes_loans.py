# app/routes_loans.py
"""
Routes for loans. Active loans feed the dashboard's debt figure.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from models import Loan, LoanStatus, User
from app.deps import found_or_404, get_current_user, get_db
from app.schemas import LoanCreate, LoanRead, LoanUpdate, MessageResponse
from app.services.aggregation import summarize_loans
from app.services.resource_store import loans_store

router = APIRouter(prefix="/loans", tags=["loans"])


@router.post("", response_model=LoanRead, status_code=201)
def create_loan(
    payload: LoanCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return loans_store.create(db, user.id, payload.model_dump())


@router.get("", response_model=List[LoanRead])
def list_loans(
    status: Optional[LoanStatus] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    criteria = []
    if status is not None:
        criteria.append(Loan.status == status)
    return loans_store.find_all(db, user.id, *criteria)


@router.get("/summary")
def loans_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return summarize_loans(loans_store.find_all(db, user.id))


@router.get("/{loan_id}", response_model=LoanRead)
def get_loan(loan_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return found_or_404(loans_store.find_one(db, user.id, loan_id), loans_store.not_found_message)


@router.patch("/{loan_id}", response_model=LoanRead)
def update_loan(
    loan_id: str,
    payload: LoanUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    loan = loans_store.update(db, user.id, loan_id, payload.model_dump(exclude_unset=True))
    return found_or_404(loan, loans_store.not_found_message)


@router.delete("/{loan_id}", response_model=MessageResponse)
def delete_loan(loan_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    found_or_404(loans_store.remove(db, user.id, loan_id), loans_store.not_found_message)
    return {"message": loans_store.deleted_message}
