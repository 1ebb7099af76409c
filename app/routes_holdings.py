# app/routes_holdings.py
"""
Routes for cash accounts and precious-metal holdings (gold, silver).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from models import User
from app.deps import found_or_404, get_current_user, get_db
from app.schemas import (
    CashCreate,
    CashRead,
    CashUpdate,
    MessageResponse,
    MetalCreate,
    MetalRead,
    MetalUpdate,
)
from app.services.aggregation import summarize_cash, summarize_metal
from app.services.resource_store import ResourceStore, cash_store, gold_store, silver_store

cash_router = APIRouter(prefix="/cash", tags=["cash"])


# -------------------------------------------------------------------
# Cash accounts
# -------------------------------------------------------------------

@cash_router.post("", response_model=CashRead, status_code=201)
def create_cash(
    payload: CashCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return cash_store.create(db, user.id, payload.model_dump())


@cash_router.get("", response_model=List[CashRead])
def list_cash(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return cash_store.find_all(db, user.id)


@cash_router.get("/summary")
def cash_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Balances summed per currency and overall (no FX conversion)."""
    return summarize_cash(cash_store.find_all(db, user.id))


@cash_router.get("/{cash_id}", response_model=CashRead)
def get_cash(cash_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return found_or_404(cash_store.find_one(db, user.id, cash_id), cash_store.not_found_message)


@cash_router.patch("/{cash_id}", response_model=CashRead)
def update_cash(
    cash_id: str,
    payload: CashUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    account = cash_store.update(db, user.id, cash_id, payload.model_dump(exclude_unset=True))
    return found_or_404(account, cash_store.not_found_message)


@cash_router.delete("/{cash_id}", response_model=MessageResponse)
def delete_cash(cash_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    found_or_404(cash_store.remove(db, user.id, cash_id), cash_store.not_found_message)
    return {"message": cash_store.deleted_message}


# -------------------------------------------------------------------
# Gold / Silver
# -------------------------------------------------------------------

def build_metal_router(prefix: str, store: ResourceStore) -> APIRouter:
    """Gold and silver have identical schemas; only the table differs."""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.post("", response_model=MetalRead, status_code=201)
    def create_holding(
        payload: MetalCreate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        return store.create(db, user.id, payload.model_dump())

    @router.get("", response_model=List[MetalRead])
    def list_holdings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
        return store.find_all(db, user.id)

    @router.get("/summary")
    def holdings_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
        return summarize_metal(store.find_all(db, user.id))

    @router.get("/{holding_id}", response_model=MetalRead)
    def get_holding(holding_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
        return found_or_404(store.find_one(db, user.id, holding_id), store.not_found_message)

    @router.patch("/{holding_id}", response_model=MetalRead)
    def update_holding(
        holding_id: str,
        payload: MetalUpdate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        holding = store.update(db, user.id, holding_id, payload.model_dump(exclude_unset=True))
        return found_or_404(holding, store.not_found_message)

    @router.delete("/{holding_id}", response_model=MessageResponse)
    def delete_holding(holding_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
        found_or_404(store.remove(db, user.id, holding_id), store.not_found_message)
        return {"message": store.deleted_message}

    return router


gold_router = build_metal_router("/gold", gold_store)
silver_router = build_metal_router("/silver", silver_store)
