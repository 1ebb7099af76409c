# app/routes_portfolio.py
"""
Routes for securities holdings: stocks, ETFs and eurobonds.

Each family exposes the same CRUD surface plus a /summary view. Records are
returned with their income sub-records (dividends, distributions, coupon
payments) attached.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from models import User
from app.deps import found_or_404, get_current_user, get_db
from app.schemas import (
    EtfCreate,
    EtfRead,
    EtfUpdate,
    EurobondCreate,
    EurobondRead,
    EurobondUpdate,
    MessageResponse,
    StockCreate,
    StockRead,
    StockUpdate,
)
from app.services.aggregation import summarize_etfs, summarize_eurobonds, summarize_stocks
from app.services.resource_store import etfs_store, eurobonds_store, stocks_store

stocks_router = APIRouter(prefix="/stocks", tags=["stocks"])
etfs_router = APIRouter(prefix="/etfs", tags=["etfs"])
eurobonds_router = APIRouter(prefix="/eurobonds", tags=["eurobonds"])


# -------------------------------------------------------------------
# Stocks
# -------------------------------------------------------------------

@stocks_router.post("", response_model=StockRead, status_code=201)
def create_stock(
    payload: StockCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return stocks_store.create(db, user.id, payload.model_dump())


@stocks_router.get("", response_model=List[StockRead])
def list_stocks(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return stocks_store.find_all(db, user.id)


@stocks_router.get("/summary")
def stocks_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return summarize_stocks(stocks_store.find_all(db, user.id))


@stocks_router.get("/{stock_id}", response_model=StockRead)
def get_stock(stock_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return found_or_404(stocks_store.find_one(db, user.id, stock_id), stocks_store.not_found_message)


@stocks_router.patch("/{stock_id}", response_model=StockRead)
def update_stock(
    stock_id: str,
    payload: StockUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    stock = stocks_store.update(db, user.id, stock_id, payload.model_dump(exclude_unset=True))
    return found_or_404(stock, stocks_store.not_found_message)


@stocks_router.delete("/{stock_id}", response_model=MessageResponse)
def delete_stock(stock_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    found_or_404(stocks_store.remove(db, user.id, stock_id), stocks_store.not_found_message)
    return {"message": stocks_store.deleted_message}


# -------------------------------------------------------------------
# ETFs
# -------------------------------------------------------------------

@etfs_router.post("", response_model=EtfRead, status_code=201)
def create_etf(
    payload: EtfCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return etfs_store.create(db, user.id, payload.model_dump())


@etfs_router.get("", response_model=List[EtfRead])
def list_etfs(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return etfs_store.find_all(db, user.id)


@etfs_router.get("/summary")
def etfs_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return summarize_etfs(etfs_store.find_all(db, user.id))


@etfs_router.get("/{etf_id}", response_model=EtfRead)
def get_etf(etf_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return found_or_404(etfs_store.find_one(db, user.id, etf_id), etfs_store.not_found_message)


@etfs_router.patch("/{etf_id}", response_model=EtfRead)
def update_etf(
    etf_id: str,
    payload: EtfUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    etf = etfs_store.update(db, user.id, etf_id, payload.model_dump(exclude_unset=True))
    return found_or_404(etf, etfs_store.not_found_message)


@etfs_router.delete("/{etf_id}", response_model=MessageResponse)
def delete_etf(etf_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    found_or_404(etfs_store.remove(db, user.id, etf_id), etfs_store.not_found_message)
    return {"message": etfs_store.deleted_message}


# -------------------------------------------------------------------
# Eurobonds (listed by maturity, soonest first)
# -------------------------------------------------------------------

@eurobonds_router.post("", response_model=EurobondRead, status_code=201)
def create_eurobond(
    payload: EurobondCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return eurobonds_store.create(db, user.id, payload.model_dump())


@eurobonds_router.get("", response_model=List[EurobondRead])
def list_eurobonds(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return eurobonds_store.find_all(db, user.id)


@eurobonds_router.get("/summary")
def eurobonds_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return summarize_eurobonds(eurobonds_store.find_all(db, user.id))


@eurobonds_router.get("/{eurobond_id}", response_model=EurobondRead)
def get_eurobond(eurobond_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return found_or_404(
        eurobonds_store.find_one(db, user.id, eurobond_id),
        eurobonds_store.not_found_message,
    )


@eurobonds_router.patch("/{eurobond_id}", response_model=EurobondRead)
def update_eurobond(
    eurobond_id: str,
    payload: EurobondUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    bond = eurobonds_store.update(db, user.id, eurobond_id, payload.model_dump(exclude_unset=True))
    return found_or_404(bond, eurobonds_store.not_found_message)


@eurobonds_router.delete("/{eurobond_id}", response_model=MessageResponse)
def delete_eurobond(eurobond_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    found_or_404(eurobonds_store.remove(db, user.id, eurobond_id), eurobonds_store.not_found_message)
    return {"message": eurobonds_store.deleted_message}
