# app/routes_market_data.py
"""
Market data endpoints: precious-metal spot prices and Yahoo Finance lookups.

Gateway failures are raised as MarketDataError and rendered by the handler
registered in main.py (502 upstream / 404 unknown symbol / 500 malformed).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from models import User
from app.deps import get_current_user, get_market_data
from app.services.market_data import MarketDataGateway

metals_router = APIRouter(prefix="/precious-metals", tags=["precious-metals"])
yahoo_router = APIRouter(prefix="/yahoo-finance", tags=["yahoo-finance"])


# -------------------------------------------------------------------
# Precious metals (cached, local currency)
# -------------------------------------------------------------------

@metals_router.get("/gold/price")
def gold_price(
    user: User = Depends(get_current_user),
    market: MarketDataGateway = Depends(get_market_data),
):
    return market.get_gold_price()


@metals_router.get("/silver/price")
def silver_price(
    user: User = Depends(get_current_user),
    market: MarketDataGateway = Depends(get_market_data),
):
    return market.get_silver_price()


# -------------------------------------------------------------------
# Yahoo Finance
# -------------------------------------------------------------------

@yahoo_router.get("/search")
def search_symbol(
    q: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    market: MarketDataGateway = Depends(get_market_data),
):
    return market.search_symbol(q or "")


@yahoo_router.get("/quote/{symbol}")
def get_quote(
    symbol: str,
    user: User = Depends(get_current_user),
    market: MarketDataGateway = Depends(get_market_data),
):
    return market.get_quote(symbol)


@yahoo_router.get("/historical/{symbol}")
def get_historical(
    symbol: str,
    period1: int = Query(..., description="Unix seconds, window start"),
    period2: int = Query(..., description="Unix seconds, window end"),
    interval: str = Query("1d"),
    user: User = Depends(get_current_user),
    market: MarketDataGateway = Depends(get_market_data),
):
    return market.get_historical_data(symbol, period1, period2, interval)
