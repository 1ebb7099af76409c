# app/services/market_data.py
"""
Market data gateway (Yahoo Finance public chart/search endpoints).

Public API:
    MarketDataGateway.get_quote(symbol)
    MarketDataGateway.search_symbol(query)
    MarketDataGateway.get_historical_data(symbol, period1, period2, interval)
    MarketDataGateway.get_gold_price() / get_silver_price()

Failures surface as one of three MarketDataError subclasses so the HTTP
layer can map them to 502 / 404 / 500. Nothing here retries.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from app.services.quote_cache import QuoteCache

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://query1.finance.yahoo.com"

# Troy-ounce conversion used for every metal price
GRAMS_PER_OUNCE = 28.3495

GOLD_SYMBOL = "GC=F"  # gold futures, USD per ounce
SILVER_SYMBOL = "SI=F"  # silver futures, USD per ounce

_YF_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123 Safari/537.36",
    "Accept": "application/json, text/plain, */*",
}


# -------------------------------------------------------------------
# Errors
# -------------------------------------------------------------------

class MarketDataError(Exception):
    """Base class for upstream market-data failures."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UpstreamUnavailableError(MarketDataError):
    """Yahoo could not be reached or answered with a non-2xx status."""

    status_code = 502


class SymbolNotFoundError(MarketDataError):
    """Yahoo answered but returned no result for the symbol."""

    status_code = 404


class MalformedResponseError(MarketDataError):
    """Yahoo answered with something we could not parse."""

    status_code = 500


# -------------------------------------------------------------------
# Conversion helpers
# -------------------------------------------------------------------

def convert_usd_per_ounce(usd_per_ounce: float, fx_rate: float) -> Tuple[float, float]:
    """
    USD per troy ounce -> (local per gram, local per ounce).
    """
    price_per_ounce = usd_per_ounce * fx_rate
    price_per_gram = price_per_ounce / GRAMS_PER_OUNCE
    return price_per_gram, price_per_ounce


def fx_symbol(from_ccy: str, to_ccy: str) -> str:
    # Yahoo FX tickers look like USDTRY=X
    return f"{from_ccy.upper()}{to_ccy.upper()}=X"


# -------------------------------------------------------------------
# Gateway
# -------------------------------------------------------------------

class MarketDataGateway:
    """
    Thin client over Yahoo Finance with response normalization.

    The quote cache is owned by the instance; build one gateway per process
    (see app/deps.py:get_market_data) or a fresh one per test.

    The requests.Session is shared by every threadpool worker (connection
    pooling only, no per-request state) and released by close() at shutdown.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        cache: Optional[QuoteCache] = None,
        timeout: float = 10.0,
        local_currency: str = "TRY",
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.cache = cache if cache is not None else QuoteCache()
        self.timeout = timeout
        self.local_currency = local_currency.upper()

    def close(self) -> None:
        self.session.close()

    # ---- Transport ----

    def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.get(url, params=params, headers=_YF_HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Yahoo Finance request failed: %s %r", url, e)
            raise UpstreamUnavailableError("Yahoo Finance API error") from e

        if not r.ok:
            logger.warning("Yahoo Finance returned HTTP %s for %s", r.status_code, url)
            raise UpstreamUnavailableError("Yahoo Finance API error")

        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponseError("Invalid response from Yahoo Finance") from e

    def _chart_result(self, symbol: str, params: Dict[str, Any]) -> Dict[str, Any]:
        data = self._get_json(f"/v8/finance/chart/{quote(symbol, safe='')}", params)
        if not isinstance(data, dict):
            raise MalformedResponseError("Invalid response from Yahoo Finance")

        chart = data.get("chart") or {}
        if not isinstance(chart, dict):
            raise MalformedResponseError("Invalid response from Yahoo Finance")

        result = chart.get("result") or []
        if not isinstance(result, list):
            raise MalformedResponseError("Invalid response from Yahoo Finance")
        if not result:
            raise SymbolNotFoundError("Symbol not found")
        if not isinstance(result[0], dict):
            raise MalformedResponseError("Invalid response from Yahoo Finance")
        return result[0]

    def _chart_meta(self, symbol: str) -> Dict[str, Any]:
        result = self._chart_result(symbol, {"interval": "1d", "range": "1d"})
        meta = result.get("meta")
        if not isinstance(meta, dict):
            raise MalformedResponseError("Quote metadata missing")
        return meta

    def _market_price(self, symbol: str) -> float:
        meta = self._chart_meta(symbol)
        try:
            return float(meta["regularMarketPrice"])
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"No market price for {symbol}") from e

    # ---- Quotes / search / history ----

    def get_quote(self, symbol: str) -> Dict[str, Any]:
        """Current price for a symbol plus change vs. the previous close."""
        meta = self._chart_meta(symbol)

        try:
            price = float(meta["regularMarketPrice"])
            raw_previous = meta.get("previousClose")
            if raw_previous is None:
                raw_previous = meta["chartPreviousClose"]
            previous_close = float(raw_previous)
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Incomplete quote for {symbol}") from e

        change = price - previous_close
        change_percent = (change / previous_close * 100) if previous_close else 0.0

        return {
            "symbol": meta.get("symbol") or symbol,
            "name": meta.get("longName") or meta.get("symbol") or symbol,
            "regularMarketPrice": price,
            "regularMarketChange": change,
            "regularMarketChangePercent": change_percent,
            "currency": meta.get("currency"),
            "marketState": meta.get("marketState"),
        }

    def search_symbol(self, query: str) -> List[Dict[str, Any]]:
        """
        Search stocks/ETFs by ticker or name.

        Blank queries short-circuit to [] without touching the network.
        """
        q = (query or "").strip()
        if not q:
            return []

        data = self._get_json(
            "/v1/finance/search",
            {"q": q, "quotesCount": 10, "newsCount": 0},
        )
        if not isinstance(data, dict):
            raise MalformedResponseError("Invalid response from Yahoo Finance")

        quotes = data.get("quotes") or []
        if not isinstance(quotes, list):
            raise MalformedResponseError("Invalid response from Yahoo Finance")

        results: List[Dict[str, Any]] = []
        for it in quotes:
            if not isinstance(it, dict):
                raise MalformedResponseError("Invalid search hit from Yahoo Finance")
            sym = it.get("symbol")
            results.append(
                {
                    "symbol": sym,
                    "name": it.get("shortname") or it.get("longname") or sym,
                    "type": it.get("quoteType") or "EQUITY",
                    "exchange": it.get("exchange") or "UNKNOWN",
                }
            )
        return results

    def get_historical_data(
        self,
        symbol: str,
        period1: int,
        period2: int,
        interval: str = "1d",
    ) -> Dict[str, Any]:
        """
        Raw chart entry (timestamps + indicators) for [period1, period2].

        Resampling and charting are left to the caller.
        """
        params = {
            "period1": period1,
            "period2": period2,
            "interval": interval or "1d",
            "includePrePost": "true",
            "events": "div|split|earn",
        }
        return self._chart_result(symbol, params)

    # ---- Precious metals ----

    def get_gold_price(self) -> Dict[str, Any]:
        return self._metal_price("GOLD", GOLD_SYMBOL)

    def get_silver_price(self) -> Dict[str, Any]:
        return self._metal_price("SILVER", SILVER_SYMBOL)

    def _metal_price(self, metal: str, symbol: str) -> Dict[str, Any]:
        cache_key = f"{metal}_PRICE"

        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        if self.local_currency == "USD":
            usd_per_ounce = self._market_price(symbol)
            fx_rate = 1.0
        else:
            # Metal and FX quotes are independent; fetch both at once.
            with ThreadPoolExecutor(max_workers=2) as executor:
                metal_future = executor.submit(self._market_price, symbol)
                fx_future = executor.submit(self._market_price, fx_symbol("USD", self.local_currency))
                usd_per_ounce = metal_future.result()
                fx_rate = fx_future.result()

        price_per_gram, price_per_ounce = convert_usd_per_ounce(usd_per_ounce, fx_rate)

        result = {
            "metal": metal,
            "pricePerGram": price_per_gram,
            "pricePerOunce": price_per_ounce,
            "currency": self.local_currency,
            "fxRate": fx_rate,
            "lastUpdated": datetime.now(timezone.utc),
        }
        self.cache.set(cache_key, result)
        logger.info("%s price refreshed: %.2f %s/g", metal, price_per_gram, self.local_currency)
        return result
