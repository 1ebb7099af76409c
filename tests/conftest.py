import os

# Must be set before config/db are imported anywhere.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOCAL_CURRENCY"] = "TRY"

from typing import Any, Dict, List, Optional
from urllib.parse import unquote

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from main import app
from app.deps import get_db, get_identity_provider, get_market_data
from app.services.identity import AuthenticatedUser
from app.services.market_data import MarketDataGateway
from app.services.quote_cache import QuoteCache

USERS = {
    "token-a": AuthenticatedUser(id="user-a", email="alice@example.com", name="Alice"),
    "token-b": AuthenticatedUser(id="user-b", email="bob@example.com", name="Bob"),
}


# -------------------------------------------------------------------
# Fakes
# -------------------------------------------------------------------

class FakeIdentityProvider:
    def verify_token(self, token: str) -> Optional[AuthenticatedUser]:
        return USERS.get(token)


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, invalid_json: bool = False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self.invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self.payload


class FakeYahooSession:
    """
    Stands in for requests.Session: answers chart requests from `quotes`
    and search requests from `search_results`, recording every call.
    """

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.quotes: Dict[str, Dict[str, Any]] = {}
        self.search_results: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.status_code = 200
        self.invalid_json = False
        # when set, returned verbatim for every request
        self.payload: Any = None

    def set_quote(self, symbol: str, price: float, previous_close: Optional[float] = None, **extra):
        meta = {"symbol": symbol, "regularMarketPrice": price, "currency": "USD"}
        if previous_close is not None:
            meta["previousClose"] = previous_close
        meta.update(extra)
        self.quotes[symbol] = meta

    def chart_calls(self, symbol: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["url"].endswith(f"/v8/finance/chart/{symbol}")]

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": unquote(url), "params": dict(params or {})})

        if self.error is not None:
            raise self.error
        if self.status_code != 200:
            return FakeResponse({}, status_code=self.status_code)
        if self.invalid_json:
            return FakeResponse(invalid_json=True)
        if self.payload is not None:
            return FakeResponse(self.payload)

        if "/v1/finance/search" in url:
            return FakeResponse({"quotes": self.search_results})

        symbol = unquote(url.rsplit("/", 1)[-1])
        meta = self.quotes.get(symbol)
        if meta is None:
            return FakeResponse({"chart": {"result": None, "error": None}})
        return FakeResponse(
            {
                "chart": {
                    "result": [
                        {
                            "meta": meta,
                            "timestamp": [1714521600],
                            "indicators": {"quote": [{"close": [meta["regularMarketPrice"]]}]},
                        }
                    ],
                    "error": None,
                }
            }
        )


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# -------------------------------------------------------------------
# Fixtures
# -------------------------------------------------------------------

@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def yahoo():
    return FakeYahooSession()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def market(yahoo, clock):
    return MarketDataGateway(
        base_url="https://yahoo.test",
        session=yahoo,
        cache=QuoteCache(ttl_seconds=900, clock=clock),
        local_currency="TRY",
    )


@pytest.fixture()
def client(session_factory, market):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: FakeIdentityProvider()
    app.dependency_overrides[get_market_data] = lambda: market
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_a():
    return {"Authorization": "Bearer token-a"}


@pytest.fixture()
def auth_b():
    return {"Authorization": "Bearer token-b"}
