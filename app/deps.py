# app/deps.py
# Role: Shared application-level dependencies.
#       Provides the SQLAlchemy session dependency, bearer-token authentication,
#       and the process-wide market-data gateway.

"""
Shared dependencies for the finance tracker API.
"""

import logging
from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from db import SessionLocal
from models import User
from app.services.identity import AuthenticatedUser, IdentityProvider
from app.services.market_data import MarketDataGateway
from app.services.quote_cache import QuoteCache

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# -------------------------------------------------------------------
# External collaborators (built once per process)
# -------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_identity_provider() -> IdentityProvider:
    return IdentityProvider(config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY)


@lru_cache(maxsize=1)
def get_market_data() -> MarketDataGateway:
    return MarketDataGateway(
        base_url=config.YAHOO_FINANCE_BASE_URL,
        cache=QuoteCache(ttl_seconds=config.QUOTE_CACHE_TTL_SECONDS),
        timeout=config.MARKET_DATA_TIMEOUT,
        local_currency=config.LOCAL_CURRENCY,
    )


def close_clients() -> None:
    """Release the shared HTTP sessions (app shutdown). Unbuilt clients are skipped."""
    for factory in (get_identity_provider, get_market_data):
        if factory.cache_info().currsize:
            factory().close()
            factory.cache_clear()

# -------------------------------------------------------------------
# Authentication
# -------------------------------------------------------------------

def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    parts = (authorization or "").split(" ")
    if len(parts) == 2 and parts[0] == "Bearer" and parts[1]:
        return parts[1]
    return None


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> User:
    """
    Resolve the caller from the Authorization header.

    The verified identity is upserted into the local users table; its id is
    the ownership key for every resource operation.
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="No token provided")

    verified = identity.verify_token(token)
    if verified is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    return upsert_user(db, verified)


def upsert_user(db: Session, verified: AuthenticatedUser) -> User:
    """
    Insert or refresh the local row for a verified identity.

    Parallel first requests from a new user race on the insert; the loser
    gets an IntegrityError, rolls back and updates the row the winner wrote.
    """
    user = db.get(User, verified.id)
    if user is None:
        db.add(User(id=verified.id, email=verified.email, name=verified.name))
        try:
            db.commit()
            logger.info("Registered new user %s", verified.id)
        except IntegrityError:
            db.rollback()
            logger.debug("User %s registered concurrently", verified.id)
        user = db.get(User, verified.id)

    user.email = verified.email
    user.name = verified.name
    db.commit()
    db.refresh(user)
    return user

# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def found_or_404(record, message: str):
    """Translate the store's not-found sentinel into a 404."""
    if record is None or record is False:
        raise HTTPException(status_code=404, detail=message)
    return record
