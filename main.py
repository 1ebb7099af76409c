# main.py
# Role: Application entry point for the finance tracker API.
#       Initializes the FastAPI app, creates database tables,
#       installs error handlers, and registers all route modules.

"""
Main FastAPI app for the personal finance tracker.

Here we only:
- configure logging
- create DB tables
- set up CORS and error rendering
- include route modules
"""

import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from db import Base, engine
from app.routes_root import router as root_router
from app.routes_portfolio import etfs_router, eurobonds_router, stocks_router
from app.routes_holdings import cash_router, gold_router, silver_router
from app.routes_loans import router as loans_router
from app.routes_transactions import expenses_router, incomes_router
from app.routes_dashboard import router as dashboard_router
from app.routes_market_data import metals_router, yahoo_router
from app.deps import close_clients
from app.services.market_data import MarketDataError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

# Create database tables (only if they don't exist yet).
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_clients()


app = FastAPI(title="Finance Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------
# Error rendering: {"statusCode", "message", "error"}
# -------------------------------------------------------------------

def error_body(status_code: int, message) -> dict:
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    return {"statusCode": status_code, "message": message, "error": reason}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(MarketDataError)
async def market_data_exception_handler(request: Request, exc: MarketDataError):
    if exc.status_code >= 500 and exc.status_code != 502:
        logger.error("Market data failure on %s: %s", request.url.path, exc.message)
        message = "Failed to fetch market data"
    else:
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(500, "Internal server error"))


# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Public landing + health
app.include_router(root_router)

# Holdings
app.include_router(stocks_router)
app.include_router(etfs_router)
app.include_router(eurobonds_router)
app.include_router(cash_router)
app.include_router(gold_router)
app.include_router(silver_router)
app.include_router(loans_router)

# Cash flow
app.include_router(incomes_router)
app.include_router(expenses_router)

# Net worth + recent activity
app.include_router(dashboard_router)

# Market data
app.include_router(metals_router)
app.include_router(yahoo_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
