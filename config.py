# config.py
# Role: Environment-driven settings for the finance tracker API.
#       Values come from the process environment or a local .env file.

"""
Application settings.

Everything is read once at import time via os.getenv, after load_dotenv()
has merged a local .env file into the environment.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_truthy(name: str, default: str = "0") -> bool:
    v = os.getenv(name, default)
    return str(v).strip().lower() in ("1", "true", "yes", "y", "on")


def _env_list(name: str, default: str = "") -> list[str]:
    raw = os.getenv(name, default) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


# -------------------------------------------------------------------
# Database
# -------------------------------------------------------------------

DEFAULT_DB_PATH = os.path.join(BASE_DIR, "database", "finance.db")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")
DB_ECHO = _env_truthy("DB_ECHO", "0")

# -------------------------------------------------------------------
# Identity provider (Supabase Auth)
# -------------------------------------------------------------------

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")

# -------------------------------------------------------------------
# Market data (Yahoo Finance public endpoints)
# -------------------------------------------------------------------

YAHOO_FINANCE_BASE_URL = os.getenv("YAHOO_FINANCE_BASE_URL", "https://query1.finance.yahoo.com")
MARKET_DATA_TIMEOUT = float(os.getenv("MARKET_DATA_TIMEOUT", "10"))
QUOTE_CACHE_TTL_SECONDS = float(os.getenv("QUOTE_CACHE_TTL_SECONDS", "900"))

# Precious-metal prices are reported in this currency
LOCAL_CURRENCY = os.getenv("LOCAL_CURRENCY", "TRY").upper()

# -------------------------------------------------------------------
# HTTP server
# -------------------------------------------------------------------

# Frontend origins allowed by CORS (comma separated)
CORS_ORIGINS = _env_list("CORS_ORIGINS", "http://localhost:3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "8000"))
