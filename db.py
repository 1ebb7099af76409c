# db.py
# Role: Database bootstrap for the finance tracker API.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.
#       Also ensures the on-disk database directory exists for the default SQLite URL.

"""
Database setup for the finance tracker.

- Uses config.DATABASE_URL (SQLite at <project_root>/database/finance.db by default)
- Ensures the 'database' folder exists when the default path is used.
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import DATABASE_URL, DB_ECHO, DEFAULT_DB_PATH

if DATABASE_URL == f"sqlite:///{DEFAULT_DB_PATH}":
    os.makedirs(os.path.dirname(DEFAULT_DB_PATH), exist_ok=True)  # ensure folder exists

# For SQLite, we need check_same_thread=False for FastAPI (threaded request handling)
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=DB_ECHO,
    connect_args=connect_args,
)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
