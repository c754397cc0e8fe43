# db.py
# Role: Database bootstrap for the finance projection service.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.
#       The connection URL comes from DATABASE_URL (loaded from .env if present),
#       falling back to a SQLite file under <project_root>/database/.

"""
Database setup for the finance projection service.

- Default database: <project_root>/database/finance.db (SQLite)
- Override with DATABASE_URL (e.g. a Postgres URL) in the environment or .env
"""

import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Folder for the default SQLite DB
DB_DIR = os.path.join(BASE_DIR, "database")

DEFAULT_DATABASE_URL = f"sqlite:///{os.path.join(DB_DIR, 'finance.db')}"

# SQLAlchemy connection URL
DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

if DATABASE_URL == DEFAULT_DATABASE_URL:
    os.makedirs(DB_DIR, exist_ok=True)  # ensure folder exists


def build_engine(url: str):
    """
    Create an engine for the given URL.

    SQLite needs check_same_thread=False because FastAPI serves sync routes
    from a thread pool.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = build_engine(DATABASE_URL)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
