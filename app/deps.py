# app/deps.py
# Role: Shared request dependencies.
#       Provides the SQLAlchemy session dependency, the per-request
#       TransactionStore, and the caller identity taken from X-User-Id.

"""
Shared dependencies for the finance projection service.
"""

from typing import Generator

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from db import SessionLocal
from app.services.store import TransactionStore

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


def get_store(db: Session = Depends(get_db)) -> TransactionStore:
    return TransactionStore(db)


# -------------------------------------------------------------------
# Caller identity
# -------------------------------------------------------------------

def get_user_id(x_user_id: str | None = Header(None)) -> str:
    """
    Identity of the caller. Authentication happens upstream; the header is
    trusted as-is.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing user identity.")
    return x_user_id.strip()
