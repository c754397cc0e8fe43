# routes_root.py
"""
Service-level endpoints: the landing redirect and a readiness check that
touches the database.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.deps import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def landing():
    """The monthly dashboard is the entry point of the service."""
    return RedirectResponse(url="/dashboard", status_code=302)


@router.get("/health")
def readiness(db: Session = Depends(get_db)):
    """200 when the database answers, 503 otherwise."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("[health] database unreachable: %r", e)
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ok"}
