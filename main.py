# main.py
# Role: Application entry point for the finance projection service.
#       Configures logging, creates database tables, registers the error
#       handlers, and includes all route modules.

"""
Main FastAPI app for the finance projection service.

Here we only:
- configure logging
- create DB tables
- map domain errors to HTTP responses
- include route modules
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import models  # noqa: F401  (registers tables on Base.metadata)
from db import Base, engine
from app.config import LOG_LEVEL
from app.errors import ConflictError, NotFoundError, StoreError, ValidationError
from app.routes_root import router as root_router
from app.routes_transactions import router as transactions_router
from app.routes_projection import router as projection_router
from app.routes_dashboard import router as dashboard_router
from app.routes_catalog import router as catalog_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

# Create database tables (only if they don't exist yet).
Base.metadata.create_all(bind=engine)

# FastAPI application instance
app = FastAPI(title="Finance Projection")


# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("[store] %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Could not complete the operation."})


# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / landing routes
app.include_router(root_router)

# Transactions, single-row edits and recurring series
app.include_router(transactions_router)

# Projection, analysis, health and recommendations
app.include_router(projection_router)

# Dashboard (monthly overview)
app.include_router(dashboard_router)

# Categories and sources
app.include_router(catalog_router)
