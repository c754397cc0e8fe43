# routes_catalog.py
"""
Routes for the per-user categories and sources used to label transactions.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.deps import get_db, get_user_id
from app.schemas import (
    CategoryCreate,
    CategoryRecord,
    CountResponse,
    SourceCreate,
    SourceRecord,
    SourceUpdate,
    TransactionKind,
)
from app.services import catalog

router = APIRouter()


# -------------------------------------------------------------------
# Categories
# -------------------------------------------------------------------

@router.get("/categories", response_model=List[CategoryRecord])
def list_categories(
    type: TransactionKind | None = Query(None),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    The user's categories, optionally only income or expense ones.
    The default set is created on the first call.
    """
    return catalog.list_categories(db, user_id, type)


@router.post("/categories", response_model=CategoryRecord, status_code=201)
def add_category(
    payload: CategoryCreate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return catalog.add_category(db, user_id, payload)


@router.delete("/categories/{category_id}", response_model=CountResponse)
def delete_category(
    category_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return CountResponse(count=catalog.delete_category(db, user_id, category_id))


# -------------------------------------------------------------------
# Sources
# -------------------------------------------------------------------

@router.get("/sources", response_model=List[SourceRecord])
def list_sources(
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return catalog.list_sources(db, user_id)


@router.post("/sources", response_model=SourceRecord, status_code=201)
def add_source(
    payload: SourceCreate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return catalog.add_source(db, user_id, payload)


@router.patch("/sources/{source_id}", response_model=SourceRecord)
def update_source(
    source_id: str,
    payload: SourceUpdate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return catalog.update_source(db, user_id, source_id, payload)


@router.delete("/sources/{source_id}", response_model=CountResponse)
def delete_source(
    source_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return CountResponse(count=catalog.delete_source(db, user_id, source_id))
