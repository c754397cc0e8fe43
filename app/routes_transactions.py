# routes_transactions.py
"""
Routes for transactions: month listing, create, single-row edits, scoped
deletes, and recurring-series operations.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from app.deps import get_store, get_user_id
from app.schemas import (
    AmountPayload,
    BaseValuePayload,
    CountResponse,
    DeleteScope,
    TransactionCreate,
    TransactionRecord,
    TransactionUpdate,
)
from app.services import recurrence
from app.services.month_helpers import parse_month_string
from app.services.store import TransactionStore

router = APIRouter()


def resolve_month(month: str | None) -> tuple[int, int]:
    """
    month: 'YYYY-MM' or None.
    Missing or invalid values fall back to the current month.
    """
    if month:
        try:
            return parse_month_string(month)
        except ValueError:
            pass
    today = date.today()
    return today.year, today.month


# -------------------------------------------------------------------
# Listing
# -------------------------------------------------------------------

@router.get("/transactions", response_model=List[TransactionRecord])
def transactions_for_month(
    month: str | None = Query(None),
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    """
    Transactions of one month, newest first. Occurrences of infinite
    recurring series are generated for the month before reading.
    """
    year, month_num = resolve_month(month)
    recurrence.materialize_month(store, user_id, year, month_num)
    return store.get_transactions_for_month(user_id, year, month_num)


@router.get("/transactions/all", response_model=List[TransactionRecord])
def all_transactions(
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    return store.get_all_transactions(user_id)


# -------------------------------------------------------------------
# Create / edit
# -------------------------------------------------------------------

@router.post("/transactions", response_model=List[TransactionRecord], status_code=201)
def create_transaction(
    payload: TransactionCreate,
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    """
    Create a transaction. A fixed recurring definition returns the origin
    followed by every generated month.
    """
    return recurrence.materialize(store, user_id, payload)


@router.patch("/transactions/{transaction_id}", response_model=TransactionRecord)
def edit_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    return recurrence.update_transaction(store, user_id, transaction_id, payload)


@router.put("/transactions/{transaction_id}/amount", response_model=TransactionRecord)
def set_amount(
    transaction_id: str,
    payload: AmountPayload,
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    """Set this occurrence's amount (variable recurring bills)."""
    return recurrence.set_instance_amount(store, user_id, transaction_id, payload.amount)


@router.post("/transactions/{transaction_id}/toggle-status", response_model=TransactionRecord)
def toggle_status(
    transaction_id: str,
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    return recurrence.toggle_status(store, user_id, transaction_id)


@router.delete("/transactions/{transaction_id}", response_model=CountResponse)
def delete_transaction(
    transaction_id: str,
    scope: DeleteScope = Query("current"),
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    deleted = recurrence.delete_scoped(store, user_id, transaction_id, scope)
    return CountResponse(count=deleted)


# -------------------------------------------------------------------
# Recurring series
# -------------------------------------------------------------------

@router.get("/series/{group_id}", response_model=List[TransactionRecord])
def series(
    group_id: str,
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    return recurrence.get_series(store, user_id, group_id)


@router.post("/series/{group_id}/base-value", response_model=CountResponse)
def update_base_value(
    group_id: str,
    payload: BaseValuePayload,
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    """
    Apply a new base amount to the series' unpaid rows from this month on.
    """
    updated = recurrence.update_base_value(
        store, user_id, group_id, payload.new_amount, payload.overwrite_edited
    )
    return CountResponse(count=updated)
