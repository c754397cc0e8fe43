# app/routes_dashboard.py

from datetime import date

from fastapi import APIRouter, Depends, Query

from app.deps import get_store, get_user_id
from app.routes_transactions import resolve_month
from app.schemas import MonthlySummary
from app.services import recurrence
from app.services.month_helpers import create_month_string
from app.services.store import TransactionStore
from app.services.summary import monthly_summary

router = APIRouter()


@router.get("/dashboard", response_model=MonthlySummary)
def dashboard(
    month: str | None = Query(None),
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    """
    Month overview: totals, paid/pending counts, variable bills still
    missing an amount, upcoming unpaid expenses and income sources.
    """
    year, month_num = resolve_month(month)
    recurrence.materialize_month(store, user_id, year, month_num)

    month_transactions = store.get_transactions_for_month(user_id, year, month_num)
    all_transactions = store.get_all_transactions(user_id)

    return monthly_summary(
        month_transactions,
        all_transactions,
        create_month_string(year, month_num),
        today=date.today(),
    )
