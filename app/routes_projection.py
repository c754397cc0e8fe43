# routes_projection.py
"""
Projection endpoint: timeline, analysis, health indicators and
recommendations, optionally blended with what-if scenarios.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends

from app.config import DEFAULT_PROJECTION_MONTHS
from app.deps import get_store, get_user_id
from app.schemas import ProjectionReport, ProjectionRequest, TransactionRecord
from app.services import analysis, health, projection, recurrence, scenarios
from app.services.month_helpers import shift_month
from app.services.store import TransactionStore

router = APIRouter()


def expand_infinite_series(
    store: TransactionStore,
    user_id: str,
    transactions: List[TransactionRecord],
    period_months: int,
    today: date,
) -> List[TransactionRecord]:
    """
    In-memory occurrences of infinite series for every month of the horizon
    that has not been materialized yet. Nothing is written.
    """
    instances = [t for t in transactions if t.recurring and t.recurring_type == "infinite"]
    if not instances:
        return []
    skipped = store.get_skipped_months(user_id)

    planned: List[TransactionRecord] = []
    for offset in range(period_months):
        year, month = shift_month(today.year, today.month, offset)
        planned.extend(recurrence.plan_month_occurrences(instances, skipped, year, month))
    return planned


@router.post("/projection", response_model=ProjectionReport)
def build_projection_report(
    payload: ProjectionRequest,
    user_id: str = Depends(get_user_id),
    store: TransactionStore = Depends(get_store),
):
    today = date.today()
    period_months = payload.period_months if payload.period_months is not None else DEFAULT_PROJECTION_MONTHS

    transactions = store.get_all_transactions(user_id)
    transactions += expand_infinite_series(store, user_id, transactions, period_months, today)

    starting_balance = (
        payload.starting_balance
        if payload.starting_balance is not None
        else projection.current_balance(transactions)
    )

    synthetic = scenarios.map_scenarios(payload.scenarios, period_months, today)
    rows = projection.build_projection(period_months, transactions, synthetic, starting_balance, today)

    pool = transactions + synthetic
    result = analysis.analyze(rows, pool)
    indicators = health.health_indicators(result, period_months)

    return ProjectionReport(
        period_months=period_months,
        starting_balance=starting_balance,
        projection=rows,
        analysis=result,
        health=indicators,
        recommendations=health.recommendations(rows, indicators, result),
        income_evolution=analysis.evolution_by_label(rows, pool, "income"),
        expense_evolution=analysis.evolution_by_label(rows, pool, "expense"),
        has_active_scenarios=any(item.enabled for item in payload.scenarios),
    )
