# app/services/projection.py
#
# Projection Builder
# Folds real and synthetic transactions into a month-by-month balance
# timeline starting at the current calendar month.

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from app.schemas import ProjectionMonth, TransactionRecord
from app.services.month_helpers import create_month_string, shift_month


def current_balance(transactions: Iterable[TransactionRecord]) -> float:
    """Paid income minus paid expenses; the default starting balance."""
    balance = 0.0
    for t in transactions:
        if t.status != "paid" or t.amount is None:
            continue
        balance += t.amount if t.type == "income" else -t.amount
    return balance


def _monthly_totals(transactions: Iterable[TransactionRecord]) -> Dict[Tuple[int, int], Dict[str, float]]:
    # (year, month) -> {"income": x, "expense": y}; undefined amounts count as nothing
    totals: Dict[Tuple[int, int], Dict[str, float]] = defaultdict(lambda: {"income": 0.0, "expense": 0.0})
    for t in transactions:
        if t.amount is None:
            continue
        totals[(t.date.year, t.date.month)][t.type] += t.amount
    return totals


def build_projection(
    period_months: int,
    transactions: Iterable[TransactionRecord],
    synthetic: Iterable[TransactionRecord] = (),
    starting_balance: float = 0.0,
    today: Optional[date] = None,
) -> List[ProjectionMonth]:
    """
    Build period_months rows, oldest first, beginning with today's month.

    accumulated_balance starts from starting_balance and adds each month's
    income - expenses in order. Inputs are not modified.
    """
    today = today or date.today()
    totals = _monthly_totals(list(transactions) + list(synthetic))

    rows: List[ProjectionMonth] = []
    accumulated = float(starting_balance)

    for offset in range(period_months):
        year, month = shift_month(today.year, today.month, offset)
        month_totals = totals.get((year, month), {"income": 0.0, "expense": 0.0})
        income = month_totals["income"]
        expenses = month_totals["expense"]
        monthly_balance = income - expenses
        accumulated += monthly_balance

        rows.append(
            ProjectionMonth(
                month=date(year, month, 1).strftime("%b %y"),
                month_key=create_month_string(year, month),
                income=income,
                expenses=expenses,
                monthly_balance=monthly_balance,
                accumulated_balance=accumulated,
                is_negative=accumulated < 0,
            )
        )

    return rows
