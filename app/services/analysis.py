# app/services/analysis.py
#
# Financial Analyzer
# Summary statistics over a projection timeline and the transaction pool it
# was built from: totals, breakdowns by income source and expense category,
# and illustrative investment allocations of the final balance.

from typing import Iterable, List, Tuple

import pandas as pd

from app.schemas import (
    EvolutionPoint,
    FinancialAnalysis,
    InvestmentScenario,
    ProjectionMonth,
    TransactionRecord,
)
from app.services.month_helpers import month_ref_for

UNSPECIFIED_SOURCE = "Unspecified"
UNCATEGORIZED = "Uncategorized"

INVESTMENT_PERCENTAGES = (10, 20, 30, 50)

# Flat illustrative returns on the invested amount, not compounded
RETURN_6_MONTHS = 0.06
RETURN_12_MONTHS = 0.12

FRAME_COLUMNS = ["type", "amount", "source", "category", "month_key"]


def transactions_frame(transactions: Iterable[TransactionRecord]) -> pd.DataFrame:
    """
    DataFrame of the transactions with a defined amount, one row each.
    Missing source/category labels are replaced by their fallback labels.
    """
    rows = [
        {
            "type": t.type,
            "amount": float(t.amount),
            "source": (t.source or "").strip() or UNSPECIFIED_SOURCE,
            "category": (t.category or "").strip() or UNCATEGORIZED,
            "month_key": t.month_ref or month_ref_for(t.date),
        }
        for t in transactions
        if t.amount is not None
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _label_column(kind: str) -> str:
    return "source" if kind == "income" else "category"


def breakdown(df: pd.DataFrame, kind: str) -> List[Tuple[str, float]]:
    """(label, total) pairs for one transaction type, largest first."""
    subset = df[df["type"] == kind]
    if subset.empty:
        return []
    totals = (
        subset.groupby(_label_column(kind))["amount"]
        .sum()
        .sort_values(ascending=False, kind="mergesort")
    )
    return [(str(label), float(amount)) for label, amount in totals.items()]


def investment_scenarios(final_balance: float) -> List[InvestmentScenario]:
    scenarios = []
    for percentage in INVESTMENT_PERCENTAGES:
        investment_amount = final_balance * percentage / 100
        scenarios.append(
            InvestmentScenario(
                percentage=percentage,
                investment_amount=investment_amount,
                remaining_balance=final_balance - investment_amount,
                potential_return_6_months=investment_amount * RETURN_6_MONTHS,
                potential_return_12_months=investment_amount * RETURN_12_MONTHS,
            )
        )
    return scenarios


def analyze(
    projection: List[ProjectionMonth],
    transactions: Iterable[TransactionRecord],
) -> FinancialAnalysis:
    """
    Totals come from the projection rows; breakdowns come from the whole
    transaction pool (real + synthetic) handed in.
    """
    total_income = sum(row.income for row in projection)
    total_expenses = sum(row.expenses for row in projection)
    final_balance = projection[-1].accumulated_balance if projection else 0.0
    avg_monthly_balance = (
        sum(row.monthly_balance for row in projection) / len(projection) if projection else 0.0
    )

    df = transactions_frame(transactions)

    return FinancialAnalysis(
        total_income=total_income,
        total_expenses=total_expenses,
        final_balance=final_balance,
        avg_monthly_balance=avg_monthly_balance,
        income_by_source=breakdown(df, "income"),
        expenses_by_category=breakdown(df, "expense"),
        investment_scenarios=investment_scenarios(final_balance),
    )


def evolution_by_label(
    projection: List[ProjectionMonth],
    transactions: Iterable[TransactionRecord],
    kind: str,
    top: int = 5,
) -> List[EvolutionPoint]:
    """
    Per projection month, the amount of each of the `top` largest income
    sources (kind='income') or expense categories (kind='expense').
    """
    df = transactions_frame(transactions)
    labels = [label for label, _ in breakdown(df, kind)[:top]]
    column = _label_column(kind)

    subset = df[(df["type"] == kind) & (df[column].isin(labels))]
    by_month = subset.groupby(["month_key", column])["amount"].sum().to_dict()

    points = []
    for row in projection:
        values = {label: float(by_month.get((row.month_key, label), 0.0)) for label in labels}
        points.append(EvolutionPoint(month=row.month, values=values))
    return points
