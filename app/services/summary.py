# app/services/summary.py
#
# Monthly summary for the dashboard: month totals, status counts, upcoming
# unpaid expenses, and where the month's income comes from.

from datetime import date
from typing import Iterable, List, Optional

from app.schemas import MonthlySummary, SourceShare, TransactionRecord, UpcomingPayment
from app.services.analysis import breakdown, transactions_frame

UPCOMING_LIMIT = 5


def upcoming_payments(
    transactions: Iterable[TransactionRecord],
    today: Optional[date] = None,
    limit: int = UPCOMING_LIMIT,
) -> List[UpcomingPayment]:
    """Pending expenses due today or later, soonest first."""
    today = today or date.today()
    due = sorted(
        (t for t in transactions if t.type == "expense" and t.status == "pending" and t.date >= today),
        key=lambda t: t.date,
    )
    return [
        UpcomingPayment(
            id=t.id,
            description=t.description,
            category=t.category,
            amount=t.amount,
            date=t.date,
            days_until=(t.date - today).days,
        )
        for t in due[:limit]
    ]


def monthly_summary(
    month_transactions: List[TransactionRecord],
    all_transactions: List[TransactionRecord],
    month_ref: str,
    today: Optional[date] = None,
) -> MonthlySummary:
    income = sum(t.amount for t in month_transactions if t.type == "income" and t.amount is not None)
    expenses = sum(t.amount for t in month_transactions if t.type == "expense" and t.amount is not None)

    sources = breakdown(transactions_frame(month_transactions), "income")
    income_sources = [
        SourceShare(
            source=label,
            amount=amount,
            percentage=round(amount / income * 100, 1) if income > 0 else 0.0,
        )
        for label, amount in sources
    ]

    return MonthlySummary(
        month_ref=month_ref,
        income=income,
        expenses=expenses,
        balance=income - expenses,
        paid_count=sum(1 for t in month_transactions if t.status == "paid"),
        pending_count=sum(1 for t in month_transactions if t.status == "pending"),
        missing_amount_count=sum(
            1 for t in month_transactions if t.is_variable_amount and t.amount is None
        ),
        upcoming_payments=upcoming_payments(all_transactions, today),
        income_sources=income_sources,
    )
