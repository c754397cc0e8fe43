from datetime import date

from app.services.summary import monthly_summary, upcoming_payments
from tests.conftest import make_tx

TODAY = date(2024, 6, 10)


def test_upcoming_payments_are_pending_expenses_from_today():
    transactions = [
        make_tx("expense", 10, date(2024, 6, 9)),
        make_tx("expense", 20, date(2024, 6, 10)),
        make_tx("expense", 30, date(2024, 6, 25)),
        make_tx("expense", 40, date(2024, 6, 12), status="paid"),
        make_tx("income", 50, date(2024, 6, 11)),
    ]
    upcoming = upcoming_payments(transactions, today=TODAY)

    assert [u.amount for u in upcoming] == [20, 30]
    assert [u.days_until for u in upcoming] == [0, 15]


def test_upcoming_payments_limit():
    transactions = [make_tx("expense", i + 1, date(2024, 7, i + 1)) for i in range(8)]
    upcoming = upcoming_payments(transactions, today=TODAY)
    assert [u.date.day for u in upcoming] == [1, 2, 3, 4, 5]


def test_monthly_summary():
    month = [
        make_tx("income", 3000, date(2024, 6, 1), source="Salary", status="paid"),
        make_tx("income", 1000, date(2024, 6, 2), source="Freelance"),
        make_tx("expense", 1200, date(2024, 6, 3), status="paid"),
        make_tx("expense", None, date(2024, 6, 15), id="power", is_variable_amount=True, recurring=True),
    ]
    summary = monthly_summary(month, month, "2024-06", today=TODAY)

    assert summary.month_ref == "2024-06"
    assert (summary.income, summary.expenses, summary.balance) == (4000, 1200, 2800)
    assert (summary.paid_count, summary.pending_count) == (2, 2)
    assert summary.missing_amount_count == 1
    assert [u.id for u in summary.upcoming_payments] == ["power"]
    assert [(s.source, s.percentage) for s in summary.income_sources] == [
        ("Salary", 75.0),
        ("Freelance", 25.0),
    ]


def test_empty_month():
    summary = monthly_summary([], [], "2024-06", today=TODAY)
    assert summary.income == 0
    assert summary.income_sources == []
    assert summary.upcoming_payments == []
