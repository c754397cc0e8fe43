from datetime import date

import pytest

from app.services.analysis import analyze, evolution_by_label
from app.services.projection import build_projection
from tests.conftest import make_tx

TODAY = date(2024, 3, 1)


@pytest.fixture
def transactions():
    return [
        make_tx("income", 4000, date(2024, 3, 5), source="Salary"),
        make_tx("income", 1000, date(2024, 3, 8), source="  "),
        make_tx("income", 4000, date(2024, 4, 5), source="Salary", id="salary-apr"),
        make_tx("expense", 1500, date(2024, 3, 10), category="Housing"),
        make_tx("expense", 300, date(2024, 3, 12), category=""),
        make_tx("expense", 600, date(2024, 4, 12), category="Food"),
        make_tx("expense", None, date(2024, 4, 20), category="Utilities", id="variable"),
    ]


def test_totals_follow_projection(transactions):
    rows = build_projection(2, transactions, starting_balance=100, today=TODAY)
    result = analyze(rows, transactions)

    assert result.total_income == 9000
    assert result.total_expenses == 2400
    assert result.final_balance == 100 + 9000 - 2400
    assert result.avg_monthly_balance == (9000 - 2400) / 2


def test_breakdowns_use_fallback_labels_and_sort_desc(transactions):
    rows = build_projection(2, transactions, today=TODAY)
    result = analyze(rows, transactions)

    assert result.income_by_source == [("Salary", 8000.0), ("Unspecified", 1000.0)]
    assert result.expenses_by_category == [
        ("Housing", 1500.0),
        ("Food", 600.0),
        ("Uncategorized", 300.0),
    ]


def test_investment_scenarios():
    rows = build_projection(1, [make_tx("income", 1000, TODAY)], today=TODAY)
    scenarios = analyze(rows, []).investment_scenarios

    assert [s.percentage for s in scenarios] == [10, 20, 30, 50]
    ten = scenarios[0]
    assert ten.investment_amount == pytest.approx(100)
    assert ten.remaining_balance == pytest.approx(900)
    assert ten.potential_return_6_months == pytest.approx(6)
    assert ten.potential_return_12_months == pytest.approx(12)


def test_empty_projection_is_all_zero():
    result = analyze([], [])
    assert result.total_income == 0
    assert result.final_balance == 0
    assert result.avg_monthly_balance == 0
    assert result.income_by_source == []
    assert result.expenses_by_category == []
    assert all(s.investment_amount == 0 for s in result.investment_scenarios)


def test_evolution_by_label(transactions):
    rows = build_projection(2, transactions, today=TODAY)
    points = evolution_by_label(rows, transactions, "expense")

    assert [p.month for p in points] == ["Mar 24", "Apr 24"]
    assert points[0].values == {"Housing": 1500.0, "Food": 0.0, "Uncategorized": 300.0}
    assert points[1].values == {"Housing": 0.0, "Food": 600.0, "Uncategorized": 0.0}


def test_evolution_limits_to_top_labels(transactions):
    rows = build_projection(2, transactions, today=TODAY)
    points = evolution_by_label(rows, transactions, "income", top=1)
    assert [p.values for p in points] == [{"Salary": 4000.0}, {"Salary": 4000.0}]


def test_evolution_without_matching_transactions():
    rows = build_projection(2, [], today=TODAY)
    assert [p.values for p in evolution_by_label(rows, [], "income")] == [{}, {}]
