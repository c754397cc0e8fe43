from datetime import date

from app.schemas import SimulatedItem
from app.services.projection import build_projection
from app.services.scenarios import map_scenarios

TODAY = date(2024, 5, 20)


def item(**kwargs):
    defaults = dict(id="s1", type="income", description="Freelance", amount=1000, start=date(2024, 5, 1))
    defaults.update(kwargs)
    return SimulatedItem(**defaults)


def test_income_scenario_accumulates_over_horizon():
    synthetic = map_scenarios([item()], 3, today=TODAY)

    assert len(synthetic) == 3
    assert [t.month_ref for t in synthetic] == ["2024-05", "2024-06", "2024-07"]
    assert all(t.date.day == 15 for t in synthetic)

    rows = build_projection(3, [], synthetic, 0, today=TODAY)
    assert [r.accumulated_balance for r in rows] == [1000, 2000, 3000]


def test_synthetic_records_are_labelled():
    income, = map_scenarios([item()], 1, today=TODAY)
    expense, = map_scenarios([item(id="s2", type="expense", description="Car")], 1, today=TODAY)

    assert income.id == "sim-s1-0"
    assert income.user_id == "simulated"
    assert income.category == "Simulation - Income"
    assert income.source == "Simulated scenario"
    assert income.description == "[Simulated] Freelance"
    assert income.status == "pending"
    assert income.recurring is False

    assert expense.category == "Simulation - Expense"
    assert expense.source is None


def test_disabled_items_produce_nothing():
    assert map_scenarios([item(enabled=False)], 6, today=TODAY) == []


def test_window_uses_mid_month_date():
    # Starts after the 15th, so May is excluded; ends before July 15th
    synthetic = map_scenarios(
        [item(start=date(2024, 5, 16), end=date(2024, 7, 14))], 6, today=TODAY
    )
    assert [t.month_ref for t in synthetic] == ["2024-06"]


def test_zero_horizon_is_empty():
    assert map_scenarios([item()], 0, today=TODAY) == []
