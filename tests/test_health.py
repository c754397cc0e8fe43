import pytest

from app.schemas import FinancialAnalysis, ProjectionMonth
from app.services.analysis import investment_scenarios
from app.services.health import (
    commitment_color,
    cushion_color,
    health_indicators,
    recommendations,
    savings_rate_color,
)


def make_analysis(total_income, total_expenses, final_balance):
    return FinancialAnalysis(
        total_income=total_income,
        total_expenses=total_expenses,
        final_balance=final_balance,
        avg_monthly_balance=0.0,
        income_by_source=[],
        expenses_by_category=[],
        investment_scenarios=investment_scenarios(final_balance),
    )


def month(label, accumulated, monthly=0.0):
    return ProjectionMonth(
        month=label,
        month_key="2024-01",
        income=0.0,
        expenses=0.0,
        monthly_balance=monthly,
        accumulated_balance=accumulated,
        is_negative=accumulated < 0,
    )


def test_ten_percent_savings_is_yellow():
    health = health_indicators(make_analysis(5000 * 6, 4500 * 6, 3000), 6)
    assert health.savings_rate == pytest.approx(10)
    assert health.savings_rate_color == "yellow"


def test_zero_balance_means_no_cushion():
    health = health_indicators(make_analysis(2000 * 3, 1000 * 3, 0), 3)
    assert health.cushion_months == 0
    assert health.cushion_color == "red"


def test_commitment_uses_thirty_percent_of_expenses():
    health = health_indicators(make_analysis(10000, 4000, 0), 1)
    assert health.commitment == pytest.approx(12)
    assert health.commitment_color == "green"


def test_zero_income_and_horizon_do_not_divide_by_zero():
    health = health_indicators(make_analysis(0, 500, -500), 2)
    assert (health.savings_rate, health.commitment) == (0, 0)

    empty = health_indicators(make_analysis(0, 0, 0), 0)
    assert (empty.savings_rate, empty.commitment, empty.cushion_months) == (0, 0, 0)


@pytest.mark.parametrize(
    "value, expected",
    [(-0.1, "red"), (0, "yellow"), (19.9, "yellow"), (20, "green")],
)
def test_savings_rate_bands(value, expected):
    assert savings_rate_color(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(30, "green"), (30.1, "yellow"), (40, "yellow"), (40.1, "red")],
)
def test_commitment_bands(value, expected):
    assert commitment_color(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(2.9, "red"), (3, "yellow"), (5.9, "yellow"), (6, "green")],
)
def test_cushion_bands(value, expected):
    assert cushion_color(value) == expected


def test_recommendations_order_when_everything_is_wrong():
    projection = [month("Jan 24", 100), month("Feb 24", -250), month("Mar 24", -400)]
    analysis = make_analysis(3000, 3300, -400)
    health = health_indicators(analysis, 3)

    recs = recommendations(projection, health, analysis)

    assert [r.icon for r in recs] == ["alert", "savings", "shield"]
    assert [r.type for r in recs] == ["warning", "warning", "info"]
    assert "Feb 24" in recs[0].text
    assert "250.00" in recs[0].text


def test_cushion_top_up_amount():
    projection = [month("Jan 24", 1000), month("Feb 24", 2000)]
    analysis = make_analysis(10000, 2000, 2000)  # avg expenses 1000, cushion 2
    health = health_indicators(analysis, 2)

    recs = recommendations(projection, health, analysis)

    assert [r.icon for r in recs] == ["shield", "target"]
    assert "4,000.00" in recs[0].text
    assert recs[1].type == "success"


def test_healthy_plan_only_gets_praise():
    projection = [month("Jan 24", 30000)]
    analysis = make_analysis(10000, 4000, 30000)
    health = health_indicators(analysis, 1)

    recs = recommendations(projection, health, analysis)
    assert [r.icon for r in recs] == ["target"]
