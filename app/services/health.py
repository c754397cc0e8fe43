# app/services/health.py
#
# Health & Recommendation Engine
# Normalized health ratios over a projection, with three-way colour bands,
# and the rule-based recommendations shown next to them.

from typing import List

from app.schemas import FinancialAnalysis, HealthIndicators, ProjectionMonth, Recommendation

# Share of average expenses treated as fixed debt obligations. A flat
# heuristic, not derived from categories.
DEBT_SHARE_OF_EXPENSES = 0.30

TARGET_SAVINGS_RATE = 20.0
TARGET_CUSHION_MONTHS = 6.0


def savings_rate_color(savings_rate: float) -> str:
    if savings_rate < 0:
        return "red"
    if savings_rate < 20:
        return "yellow"
    return "green"


def commitment_color(commitment: float) -> str:
    if commitment > 40:
        return "red"
    if commitment > 30:
        return "yellow"
    return "green"


def cushion_color(cushion_months: float) -> str:
    if cushion_months < 3:
        return "red"
    if cushion_months < 6:
        return "yellow"
    return "green"


def health_indicators(analysis: FinancialAnalysis, period_months: int) -> HealthIndicators:
    """
    Ratios from monthly averages over the horizon. Zero averages (or a zero
    horizon) give 0 instead of dividing by zero.
    """
    avg_income = analysis.total_income / period_months if period_months > 0 else 0.0
    avg_expenses = analysis.total_expenses / period_months if period_months > 0 else 0.0

    savings_rate = (avg_income - avg_expenses) / avg_income * 100 if avg_income > 0 else 0.0
    commitment = avg_expenses * DEBT_SHARE_OF_EXPENSES / avg_income * 100 if avg_income > 0 else 0.0
    cushion_months = analysis.final_balance / avg_expenses if avg_expenses > 0 else 0.0

    return HealthIndicators(
        savings_rate=savings_rate,
        commitment=commitment,
        cushion_months=cushion_months,
        savings_rate_color=savings_rate_color(savings_rate),
        commitment_color=commitment_color(commitment),
        cushion_color=cushion_color(cushion_months),
    )


def recommendations(
    projection: List[ProjectionMonth],
    health: HealthIndicators,
    analysis: FinancialAnalysis,
) -> List[Recommendation]:
    """Every applicable rule, in a fixed order: balance, savings, cushion, praise."""
    result: List[Recommendation] = []

    first_negative = next((row for row in projection if row.accumulated_balance < 0), None)
    if first_negative is not None:
        result.append(
            Recommendation(
                icon="alert",
                text=(
                    f"Balance turns negative in {first_negative.month}. Consider cutting expenses by "
                    f"{abs(first_negative.accumulated_balance):,.2f} or increasing income."
                ),
                type="warning",
            )
        )

    if health.savings_rate < TARGET_SAVINGS_RATE:
        result.append(
            Recommendation(
                icon="savings",
                text=(
                    f"Low savings rate ({health.savings_rate:.1f}%). "
                    f"Try to save at least {TARGET_SAVINGS_RATE:.0f}% of your income."
                ),
                type="warning",
            )
        )

    if health.cushion_months < TARGET_CUSHION_MONTHS:
        avg_expenses = analysis.total_expenses / len(projection) if projection else 0.0
        needed = (TARGET_CUSHION_MONTHS - health.cushion_months) * avg_expenses
        result.append(
            Recommendation(
                icon="shield",
                text=(
                    f"Emergency fund is short. Consider saving another {needed:,.2f} "
                    f"to cover {TARGET_CUSHION_MONTHS:.0f} months of expenses."
                ),
                type="info",
            )
        )

    if analysis.final_balance > 0 and health.savings_rate > TARGET_SAVINGS_RATE:
        result.append(
            Recommendation(
                icon="target",
                text="Excellent planning! Consider investing part of the final balance for better returns.",
                type="success",
            )
        )

    return result
