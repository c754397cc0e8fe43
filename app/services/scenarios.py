# app/services/scenarios.py
#
# Scenario Mapper
# Expands "what-if" items into synthetic transaction records for a projection
# horizon. Nothing here touches the database.

from datetime import date
from typing import Iterable, List, Optional

from app.schemas import SimulatedItem, TransactionRecord
from app.services.month_helpers import month_ref_for, shift_month

SIMULATED_USER = "simulated"
SIMULATED_INCOME_CATEGORY = "Simulation - Income"
SIMULATED_EXPENSE_CATEGORY = "Simulation - Expense"
SIMULATED_SOURCE = "Simulated scenario"

# Day used to place a simulated entry inside its month
REPRESENTATIVE_DAY = 15


def map_scenarios(
    items: Iterable[SimulatedItem],
    period_months: int,
    today: Optional[date] = None,
) -> List[TransactionRecord]:
    """
    One synthetic record per enabled item per month of the horizon, starting
    with the current month, when the month's mid-point falls inside
    [item.start, item.end] (item.end None = no end).
    """
    today = today or date.today()
    transactions: List[TransactionRecord] = []

    for item in items:
        if not item.enabled:
            continue
        for offset in range(period_months):
            year, month = shift_month(today.year, today.month, offset)
            projection_date = date(year, month, REPRESENTATIVE_DAY)

            if projection_date < item.start:
                continue
            if item.end is not None and projection_date > item.end:
                continue

            is_income = item.type == "income"
            transactions.append(
                TransactionRecord(
                    id=f"sim-{item.id}-{offset}",
                    user_id=SIMULATED_USER,
                    type=item.type,
                    amount=item.amount,
                    category=SIMULATED_INCOME_CATEGORY if is_income else SIMULATED_EXPENSE_CATEGORY,
                    description=f"[Simulated] {item.description}",
                    source=SIMULATED_SOURCE if is_income else None,
                    date=projection_date,
                    month_ref=month_ref_for(projection_date),
                    status="pending",
                    recurring=False,
                )
            )

    return transactions
