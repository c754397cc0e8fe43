# app/schemas.py
# Role: Pydantic models shared by the services and the JSON routes.
#       TransactionRecord is the plain record the core works with; the store
#       converts ORM rows into it, and the scenario mapper builds synthetic ones.

from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

TransactionKind = Literal["income", "expense"]
TransactionStatus = Literal["paid", "pending"]
RecurringType = Literal["infinite", "fixed"]
DeleteScope = Literal["current", "all_future", "all_instances"]
HealthColor = Literal["green", "yellow", "red"]


# -------------------------------------------------------------------
# Transactions
# -------------------------------------------------------------------

class TransactionRecord(BaseModel):
    """One concrete transaction occurrence, real or synthetic."""

    model_config = ConfigDict(from_attributes=True)

    id: str = ""
    user_id: str = ""
    type: TransactionKind
    amount: Optional[float] = None
    category: str = ""
    description: str = ""
    source: Optional[str] = None
    date: dt.date
    month_ref: str = ""
    status: TransactionStatus = "pending"
    recurring: bool = False
    is_variable_amount: bool = False
    recurring_type: Optional[RecurringType] = None
    recurring_months: Optional[int] = None
    recurring_end_date: Optional[dt.date] = None
    recurrence_group_id: Optional[str] = None
    original_id: Optional[str] = None
    is_generated: bool = False
    base_amount: Optional[float] = None
    manually_edited: bool = False
    created_at: Optional[dt.datetime] = None


class TransactionCreate(BaseModel):
    """Payload for a new transaction, optionally defining a recurring series."""

    type: TransactionKind
    amount: Optional[float] = None
    category: str = ""
    description: str = ""
    source: Optional[str] = None
    date: dt.date
    status: TransactionStatus = "pending"
    recurring: bool = False
    is_variable_amount: bool = False
    recurring_type: Optional[RecurringType] = None
    recurring_months: Optional[int] = None
    recurring_end_date: Optional[dt.date] = None


class TransactionUpdate(BaseModel):
    """Partial edit of a single transaction; unset fields are left alone."""

    type: Optional[TransactionKind] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    date: Optional[dt.date] = None
    status: Optional[TransactionStatus] = None


class AmountPayload(BaseModel):
    amount: float = Field(..., gt=0)


class BaseValuePayload(BaseModel):
    new_amount: float
    overwrite_edited: bool = False


class CountResponse(BaseModel):
    count: int


# -------------------------------------------------------------------
# Scenarios & projection
# -------------------------------------------------------------------

class SimulatedItem(BaseModel):
    """Hypothetical income/expense used only inside one projection request."""

    id: str
    type: TransactionKind
    description: str = ""
    amount: float = Field(..., gt=0)
    start: dt.date
    end: Optional[dt.date] = None  # None = infinite
    enabled: bool = True


class ProjectionMonth(BaseModel):
    month: str
    month_key: str
    income: float
    expenses: float
    monthly_balance: float
    accumulated_balance: float
    is_negative: bool


class InvestmentScenario(BaseModel):
    percentage: int
    investment_amount: float
    remaining_balance: float
    potential_return_6_months: float
    potential_return_12_months: float


class FinancialAnalysis(BaseModel):
    total_income: float
    total_expenses: float
    final_balance: float
    avg_monthly_balance: float
    income_by_source: List[Tuple[str, float]]
    expenses_by_category: List[Tuple[str, float]]
    investment_scenarios: List[InvestmentScenario]


class HealthIndicators(BaseModel):
    savings_rate: float
    commitment: float
    cushion_months: float
    savings_rate_color: HealthColor
    commitment_color: HealthColor
    cushion_color: HealthColor


class Recommendation(BaseModel):
    icon: str
    text: str
    type: Literal["warning", "info", "success"]


class ProjectionRequest(BaseModel):
    period_months: Optional[int] = Field(None, ge=0, le=120)
    scenarios: List[SimulatedItem] = []
    starting_balance: Optional[float] = None


class EvolutionPoint(BaseModel):
    month: str
    values: dict[str, float]


class ProjectionReport(BaseModel):
    period_months: int
    starting_balance: float
    projection: List[ProjectionMonth]
    analysis: FinancialAnalysis
    health: HealthIndicators
    recommendations: List[Recommendation]
    income_evolution: List[EvolutionPoint]
    expense_evolution: List[EvolutionPoint]
    has_active_scenarios: bool


# -------------------------------------------------------------------
# Dashboard
# -------------------------------------------------------------------

class UpcomingPayment(BaseModel):
    id: str
    description: str
    category: str
    amount: Optional[float]
    date: dt.date
    days_until: int


class SourceShare(BaseModel):
    source: str
    amount: float
    percentage: float


class MonthlySummary(BaseModel):
    month_ref: str
    income: float
    expenses: float
    balance: float
    paid_count: int
    pending_count: int
    missing_amount_count: int
    upcoming_payments: List[UpcomingPayment]
    income_sources: List[SourceShare]


# -------------------------------------------------------------------
# Categories & sources
# -------------------------------------------------------------------

class CategoryCreate(BaseModel):
    name: str
    type: TransactionKind
    icon: Optional[str] = None


class CategoryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: TransactionKind
    icon: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class SourceCreate(BaseModel):
    name: str
    icon: Optional[str] = None


class SourceUpdate(BaseModel):
    name: Optional[str] = None
    icon: Optional[str] = None


class SourceRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    icon: Optional[str] = None
    created_at: Optional[dt.datetime] = None
