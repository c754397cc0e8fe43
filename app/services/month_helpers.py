# app/services/month_helpers.py
#
# Month Helper Functions
# Calendar-month arithmetic used by recurrence generation, projections, and
# the month-filtered transaction views.

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


# ---- Month keys ----

def month_ref_for(d: date) -> str:
    """'YYYY-MM' bucket for a date."""
    return f"{d.year:04d}-{d.month:02d}"


def create_month_string(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_month_string(month_str: str) -> tuple[int, int]:
    """
    'YYYY-MM' -> (year, month).
    Raises ValueError when the string is not a valid month.
    """
    year_str, month_only_str = month_str.split("-")
    year = int(year_str)
    month = int(month_only_str)
    if not (1 <= month <= 12):
        raise ValueError(f"invalid month: {month_str!r}")
    return year, month


# ---- Month arithmetic ----

def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move (year, month) by offset whole months, in either direction."""
    shifted = date(year, month, 1) + relativedelta(months=offset)
    return shifted.year, shifted.month


def add_months(d: date, months: int) -> date:
    """
    Advance a date by whole calendar months, keeping the day of month.
    Days past the end of the target month clamp to its last day
    (Jan 31 + 1 month -> Feb 28/29).
    """
    return d + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def first_of_month(d: date) -> date:
    return d.replace(day=1)


# ---- Date Range Utilities ----

def get_month_range(year: int, month: int):
    """
    Returns (start_date, end_date_exclusive) for the given month.
    """
    start_date = date(year, month, 1)
    next_year, next_month = shift_month(year, month, 1)
    return start_date, date(next_year, next_month, 1)


def last_of_month(year: int, month: int) -> date:
    _, end_exclusive = get_month_range(year, month)
    return end_exclusive - timedelta(days=1)
