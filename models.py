# models.py
# Role: SQLAlchemy ORM models for the finance projection service.
#       Transaction holds one concrete income/expense occurrence, including the
#       recurrence metadata that ties generated instances to their series.
#       SkippedOccurrence remembers single deleted months of infinite series.
#       Category and Source are the per-user labels offered when editing.

import uuid
from datetime import datetime

from sqlalchemy import Column, String, Date, DateTime, Float, Boolean, Integer, Index, UniqueConstraint
from db import Base


def new_id() -> str:
    return uuid.uuid4().hex


class Transaction(Base):
    """
    ORM model representing a single financial transaction.

    Recurring series are stored as one row per month. All rows of a series
    share recurrence_group_id; generated rows point back to the origin row
    through original_id.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_user_month", "user_id", "month_ref"),
        Index("ix_transactions_user_group", "user_id", "recurrence_group_id"),
    )

    # Primary key (assigned client-side so a whole series is one commit)
    id = Column(String(32), primary_key=True, default=new_id)

    # Owner of the record
    user_id = Column(String, nullable=False, index=True)

    # 'income' | 'expense'
    type = Column(String(16), nullable=False)

    # Positive magnitude; NULL for a variable occurrence not yet set
    amount = Column(Float, nullable=True)

    category = Column(String, nullable=False, default="")
    description = Column(String, nullable=False, default="")
    source = Column(String, nullable=True)

    # Occurrence date and its 'YYYY-MM' bucket
    date = Column(Date, nullable=False)
    month_ref = Column(String(7), nullable=False)

    # 'paid' | 'pending'
    status = Column(String(16), nullable=False, default="pending")

    # Recurrence metadata
    recurring = Column(Boolean, nullable=False, default=False)
    is_variable_amount = Column(Boolean, nullable=False, default=False)
    recurring_type = Column(String(16), nullable=True)  # 'infinite' | 'fixed'
    recurring_months = Column(Integer, nullable=True)
    recurring_end_date = Column(Date, nullable=True)
    recurrence_group_id = Column(String(32), nullable=True)
    original_id = Column(String(32), nullable=True)
    is_generated = Column(Boolean, nullable=False, default=False)

    # Series base value this row was generated with, and whether the user
    # overrode the amount of this single occurrence
    base_amount = Column(Float, nullable=True)
    manually_edited = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class SkippedOccurrence(Base):
    """
    Month of an infinite series the user deleted on its own.

    On-demand generation consults these so a removed occurrence does not
    come back the next time the month is opened.
    """

    __tablename__ = "skipped_occurrences"
    __table_args__ = (
        UniqueConstraint("user_id", "recurrence_group_id", "month_ref"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False)
    recurrence_group_id = Column(String(32), nullable=False)
    month_ref = Column(String(7), nullable=False)


class Category(Base):
    """
    User-defined label for transactions of one type.

    Names are unique per user and type; a fresh user gets a default set on
    first read (see app/services/catalog.py).
    """

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("user_id", "type", "name", name="uq_categories_user_type_name"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)

    # 'income' | 'expense'
    type = Column(String(16), nullable=False)

    # Icon class shown next to the name (e.g. 'fas fa-home')
    icon = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Source(Base):
    """
    Where money comes from or goes through (account, card, cash).
    Stored on transactions by name.
    """

    __tablename__ = "sources"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_sources_user_name"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
