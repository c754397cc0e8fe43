# app/services/recurrence.py
#
# Recurrence Materializer
# Turns a recurring definition into concrete monthly transaction rows and
# applies series-wide edits and deletes. Every public operation ends in one
# TransactionStore.write_batch call, so it either fully applies or not at all.
#
# Policy for "infinite" series: only the originating row is written at
# creation. Later months are generated on demand (materialize_month) when a
# month is opened; projections expand them in memory (plan_month_occurrences)
# without writing.

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple

from models import new_id
from app.errors import NotFoundError, ValidationError
from app.schemas import TransactionCreate, TransactionRecord, TransactionUpdate
from app.services.month_helpers import (
    add_months,
    create_month_string,
    first_of_month,
    get_month_range,
    month_ref_for,
    months_between,
    shift_month,
)
from app.services.store import TransactionStore

logger = logging.getLogger(__name__)

DELETE_SCOPES = ("current", "all_future", "all_instances")

# Fields every instance of a recurrence group shares
SERIES_SHARED_FIELDS = ("type", "category", "description", "source")

# How far past skipped months update_base_value looks for a month to anchor
ANCHOR_SEARCH_MONTHS = 24


# ---- Validation ----

def validate_definition(definition: TransactionCreate) -> None:
    """Raise ValidationError for a definition that must not be written."""
    needs_amount = not (definition.recurring and definition.is_variable_amount)
    if needs_amount and (definition.amount is None or definition.amount <= 0):
        raise ValidationError("Amount must be a positive number.")
    if definition.amount is not None and definition.amount < 0:
        raise ValidationError("Amount cannot be negative.")

    if not definition.recurring or definition.recurring_type != "fixed":
        return

    if definition.recurring_months is None and definition.recurring_end_date is None:
        raise ValidationError("Fixed recurrence needs a number of months or an end date.")
    if definition.recurring_months is not None and definition.recurring_months < 1:
        raise ValidationError("Number of months must be at least 1.")
    if definition.recurring_end_date is not None and definition.recurring_end_date < definition.date:
        raise ValidationError("End date cannot be before the transaction date.")


def is_edited(record: TransactionRecord) -> bool:
    """
    True when the user set this occurrence's amount by hand: either the
    explicit flag, or a defined amount that no longer matches the base value
    the row was generated with.
    """
    if record.manually_edited:
        return True
    return (
        record.amount is not None
        and record.base_amount is not None
        and record.amount != record.base_amount
    )


# ---- Create ----

def _origin_record(user_id: str, definition: TransactionCreate) -> TransactionRecord:
    base = dict(
        id=new_id(),
        user_id=user_id,
        type=definition.type,
        amount=definition.amount,
        category=definition.category,
        description=definition.description,
        source=definition.source,
        date=definition.date,
        month_ref=month_ref_for(definition.date),
        status=definition.status,
    )
    if not definition.recurring:
        return TransactionRecord(**base)

    recurring_type = definition.recurring_type or "infinite"
    return TransactionRecord(
        **base,
        recurring=True,
        is_variable_amount=definition.is_variable_amount,
        recurring_type=recurring_type,
        recurring_months=definition.recurring_months if recurring_type == "fixed" else None,
        recurring_end_date=definition.recurring_end_date if recurring_type == "fixed" else None,
        recurrence_group_id=new_id(),
        base_amount=definition.amount,
    )


def fixed_occurrence_count(definition: TransactionCreate) -> int:
    """
    Number of rows generated after the origin: the earlier of
    recurring_months, or the month holding recurring_end_date (inclusive).
    """
    bounds = []
    if definition.recurring_months is not None:
        bounds.append(definition.recurring_months)
    if definition.recurring_end_date is not None:
        bounds.append(months_between(definition.date, definition.recurring_end_date))
    return max(min(bounds), 0) if bounds else 0


def generate_occurrence(
    origin: TransactionRecord,
    occurrence_date: date,
    template: Optional[TransactionRecord] = None,
) -> TransactionRecord:
    """Copy of a series row for another month, pending and unedited."""
    template = template or origin
    amount = None if template.is_variable_amount else template.base_amount
    return template.model_copy(
        update={
            "id": new_id(),
            "date": occurrence_date,
            "month_ref": month_ref_for(occurrence_date),
            "status": "pending",
            "amount": amount,
            "is_generated": True,
            "original_id": origin.id,
            "manually_edited": False,
            "created_at": None,
        }
    )


def materialize(
    store: TransactionStore,
    user_id: str,
    definition: TransactionCreate,
) -> List[TransactionRecord]:
    """
    Create a transaction. For a fixed recurring definition, every following
    month up to its bound is generated in the same batch. Returns the rows
    written, origin first.
    """
    validate_definition(definition)
    origin = _origin_record(user_id, definition)
    records = [origin]

    if origin.recurring and origin.recurring_type == "fixed":
        count = fixed_occurrence_count(definition)
        for i in range(1, count + 1):
            records.append(generate_occurrence(origin, add_months(origin.date, i)))

    store.write_batch(create=records)
    logger.info(
        "[materialize] user=%s %s %r -> %d row(s)",
        user_id,
        origin.recurring_type or "single",
        origin.description,
        len(records),
    )
    return records


# ---- On-demand generation for infinite series ----

def _series_end(series: Iterable[TransactionRecord]) -> Optional[date]:
    ends = [r.recurring_end_date for r in series if r.recurring_end_date is not None]
    return min(ends) if ends else None


def plan_month_occurrences(
    instances: Iterable[TransactionRecord],
    skipped: Set[Tuple[str, str]],
    year: int,
    month: int,
) -> List[TransactionRecord]:
    """
    Occurrences of infinite series missing from the given month.

    A series gets a row for the month when it started in an earlier month,
    has no row in that month yet, was not skipped there by the user, and was
    not cut off before it.
    """
    target_ref = create_month_string(year, month)
    month_start, _ = get_month_range(year, month)

    groups: Dict[str, List[TransactionRecord]] = defaultdict(list)
    for record in instances:
        if record.recurring and record.recurring_type == "infinite" and record.recurrence_group_id:
            groups[record.recurrence_group_id].append(record)

    planned = []
    for group_id, series in groups.items():
        series = sorted(series, key=lambda r: r.date)
        if any(r.month_ref == target_ref for r in series):
            continue
        if (group_id, target_ref) in skipped:
            continue

        origin = next((r for r in series if not r.is_generated), series[0])
        offset = months_between(origin.date, month_start)
        if offset <= 0:
            continue

        end = _series_end(series)
        if end is not None and month_start > end:
            continue

        # Latest unedited row before the month carries the base value in force then
        unedited = [r for r in series if not is_edited(r)]
        earlier = [r for r in unedited if r.date < month_start]
        template = (earlier or unedited or series)[-1]
        planned.append(generate_occurrence(origin, add_months(origin.date, offset), template))

    return planned


def materialize_month(store: TransactionStore, user_id: str, year: int, month: int) -> List[TransactionRecord]:
    """Write the missing infinite-series rows for one month."""
    instances = store.get_infinite_instances(user_id)
    if not instances:
        return []
    planned = plan_month_occurrences(instances, store.get_skipped_months(user_id), year, month)
    if planned:
        store.write_batch(create=planned)
        logger.info(
            "[materialize-month] user=%s %s -> %d row(s)",
            user_id, create_month_string(year, month), len(planned),
        )
    return planned


# ---- Series-wide edits ----

def get_series(store: TransactionStore, user_id: str, group_id: str) -> List[TransactionRecord]:
    series = store.get_series(user_id, group_id)
    if not series:
        raise NotFoundError(f"Recurring series {group_id!r} not found.")
    return series


def update_base_value(
    store: TransactionStore,
    user_id: str,
    group_id: str,
    new_amount: float,
    overwrite_edited: bool = False,
    today: Optional[date] = None,
) -> int:
    """
    Propagate a new base amount to the series' unpaid rows from the current
    month on. Rows the user edited are skipped unless overwrite_edited.
    Paid rows and rows before the current month are never changed.
    Returns the number of rows updated.
    """
    if new_amount is None or new_amount <= 0:
        raise ValidationError("New base value must be a positive number.")

    series = get_series(store, user_id, group_id)
    cutoff = first_of_month(today or date.today())
    new_values = {"amount": new_amount, "base_amount": new_amount, "manually_edited": False}

    updates = []
    for record in series:
        if record.date < cutoff or record.status == "paid":
            continue
        if not overwrite_edited and is_edited(record):
            continue
        updates.append((record.id, dict(new_values)))

    anchors = [
        r.model_copy(update=new_values)
        for r in _anchor_occurrences(store, user_id, series, cutoff)
    ]

    if updates or anchors:
        store.write_batch(user_id=user_id, create=anchors, update=updates)
    count = len(updates) + len(anchors)
    logger.info(
        "[base-value] user=%s group=%s amount=%.2f overwrite=%s -> %d updated",
        user_id, group_id, new_amount, overwrite_edited, count,
    )
    return count


def _anchor_occurrences(
    store: TransactionStore,
    user_id: str,
    series: List[TransactionRecord],
    cutoff: date,
) -> List[TransactionRecord]:
    """
    For an infinite series with no row from cutoff's month on, the first
    row that on-demand generation would create there (skipped months are
    passed over). Later months are generated from it, so a new base value
    written to it carries forward.
    """
    origin = series[0]
    if not (origin.recurring and origin.recurring_type == "infinite"):
        return []
    if any(r.date >= cutoff for r in series):
        return []

    skipped = store.get_skipped_months(user_id)
    end = _series_end(series)
    for offset in range(ANCHOR_SEARCH_MONTHS):
        year, month = shift_month(cutoff.year, cutoff.month, offset)
        if end is not None and date(year, month, 1) > end:
            break
        planned = plan_month_occurrences(series, skipped, year, month)
        if planned:
            return planned
    return []


def delete_scoped(
    store: TransactionStore,
    user_id: str,
    instance_id: str,
    scope: str,
    today: Optional[date] = None,
) -> int:
    """
    Delete one occurrence, this and future occurrences, or a whole series.

    - current: only this row
    - all_future: rows of the series from this row's month on, but never
      rows before the current month
    - all_instances: every row of the series

    Returns the number of rows deleted.
    """
    if scope not in DELETE_SCOPES:
        raise ValidationError(f"Unknown delete scope {scope!r}.")

    instance = store.get(user_id, instance_id)
    if instance is None:
        raise NotFoundError(f"Transaction {instance_id!r} not found.")

    group_id = instance.recurrence_group_id
    infinite = instance.recurring and instance.recurring_type == "infinite"

    if scope == "current" or not instance.recurring or not group_id:
        skips = [(group_id, instance.month_ref)] if infinite and group_id else []
        deleted = store.write_batch(user_id=user_id, delete=[instance.id], skips=skips).deleted
        logger.info("[delete] user=%s id=%s scope=current -> %d", user_id, instance.id, deleted)
        return deleted

    series = store.get_series(user_id, group_id)
    updates = []
    if scope == "all_instances":
        ids = [r.id for r in series]
    else:
        cutoff = max(first_of_month(instance.date), first_of_month(today or date.today()))
        ids = [r.id for r in series if r.date >= cutoff]
        if infinite:
            # Remaining rows carry the cut-off so on-demand generation stops
            cut = cutoff - timedelta(days=1)
            updates = [(r.id, {"recurring_end_date": cut}) for r in series if r.date < cutoff]

    deleted = store.write_batch(user_id=user_id, update=updates, delete=ids).deleted
    logger.info("[delete] user=%s group=%s scope=%s -> %d", user_id, group_id, scope, deleted)
    return deleted


# ---- Single-occurrence edits ----

def _require(store: TransactionStore, user_id: str, instance_id: str) -> TransactionRecord:
    record = store.get(user_id, instance_id)
    if record is None:
        raise NotFoundError(f"Transaction {instance_id!r} not found.")
    return record


def set_instance_amount(store: TransactionStore, user_id: str, instance_id: str, amount: float) -> TransactionRecord:
    """Set the amount of one occurrence (e.g. this month's variable bill)."""
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be a positive number.")
    record = _require(store, user_id, instance_id)
    store.write_batch(
        user_id=user_id,
        update=[(record.id, {"amount": amount, "manually_edited": record.recurring})],
    )
    return store.get(user_id, instance_id)


def toggle_status(store: TransactionStore, user_id: str, instance_id: str) -> TransactionRecord:
    record = _require(store, user_id, instance_id)
    new_status = "pending" if record.status == "paid" else "paid"
    store.write_batch(user_id=user_id, update=[(record.id, {"status": new_status})])
    return store.get(user_id, instance_id)


def update_transaction(
    store: TransactionStore,
    user_id: str,
    instance_id: str,
    changes: TransactionUpdate,
) -> TransactionRecord:
    """
    Edit one row. Changing the date moves the row to another month bucket;
    changing the amount of a recurring row marks it as edited. Fields shared
    by a whole series (type, category, description, source) stay fixed on
    its rows.
    """
    record = _require(store, user_id, instance_id)
    fields = changes.model_dump(exclude_unset=True)

    if "amount" in fields:
        amount = fields["amount"]
        if amount is None and not record.is_variable_amount:
            raise ValidationError("Amount is required.")
        if amount is not None and amount <= 0:
            raise ValidationError("Amount must be a positive number.")
        if record.recurring:
            fields["manually_edited"] = amount is not None
    for required in ("type", "status", "date", "category", "description"):
        if required in fields and fields[required] is None:
            raise ValidationError(f"{required} cannot be empty.")

    if record.recurrence_group_id:
        changed = [f for f in SERIES_SHARED_FIELDS if f in fields and fields[f] != getattr(record, f)]
        if changed:
            raise ValidationError(
                f"{', '.join(changed)} is shared by the whole recurring series and "
                "cannot be changed on a single occurrence."
            )

    if fields:
        store.write_batch(user_id=user_id, update=[(record.id, fields)])
    return store.get(user_id, instance_id)
