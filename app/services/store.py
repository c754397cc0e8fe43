# app/services/store.py
#
# Transaction Store
# SQLAlchemy-backed access layer for transaction rows. Reads return plain
# TransactionRecord objects; every write goes through write_batch, which
# applies creates, updates, and deletes in a single commit (or none of them).

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Transaction, SkippedOccurrence, new_id
from app.errors import StoreError
from app.schemas import TransactionRecord
from app.services.month_helpers import create_month_string, month_ref_for

logger = logging.getLogger(__name__)

STORE_FAILURE_MESSAGE = "Could not complete the operation."

# Columns a caller may set through update_instances
UPDATABLE_FIELDS = {
    "type",
    "amount",
    "category",
    "description",
    "source",
    "date",
    "status",
    "recurring_end_date",
    "base_amount",
    "manually_edited",
}


@dataclass
class BatchResult:
    created_ids: List[str] = field(default_factory=list)
    updated: int = 0
    deleted: int = 0


def to_record(row: Transaction) -> TransactionRecord:
    return TransactionRecord.model_validate(row)


class TransactionStore:
    """
    Per-request handle on the transactions table.

    Wraps one SQLAlchemy session; the caller owns the session lifecycle
    (see app/deps.py:get_db).
    """

    def __init__(self, db: Session):
        self._db = db

    # ---- Reads ----

    def get(self, user_id: str, transaction_id: str) -> TransactionRecord | None:
        row = self._read(
            lambda: self._query(user_id).filter(Transaction.id == transaction_id).one_or_none()
        )
        return to_record(row) if row is not None else None

    def get_transactions_for_month(self, user_id: str, year: int, month: int) -> List[TransactionRecord]:
        """Transactions bucketed in the given month, newest first."""
        month_ref = create_month_string(year, month)
        rows = self._read(
            lambda: self._query(user_id)
            .filter(Transaction.month_ref == month_ref)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
            .all()
        )
        return [to_record(r) for r in rows]

    def get_all_transactions(self, user_id: str) -> List[TransactionRecord]:
        rows = self._read(
            lambda: self._query(user_id)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
            .all()
        )
        return [to_record(r) for r in rows]

    def get_series(self, user_id: str, group_id: str) -> List[TransactionRecord]:
        """Every instance of one recurrence group, oldest first."""
        rows = self._read(
            lambda: self._query(user_id)
            .filter(Transaction.recurrence_group_id == group_id)
            .order_by(Transaction.date.asc(), Transaction.created_at.asc())
            .all()
        )
        return [to_record(r) for r in rows]

    def get_infinite_instances(self, user_id: str) -> List[TransactionRecord]:
        rows = self._read(
            lambda: self._query(user_id)
            .filter(
                Transaction.recurring.is_(True),
                Transaction.recurring_type == "infinite",
                Transaction.recurrence_group_id.isnot(None),
            )
            .order_by(Transaction.date.asc())
            .all()
        )
        return [to_record(r) for r in rows]

    def get_skipped_months(self, user_id: str) -> set[Tuple[str, str]]:
        """(recurrence_group_id, month_ref) pairs the user removed on their own."""
        rows = self._read(
            lambda: self._db.query(SkippedOccurrence.recurrence_group_id, SkippedOccurrence.month_ref)
            .filter(SkippedOccurrence.user_id == user_id)
            .all()
        )
        return {(r[0], r[1]) for r in rows}

    # ---- Writes ----

    def create_instances(self, records: Sequence[TransactionRecord]) -> List[str]:
        return self.write_batch(create=records).created_ids

    def update_instances(self, user_id: str, updates: Sequence[Tuple[str, dict]]) -> bool:
        self.write_batch(user_id=user_id, update=updates)
        return True

    def delete_instances(self, user_id: str, ids: Sequence[str]) -> int:
        return self.write_batch(user_id=user_id, delete=ids).deleted

    def write_batch(
        self,
        user_id: str | None = None,
        create: Iterable[TransactionRecord] = (),
        update: Iterable[Tuple[str, dict]] = (),
        delete: Iterable[str] = (),
        skips: Iterable[Tuple[str, str]] = (),
    ) -> BatchResult:
        """
        Apply one atomic batch.

        - create: records to insert (ids are kept if set, assigned otherwise;
          month_ref is always derived from date)
        - update: (id, fields) pairs for rows owned by user_id
        - delete: ids of rows owned by user_id
        - skips: (recurrence_group_id, month_ref) tombstones for user_id

        Either everything is committed or the session is rolled back and a
        StoreError is raised.
        """
        result = BatchResult()
        update = list(update)
        delete = list(delete)
        skips = list(skips)
        if (update or delete or skips) and user_id is None:
            raise ValueError("user_id is required for update/delete batches")

        try:
            for record in create:
                row = self._row_from_record(record)
                self._db.add(row)
                result.created_ids.append(row.id)

            for tx_id, fields in update:
                values = self._clean_update(fields)
                if not values:
                    continue
                matched = (
                    self._query(user_id)
                    .filter(Transaction.id == tx_id)
                    .update(values, synchronize_session=False)
                )
                if matched != 1:
                    raise StoreError(f"Transaction {tx_id!r} disappeared during update.")
                result.updated += 1

            if delete:
                result.deleted = (
                    self._query(user_id)
                    .filter(Transaction.id.in_(delete))
                    .delete(synchronize_session=False)
                )

            # A month can already be skipped (a row moved into it, then deleted)
            for group_id, month_ref in set(skips):
                exists = (
                    self._db.query(SkippedOccurrence.id)
                    .filter(
                        SkippedOccurrence.user_id == user_id,
                        SkippedOccurrence.recurrence_group_id == group_id,
                        SkippedOccurrence.month_ref == month_ref,
                    )
                    .first()
                )
                if exists is None:
                    self._db.add(
                        SkippedOccurrence(user_id=user_id, recurrence_group_id=group_id, month_ref=month_ref)
                    )

            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("[write-batch] ERROR during DB write, rolled back: %r", e)
            raise StoreError(STORE_FAILURE_MESSAGE) from e
        except Exception:
            self._db.rollback()
            raise

        logger.debug(
            "[write-batch] created=%d updated=%d deleted=%d skips=%d",
            len(result.created_ids), result.updated, result.deleted, len(skips),
        )
        return result

    # ---- Internals ----

    def _query(self, user_id: str):
        return self._db.query(Transaction).filter(Transaction.user_id == user_id)

    def _read(self, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("[read] ERROR during DB read: %r", e)
            raise StoreError(STORE_FAILURE_MESSAGE) from e

    @staticmethod
    def _row_from_record(record: TransactionRecord) -> Transaction:
        data = record.model_dump(exclude={"created_at"})
        data["id"] = data["id"] or new_id()
        data["month_ref"] = month_ref_for(record.date)
        return Transaction(**data)

    @staticmethod
    def _clean_update(fields: dict) -> dict:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"fields not updatable: {sorted(unknown)}")
        values = dict(fields)
        if values.get("date") is not None:
            values["month_ref"] = month_ref_for(values["date"])
        return values
