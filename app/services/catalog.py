# app/services/catalog.py
#
# Categories & Sources
# Per-user labels offered when creating or editing transactions. A user
# with no categories (or no sources) gets the default set on first read.
# Transactions store labels by name, so removing a label never touches them.

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models import Category, Source
from app.errors import ConflictError, NotFoundError, StoreError, ValidationError
from app.schemas import (
    CategoryCreate,
    CategoryRecord,
    SourceCreate,
    SourceRecord,
    SourceUpdate,
)
from app.services.store import STORE_FAILURE_MESSAGE

logger = logging.getLogger(__name__)

# (name, type, icon)
DEFAULT_CATEGORIES = [
    ("Salary", "income", "fas fa-briefcase"),
    ("Freelance", "income", "fas fa-handshake"),
    ("Investments", "income", "fas fa-chart-line"),
    ("Housing", "expense", "fas fa-home"),
    ("Food", "expense", "fas fa-utensils"),
    ("Transportation", "expense", "fas fa-car"),
    ("Leisure", "expense", "fas fa-gamepad"),
    ("Health", "expense", "fas fa-heartbeat"),
    ("Education", "expense", "fas fa-graduation-cap"),
]

# (name, icon)
DEFAULT_SOURCES = [
    ("Checking account", "fas fa-university"),
    ("Savings account", "fas fa-piggy-bank"),
    ("Credit card", "fas fa-credit-card"),
    ("Cash", "fas fa-money-bill"),
]

DEFAULT_ICON = "fas fa-tag"


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required.")
    return cleaned


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"{what} already exists.") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("[catalog] ERROR during DB write, rolled back: %r", e)
        raise StoreError(STORE_FAILURE_MESSAGE) from e


# ---- Categories ----

def ensure_default_categories(db: Session, user_id: str) -> None:
    existing = db.query(Category.id).filter(Category.user_id == user_id).first()
    if existing:
        return
    for name, kind, icon in DEFAULT_CATEGORIES:
        db.add(Category(user_id=user_id, name=name, type=kind, icon=icon))
    _commit(db, "Category")
    logger.info("[categories] user=%s seeded %d default categories", user_id, len(DEFAULT_CATEGORIES))


def list_categories(db: Session, user_id: str, kind: Optional[str] = None) -> List[CategoryRecord]:
    """Categories of the user, by type then name. Seeds the defaults first."""
    ensure_default_categories(db, user_id)
    q = db.query(Category).filter(Category.user_id == user_id)
    if kind:
        q = q.filter(Category.type == kind)
    rows = q.order_by(Category.type.asc(), Category.name.asc()).all()
    return [CategoryRecord.model_validate(r) for r in rows]


def add_category(db: Session, user_id: str, payload: CategoryCreate) -> CategoryRecord:
    row = Category(
        user_id=user_id,
        name=_clean_name(payload.name),
        type=payload.type,
        icon=payload.icon or DEFAULT_ICON,
    )
    db.add(row)
    _commit(db, f"Category {row.name!r}")
    return CategoryRecord.model_validate(row)


def delete_category(db: Session, user_id: str, category_id: str) -> int:
    deleted = (
        db.query(Category)
        .filter(Category.user_id == user_id, Category.id == category_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFoundError(f"Category {category_id!r} not found.")
    _commit(db, "Category")
    return deleted


# ---- Sources ----

def ensure_default_sources(db: Session, user_id: str) -> None:
    existing = db.query(Source.id).filter(Source.user_id == user_id).first()
    if existing:
        return
    for name, icon in DEFAULT_SOURCES:
        db.add(Source(user_id=user_id, name=name, icon=icon))
    _commit(db, "Source")
    logger.info("[sources] user=%s seeded %d default sources", user_id, len(DEFAULT_SOURCES))


def list_sources(db: Session, user_id: str) -> List[SourceRecord]:
    ensure_default_sources(db, user_id)
    rows = db.query(Source).filter(Source.user_id == user_id).order_by(Source.name.asc()).all()
    return [SourceRecord.model_validate(r) for r in rows]


def add_source(db: Session, user_id: str, payload: SourceCreate) -> SourceRecord:
    row = Source(user_id=user_id, name=_clean_name(payload.name), icon=payload.icon or DEFAULT_ICON)
    db.add(row)
    _commit(db, f"Source {row.name!r}")
    return SourceRecord.model_validate(row)


def update_source(db: Session, user_id: str, source_id: str, payload: SourceUpdate) -> SourceRecord:
    row = db.query(Source).filter(Source.user_id == user_id, Source.id == source_id).one_or_none()
    if row is None:
        raise NotFoundError(f"Source {source_id!r} not found.")

    fields = payload.model_dump(exclude_unset=True)
    if "name" in fields:
        row.name = _clean_name(fields["name"])
    if "icon" in fields:
        row.icon = fields["icon"] or DEFAULT_ICON
    _commit(db, f"Source {row.name!r}")
    return SourceRecord.model_validate(row)


def delete_source(db: Session, user_id: str, source_id: str) -> int:
    deleted = (
        db.query(Source)
        .filter(Source.user_id == user_id, Source.id == source_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFoundError(f"Source {source_id!r} not found.")
    _commit(db, "Source")
    return deleted
