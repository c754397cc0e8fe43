import os

# Keep the app's module-level engine off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from db import Base
from app.deps import get_db
from app.schemas import TransactionRecord
from app.services.month_helpers import month_ref_for
from app.services.store import TransactionStore

USER = "user-1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(session):
    return TransactionStore(session)


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        c.headers.update({"X-User-Id": USER})
        yield c
    app.dependency_overrides.clear()


def make_tx(type_="expense", amount=100.0, on=date(2024, 1, 15), **kwargs) -> TransactionRecord:
    """Plain non-recurring record for the pure-function tests."""
    return TransactionRecord(
        id=kwargs.pop("id", f"{type_}-{on.isoformat()}-{amount}"),
        user_id=kwargs.pop("user_id", USER),
        type=type_,
        amount=amount,
        date=on,
        month_ref=month_ref_for(on),
        **kwargs,
    )
