import pytest

from app.errors import ConflictError, NotFoundError, ValidationError
from app.schemas import CategoryCreate, SourceCreate, SourceUpdate
from app.services import catalog
from tests.conftest import USER


def test_defaults_are_seeded_once(session):
    first = catalog.list_categories(session, USER)
    assert len(first) == len(catalog.DEFAULT_CATEGORIES)
    assert {c.name for c in first if c.type == "income"} == {"Salary", "Freelance", "Investments"}

    assert [c.id for c in catalog.list_categories(session, USER)] == [c.id for c in first]
    assert [c.name for c in catalog.list_categories(session, USER, "income")] == [
        "Freelance",
        "Investments",
        "Salary",
    ]


def test_defaults_are_per_user(session):
    catalog.list_categories(session, USER)
    catalog.add_category(session, USER, CategoryCreate(name="Pets", type="expense"))

    other = catalog.list_categories(session, "user-2")
    assert "Pets" not in {c.name for c in other}
    assert len(other) == len(catalog.DEFAULT_CATEGORIES)


def test_add_and_delete_category(session):
    catalog.list_categories(session, USER)
    pets = catalog.add_category(session, USER, CategoryCreate(name="  Pets ", type="expense"))
    assert pets.name == "Pets"
    assert pets.icon == catalog.DEFAULT_ICON

    assert catalog.delete_category(session, USER, pets.id) == 1
    assert "Pets" not in {c.name for c in catalog.list_categories(session, USER)}

    with pytest.raises(NotFoundError):
        catalog.delete_category(session, USER, pets.id)


def test_category_names_are_unique_per_type(session):
    catalog.add_category(session, USER, CategoryCreate(name="Bonus", type="income"))
    with pytest.raises(ConflictError):
        catalog.add_category(session, USER, CategoryCreate(name="Bonus", type="income"))

    # same name as an expense is a different category
    catalog.add_category(session, USER, CategoryCreate(name="Bonus", type="expense"))


def test_blank_names_are_rejected(session):
    with pytest.raises(ValidationError):
        catalog.add_category(session, USER, CategoryCreate(name="   ", type="income"))
    with pytest.raises(ValidationError):
        catalog.add_source(session, USER, SourceCreate(name=""))


def test_sources_lifecycle(session):
    names = [s.name for s in catalog.list_sources(session, USER)]
    assert names == sorted(name for name, _ in catalog.DEFAULT_SOURCES)

    wallet = catalog.add_source(session, USER, SourceCreate(name="Wallet"))
    renamed = catalog.update_source(session, USER, wallet.id, SourceUpdate(name="Travel wallet"))
    assert renamed.name == "Travel wallet"
    assert renamed.icon == catalog.DEFAULT_ICON

    with pytest.raises(ConflictError):
        catalog.update_source(session, USER, wallet.id, SourceUpdate(name="Cash"))

    assert catalog.delete_source(session, USER, wallet.id) == 1
    with pytest.raises(NotFoundError):
        catalog.update_source(session, USER, wallet.id, SourceUpdate(name="Gone"))


def test_catalog_routes(client):
    categories = client.get("/categories", params={"type": "expense"}).json()
    assert {c["name"] for c in categories} >= {"Housing", "Food"}

    response = client.post("/categories", json={"name": "Pets", "type": "expense", "icon": "fas fa-paw"})
    assert response.status_code == 201
    pets = response.json()
    assert pets["icon"] == "fas fa-paw"

    assert client.post("/categories", json={"name": "Pets", "type": "expense"}).status_code == 409
    assert client.post("/categories", json={"name": "", "type": "expense"}).status_code == 422

    assert client.delete(f"/categories/{pets['id']}").json() == {"count": 1}
    assert client.delete(f"/categories/{pets['id']}").status_code == 404

    sources = client.get("/sources").json()
    cash = next(s for s in sources if s["name"] == "Cash")
    response = client.patch(f"/sources/{cash['id']}", json={"name": "Pocket money"})
    assert response.json()["name"] == "Pocket money"
    assert client.delete(f"/sources/{cash['id']}").json() == {"count": 1}
