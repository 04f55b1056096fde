# flake8: noqa
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from grocery_shopper import app as app_module
from grocery_shopper import models
from grocery_shopper.client import ApiClient, ApiError
from grocery_shopper.db import make_engine

engine = make_engine("sqlite:///:memory:", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def api():
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    overrides = app_module.app.dependency_overrides
    previous = overrides.get(app_module.get_db)
    overrides[app_module.get_db] = override_get_db
    yield ApiClient(http=TestClient(app_module.app))
    if previous is None:
        overrides.pop(app_module.get_db, None)
    else:
        overrides[app_module.get_db] = previous


def test_health_check(api):
    assert api.health_check()["status"] == "ok"


def test_round_trip(api):
    store = api.create_store("FreshMart", location="12 Main St")
    item = api.create_item("Milk", 0.99, "l", store["id"])
    assert item["storeId"] == store["id"]

    stores = api.get_stores()
    assert stores[0]["items"][0]["name"] == "Milk"
    assert api.get_items()[0]["store"]["name"] == "FreshMart"

    recipe = api.create_recipe(
        "Latte", [{"itemName": "milk", "quantity": 0.25, "unit": "l"}], description="Coffee"
    )
    assert api.get_recipes()[0]["id"] == recipe["id"]

    best = api.find_cheapest_store(recipe["id"])
    assert best["store"]["name"] == "FreshMart"
    assert best["totalPrice"] == pytest.approx(0.99 * 0.25)


def test_error_raises_api_error(api):
    with pytest.raises(ApiError) as excinfo:
        api.find_cheapest_store("missing")
    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Recipe not found"


def test_get_stores_returns_every_store(api):
    for i in range(105):
        api.create_store(f"Store {i}")
    assert len(api.get_stores()) == 105


def test_validation_error_message(api):
    with pytest.raises(ApiError) as excinfo:
        api.create_item("Milk", 1.0, "l", None)
    assert excinfo.value.status_code == 422
    assert "storeId" in excinfo.value.message or "store_id" in excinfo.value.message
