import json

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from grocery_shopper import crud, models
from grocery_shopper.db import make_engine
from grocery_shopper.seed import import_seed, load_seed


def make_session():
    engine = make_engine("sqlite:///:memory:", poolclass=StaticPool)
    models.Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


SEED = {
    "stores": [
        {"name": "A", "location": "x", "items": [{"name": "Milk", "price": 1, "unit": "l"}]},
        {"name": "B", "items": []},
    ],
    "recipes": [
        {"name": "Latte", "ingredients": [{"itemName": "milk", "quantity": 0.2, "unit": "l"}]},
    ],
}


def test_load_seed_missing_file(tmp_path):
    assert load_seed(tmp_path / "nope.json") == {"stores": [], "recipes": []}


def test_load_seed_reads_file(tmp_path):
    p = tmp_path / "seed.json"
    p.write_text(json.dumps(SEED), encoding="utf-8")
    assert load_seed(p) == SEED


def test_import_seed_skips_existing_names():
    db = make_session()
    try:
        assert import_seed(db, SEED) == 4
        assert import_seed(db, SEED) == 0

        stores = {s.name: s for s in crud.get_all_stores(db)}
        assert set(stores) == {"A", "B"}
        assert [i.name for i in stores["A"].items] == ["Milk"]
        assert stores["B"].location is None
        recipe = crud.get_recipe_by_name(db, "Latte")
        assert [i.item_name for i in recipe.ingredients] == ["milk"]
    finally:
        db.close()


def test_import_seed_skips_names_repeated_in_file():
    db = make_session()
    try:
        data = {
            "stores": [SEED["stores"][0], SEED["stores"][0]],
            "recipes": SEED["recipes"] * 2,
        }
        assert import_seed(db, data) == 3
        assert len(crud.get_all_stores(db)) == 1
        assert len(crud.get_recipes(db)) == 1
    finally:
        db.close()
