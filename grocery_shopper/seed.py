import json
import logging
from pathlib import Path

from sqlalchemy.orm import Session

from . import crud, models, schemas

logger = logging.getLogger(__name__)


def load_seed(path):
    """Load seed data from a JSON file.

    Args:
        path (str or Path): Path to the JSON file.

    Returns:
        dict: ``{"stores": [...], "recipes": [...]}``; both lists are empty
        when the file does not exist.
    """
    p = Path(path)
    if not p.exists():
        return {"stores": [], "recipes": []}
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return {"stores": data.get("stores", []), "recipes": data.get("recipes", [])}


def import_seed(db: Session, data) -> int:
    """Insert stores (with items) and recipes, skipping names already present.

    Returns the number of stores, items and recipes added.
    """
    added = 0
    seen_stores, seen_recipes = set(), set()
    for s in data.get("stores", []):
        name = s.get("name")
        if not name or name in seen_stores or crud.get_store_by_name(db, name):
            continue
        seen_stores.add(name)
        store = models.Store(name=name, location=s.get("location"))
        for i in s.get("items", []):
            store.items.append(
                models.Item(name=i["name"], price=float(i["price"]), unit=i["unit"])
            )
            added += 1
        db.add(store)
        added += 1
    for r in data.get("recipes", []):
        name = r.get("name")
        if not name or name in seen_recipes or crud.get_recipe_by_name(db, name):
            continue
        seen_recipes.add(name)
        recipe = schemas.RecipeCreate(**r)
        db.add(
            models.Recipe(
                name=recipe.name,
                description=recipe.description,
                ingredients=[
                    models.RecipeIngredient(
                        item_name=ing.item_name, quantity=ing.quantity, unit=ing.unit
                    )
                    for ing in recipe.ingredients
                ],
            )
        )
        added += 1
    db.commit()
    logger.info("Imported %d records", added)
    return added
