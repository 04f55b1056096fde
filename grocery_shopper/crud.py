import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from . import models, schemas

logger = logging.getLogger(__name__)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _name_filter(query, column, q):
    # % and _ in q are matched literally
    if q:
        query = query.filter(column.ilike(f"%{_escape_like(q)}%", escape="\\"))
    return query


def _page(query, skip: int = 0, limit: Optional[int] = None):
    if skip:
        query = query.offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


# Stores

def get_store(db: Session, store_id: str):
    return (
        db.query(models.Store)
        .options(selectinload(models.Store.items))
        .filter(models.Store.id == store_id)
        .first()
    )


def get_stores(db: Session, skip: int = 0, limit: Optional[int] = None, q: Optional[str] = None):
    query = db.query(models.Store).options(selectinload(models.Store.items))
    query = _name_filter(query, models.Store.name, q)
    return _page(
        query.order_by(models.Store.created_at, models.Store.id),
        skip,
        limit,
    )


def get_all_stores(db: Session):
    """Every store with its items, oldest first."""
    return (
        db.query(models.Store)
        .options(selectinload(models.Store.items))
        .order_by(models.Store.created_at, models.Store.id)
        .all()
    )


def get_store_by_name(db: Session, name: str):
    return db.query(models.Store).filter(models.Store.name == name).first()


def create_store(db: Session, store: schemas.StoreCreate):
    db_store = models.Store(name=store.name, location=store.location)
    db.add(db_store)
    db.commit()
    db.refresh(db_store)
    logger.info("Created store %s (%s)", db_store.id, db_store.name)
    return db_store


def update_store(db: Session, store_id: str, store: schemas.StoreCreate):
    db_store = get_store(db, store_id)
    if not db_store:
        return None
    db_store.name = store.name
    db_store.location = store.location
    db.commit()
    return get_store(db, store_id)


def delete_store(db: Session, store_id: str):
    db_store = get_store(db, store_id)
    if not db_store:
        return False
    db.delete(db_store)
    db.commit()
    logger.info("Deleted store %s", store_id)
    return True


# Items

def get_item(db: Session, item_id: str):
    return (
        db.query(models.Item)
        .options(joinedload(models.Item.store))
        .filter(models.Item.id == item_id)
        .first()
    )


def get_items(db: Session, skip: int = 0, limit: Optional[int] = None, q: Optional[str] = None):
    query = db.query(models.Item).options(joinedload(models.Item.store))
    query = _name_filter(query, models.Item.name, q)
    return _page(
        query.order_by(models.Item.created_at, models.Item.id),
        skip,
        limit,
    )


def create_item(db: Session, item: schemas.ItemCreate):
    db_item = models.Item(
        name=item.name,
        price=item.price,
        unit=item.unit,
        store_id=item.store_id,
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    logger.info("Created item %s (%s) in store %s", db_item.id, db_item.name, db_item.store_id)
    return db_item


def update_item(db: Session, item_id: str, item: schemas.ItemCreate):
    db_item = get_item(db, item_id)
    if not db_item:
        return None
    db_item.name = item.name
    db_item.price = item.price
    db_item.unit = item.unit
    db_item.store_id = item.store_id
    db.commit()
    return get_item(db, item_id)


def delete_item(db: Session, item_id: str):
    db_item = get_item(db, item_id)
    if not db_item:
        return False
    db.delete(db_item)
    db.commit()
    logger.info("Deleted item %s", item_id)
    return True


# Recipes

def get_recipe(db: Session, recipe_id: str):
    return (
        db.query(models.Recipe)
        .options(selectinload(models.Recipe.ingredients))
        .filter(models.Recipe.id == recipe_id)
        .first()
    )


def get_recipe_by_name(db: Session, name: str):
    return db.query(models.Recipe).filter(models.Recipe.name == name).first()


def get_recipes(db: Session, skip: int = 0, limit: Optional[int] = None, q: Optional[str] = None):
    query = db.query(models.Recipe).options(selectinload(models.Recipe.ingredients))
    query = _name_filter(query, models.Recipe.name, q)
    return _page(
        query.order_by(models.Recipe.created_at, models.Recipe.id),
        skip,
        limit,
    )


def _build_ingredients(ingredients):
    return [
        models.RecipeIngredient(
            item_name=ing.item_name, quantity=ing.quantity, unit=ing.unit
        )
        for ing in ingredients
    ]


def create_recipe(db: Session, recipe: schemas.RecipeCreate):
    db_recipe = models.Recipe(
        name=recipe.name,
        description=recipe.description,
        ingredients=_build_ingredients(recipe.ingredients),
    )
    db.add(db_recipe)
    db.commit()
    logger.info("Created recipe %s (%s)", db_recipe.id, recipe.name)
    return get_recipe(db, db_recipe.id)


def update_recipe(db: Session, recipe_id: str, recipe: schemas.RecipeCreate):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return None
    db_recipe.name = recipe.name
    db_recipe.description = recipe.description
    # delete-orphan cascade drops the old ingredient rows
    db_recipe.ingredients = _build_ingredients(recipe.ingredients)
    db.commit()
    return get_recipe(db, recipe_id)


def delete_recipe(db: Session, recipe_id: str):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return False
    db.delete(db_recipe)
    db.commit()
    logger.info("Deleted recipe %s", recipe_id)
    return True
