"""Score stores against a recipe and pick the cheapest one.

Ingredients reference items by free-text name. A store can supply an
ingredient when one of its items has the same name, ignoring case. Units
are not converted: the item price is multiplied by the ingredient quantity
as is.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


@dataclass
class StorePrice:
    store: Any
    total_price: float
    all_items_available: bool


def normalize_name(name: str) -> str:
    if not name:
        return ""
    return name.lower()


def _item_index(items) -> dict:
    # first item wins when a store lists the same name twice
    index = {}
    for item in items:
        index.setdefault(normalize_name(item.name), item)
    return index


def price_store(ingredients, store) -> StorePrice:
    index = _item_index(store.items)
    total = 0.0
    available = True
    for ing in ingredients:
        item = index.get(normalize_name(ing.item_name))
        if item is None:
            available = False
            continue
        total += item.price * ing.quantity
    return StorePrice(store=store, total_price=total, all_items_available=available)


def price_stores(ingredients, stores: Iterable) -> List[StorePrice]:
    """Return one StorePrice per store, keeping the order of `stores`."""
    ingredients = list(ingredients)
    return [price_store(ingredients, s) for s in stores]


def find_cheapest(store_prices: Iterable[StorePrice]) -> Optional[StorePrice]:
    """Cheapest fully stocked store, or None.

    The sort is stable, so equal totals keep their input order.
    """
    eligible = [sp for sp in store_prices if sp.all_items_available]
    if not eligible:
        return None
    return sorted(eligible, key=lambda sp: sp.total_price)[0]
